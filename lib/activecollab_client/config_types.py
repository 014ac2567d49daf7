from __future__ import annotations
from dataclasses import dataclass

JSON_CONTENT_TYPE = "application/json"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
POST_CONTENT_TYPES = (JSON_CONTENT_TYPE, FORM_CONTENT_TYPE)


@dataclass(frozen=True)
class ClientConfig:
    base_url: str
    api_key: str = ""
    api_version: int = 1
    auth_in_header: bool = True
    post_content_type: str = JSON_CONTENT_TYPE
    timeout_s: float | None = None

    def __post_init__(self) -> None:
        version = int(self.api_version)
        if version < 1:
            raise ValueError(f"api_version must be >= 1, got {self.api_version!r}")
        if self.post_content_type not in POST_CONTENT_TYPES:
            raise ValueError(f"unsupported POST content type: {self.post_content_type!r}")
        object.__setattr__(self, "api_version", version)
        object.__setattr__(self, "base_url", (self.base_url or "").rstrip("/"))
