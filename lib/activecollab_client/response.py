from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from functools import cached_property
from typing import Any, Mapping

logger = logging.getLogger(__name__)

_UNDECODABLE = object()


@dataclass(frozen=True)
class Response:
    """HTTP response as returned by the API.

    Non-2xx statuses are ordinary values here; callers decide how to react
    by looking at ``http_status``, ``is_json()`` and ``get_json()``.
    """

    http_status: int
    raw_body: bytes
    content_type: str = ""
    headers: Mapping[str, str] = field(default_factory=dict)

    def __repr__(self) -> str:
        return f"Response(http_status={self.http_status}, content_type={self.content_type!r}, size={len(self.raw_body)})"

    def is_ok(self) -> bool:
        return 200 <= self.http_status < 300

    def is_json(self) -> bool:
        media_type = self.content_type.split(";", 1)[0].strip().lower()
        return media_type == "application/json" or media_type.endswith("+json")

    def get_body(self) -> str:
        return self.raw_body.decode("utf-8", errors="replace")

    def get_json(self) -> Any:
        """Return the decoded body, or None when it is not JSON."""
        data = self._json
        return None if data is _UNDECODABLE else data

    def has_valid_json(self) -> bool:
        """True when the body is JSON that decodes, including a literal null."""
        return self._json is not _UNDECODABLE

    @cached_property
    def _json(self) -> Any:
        if not self.is_json():
            return _UNDECODABLE
        try:
            return json.loads(self.raw_body.decode("utf-8"))
        except (UnicodeDecodeError, ValueError) as e:
            logger.debug("response body is not valid JSON: %s", e)
            return _UNDECODABLE
