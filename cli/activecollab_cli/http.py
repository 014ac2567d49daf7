from __future__ import annotations

from activecollab_client import ActiveCollabClient
from activecollab_client.config_types import ClientConfig

from .config import AppConfig, apply_profile, normalize_base_url


class MissingBaseUrl(Exception):
    pass


def make_client(
    cfg: AppConfig,
    *,
    profile: str | None = None,
    base_url_override: str | None = None,
) -> ActiveCollabClient:
    effective_cfg = apply_profile(cfg, profile)
    base_url = normalize_base_url(base_url_override or effective_cfg.base_url, warn=True)
    if not base_url:
        raise MissingBaseUrl("Base URL is not configured. Run: activecollab settings init")
    return ActiveCollabClient(
        ClientConfig(
            base_url=base_url,
            api_key=effective_cfg.api_key,
            api_version=effective_cfg.api_version,
            auth_in_header=effective_cfg.auth_in_header,
            post_content_type=effective_cfg.post_content_type,
        )
    )
