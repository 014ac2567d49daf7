from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from typing import Any

import tomli_w
from platformdirs import user_config_dir

from activecollab_client.config_types import JSON_CONTENT_TYPE, POST_CONTENT_TYPES

from . import console

APP_NAME = "activecollab"
CONFIG_FILENAME = "config.toml"
ENV_BASE_URL = "ACTIVECOLLAB_BASE_URL"
ENV_API_KEY = "ACTIVECOLLAB_API_KEY"

_WARNED_BASE_URL_SCHEME = False


@dataclass
class AppConfig:
    base_url: str
    api_key: str = ""
    api_version: int = 1
    auth_in_header: bool = True
    post_content_type: str = JSON_CONTENT_TYPE


def config_path() -> str:
    return f"{user_config_dir(APP_NAME)}/{CONFIG_FILENAME}"


def default_config() -> AppConfig:
    return AppConfig(base_url="")


def normalize_base_url(raw: str | None, *, warn: bool = False) -> str:
    value = (raw or "").strip()
    if not value:
        return ""
    value = value.rstrip("/")
    lowered = value.lower()
    if lowered.startswith("http://") or lowered.startswith("https://"):
        return value

    host = value.split("/", 1)[0]
    host = host.split(":", 1)[0].lower()
    if host in {"localhost", "127.0.0.1", "0.0.0.0"}:
        scheme = "http://"
    else:
        scheme = "https://"

    normalized = f"{scheme}{value}"
    if warn:
        _warn_missing_scheme(normalized)
    return normalized


def _warn_missing_scheme(normalized: str) -> None:
    global _WARNED_BASE_URL_SCHEME
    if _WARNED_BASE_URL_SCHEME:
        return
    if not _is_interactive():
        return
    console.warn(f"base_url missing scheme, assuming {normalized}")
    _WARNED_BASE_URL_SCHEME = True


def _is_interactive() -> bool:
    import sys
    return bool(sys.stderr.isatty() or sys.stdout.isatty())


def ensure_parent_dir(path: str) -> None:
    os.makedirs(os.path.dirname(path), exist_ok=True)


def to_toml(cfg: AppConfig) -> dict[str, Any]:
    return {
        "base_url": cfg.base_url,
        "api_key": cfg.api_key,
        "api_version": cfg.api_version,
        "auth_in_header": cfg.auth_in_header,
        "post_content_type": cfg.post_content_type,
    }


def _apply_values(cfg: AppConfig, data: dict[str, Any]) -> AppConfig:
    if data.get("base_url"):
        cfg.base_url = normalize_base_url(str(data["base_url"]), warn=True)
    if "api_key" in data:
        cfg.api_key = str(data.get("api_key") or "")
    if "api_version" in data:
        try:
            cfg.api_version = max(1, int(data["api_version"]))
        except (TypeError, ValueError):
            console.warn(f"Ignoring invalid api_version: {data['api_version']!r}")
    if isinstance(data.get("auth_in_header"), bool):
        cfg.auth_in_header = data["auth_in_header"]
    content_type = data.get("post_content_type")
    if content_type in POST_CONTENT_TYPES:
        cfg.post_content_type = content_type
    return cfg


def from_toml(data: dict[str, Any]) -> AppConfig:
    return _apply_values(default_config(), data)


def _read_toml() -> dict[str, Any] | None:
    try:
        with open(config_path(), "rb") as f:
            return tomllib.load(f)
    except FileNotFoundError:
        return None


def _apply_env(cfg: AppConfig) -> AppConfig:
    base_url = os.getenv(ENV_BASE_URL)
    if base_url:
        cfg.base_url = normalize_base_url(base_url)
    api_key = os.getenv(ENV_API_KEY)
    if api_key:
        cfg.api_key = api_key
    return cfg


def load_config(*, use_env: bool = True) -> AppConfig:
    data = _read_toml()
    cfg = from_toml(data) if data is not None else default_config()
    return _apply_env(cfg) if use_env else cfg


def apply_profile(cfg: AppConfig, profile: str | None) -> AppConfig:
    if not profile:
        return cfg
    data = _read_toml() or {}
    profiles_raw = data.get("profiles") or {}
    if not isinstance(profiles_raw, dict):
        return cfg
    prof = profiles_raw.get(profile)
    if not isinstance(prof, dict):
        console.warn(f"Profile not found: {profile}")
        return cfg
    return _apply_values(AppConfig(**vars(cfg)), prof)


def save_config(cfg: AppConfig) -> str:
    path = config_path()
    ensure_parent_dir(path)
    payload = to_toml(cfg)
    existing = _read_toml() or {}
    if isinstance(existing.get("profiles"), dict):
        payload["profiles"] = existing["profiles"]
    with open(path, "wb") as f:
        f.write(tomli_w.dumps(payload).encode("utf-8"))
    os.chmod(path, 0o600)
    return path
