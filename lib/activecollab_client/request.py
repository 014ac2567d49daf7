from __future__ import annotations

import json
import os
import uuid
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping
from urllib.parse import quote, urlencode, urlsplit

from . import __version__
from .config_types import JSON_CONTENT_TYPE, ClientConfig
from .errors import FileNotReadable

AUTH_HEADER = "X-Angie-AuthApiToken"
AUTH_QUERY_PARAM = "auth_api_token"
DEFAULT_MIME_TYPE = "application/octet-stream"
METHODS = ("GET", "POST", "PUT", "DELETE")


def user_agent() -> str:
    return f"ActiveCollab API Client; v{__version__}"


@dataclass(frozen=True)
class Attachment:
    path: str
    mime_type: str = DEFAULT_MIME_TYPE

    @classmethod
    def coerce(cls, value: Any) -> "Attachment":
        if isinstance(value, Attachment):
            return value
        if isinstance(value, (tuple, list)):
            if not value:
                raise ValueError("empty attachment descriptor")
            if len(value) == 1:
                return cls(os.fspath(value[0]))
            path, mime_type = value[0], value[1]
            return cls(os.fspath(path), mime_type or DEFAULT_MIME_TYPE)
        return cls(os.fspath(value))

    @property
    def filename(self) -> str:
        return os.path.basename(self.path)


@dataclass(frozen=True)
class Request:
    method: str
    url: str
    headers: tuple[tuple[str, str], ...]
    content: bytes | None = None
    fields: Mapping[str, str] = field(default_factory=dict)
    attachments: tuple[Attachment, ...] = ()

    @property
    def is_multipart(self) -> bool:
        return bool(self.attachments)

    def header(self, name: str) -> str | None:
        wanted = name.lower()
        for key, value in self.headers:
            if key.lower() == wanted:
                return value
        return None


def build_url(path: str, *, auth_in_header: bool, api_version: int, api_key: str, base_url: str) -> str:
    bits = urlsplit(path or "")
    component = bits.path or "/"
    if not component.startswith("/"):
        component = "/" + component

    query = bits.query
    if not auth_in_header:
        token = f"{AUTH_QUERY_PARAM}={quote(api_key or '', safe='')}"
        query = f"{query}&{token}" if query else token

    url = f"{base_url}/api/v{api_version}{component}"
    return f"{url}?{query}" if query else url


def build_headers(cfg: ClientConfig) -> tuple[tuple[str, str], ...]:
    headers = [
        ("Accept", "application/json"),
        ("User-Agent", user_agent()),
    ]
    if cfg.auth_in_header:
        headers.append((AUTH_HEADER, cfg.api_key or ""))
    return tuple(headers)


def prepare_attachments(attachments: Iterable[Any] | None) -> tuple[Attachment, ...]:
    prepared: list[Attachment] = []
    for item in attachments or ():
        attachment = Attachment.coerce(item)
        if not (os.path.isfile(attachment.path) and os.access(attachment.path, os.R_OK)):
            raise FileNotReadable(attachment.path)
        prepared.append(attachment)
    return tuple(prepared)


def _form_value(value: Any) -> str:
    # bools go over the wire the way form-encoded servers expect them
    if isinstance(value, bool):
        return "1" if value else "0"
    if value is None:
        return ""
    return str(value)


def _form_pairs(params: Mapping[str, Any] | None) -> list[tuple[str, str]]:
    """Flatten nested params into bracketed keys, e.g. members[0], meta[a]."""
    pairs: list[tuple[str, str]] = []

    def walk(key: str, value: Any) -> None:
        if isinstance(value, Mapping):
            for sub, item in value.items():
                walk(f"{key}[{sub}]", item)
        elif isinstance(value, (list, tuple)):
            for i, item in enumerate(value):
                walk(f"{key}[{i}]", item)
        else:
            pairs.append((key, _form_value(value)))

    for k, v in (params or {}).items():
        walk(str(k), v)
    return pairs


def _json_content(params: Mapping[str, Any] | None) -> bytes:
    return json.dumps(dict(params or {}), ensure_ascii=False).encode("utf-8")


def build_request(
    cfg: ClientConfig,
    method: str,
    path: str,
    params: Mapping[str, Any] | None = None,
    attachments: Iterable[Any] | None = None,
) -> Request:
    """Compose a fully-formed request for the given verb.

    Attachments are validated before anything else so an unreadable file
    never results in a partial call.
    """
    method = method.upper()
    if method not in METHODS:
        raise ValueError(f"unsupported HTTP method: {method}")

    files = prepare_attachments(attachments) if method == "POST" else ()
    url = build_url(
        path,
        auth_in_header=cfg.auth_in_header,
        api_version=cfg.api_version,
        api_key=cfg.api_key,
        base_url=cfg.base_url,
    )
    headers = list(build_headers(cfg))

    if method == "GET":
        return Request(method=method, url=url, headers=tuple(headers))

    if method == "POST" and files:
        boundary = uuid.uuid4().hex
        headers.append(("Content-Type", f"multipart/form-data; boundary={boundary}"))
        fields = dict(_form_pairs(params))
        return Request(method=method, url=url, headers=tuple(headers), fields=fields, attachments=files)

    if method == "POST" and cfg.post_content_type != JSON_CONTENT_TYPE:
        headers.append(("Content-Type", cfg.post_content_type))
        pairs = _form_pairs(params)
        return Request(method=method, url=url, headers=tuple(headers), content=urlencode(pairs).encode("ascii"))

    headers.append(("Content-Type", JSON_CONTENT_TYPE))
    return Request(method=method, url=url, headers=tuple(headers), content=_json_content(params))
