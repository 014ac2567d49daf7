from __future__ import annotations

import dataclasses
import logging
from typing import Any, Iterable, Mapping

import httpx

from .config_types import JSON_CONTENT_TYPE, ClientConfig
from .errors import IssueTokenException
from .request import build_request, prepare_attachments
from .response import Response
from .transport import Transport

logger = logging.getLogger(__name__)

INFO_PATH = "info"
ISSUE_TOKEN_PATH = "issue-token"
INVALID_RESPONSE = "Invalid response"

_NOT_FETCHED = object()


class ActiveCollabClient:
    def __init__(self, cfg: ClientConfig, *, transport: Transport | None = None, http_transport: httpx.BaseTransport | None = None):
        self._cfg = cfg
        self._t = transport if transport is not None else Transport(cfg, transport=http_transport)
        self._info: Any = _NOT_FETCHED

    @property
    def config(self) -> ClientConfig:
        return self._cfg

    def __enter__(self) -> "ActiveCollabClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._t.close()

    # --- configuration ---
    def configure(self, **changes: Any) -> ClientConfig:
        """Replace config fields; no I/O is performed."""
        new_cfg = dataclasses.replace(self._cfg, **changes)
        if new_cfg.timeout_s != self._cfg.timeout_s:
            self._t.set_timeout(new_cfg.timeout_s)
        if (new_cfg.base_url, new_cfg.api_version) != (self._cfg.base_url, self._cfg.api_version):
            self.invalidate_info()
        self._cfg = new_cfg
        return new_cfg

    def use_header_for_auth_token(self, flag: bool = True) -> None:
        self.configure(auth_in_header=bool(flag))

    def set_content_type_for_post(self, content_type: str = JSON_CONTENT_TYPE) -> None:
        self.configure(post_content_type=content_type)

    # --- verbs ---
    def _send(
            self,
            method: str,
            path: str,
            params: Mapping[str, Any] | None = None,
            attachments: Iterable[Any] | None = None,
    ) -> Response:
        request = build_request(self._cfg, method, path, params, attachments)
        return self._t.send(request)

    def get(self, path: str) -> Response:
        return self._send("GET", path)

    def post(self, path: str, params: Mapping[str, Any] | None = None, attachments: Iterable[Any] | None = None) -> Response:
        return self._send("POST", path, params, attachments)

    def put(self, path: str, params: Mapping[str, Any] | None = None, attachments: Iterable[Any] | None = None) -> Response:
        if attachments:
            # uploads are not accepted on PUT; still refuse unreadable paths up front
            dropped = prepare_attachments(attachments)
            logger.warning("PUT %s: ignoring %d attachment(s)", path, len(dropped))
        return self._send("PUT", path, params)

    def delete(self, path: str, params: Mapping[str, Any] | None = None) -> Response:
        return self._send("DELETE", path, params)

    # --- info ---
    def info(self, property: str | None = None) -> Any:
        if self._info is _NOT_FETCHED:
            data = self.get(INFO_PATH).get_json()
            if not isinstance(data, dict):
                logger.warning("info endpoint returned no JSON object, caching empty info")
                data = {}
            self._info = data

        if property:
            return self._info.get(property) or None
        return self._info

    def invalidate_info(self) -> None:
        self._info = _NOT_FETCHED

    # --- auth ---
    def issue_token(
            self,
            username: str,
            password: str,
            client_name: str,
            client_vendor: str,
            *,
            read_only: bool = False,
    ) -> str:
        """Exchange credentials for an API token.

        A well-formed but rejected response returns the server's error
        message (or "Invalid response") instead of raising; only a body
        that is not JSON at all raises IssueTokenException.
        """
        response = self.post(
            ISSUE_TOKEN_PATH,
            {
                "username": username,
                "password": password,
                "client_name": client_name,
                "client_vendor": client_vendor,
                "read_only": bool(read_only),
            },
        )
        if not response.has_valid_json():
            raise IssueTokenException(
                f"issue-token returned a non-JSON response (HTTP {response.http_status})",
                http_status=response.http_status,
                raw_body=response.raw_body,
            )

        data = response.get_json()
        if isinstance(data, dict):
            token = data.get("token")
            if data.get("is_ok") and isinstance(token, str) and token:
                return token
            error = data.get("error")
            if error:
                return str(error)
        return INVALID_RESPONSE
