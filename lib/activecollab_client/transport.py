from __future__ import annotations

import logging
import re
from contextlib import ExitStack

import httpx

from .config_types import ClientConfig
from .errors import CallFailed, FileNotReadable
from .request import Request
from .response import Response

logger = logging.getLogger(__name__)

_TOKEN_RE = re.compile(r"(auth_api_token=)[^&]*")


def redact_url(url: str) -> str:
    return _TOKEN_RE.sub(r"\1***", url)


class Transport:
    def __init__(self, cfg: ClientConfig, *, transport: httpx.BaseTransport | None = None):
        self._client = httpx.Client(
            timeout=cfg.timeout_s,
            follow_redirects=True,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def set_timeout(self, timeout_s: float | None) -> None:
        self._client.timeout = httpx.Timeout(timeout_s)

    def send(self, request: Request) -> Response:
        logger.debug("%s %s", request.method, redact_url(request.url))
        with ExitStack() as stack:
            files = None
            if request.is_multipart:
                files = []
                for i, a in enumerate(request.attachments, start=1):
                    try:
                        fh = stack.enter_context(open(a.path, "rb"))
                    except OSError as e:
                        raise FileNotReadable(a.path) from e
                    files.append((f"attachment_{i}", (a.filename, fh, a.mime_type)))
            try:
                r = self._client.request(
                    request.method,
                    request.url,
                    headers=list(request.headers),
                    content=request.content,
                    data=dict(request.fields) if files else None,
                    files=files,
                )
            except httpx.RequestError as e:
                logger.warning("%s %s failed: %s", request.method, redact_url(request.url), e)
                raise CallFailed(type(e).__name__, str(e) or type(e).__name__) from e

        logger.debug("%s %s -> %s", request.method, redact_url(request.url), r.status_code)
        return Response(
            http_status=r.status_code,
            raw_body=r.content,
            content_type=r.headers.get("content-type", ""),
            headers=dict(r.headers),
        )
