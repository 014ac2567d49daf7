from __future__ import annotations


class ActiveCollabError(Exception):
    """Base client error."""

    def __init__(
        self,
        message: str,
        *,
        code: str | int | None = None,
        http_status: int | None = None,
        raw_body: bytes | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.http_status = http_status
        self.raw_body = raw_body


class FileNotReadable(ActiveCollabError):
    """Attachment path cannot be read; raised before any network I/O."""

    def __init__(self, path: str):
        super().__init__(f"File not readable: {path}", code="file_not_readable")
        self.path = path


class CallFailed(ActiveCollabError):
    """Transport/network layer error, no HTTP response was obtained."""

    def __init__(self, code: str | int, message: str):
        super().__init__(message, code=code)

    def __str__(self) -> str:
        return f"{self.message} (code: {self.code})"


class IssueTokenException(ActiveCollabError):
    """Token issuance response was not parseable as JSON."""

    def __init__(self, message: str, *, http_status: int | None = None, raw_body: bytes | None = None):
        super().__init__(message, code="issue_token", http_status=http_status, raw_body=raw_body)
