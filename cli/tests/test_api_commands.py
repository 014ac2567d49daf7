from __future__ import annotations

import json

import pytest
import typer
from typer.testing import CliRunner

from activecollab_client import ActiveCollabClient, ClientConfig, Response
from activecollab_client.errors import CallFailed
from activecollab_cli import main
from activecollab_cli.commands import api_cmd


class _FakeTransport:
    def __init__(self, response: Response | None = None, error: Exception | None = None) -> None:
        self.requests = []
        self.closed = False
        self._response = response
        self._error = error

    def send(self, request):
        self.requests.append(request)
        if self._error is not None:
            raise self._error
        return self._response

    def close(self) -> None:
        self.closed = True


def _install(monkeypatch, transport: _FakeTransport) -> None:
    cfg = ClientConfig(base_url="https://ac.example.test", api_key="1-key")
    monkeypatch.setattr(
        api_cmd,
        "make_client",
        lambda *_args, **_kwargs: ActiveCollabClient(cfg, transport=transport),
    )


def _json(payload, status: int = 200) -> Response:
    return Response(http_status=status, raw_body=json.dumps(payload).encode(), content_type="application/json")


def test_get_prints_json(monkeypatch, config_dir) -> None:
    t = _FakeTransport(_json({"id": 1, "name": "Alpha"}))
    _install(monkeypatch, t)

    result = CliRunner().invoke(main.app, ["api", "get", "projects/1"])

    assert result.exit_code == 0, result.output
    assert "HTTP 200" in result.output
    assert '"name": "Alpha"' in result.output
    assert t.requests[0].url == "https://ac.example.test/api/v1/projects/1"
    assert t.closed


def test_get_renders_yaml(monkeypatch, config_dir) -> None:
    _install(monkeypatch, _FakeTransport(_json({"id": 1, "name": "Alpha"})))

    result = CliRunner().invoke(main.app, ["api", "get", "projects/1", "--yaml"])

    assert result.exit_code == 0, result.output
    assert "name: Alpha" in result.output


def test_non_2xx_exits_one(monkeypatch, config_dir) -> None:
    _install(monkeypatch, _FakeTransport(_json({"message": "Not found"}, status=404)))

    result = CliRunner().invoke(main.app, ["api", "delete", "projects/9"])

    assert result.exit_code == 1
    assert "HTTP 404" in result.output


def test_post_sends_params_and_json_body(monkeypatch, config_dir) -> None:
    t = _FakeTransport(_json({"single": {"id": 5}}))
    _install(monkeypatch, t)

    result = CliRunner().invoke(
        main.app,
        ["api", "post", "projects", "--json-body", '{"members": [1, 2]}', "-p", "name=Beta"],
    )

    assert result.exit_code == 0, result.output
    assert json.loads(t.requests[0].content) == {"members": [1, 2], "name": "Beta"}


def test_post_missing_attachment_is_reported(monkeypatch, config_dir, tmp_path) -> None:
    t = _FakeTransport(_json({}))
    _install(monkeypatch, t)

    result = CliRunner().invoke(main.app, ["api", "post", "upload-files", "-a", str(tmp_path / "missing.bin")])

    assert result.exit_code == 2
    assert "not readable" in result.output
    assert t.requests == []


def test_call_failed_is_reported(monkeypatch, config_dir) -> None:
    _install(monkeypatch, _FakeTransport(error=CallFailed("ConnectError", "connection refused")))

    result = CliRunner().invoke(main.app, ["api", "get", "info"])

    assert result.exit_code == 2
    assert "connection refused" in result.output


def test_parse_params_rejects_bad_pairs() -> None:
    with pytest.raises(typer.BadParameter):
        api_cmd.parse_params(["novalue"], None)
    with pytest.raises(typer.BadParameter):
        api_cmd.parse_params(None, "[1, 2]")
    assert api_cmd.parse_params(["a=1=2"], '{"b": true}') == {"b": True, "a": "1=2"}


def test_parse_attachments_mime_suffix() -> None:
    parsed = api_cmd.parse_attachments(["report.pdf:application/pdf", "C:notes.txt", "plain.bin"])
    assert [(a.path, a.mime_type) for a in parsed] == [
        ("report.pdf", "application/pdf"),
        ("C:notes.txt", "application/octet-stream"),
        ("plain.bin", "application/octet-stream"),
    ]
