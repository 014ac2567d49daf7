from __future__ import annotations

import json

from typer.testing import CliRunner

from activecollab_client import ActiveCollabClient, ClientConfig, Response
from activecollab_cli import main
from activecollab_cli.commands import info_cmd


class _FakeTransport:
    def __init__(self, payload) -> None:
        self.calls = 0
        self._payload = payload

    def send(self, request):
        self.calls += 1
        return Response(http_status=200, raw_body=json.dumps(self._payload).encode(), content_type="application/json")

    def close(self) -> None:
        return None


def _install(monkeypatch, payload) -> _FakeTransport:
    t = _FakeTransport(payload)
    cfg = ClientConfig(base_url="https://ac.example.test", api_key="1-k")
    monkeypatch.setattr(info_cmd, "make_client", lambda *_a, **_kw: ActiveCollabClient(cfg, transport=t))
    return t


def test_info_property(monkeypatch, config_dir) -> None:
    t = _install(monkeypatch, {"application": "ActiveCollab", "version": "7.4.12"})

    result = CliRunner().invoke(main.app, ["info", "version"])

    assert result.exit_code == 0, result.output
    assert result.output.strip() == "7.4.12"
    assert t.calls == 1


def test_info_missing_property(monkeypatch, config_dir) -> None:
    _install(monkeypatch, {"application": "ActiveCollab"})

    result = CliRunner().invoke(main.app, ["info", "missing_key"])

    assert result.exit_code == 1


def test_info_full_mapping(monkeypatch, config_dir) -> None:
    _install(monkeypatch, {"application": "ActiveCollab"})

    result = CliRunner().invoke(main.app, ["info"])

    assert result.exit_code == 0
    assert '"application": "ActiveCollab"' in result.output
