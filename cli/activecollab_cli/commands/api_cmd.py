from __future__ import annotations

import json
from typing import Any

import typer
import yaml

from activecollab_client import ActiveCollabClient, Attachment, CallFailed, FileNotReadable, Response

from .. import console
from ..config import load_config
from ..http import MissingBaseUrl, make_client

app = typer.Typer(help="Raw API calls (GET/POST/PUT/DELETE).")

_PROFILE_OPT = typer.Option(None, "--profile", help="Config profile to use.")
_BASE_URL_OPT = typer.Option(None, "--base-url", help="Override base URL.")
_PARAM_OPT = typer.Option(None, "--param", "-p", help="Request param as key=value (repeatable).")
_JSON_BODY_OPT = typer.Option(None, "--json-body", help="Request params as a JSON object.")
_ATTACH_OPT = typer.Option(None, "--attach", "-a", help="File to upload as path[:mime] (repeatable).")
_YAML_OPT = typer.Option(False, "--yaml", help="Render JSON responses as YAML.")


def parse_params(pairs: list[str] | None, json_body: str | None) -> dict[str, Any]:
    params: dict[str, Any] = {}
    if json_body:
        try:
            data = json.loads(json_body)
        except ValueError as e:
            raise typer.BadParameter(f"invalid JSON: {e}", param_hint="--json-body")
        if not isinstance(data, dict):
            raise typer.BadParameter("must be a JSON object", param_hint="--json-body")
        params.update(data)
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise typer.BadParameter(f"expected key=value, got {pair!r}", param_hint="--param")
        params[key.strip()] = value
    return params


def parse_attachments(values: list[str] | None) -> list[Attachment]:
    attachments: list[Attachment] = []
    for value in values or []:
        path, sep, mime = value.rpartition(":")
        # only treat the suffix as a MIME type when it looks like one
        if sep and path and "/" in mime:
            attachments.append(Attachment(path, mime))
        else:
            attachments.append(Attachment(value))
    return attachments


def render_response(resp: Response, *, as_yaml: bool = False) -> None:
    style = "green" if resp.is_ok() else "red"
    console.print(f"[bold {style}]HTTP {resp.http_status}[/]")
    data = resp.get_json()
    if data is not None:
        if as_yaml:
            console.print(yaml.safe_dump(data, sort_keys=False, allow_unicode=True).rstrip(), markup=False)
        else:
            console.print_json(data)
    elif resp.raw_body:
        console.print(resp.get_body(), markup=False)


def _client(profile: str | None, base_url: str | None) -> ActiveCollabClient:
    try:
        return make_client(load_config(), profile=profile, base_url_override=base_url)
    except MissingBaseUrl as e:
        console.err(str(e))
        raise typer.Exit(code=2)


def _run(client: ActiveCollabClient, call, *, as_yaml: bool) -> None:
    try:
        resp = call(client)
    except (FileNotReadable, CallFailed) as e:
        console.err(str(e))
        raise typer.Exit(code=2)
    finally:
        client.close()
    render_response(resp, as_yaml=as_yaml)
    if not resp.is_ok():
        raise typer.Exit(code=1)


@app.command("get")
def get_cmd(
        path: str = typer.Argument(..., help="API path, e.g. projects or projects/1/tasks?page=2"),
        as_yaml: bool = _YAML_OPT,
        profile: str | None = _PROFILE_OPT,
        base_url: str | None = _BASE_URL_OPT,
):
    _run(_client(profile, base_url), lambda c: c.get(path), as_yaml=as_yaml)


@app.command("post")
def post_cmd(
        path: str = typer.Argument(..., help="API path."),
        param: list[str] | None = _PARAM_OPT,
        json_body: str | None = _JSON_BODY_OPT,
        attach: list[str] | None = _ATTACH_OPT,
        as_yaml: bool = _YAML_OPT,
        profile: str | None = _PROFILE_OPT,
        base_url: str | None = _BASE_URL_OPT,
):
    params = parse_params(param, json_body)
    attachments = parse_attachments(attach)
    _run(_client(profile, base_url), lambda c: c.post(path, params, attachments), as_yaml=as_yaml)


@app.command("put")
def put_cmd(
        path: str = typer.Argument(..., help="API path."),
        param: list[str] | None = _PARAM_OPT,
        json_body: str | None = _JSON_BODY_OPT,
        attach: list[str] | None = _ATTACH_OPT,
        as_yaml: bool = _YAML_OPT,
        profile: str | None = _PROFILE_OPT,
        base_url: str | None = _BASE_URL_OPT,
):
    params = parse_params(param, json_body)
    attachments = parse_attachments(attach)
    if attachments:
        console.warn("PUT does not upload attachments; they are only checked for readability.")
    _run(_client(profile, base_url), lambda c: c.put(path, params, attachments), as_yaml=as_yaml)


@app.command("delete")
def delete_cmd(
        path: str = typer.Argument(..., help="API path."),
        param: list[str] | None = _PARAM_OPT,
        json_body: str | None = _JSON_BODY_OPT,
        as_yaml: bool = _YAML_OPT,
        profile: str | None = _PROFILE_OPT,
        base_url: str | None = _BASE_URL_OPT,
):
    params = parse_params(param, json_body)
    _run(_client(profile, base_url), lambda c: c.delete(path, params), as_yaml=as_yaml)
