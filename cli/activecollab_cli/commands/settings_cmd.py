from __future__ import annotations

import os

import typer

from activecollab_client.config_types import POST_CONTENT_TYPES

from .. import console
from ..config import config_path, default_config, load_config, normalize_base_url, save_config

app = typer.Typer(help="Manage local CLI settings (~/.config/activecollab/config.toml).")

_KEYS = ("base_url", "api_key", "api_version", "auth_in_header", "post_content_type")


@app.command("init")
def init_settings(
        force: bool = typer.Option(False, "--force", help="Overwrite existing config."),
        base_url: str = typer.Option(
            ...,
            "--base-url",
            prompt="ActiveCollab URL",
            help="Instance URL like https://my.activecollab.test",
        ),
        api_version: int = typer.Option(1, "--api-version", min=1, help="API version."),
        query_auth: bool = typer.Option(
            False,
            "--query-auth",
            help="Send the token as auth_api_token query parameter instead of a header.",
        ),
):
    path = config_path()
    if os.path.exists(path) and not force:
        console.info(f"Config already exists: {path}")
        console.info("Use --force to overwrite.")
        return

    cfg = default_config()
    cfg.base_url = normalize_base_url(base_url, warn=True)
    if not cfg.base_url:
        console.err("Base URL cannot be empty.")
        raise typer.Exit(code=2)
    cfg.api_version = api_version
    cfg.auth_in_header = not query_auth
    saved = save_config(cfg)
    console.ok(f"Config written: {saved}")


@app.command("show")
def show_settings():
    cfg = load_config()
    key_state = "(set)" if (cfg.api_key or "").strip() else "(empty)"
    console.print(
        f"base_url={cfg.base_url} api_key={key_state} api_version={cfg.api_version} "
        f"auth_in_header={str(cfg.auth_in_header).lower()} post_content_type={cfg.post_content_type}"
    )


@app.command("get")
def get_setting(
        key: str = typer.Argument(..., help=f"Setting key ({', '.join(_KEYS)})."),
):
    cfg = load_config()
    k = key.strip().lower()
    if k not in _KEYS:
        console.err(f"Unknown setting: {key}")
        raise typer.Exit(code=2)
    value = getattr(cfg, k)
    if isinstance(value, bool):
        value = str(value).lower()
    console.print(value, markup=False)


@app.command("set")
def set_setting(
        base_url: str | None = typer.Option(None, "--base-url", help="Set instance URL."),
        api_version: int | None = typer.Option(None, "--api-version", min=1, help="Set API version."),
        auth_in_header: bool | None = typer.Option(
            None,
            "--header-auth/--query-auth",
            help="Send the token in a header or as a query parameter.",
        ),
        post_content_type: str | None = typer.Option(
            None,
            "--post-content-type",
            help=f"Body encoding for POST ({' or '.join(POST_CONTENT_TYPES)}).",
        ),
):
    cfg = load_config(use_env=False)
    if base_url is not None:
        cfg.base_url = normalize_base_url(base_url, warn=True)
    if api_version is not None:
        cfg.api_version = api_version
    if auth_in_header is not None:
        cfg.auth_in_header = auth_in_header
    if post_content_type is not None:
        if post_content_type not in POST_CONTENT_TYPES:
            console.err(f"Unsupported content type: {post_content_type}")
            raise typer.Exit(code=2)
        cfg.post_content_type = post_content_type
    saved = save_config(cfg)
    console.ok(f"Settings updated: {saved}")
