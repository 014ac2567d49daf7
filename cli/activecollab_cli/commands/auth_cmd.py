from __future__ import annotations

import re

import typer

from activecollab_client import CallFailed, IssueTokenException

from .. import console
from ..config import load_config, save_config
from ..http import MissingBaseUrl, make_client

app = typer.Typer(help="Auth commands.")

# issued tokens look like "<user id>-<random>"
_TOKEN_RE = re.compile(r"^\d+-\S+$")


@app.command("login")
def login(
    username: str = typer.Option(..., "--username", prompt="Email or username", help="Email or username."),
    password: str = typer.Option(..., "--password", prompt=True, hide_input=True, help="Password for login."),
    client_name: str = typer.Option("activecollab-cli", "--client-name", help="Name of the client application."),
    client_vendor: str = typer.Option("activecollab-cli", "--client-vendor", help="Vendor of the client application."),
    read_only: bool = typer.Option(False, "--read-only", help="Request a read-only token."),
    base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
):
    cfg = load_config()
    try:
        client = make_client(cfg, base_url_override=base_url)
    except MissingBaseUrl as e:
        console.err(str(e))
        raise typer.Exit(code=2)
    try:
        result = client.issue_token(username, password, client_name, client_vendor, read_only=read_only)
    except IssueTokenException as e:
        console.err(f"Login failed: malformed response ({e})")
        raise typer.Exit(code=2)
    except CallFailed as e:
        console.err(f"Login failed: {e}")
        raise typer.Exit(code=2)
    finally:
        client.close()

    if not _TOKEN_RE.match(result):
        console.err(f"Login failed: {result}")
        raise typer.Exit(code=2)

    cfg = load_config(use_env=False)
    if base_url:
        cfg.base_url = client.config.base_url
    cfg.api_key = result
    save_path = save_config(cfg)
    console.ok(f"Login successful. Token saved to {save_path}.")


@app.command("logout", help="Clear the stored API token.")
def logout():
    cfg = load_config(use_env=False)
    cfg.api_key = ""
    save_path = save_config(cfg)
    console.ok(f"Token cleared from {save_path}.")
