from __future__ import annotations

import typer

from activecollab_client import CallFailed

from .. import console
from ..config import load_config
from ..http import MissingBaseUrl, make_client


def info(
        prop: str | None = typer.Argument(None, metavar="PROPERTY", help="Single info field to print."),
        profile: str | None = typer.Option(None, "--profile", help="Config profile to use."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
) -> None:
    """Show server info (application, version, ...)."""
    try:
        client = make_client(load_config(), profile=profile, base_url_override=base_url)
    except MissingBaseUrl as e:
        console.err(str(e))
        raise typer.Exit(code=2)
    try:
        data = client.info(prop)
    except CallFailed as e:
        console.err(str(e))
        raise typer.Exit(code=2)
    finally:
        client.close()

    if prop:
        if data is None:
            console.err(f"Info property not available: {prop}")
            raise typer.Exit(code=1)
        console.print(data if isinstance(data, str) else str(data), markup=False)
        return
    console.print_json(data)
