from __future__ import annotations

import typer

from activecollab_client import __version__

from .commands import api_cmd, auth_cmd, info_cmd, settings_cmd
from .logging_ import setup_logging


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"activecollab {__version__}")
        raise typer.Exit()


def _build_app() -> typer.Typer:
    app = typer.Typer(
        name="activecollab",
        help="ActiveCollab API CLI",
        no_args_is_help=True,
    )

    app.add_typer(settings_cmd.app, name="settings")
    app.add_typer(auth_cmd.app, name="auth")
    app.add_typer(api_cmd.app, name="api")
    app.command("info")(info_cmd.info)

    @app.callback()
    def _main(
            verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose logs."),
            version: bool = typer.Option(
                False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit."
            ),
    ):
        setup_logging(verbose)

    return app


app = _build_app()
