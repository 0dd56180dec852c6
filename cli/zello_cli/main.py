from __future__ import annotations

import typer

from .auth_state import resolve_auth_context
from .commands import auth_cmd, settings_cmd
from .commands.channels_cmd import app as channels_app
from .commands.locations_cmd import app as locations_app
from .commands.roles_cmd import app as roles_app
from .commands.users_cmd import app as users_app
from .logging_ import setup_logging


def _build_app() -> typer.Typer:
    app = typer.Typer(
        name="zello",
        help="ZelloWork server administration CLI",
        no_args_is_help=True,
    )

    ctx = resolve_auth_context()

    # Always available
    app.add_typer(settings_cmd.app, name="settings")
    app.add_typer(auth_cmd.app, name="auth")

    if ctx.state != "no_host":
        app.add_typer(users_app, name="users")
        app.add_typer(channels_app, name="channels")
        app.add_typer(roles_app, name="roles")
        app.add_typer(locations_app, name="locations")

    @app.callback()
    def _main(
            verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose logs."),
    ):
        setup_logging(verbose)

    return app


app = _build_app()
