from __future__ import annotations

import json
from typing import Any, NoReturn

import typer
from rich.table import Table
from zello_client import ApiError

from .. import console
from ..config import load_config
from ..formatting import format_flag, format_value
from ..http import make_client

app = typer.Typer(help="Channel roles commands (admin session required).")


def _fail(action: str, e: ApiError) -> NoReturn:
    console.err(f"Failed to {action}: {e}")
    raise typer.Exit(code=2)


@app.command("list")
def list_roles(
        channel: str = typer.Argument(..., help="Channel name."),
        host: str | None = typer.Option(None, "--host", help="Override server host."),
        profile: str | None = typer.Option(None, "--profile", help="Config profile to use."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    cfg = load_config()
    client = make_client(cfg, profile=profile, host_override=host)

    try:
        data = client.get_channel_roles(channel).raise_for_error().data
    except ApiError as e:
        _fail("list roles", e)
    finally:
        client.close()

    if json_out:
        console.print_json(data)
        return

    table = Table(title=f"Roles in {channel}")
    table.add_column("name", style="bold")
    table.add_column("listen_only")
    table.add_column("no_disconnect")
    table.add_column("allow_alerts")
    table.add_column("to")

    for role in data.get("roles") or []:
        settings = role.get("settings") if isinstance(role.get("settings"), dict) else {}
        table.add_row(
            str(role.get("name") or "-"),
            format_flag(settings.get("listen_only")),
            format_flag(settings.get("no_disconnect")),
            format_flag(settings.get("allow_alerts")),
            format_value(settings.get("to")),
        )

    console.console.print(table)


@app.command("save")
def save_role(
        channel: str = typer.Argument(..., help="Channel name."),
        role: str = typer.Argument(..., help="Role name."),
        settings_json: str | None = typer.Option(
            None, "--settings", help="Role settings as a JSON object; overrides the flags below."
        ),
        listen_only: bool = typer.Option(False, "--listen-only", help="Members can only listen."),
        no_disconnect: bool = typer.Option(False, "--no-disconnect", help="Members cannot leave the channel."),
        allow_alerts: bool = typer.Option(False, "--allow-alerts", help="Members may send call alerts."),
        talk_to: list[str] = typer.Option([], "--to", help="Role this role may talk to (repeatable)."),
        host: str | None = typer.Option(None, "--host", help="Override server host."),
        profile: str | None = typer.Option(None, "--profile", help="Config profile to use."),
):
    settings: dict[str, Any] | str
    if settings_json is not None:
        try:
            parsed = json.loads(settings_json)
        except ValueError as e:
            console.err(f"--settings is not valid JSON: {e}")
            raise typer.Exit(code=2)
        if not isinstance(parsed, dict):
            console.err("--settings must be a JSON object.")
            raise typer.Exit(code=2)
        settings = settings_json
    else:
        settings = {
            "listen_only": listen_only,
            "no_disconnect": no_disconnect,
            "allow_alerts": allow_alerts,
            "to": list(talk_to),
        }

    cfg = load_config()
    client = make_client(cfg, profile=profile, host_override=host)
    try:
        client.save_channel_role(channel, role, settings).raise_for_error()
    except ApiError as e:
        _fail("save role", e)
    finally:
        client.close()

    console.ok(f"Role {role} saved in {channel}.")


@app.command("delete")
def delete_roles(
        channel: str = typer.Argument(..., help="Channel name."),
        roles: list[str] = typer.Argument(..., help="Role names to delete."),
        yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation."),
        host: str | None = typer.Option(None, "--host", help="Override server host."),
        profile: str | None = typer.Option(None, "--profile", help="Config profile to use."),
):
    if not yes and not typer.confirm(f"Delete role(s) {', '.join(roles)} from {channel}?"):
        raise typer.Exit(code=0)

    cfg = load_config()
    client = make_client(cfg, profile=profile, host_override=host)
    try:
        client.delete_channel_role(channel, roles).raise_for_error()
    except ApiError as e:
        _fail("delete roles", e)
    finally:
        client.close()

    console.ok(f"Deleted from {channel}: {', '.join(roles)}")


@app.command("assign")
def assign_role(
        channel: str = typer.Argument(..., help="Channel name."),
        role: str = typer.Argument(..., help="Role name."),
        usernames: list[str] = typer.Argument(..., help="Usernames to put in the role."),
        host: str | None = typer.Option(None, "--host", help="Override server host."),
        profile: str | None = typer.Option(None, "--profile", help="Config profile to use."),
):
    cfg = load_config()
    client = make_client(cfg, profile=profile, host_override=host)
    try:
        client.add_to_channel_role(channel, role, usernames).raise_for_error()
    except ApiError as e:
        _fail("assign role", e)
    finally:
        client.close()

    console.ok(f"{', '.join(usernames)} now in role {role} ({channel}).")
