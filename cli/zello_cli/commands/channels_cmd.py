from __future__ import annotations

from typing import NoReturn

import typer
from rich.table import Table
from zello_client import ApiError

from .. import console
from ..config import load_config
from ..formatting import format_flag, format_value
from ..http import make_client

app = typer.Typer(help="Channels commands (admin session required).")


def _fail(action: str, e: ApiError) -> NoReturn:
    console.err(f"Failed to {action}: {e}")
    raise typer.Exit(code=2)


@app.command("list")
def list_channels(
        limit: int = typer.Option(0, "--max", help="Max channels to return (0 = server default)."),
        start: int = typer.Option(0, "--start", help="Index of the first channel."),
        host: str | None = typer.Option(None, "--host", help="Override server host."),
        profile: str | None = typer.Option(None, "--profile", help="Config profile to use."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    cfg = load_config()
    client = make_client(cfg, profile=profile, host_override=host)

    try:
        data = client.get_channels(limit=limit, start=start).raise_for_error().data
    except ApiError as e:
        _fail("list channels", e)
    finally:
        client.close()

    if json_out:
        console.print_json(data)
        return

    table = Table(title="Channels")
    table.add_column("name", style="bold")
    table.add_column("group")
    table.add_column("hidden")
    table.add_column("users")

    for ch in data.get("channels") or []:
        table.add_row(
            str(ch.get("name") or "-"),
            format_flag(ch.get("is_shared")),
            format_flag(ch.get("is_invisible")),
            format_value(ch.get("count")),
        )

    console.console.print(table)


@app.command("show")
def show_channel(
        name: str = typer.Argument(..., help="Channel name."),
        host: str | None = typer.Option(None, "--host", help="Override server host."),
        profile: str | None = typer.Option(None, "--profile", help="Config profile to use."),
):
    cfg = load_config()
    client = make_client(cfg, profile=profile, host_override=host)

    try:
        data = client.get_channels(name).raise_for_error().data
    except ApiError as e:
        _fail("fetch channel", e)
    finally:
        client.close()

    channels = data.get("channels") or []
    if not channels:
        console.err(f"Channel '{name}' not found.")
        raise typer.Exit(code=2)
    console.print_json(channels[0])


@app.command("add")
def add_channel(
        name: str = typer.Argument(..., help="Channel name."),
        group: bool = typer.Option(True, "--group/--dynamic", help="Group channel or dynamic channel."),
        hidden: bool = typer.Option(False, "--hidden", help="Hidden group channel."),
        host: str | None = typer.Option(None, "--host", help="Override server host."),
        profile: str | None = typer.Option(None, "--profile", help="Config profile to use."),
):
    if hidden and not group:
        console.warn("--hidden only applies to group channels.")

    cfg = load_config()
    client = make_client(cfg, profile=profile, host_override=host)
    try:
        client.add_channel(name, is_group=group, is_hidden=hidden).raise_for_error()
    except ApiError as e:
        _fail("add channel", e)
    finally:
        client.close()

    console.ok(f"Channel {name} created.")


@app.command("delete")
def delete_channels(
        names: list[str] = typer.Argument(..., help="Channel names to delete."),
        yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation."),
        host: str | None = typer.Option(None, "--host", help="Override server host."),
        profile: str | None = typer.Option(None, "--profile", help="Config profile to use."),
):
    if not yes and not typer.confirm(f"Delete {len(names)} channel(s): {', '.join(names)}?"):
        raise typer.Exit(code=0)

    cfg = load_config()
    client = make_client(cfg, profile=profile, host_override=host)
    try:
        client.delete_channels(names).raise_for_error()
    except ApiError as e:
        _fail("delete channels", e)
    finally:
        client.close()

    console.ok(f"Deleted: {', '.join(names)}")


@app.command("add-users")
def add_users(
        channels: list[str] = typer.Option(..., "--channel", "-c", help="Channel name (repeatable)."),
        users: list[str] = typer.Option(..., "--user", "-u", help="Username (repeatable)."),
        host: str | None = typer.Option(None, "--host", help="Override server host."),
        profile: str | None = typer.Option(None, "--profile", help="Config profile to use."),
):
    cfg = load_config()
    client = make_client(cfg, profile=profile, host_override=host)
    try:
        client.add_to_channels(channels, users).raise_for_error()
    except ApiError as e:
        _fail("add users to channels", e)
    finally:
        client.close()

    console.ok(f"Added {len(users)} user(s) to {len(channels)} channel(s).")


@app.command("remove-users")
def remove_users(
        channels: list[str] = typer.Option(..., "--channel", "-c", help="Channel name (repeatable)."),
        users: list[str] = typer.Option(..., "--user", "-u", help="Username (repeatable)."),
        host: str | None = typer.Option(None, "--host", help="Override server host."),
        profile: str | None = typer.Option(None, "--profile", help="Config profile to use."),
):
    cfg = load_config()
    client = make_client(cfg, profile=profile, host_override=host)
    try:
        client.remove_from_channels(channels, users).raise_for_error()
    except ApiError as e:
        _fail("remove users from channels", e)
    finally:
        client.close()

    console.ok(f"Removed {len(users)} user(s) from {len(channels)} channel(s).")
