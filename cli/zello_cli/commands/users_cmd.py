from __future__ import annotations

from typing import NoReturn

import typer
from rich.table import Table
from zello_client import ApiError
from zello_client.security import hash_password

from .. import console
from ..config import load_config
from ..formatting import format_flag, format_value
from ..http import make_client

app = typer.Typer(help="Users commands (admin session required).")


def _fail(action: str, e: ApiError) -> NoReturn:
    console.err(f"Failed to {action}: {e}")
    raise typer.Exit(code=2)


@app.command("list")
def list_users(
        channel: str | None = typer.Option(None, "--channel", help="Only members of this channel."),
        gateway: bool = typer.Option(False, "--gateway", help="List gateways instead of users."),
        limit: int = typer.Option(0, "--max", help="Max users to return (0 = server default)."),
        start: int = typer.Option(0, "--start", help="Index of the first user."),
        host: str | None = typer.Option(None, "--host", help="Override server host."),
        profile: str | None = typer.Option(None, "--profile", help="Config profile to use."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    cfg = load_config()
    client = make_client(cfg, profile=profile, host_override=host)

    try:
        data = client.get_users(is_gateway=gateway, limit=limit, start=start, channel=channel or "").raise_for_error().data
    except ApiError as e:
        _fail("list users", e)
    finally:
        client.close()

    if json_out:
        console.print_json(data)
        return

    total = data.get("total")
    if total is not None:
        console.info(f"total={total} max={limit or '-'} start={start}")

    table = Table(title="Gateways" if gateway else "Users")
    table.add_column("name", style="bold")
    table.add_column("full_name")
    table.add_column("email")
    table.add_column("job")
    table.add_column("admin")
    table.add_column("limited_access")

    for u in data.get("users") or []:
        table.add_row(
            str(u.get("name") or "-"),
            format_value(u.get("full_name")),
            format_value(u.get("email")),
            format_value(u.get("job")),
            format_flag(u.get("admin")),
            format_flag(u.get("limited_access")),
        )

    console.console.print(table)


@app.command("show")
def show_user(
        username: str = typer.Argument(..., help="Username."),
        host: str | None = typer.Option(None, "--host", help="Override server host."),
        profile: str | None = typer.Option(None, "--profile", help="Config profile to use."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    cfg = load_config()
    client = make_client(cfg, profile=profile, host_override=host)

    try:
        data = client.get_users(username).raise_for_error().data
    except ApiError as e:
        _fail("fetch user", e)
    finally:
        client.close()

    users = data.get("users") or []
    if not users:
        console.err(f"User '{username}' not found.")
        raise typer.Exit(code=2)
    if json_out:
        console.print_json(users[0])
        return

    user = users[0]
    console.ok("User:")
    for key in ("name", "full_name", "email", "job", "admin", "limited_access", "gateway", "channels"):
        value = user.get(key)
        shown = format_flag(value) if key in {"admin", "limited_access", "gateway"} else format_value(value)
        console.console.print(f"  {key}: {shown}")


@app.command("save")
def save_user(
        name: str = typer.Argument(..., help="Username to create or update."),
        password: str | None = typer.Option(None, "--password", help="Plain-text password (sent as md5)."),
        email: str | None = typer.Option(None, "--email", help="E-mail address."),
        full_name: str | None = typer.Option(None, "--full-name", help="Display name."),
        job: str | None = typer.Option(None, "--job", help="Position."),
        admin: bool | None = typer.Option(None, "--admin/--no-admin", help="Access to the admin console."),
        limited_access: bool | None = typer.Option(
            None, "--limited-access/--full-access", help="Forbid starting 1-on-1 conversations."
        ),
        gateway: bool | None = typer.Option(None, "--gateway/--no-gateway", help="Account is a gateway."),
        create_only: bool = typer.Option(False, "--create-only", help="Fail instead of updating an existing user."),
        host: str | None = typer.Option(None, "--host", help="Override server host."),
        profile: str | None = typer.Option(None, "--profile", help="Config profile to use."),
):
    fields: dict[str, object] = {"name": name}
    if password is not None:
        fields["password"] = hash_password(password)
    for key, value in (
            ("email", email),
            ("full_name", full_name),
            ("job", job),
            ("admin", admin),
            ("limited_access", limited_access),
            ("gateway", gateway),
    ):
        if value is not None:
            fields[key] = value
    if create_only:
        fields["add"] = True

    cfg = load_config()
    client = make_client(cfg, profile=profile, host_override=host)
    try:
        client.save_user(fields).raise_for_error()
    except ApiError as e:
        _fail("save user", e)
    finally:
        client.close()

    console.ok(f"User {name} saved.")


@app.command("delete")
def delete_users(
        usernames: list[str] = typer.Argument(..., help="Usernames to delete."),
        yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation."),
        host: str | None = typer.Option(None, "--host", help="Override server host."),
        profile: str | None = typer.Option(None, "--profile", help="Config profile to use."),
):
    if not yes and not typer.confirm(f"Delete {len(usernames)} user(s): {', '.join(usernames)}?"):
        raise typer.Exit(code=0)

    cfg = load_config()
    client = make_client(cfg, profile=profile, host_override=host)
    try:
        client.delete_users(usernames).raise_for_error()
    except ApiError as e:
        _fail("delete users", e)
    finally:
        client.close()

    console.ok(f"Deleted: {', '.join(usernames)}")


@app.command("add-to")
def add_to_channel(
        channel: str = typer.Argument(..., help="Channel name."),
        usernames: list[str] = typer.Argument(..., help="Usernames to add."),
        host: str | None = typer.Option(None, "--host", help="Override server host."),
        profile: str | None = typer.Option(None, "--profile", help="Config profile to use."),
):
    cfg = load_config()
    client = make_client(cfg, profile=profile, host_override=host)
    try:
        client.add_to_channel(channel, usernames).raise_for_error()
    except ApiError as e:
        _fail("add users to channel", e)
    finally:
        client.close()

    console.ok(f"Added to {channel}: {', '.join(usernames)}")


@app.command("remove-from")
def remove_from_channel(
        channel: str = typer.Argument(..., help="Channel name."),
        usernames: list[str] = typer.Argument(..., help="Usernames to remove."),
        host: str | None = typer.Option(None, "--host", help="Override server host."),
        profile: str | None = typer.Option(None, "--profile", help="Config profile to use."),
):
    cfg = load_config()
    client = make_client(cfg, profile=profile, host_override=host)
    try:
        client.remove_from_channel(channel, usernames).raise_for_error()
    except ApiError as e:
        _fail("remove users from channel", e)
    finally:
        client.close()

    console.ok(f"Removed from {channel}: {', '.join(usernames)}")
