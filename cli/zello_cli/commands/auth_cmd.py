from __future__ import annotations

import typer
from zello_client import ApiError

from .. import console
from ..auth_state import resolve_auth_context
from ..config import apply_profile, clear_session, load_config, save_config, store_session
from ..http import make_client

app = typer.Typer(help="Auth commands.")


@app.command("login")
def login(
    username: str = typer.Option(..., "--username", prompt=True, help="Administrative username."),
    password: str = typer.Option(..., "--password", prompt=True, hide_input=True, help="Password for login."),
    host: str | None = typer.Option(None, "--host", help="Log in to this host and save it as the server."),
    profile: str | None = typer.Option(None, "--profile", help="Config profile to log in with."),
):
    cfg = load_config()
    client = make_client(cfg, profile=profile, host_override=host)
    try:
        client.auth(username, password).raise_for_error()
        sid = client.sid
    except ApiError as e:
        console.err(f"Login failed: {e}")
        raise typer.Exit(code=2)
    finally:
        client.close()

    store_session(cfg, sid, username, profile=profile, host=host)
    save_path = save_config(cfg)
    console.ok(f"Login successful. Session saved to {save_path}.")


@app.command("logout", help="End the server session and forget it locally.")
def logout(
    profile: str | None = typer.Option(None, "--profile", help="Config profile to log out of."),
):
    cfg = load_config()
    if not apply_profile(cfg, profile).session.sid:
        console.info("No active session.")
        return

    # always the host that issued the stored session
    client = make_client(cfg, profile=profile)
    try:
        result = client.logout()
    finally:
        client.close()

    if not result:
        console.warn(f"Server did not confirm logout: {result.error_description} (code {result.error_code})")
    clear_session(cfg, profile)
    save_path = save_config(cfg)
    console.ok(f"Session cleared from {save_path}.")


@app.command("status", help="Show the locally stored session.")
def status():
    ctx = resolve_auth_context()
    if ctx.state == "no_host":
        console.warn("Server host is not configured. Run: zello settings init")
    elif ctx.state == "no_api_key":
        console.warn("API key is not configured. Run: zello settings set --api-key ...")
    elif ctx.state == "no_session":
        console.info("Not logged in. Run: zello auth login")
    else:
        console.ok(f"Logged in as {ctx.username or '(unknown user)'}.")
