from __future__ import annotations

import os

import typer

from .. import console
from ..config import config_path, default_config, load_config, normalize_host, save_config

app = typer.Typer(help="Manage local CLI settings (~/.config/zello/config.toml).")


@app.command("init")
def init_settings(
        force: bool = typer.Option(False, "--force", help="Overwrite existing config."),
        host: str = typer.Option(
            ...,
            "--host",
            prompt="Server host",
            help="Server host like example.zellowork.com or https://example.zellowork.com",
        ),
        api_key: str = typer.Option(..., "--api-key", prompt="API key", hide_input=True, help="Server API key."),
):
    path = config_path()
    if os.path.exists(path) and not force:
        console.info(f"Config already exists: {path}")
        console.info("Use --force to overwrite.")
        return

    cfg = default_config()
    cfg.host = normalize_host(host)
    cfg.api_key = api_key.strip()
    if not cfg.host:
        console.err("Host cannot be empty.")
        raise typer.Exit(code=2)
    saved = save_config(cfg)
    console.ok(f"Config written: {saved}")


@app.command("show")
def show_settings():
    cfg = load_config()
    key_state = "(set)" if cfg.api_key.strip() else "(empty)"
    sid_state = "(set)" if cfg.session.sid else "(empty)"
    console.console.print(
        f"host={cfg.host or '-'} api_key={key_state} sid={sid_state} "
        f"connect_timeout_ms={cfg.connect_timeout_ms or '-'} execution_timeout_ms={cfg.execution_timeout_ms or '-'} "
        f"profiles={','.join(sorted(cfg.profiles)) or '-'}"
    )


@app.command("set")
def set_setting(
        host: str | None = typer.Option(None, "--host", help="Set server host."),
        api_key: str | None = typer.Option(None, "--api-key", help="Set API key."),
        connect_timeout_ms: int | None = typer.Option(None, "--connect-timeout-ms", help="Connect timeout, 0 to unset."),
        execution_timeout_ms: int | None = typer.Option(
            None, "--execution-timeout-ms", help="Whole-request timeout, 0 to unset."
        ),
):
    cfg = load_config()
    if host is not None:
        new_host = normalize_host(host)
        if new_host != cfg.host:
            cfg.session.sid = ""
            cfg.session.username = ""
        cfg.host = new_host
    if api_key is not None:
        cfg.api_key = api_key.strip()
    if connect_timeout_ms is not None:
        cfg.connect_timeout_ms = connect_timeout_ms or None
    if execution_timeout_ms is not None:
        cfg.execution_timeout_ms = execution_timeout_ms or None
    saved = save_config(cfg)
    console.ok(f"Settings updated: {saved}")
