from __future__ import annotations

from importlib import metadata

import typer
from zello_client import ZelloClient
from zello_client.config_types import ClientConfig

from . import console
from .config import AppConfig, apply_profile, normalize_host, resolve_api_key, resolve_host


def cli_version() -> str:
    try:
        return metadata.version("zellowork-api")
    except metadata.PackageNotFoundError:
        return "0.0.0"


def make_client(
    cfg: AppConfig,
    *,
    profile: str | None = None,
    host_override: str | None = None,
) -> ZelloClient:
    if profile and profile not in cfg.profiles:
        console.err(f"Unknown profile: {profile}")
        console.info("Profiles live in [profiles.<name>] tables of the config file.")
        raise typer.Exit(code=2)
    effective_cfg = apply_profile(cfg, profile)
    configured_host = resolve_host(effective_cfg)
    host = normalize_host(host_override) or configured_host
    if not host:
        console.err("Server host is not configured.")
        console.info("Run: zello settings init")
        raise typer.Exit(code=2)

    return ZelloClient(
        ClientConfig(
            host=host,
            api_key=resolve_api_key(effective_cfg),
            sid=(effective_cfg.session.sid or None) if host == configured_host else None,
            connect_timeout_ms=effective_cfg.connect_timeout_ms,
            execution_timeout_ms=effective_cfg.execution_timeout_ms,
            client_version=cli_version(),
        )
    )
