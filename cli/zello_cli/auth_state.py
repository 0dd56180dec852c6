from __future__ import annotations

from dataclasses import dataclass

from .config import load_config, resolve_api_key, resolve_host


@dataclass
class AuthContext:
    state: str
    username: str | None = None


def resolve_auth_context() -> AuthContext:
    """Local view of the session; the server is not contacted."""
    cfg = load_config()
    if not resolve_host(cfg):
        return AuthContext(state="no_host")
    if not resolve_api_key(cfg):
        return AuthContext(state="no_api_key")
    if not cfg.session.sid:
        return AuthContext(state="no_session")
    return AuthContext(state="session_present", username=cfg.session.username or None)
