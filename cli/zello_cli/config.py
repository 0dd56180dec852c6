from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from typing import Any

import tomli_w
from platformdirs import user_config_dir

APP_NAME = "zello"
CONFIG_FILENAME = "config.toml"
ENV_HOST = "ZELLO_URL"
ENV_API_KEY = "ZELLO_API_KEY"


@dataclass
class SessionConfig:
    sid: str = ""
    username: str = ""


@dataclass
class AppConfig:
    host: str
    api_key: str
    session: SessionConfig = field(default_factory=SessionConfig)
    connect_timeout_ms: int | None = None
    execution_timeout_ms: int | None = None
    # raw [profiles.<name>] tables, written back unchanged
    profiles: dict[str, dict[str, Any]] = field(default_factory=dict)


def config_path() -> str:
    return f"{user_config_dir(APP_NAME)}/{CONFIG_FILENAME}"


def default_config() -> AppConfig:
    return AppConfig(host="", api_key="", session=SessionConfig())


def normalize_host(raw: str | None) -> str:
    # the client adds http:// when no scheme is given
    return (raw or "").strip().rstrip("/")


def ensure_parent_dir(path: str) -> None:
    os.makedirs(os.path.dirname(path), exist_ok=True)


def to_toml(cfg: AppConfig) -> dict[str, Any]:
    return _prune_none(
        {
            "host": cfg.host,
            "api_key": cfg.api_key,
            "connect_timeout_ms": cfg.connect_timeout_ms,
            "execution_timeout_ms": cfg.execution_timeout_ms,
            "session": {
                "sid": cfg.session.sid,
                "username": cfg.session.username,
            },
            "profiles": cfg.profiles or None,
        }
    )


def _prune_none(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _prune_none(v) for k, v in value.items() if v is not None}
    if isinstance(value, list):
        return [_prune_none(item) for item in value if item is not None]
    return value


def _positive_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


def from_toml(data: dict[str, Any]) -> AppConfig:
    session_raw = data.get("session") or {}
    session = SessionConfig()
    if isinstance(session_raw, dict):
        session = SessionConfig(
            sid=str(session_raw.get("sid") or ""),
            username=str(session_raw.get("username") or ""),
        )
    return AppConfig(
        host=normalize_host(str(data.get("host") or "")),
        api_key=str(data.get("api_key") or ""),
        session=session,
        connect_timeout_ms=_positive_int(data.get("connect_timeout_ms")),
        execution_timeout_ms=_positive_int(data.get("execution_timeout_ms")),
        profiles=_profiles(data.get("profiles")),
    )


def _profiles(raw: Any) -> dict[str, dict[str, Any]]:
    if not isinstance(raw, dict):
        return {}
    return {str(name): dict(prof) for name, prof in raw.items() if isinstance(prof, dict)}


def load_config() -> AppConfig:
    path = config_path()
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
        return from_toml(data)
    except FileNotFoundError:
        return default_config()


def apply_profile(cfg: AppConfig, profile: str | None) -> AppConfig:
    """Overlay ``[profiles.<name>]`` onto ``cfg``.

    A profile switches servers, so the stored session only carries over when
    the profile names the same host.
    """
    if not profile:
        return cfg
    prof = cfg.profiles.get(profile)
    if prof is None:
        return cfg

    host = normalize_host(str(prof.get("host") or cfg.host))
    session = cfg.session if host == cfg.host else SessionConfig()
    if prof.get("sid"):
        session = SessionConfig(sid=str(prof["sid"]), username=str(prof.get("username") or ""))
    return AppConfig(
        host=host,
        api_key=str(prof.get("api_key") or cfg.api_key),
        session=session,
        connect_timeout_ms=_positive_int(prof.get("connect_timeout_ms")) or cfg.connect_timeout_ms,
        execution_timeout_ms=_positive_int(prof.get("execution_timeout_ms")) or cfg.execution_timeout_ms,
        profiles=cfg.profiles,
    )


def store_session(
    cfg: AppConfig,
    sid: str,
    username: str,
    *,
    profile: str | None = None,
    host: str | None = None,
) -> None:
    """Record a session next to the host it was issued by.

    With a profile the session goes into that profile's table; otherwise into
    the top-level ``[session]``. A host override is saved along with it.
    """
    host = normalize_host(host)
    if profile:
        prof = cfg.profiles.setdefault(profile, {})
        if host:
            prof["host"] = host
        prof["sid"] = sid
        prof["username"] = username
        return
    if host:
        cfg.host = host
    cfg.session = SessionConfig(sid=sid, username=username)


def clear_session(cfg: AppConfig, profile: str | None = None) -> None:
    prof = cfg.profiles.get(profile) if profile else None
    if prof is not None and prof.get("sid"):
        prof.pop("sid", None)
        prof.pop("username", None)
        return
    cfg.session = SessionConfig()


def resolve_host(cfg: AppConfig) -> str:
    env_value = os.getenv(ENV_HOST, "").strip()
    if env_value:
        return normalize_host(env_value)
    return cfg.host


def resolve_api_key(cfg: AppConfig) -> str:
    env_value = os.getenv(ENV_API_KEY, "").strip()
    if env_value:
        return env_value
    return cfg.api_key


def save_config(cfg: AppConfig) -> str:
    path = config_path()
    ensure_parent_dir(path)
    with open(path, "wb") as f:
        f.write(tomli_w.dumps(to_toml(cfg)).encode("utf-8"))
    os.chmod(path, 0o600)
    return path
