from __future__ import annotations

from datetime import datetime, timezone
from typing import Any


def format_timestamp(value: int | float | str | None) -> str:
    """Render a server timestamp (unix seconds) as UTC ISO-8601."""
    if value in (None, "", 0, "0"):
        return "-"
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        return str(value)
    dt = datetime.fromtimestamp(seconds, tz=timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%SZ")


def format_flag(value: Any) -> str:
    if isinstance(value, str):
        value = value.strip().lower() in {"1", "true", "yes", "on"}
    if value is None:
        return "-"
    return "yes" if value else "no"


def format_value(value: Any) -> str:
    if value is None or value == "":
        return "-"
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value) or "-"
    return str(value)


def parse_coordinates(text: str) -> list[str]:
    """Parse ``"LAT,LNG"`` into two numeric strings."""
    parts = [p.strip() for p in (text or "").split(",")]
    if len(parts) != 2:
        raise ValueError(f"expected LAT,LNG, got {text!r}")
    for part in parts:
        float(part)
    return parts
