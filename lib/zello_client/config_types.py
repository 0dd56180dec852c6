from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class ClientConfig:
    host: str
    api_key: str
    sid: str | None = None
    connect_timeout_ms: int | None = None
    execution_timeout_ms: int | None = None
    client_version: str | None = None

    @property
    def base_url(self) -> str:
        host = self.host.strip().rstrip("/")
        if host.startswith("http://") or host.startswith("https://"):
            return host
        return f"http://{host}"
