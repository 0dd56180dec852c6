from __future__ import annotations

import logging

import httpx

from .config_types import ClientConfig
from .errors import API_UNAVAILABLE, NetworkError

log = logging.getLogger(__name__)

USER_AGENT = "zello-client/1.1.0"


def _seconds(ms: int | None) -> float | None:
    if not ms:
        return None
    return ms / 1000.0


def build_timeout(cfg: ClientConfig) -> httpx.Timeout:
    # unset timeouts mean "wait as long as the server takes".
    # execution_timeout_ms bounds each read, write and pool wait, not the whole exchange.
    return httpx.Timeout(_seconds(cfg.execution_timeout_ms), connect=_seconds(cfg.connect_timeout_ms))


class Transport:
    def __init__(self, cfg: ClientConfig, *, http_client: httpx.Client | None = None):
        self._cfg = cfg
        self._timeout = build_timeout(cfg)
        self._has_timeout = bool(cfg.connect_timeout_ms or cfg.execution_timeout_ms)
        headers = {"User-Agent": USER_AGENT}
        if cfg.client_version:
            headers["X-Client-Version"] = cfg.client_version

        self._owned = http_client is None
        if http_client is None:
            http_client = httpx.Client(
                timeout=self._timeout,
                headers=headers,
                follow_redirects=True,
            )
        self._client = http_client

    def close(self) -> None:
        if self._owned:
            self._client.close()

    def request(self, method: str, url: str, *, body: str | None = None) -> str:
        kwargs: dict = {}
        if body:
            kwargs["content"] = body.encode("utf-8")
            kwargs["headers"] = {"Content-Type": "application/x-www-form-urlencoded"}
        if self._has_timeout:
            kwargs["timeout"] = self._timeout
        try:
            r = self._client.request(method, url, **kwargs)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            log.debug("%s request failed: %r", method, e)
            raise NetworkError(
                API_UNAVAILABLE,
                "API is not available",
                f"HTTP status: 0, transport error: {type(e).__name__}: {e}",
            ) from e

        if r.status_code != 200:
            log.debug("%s request returned HTTP %s", method, r.status_code)
            raise NetworkError(
                API_UNAVAILABLE,
                "API is not available",
                f"HTTP status: {r.status_code}, transport error: none",
            )
        return r.text
