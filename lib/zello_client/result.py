from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .errors import API_UNAVAILABLE, ApiError, NetworkError


@dataclass(frozen=True)
class CallResult:
    """Outcome of a single API call.

    Truthy when the server answered with ``"status": "OK"``. On success ``data``
    holds the whole response object; on failure ``data`` is empty and
    ``error_code``/``error_description`` describe what went wrong.
    """

    ok: bool
    url: str = ""
    data: dict[str, Any] = field(default_factory=dict)
    error_code: int = 0
    error_description: str = ""
    transport_error: str = ""

    def __bool__(self) -> bool:
        return self.ok

    def __getitem__(self, key: str) -> Any:
        return self.data[key]

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    @classmethod
    def success(cls, url: str, data: dict[str, Any]) -> "CallResult":
        return cls(ok=True, url=url, data=dict(data))

    @classmethod
    def failure(cls, url: str, code: int, description: str, transport_error: str = "") -> "CallResult":
        return cls(
            ok=False,
            url=url,
            error_code=code,
            error_description=description,
            transport_error=transport_error,
        )

    def raise_for_error(self) -> "CallResult":
        if self.ok:
            return self
        if self.error_code == API_UNAVAILABLE:
            raise NetworkError(self.error_code, self.error_description, self.transport_error or None)
        raise ApiError(self.error_code, self.error_description or "API call failed", None)
