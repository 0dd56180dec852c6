from __future__ import annotations

MISSING_JSON = 1000
MISSING_HTTP = 1001
API_UNAVAILABLE = 1010


class ZelloClientError(Exception):
    """Base client error."""


class ConfigurationError(ZelloClientError):
    """Required client capability is unavailable."""

    def __init__(self, code: int, message: str):
        super().__init__(message)
        self.code = code


class ApiError(ZelloClientError):
    def __init__(self, code: int, message: str, details: str | None = None):
        super().__init__(message)
        self.code = code
        self.details = details

    def __str__(self) -> str:
        return f"{super().__str__()} (code {self.code})"


class NetworkError(ApiError):
    """Transport/network layer error."""
