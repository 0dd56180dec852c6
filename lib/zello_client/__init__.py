from .client import ZelloClient
from .errors import ApiError, ConfigurationError, NetworkError, ZelloClientError
from .result import CallResult

__all__ = ["ZelloClient", "CallResult", "ApiError", "ConfigurationError", "NetworkError", "ZelloClientError"]
