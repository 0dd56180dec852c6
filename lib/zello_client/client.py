from __future__ import annotations

import json
import logging
import re
from collections.abc import Iterable, Mapping
from typing import Any
from urllib.parse import quote_plus

import httpx

from .config_types import ClientConfig
from .errors import API_UNAVAILABLE, MISSING_HTTP, MISSING_JSON, ConfigurationError, NetworkError
from .request import ApiRequest, as_list
from .result import CallResult
from .security import make_nonce, password_digest
from .transport import Transport

log = logging.getLogger(__name__)

_SID_RE = re.compile(r"([?&]sid=)[^&]*")

Names = str | Iterable[str]
RoleSettings = Mapping[str, Any] | str


def verify_requirements(json_codec: Any, http_client: Any | None) -> None:
    if not callable(getattr(json_codec, "loads", None)) or not callable(getattr(json_codec, "dumps", None)):
        raise ConfigurationError(MISSING_JSON, "Missing JSON support")
    if http_client is not None and not callable(getattr(http_client, "request", None)):
        raise ConfigurationError(MISSING_HTTP, "Missing HTTP transport support")


def redact_url(url: str) -> str:
    return _SID_RE.sub(r"\1***", url)


class ZelloClient:
    """ZelloWork server administrative API.

    Every operation issues one HTTP call and returns a :class:`CallResult`.
    The outcome of the most recent call is also mirrored on the instance
    (``data``, ``error_code``, ``error_description``, ``last_url``).
    A client holds one session and is meant for one caller at a time.
    """

    version = "1.1.0"

    def __init__(
            self,
            cfg: ClientConfig,
            *,
            http_client: httpx.Client | None = None,
            json_codec: Any = json,
    ):
        verify_requirements(json_codec, http_client)
        self._cfg = cfg
        self._json = json_codec
        self._t = Transport(cfg, http_client=http_client)
        self.sid: str = cfg.sid or ""
        self.last_url: str = ""
        self.last_result: CallResult | None = None

    def close(self) -> None:
        self._t.close()

    def __enter__(self) -> "ZelloClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # --- most recent outcome ---
    @property
    def data(self) -> dict[str, Any]:
        return self.last_result.data if self.last_result is not None else {}

    @property
    def error_code(self) -> int:
        return self.last_result.error_code if self.last_result is not None else 0

    @property
    def error_description(self) -> str:
        return self.last_result.error_description if self.last_result is not None else ""

    @property
    def transport_error(self) -> str:
        return self.last_result.transport_error if self.last_result is not None else ""

    # --- dispatch ---
    def build_url(self, request: ApiRequest) -> str:
        url = f"{self._cfg.base_url}/{request.path}?rnd={make_nonce()}"
        if self.sid:
            url += f"&sid={quote_plus(self.sid)}"
        query = request.query_string
        if query:
            url += f"&{query}"
        return url

    def _send(self, request: ApiRequest) -> tuple[str, str]:
        self.last_result = None
        url = self.build_url(request)
        self.last_url = url
        log.debug("%s %s", request.method, redact_url(url))
        return url, self._t.request(request.method, url, body=request.body or None)

    def call(self, request: ApiRequest | str) -> CallResult:
        if isinstance(request, str):
            request = ApiRequest(request)
        try:
            url, text = self._send(request)
        except NetworkError as e:
            result = CallResult.failure(self.last_url, API_UNAVAILABLE, _unavailable(e.details), e.details or "")
        else:
            result = self._classify(url, text)
        self.last_result = result
        if not result:
            log.debug("%s failed: %s (code %s)", request.command, result.error_description, result.error_code)
        return result

    def call_raw(self, request: ApiRequest | str) -> str:
        """Send a request and return the response body without interpreting it."""
        if isinstance(request, str):
            request = ApiRequest(request)
        try:
            _, text = self._send(request)
        except NetworkError as e:
            self.last_result = CallResult.failure(
                self.last_url, API_UNAVAILABLE, _unavailable(e.details), e.details or ""
            )
            return ""
        return text

    def _classify(self, url: str, text: str) -> CallResult:
        try:
            res = self._json.loads(text)
        except ValueError:
            res = None
        if not isinstance(res, dict) or "status" not in res:
            detail = "HTTP status: 200, transport error: invalid JSON response"
            return CallResult.failure(url, API_UNAVAILABLE, _unavailable(detail), detail)
        if res["status"] == "OK":
            return CallResult.success(url, res)
        return CallResult.failure(url, _int(res.get("code")), str(res["status"]))

    # --- session ---
    def auth(self, username: str, password: str) -> CallResult:
        """Two-step login: fetch a token and session id, then send the digest.

        On success ``sid`` holds the session id, which may be stored and reused
        by later clients until :meth:`logout`.
        """
        self.sid = ""
        res = self.call("user/gettoken")
        if not res:
            return res
        token = str(res.get("token") or "")
        self.sid = str(res.get("sid") or "")
        request = (
            ApiRequest("user/login")
            .form_field("username", username)
            .form_field("password", password_digest(password, token, self._cfg.api_key))
        )
        return self.call(request)

    def logout(self) -> CallResult:
        try:
            return self.call("user/logout")
        finally:
            self.sid = ""

    # --- users ---
    def get_users(
            self,
            username: str = "",
            is_gateway: bool = False,
            limit: int = 0,
            start: int = 0,
            channel: str = "",
    ) -> CallResult:
        request = ApiRequest("user/get")
        if username:
            request.segment("login", username)
        if channel:
            request.segment("channel", channel)
        if is_gateway:
            request.segment("gateway", 1)
        if limit:
            request.segment("max", int(limit))
        if start:
            request.segment("start", int(start))
        return self.call(request)

    def save_user(self, fields: Mapping[str, Any]) -> CallResult:
        """Create the user, or update it when the name already exists.

        ``fields`` is sent as-is; ``password`` must already be an md5 hex
        digest (see :func:`zello_client.security.hash_password`).
        """
        request = ApiRequest("user/save")
        for key, value in fields.items():
            if value is not None:
                request.form_field(key, value)
        return self.call(request)

    def delete_users(self, usernames: Names) -> CallResult:
        return self.call(ApiRequest("user/delete").form_fields("login[]", as_list(usernames)))


    def add_to_channel(self, channel: str, usernames: Names) -> CallResult:
        request = ApiRequest("user/addto").arg(channel).form_fields("login[]", as_list(usernames))
        return self.call(request)

    def remove_from_channel(self, channel: str, usernames: Names) -> CallResult:
        request = ApiRequest("user/removefrom").arg(channel).form_fields("login[]", as_list(usernames))
        return self.call(request)

    def add_to_channels(self, channels: Names, usernames: Names) -> CallResult:
        request = (
            ApiRequest("user/addtochannels")
            .form_fields("users[]", as_list(usernames))
            .form_fields("channels[]", as_list(channels))
        )
        return self.call(request)

    def remove_from_channels(self, channels: Names, usernames: Names) -> CallResult:
        request = (
            ApiRequest("user/removefromchannels")
            .form_fields("users[]", as_list(usernames))
            .form_fields("channels[]", as_list(channels))
        )
        return self.call(request)

    # --- channels ---
    def get_channels(self, name: str = "", limit: int = 0, start: int = 0) -> CallResult:
        request = ApiRequest("channel/get")
        if name:
            request.segment("name", name)
        if limit:
            request.segment("max", int(limit))
        if start:
            request.segment("start", int(start))
        return self.call(request)

    def add_channel(self, name: str, is_group: bool = True, is_hidden: bool = False) -> CallResult:
        """Create a channel.

        ``is_group`` selects a group channel (otherwise dynamic); ``is_hidden``
        together with ``is_group`` creates a hidden group channel.
        """
        request = (
            ApiRequest("channel/add")
            .segment("name", name)
            .segment("shared", bool(is_group))
            .segment("invisible", bool(is_hidden))
        )
        return self.call(request)

    def delete_channels(self, names: Names) -> CallResult:
        return self.call(ApiRequest("channel/delete").form_fields("name[]", as_list(names)))

    # --- channel roles ---
    def get_channel_roles(self, name: str) -> CallResult:
        return self.call(ApiRequest("channel/roleslist").segment("name", name))

    def save_channel_role(self, channel: str, role: str, settings: RoleSettings) -> CallResult:
        """Create or update a role.

        ``settings`` is either a mapping such as
        ``{"listen_only": False, "no_disconnect": True, "allow_alerts": False, "to": ["dispatchers"]}``
        or the same thing already encoded as a JSON string.
        """
        if isinstance(settings, str):
            encoded = settings
        elif isinstance(settings, Mapping):
            encoded = self._json.dumps(dict(settings))
        else:
            raise TypeError(f"role settings must be a mapping or a JSON string, not {type(settings).__name__}")
        request = (
            ApiRequest("channel/saverole")
            .segment("channel", channel)
            .segment("name", role)
            .form_field("settings", encoded)
        )
        return self.call(request)

    def delete_channel_role(self, channel: str, roles: Names) -> CallResult:
        request = ApiRequest("channel/deleterole").segment("channel", channel).form_fields("roles[]", as_list(roles))
        return self.call(request)

    def add_to_channel_role(self, channel: str, role: str, usernames: Names) -> CallResult:
        request = (
            ApiRequest("channel/addtorole")
            .segment("channel", channel)
            .segment("name", role)
            .form_fields("login[]", as_list(usernames))
        )
        return self.call(request)

    # --- locations ---
    def get_locations(
            self,
            northeast: Iterable[Any],
            southwest: Iterable[Any],
            name: str | None = None,
            filter_: str | None = None,
            start: int | None = None,
            limit: int | None = None,
    ) -> CallResult:
        """Users last seen inside a bounding box.

        ``northeast`` and ``southwest`` are ``(latitude, longitude)`` pairs.
        The arguments travel in the query string; the call is a GET.
        """
        request = (
            ApiRequest("location/get")
            .query_params("northeast[]", northeast)
            .query_params("southwest[]", southwest)
        )
        if name:
            request.query_param("name", name)
        if filter_:
            request.query_param("filter", filter_)
        if start:
            request.query_param("start", int(start))
        if limit:
            request.query_param("max", int(limit))
        return self.call(request)


def _int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _unavailable(detail: str | None) -> str:
    if detail:
        return f"API is not available: {detail}"
    return "API is not available"
