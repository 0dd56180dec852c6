from __future__ import annotations

import httpx

from zello_client.security import password_digest


def test_password_digest_reference_vector() -> None:
    assert password_digest("secret", "abc", "key1") == "b8bd3a76b4d8ecebc53d42a188e36d6a"


def test_auth_stores_sid_and_sends_chained_digest(server, client_factory) -> None:
    server.routes["user/gettoken"] = {"status": "OK", "token": "T1", "sid": "S1"}
    server.routes["user/login"] = {"status": "OK"}
    client = client_factory()

    result = client.auth("admin", "pw")

    assert result
    assert client.sid == "S1"
    gettoken, login = server.requests
    assert "sid" not in gettoken.url.params
    assert login.method == "POST"
    assert login.url.params["sid"] == "S1"
    assert server.form() == [
        ("username", "admin"),
        ("password", password_digest("pw", "T1", "key")),
    ]
    assert password_digest("pw", "T1", "key") == "7e6f6867fda0f97baeb074690b3b02da"


def test_auth_stops_when_token_request_fails(server, client_factory) -> None:
    server.routes["user/gettoken"] = {"status": "Server is busy", "code": 503}
    client = client_factory()

    result = client.auth("admin", "pw")

    assert not result
    assert result.error_code == 503
    assert result.error_description == "Server is busy"
    assert len(server.requests) == 1
    assert client.sid == ""


def test_auth_reports_login_rejection(server, client_factory) -> None:
    server.routes["user/gettoken"] = {"status": "OK", "token": "T1", "sid": "S1"}
    server.routes["user/login"] = {"status": "Invalid username or password", "code": 301}
    client = client_factory()

    result = client.auth("admin", "wrong")

    assert not result
    assert client.error_code == 301
    assert client.error_description == "Invalid username or password"


def test_logout_sends_session_and_clears_it(server, client_factory) -> None:
    client = client_factory(sid="S9")

    assert client.logout()

    assert server.requests[0].url.params["sid"] == "S9"
    assert client.sid == ""


def test_logout_clears_sid_even_when_server_fails(server, client_factory) -> None:
    server.default = httpx.Response(500)
    client = client_factory(sid="S9")

    result = client.logout()

    assert not result
    assert result.error_code == 1010
    assert client.sid == ""
