from __future__ import annotations

import re

import pytest


def _path(client) -> str:
    return client.last_url.split("://", 1)[1].split("?", 1)[0]


def test_get_channels_without_arguments_hits_bare_command(server, client_factory) -> None:
    client = client_factory()

    client.get_channels()

    assert re.fullmatch(r"http://zello\.example\.test/channel/get\?rnd=[a-z0-9]{32}", client.last_url)
    assert server.requests[0].method == "GET"


def test_get_users_encodes_username(client_factory) -> None:
    client = client_factory()

    client.get_users("john doe/ops")

    assert _path(client) == "zello.example.test/user/get/login/john+doe%2Fops"


def test_get_users_segments_follow_fixed_order(client_factory) -> None:
    client = client_factory()

    client.get_users("alice", is_gateway=True, limit=10, start=5, channel="Dispatch")

    assert _path(client) == "zello.example.test/user/get/login/alice/channel/Dispatch/gateway/1/max/10/start/5"


def test_get_channels_with_filters(client_factory) -> None:
    client = client_factory()

    client.get_channels("Field Team", limit=20, start=40)

    assert _path(client) == "zello.example.test/channel/get/name/Field+Team/max/20/start/40"


@pytest.mark.parametrize(
    ("is_group", "is_hidden", "suffix"),
    [
        (True, False, "shared/true/invisible/false"),
        (True, True, "shared/true/invisible/true"),
        (False, False, "shared/false/invisible/false"),
        (False, True, "shared/false/invisible/true"),
    ],
)
def test_add_channel_encodes_flags_as_literals(client_factory, is_group, is_hidden, suffix) -> None:
    client = client_factory()

    client.add_channel("Ops", is_group=is_group, is_hidden=is_hidden)

    assert _path(client) == f"zello.example.test/channel/add/name/Ops/{suffix}"


def test_session_id_follows_cache_buster(client_factory) -> None:
    client = client_factory(sid="S1")

    client.get_users()

    assert re.search(r"/user/get\?rnd=[a-z0-9]{32}&sid=S1$", client.last_url)


def test_host_scheme_is_kept_when_present(client_factory) -> None:
    client = client_factory(host="https://secure.example.test/")

    client.get_channels()

    assert client.last_url.startswith("https://secure.example.test/channel/get?rnd=")


def test_add_to_channel_posts_repeated_logins(server, client_factory) -> None:
    client = client_factory()

    client.add_to_channel("Dispatch", ["alice", "bob"])

    request = server.requests[0]
    assert request.method == "POST"
    assert request.headers["content-type"] == "application/x-www-form-urlencoded"
    assert _path(client) == "zello.example.test/user/addto/Dispatch"
    assert server.form() == [("login[]", "alice"), ("login[]", "bob")]


def test_remove_from_channel_accepts_single_username(server, client_factory) -> None:
    client = client_factory()

    client.remove_from_channel("Dispatch", "alice")

    assert _path(client) == "zello.example.test/user/removefrom/Dispatch"
    assert server.form() == [("login[]", "alice")]


def test_add_to_channels_sends_users_then_channels(server, client_factory) -> None:
    client = client_factory()

    client.add_to_channels(["A", "B"], ["alice"])

    assert _path(client) == "zello.example.test/user/addtochannels"
    assert server.form() == [("users[]", "alice"), ("channels[]", "A"), ("channels[]", "B")]


def test_remove_from_channels_command(server, client_factory) -> None:
    client = client_factory()

    client.remove_from_channels("A", ["alice", "bob"])

    assert _path(client) == "zello.example.test/user/removefromchannels"
    assert server.form() == [("users[]", "alice"), ("users[]", "bob"), ("channels[]", "A")]


def test_save_user_sends_fields_verbatim(server, client_factory) -> None:
    client = client_factory()

    client.save_user({"name": "alice", "password": "5ebe2294ecd0e0f08eab7690d2a6ee69", "admin": True, "job": None})

    assert _path(client) == "zello.example.test/user/save"
    assert server.form() == [
        ("name", "alice"),
        ("password", "5ebe2294ecd0e0f08eab7690d2a6ee69"),
        ("admin", "true"),
    ]


def test_delete_users_and_channels(server, client_factory) -> None:
    client = client_factory()

    client.delete_users(["alice", "bob"])
    assert _path(client) == "zello.example.test/user/delete"
    assert server.form() == [("login[]", "alice"), ("login[]", "bob")]

    client.delete_channels(["Ops"])
    assert _path(client) == "zello.example.test/channel/delete"
    assert server.form() == [("name[]", "Ops")]


def test_channel_role_commands(server, client_factory) -> None:
    client = client_factory()

    client.get_channel_roles("Ops")
    assert _path(client) == "zello.example.test/channel/roleslist/name/Ops"

    client.delete_channel_role("Ops", ["dispatchers", "drivers"])
    assert _path(client) == "zello.example.test/channel/deleterole/channel/Ops"
    assert server.form() == [("roles[]", "dispatchers"), ("roles[]", "drivers")]

    client.add_to_channel_role("Ops", "drivers", ["alice"])
    assert _path(client) == "zello.example.test/channel/addtorole/channel/Ops/name/drivers"
    assert server.form() == [("login[]", "alice")]


def test_save_channel_role_encodes_mapping(server, client_factory) -> None:
    client = client_factory()
    settings = {"listen_only": False, "no_disconnect": True, "allow_alerts": False, "to": ["dispatchers"]}

    client.save_channel_role("Ops", "drivers", settings)

    assert _path(client) == "zello.example.test/channel/saverole/channel/Ops/name/drivers"
    assert server.json_field("settings") == settings


def test_save_channel_role_passes_string_through(server, client_factory) -> None:
    client = client_factory()
    raw = '{"listen_only":true}'

    client.save_channel_role("Ops", "listeners", raw)

    assert dict(server.form())["settings"] == raw


def test_save_channel_role_rejects_other_types(server, client_factory) -> None:
    client = client_factory()

    with pytest.raises(TypeError):
        client.save_channel_role("Ops", "drivers", ["listen_only"])
    assert server.requests == []


def test_get_locations_uses_query_string(server, client_factory) -> None:
    client = client_factory(sid="S1")

    client.get_locations(
        ["-30.708945", "-70.89936"],
        ["-30.720996", "-70.916227"],
        name="alice",
        limit=50,
    )

    request = server.requests[0]
    assert request.method == "GET"
    assert request.content == b""
    assert _path(client) == "zello.example.test/location/get"
    query = client.last_url.split("&sid=S1&", 1)[1]
    assert query == (
        "northeast%5B%5D=-30.708945&northeast%5B%5D=-70.89936"
        "&southwest%5B%5D=-30.720996&southwest%5B%5D=-70.916227"
        "&name=alice&max=50"
    )
    assert request.url.params.get_list("northeast[]") == ["-30.708945", "-70.89936"]
