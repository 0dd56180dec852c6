from __future__ import annotations

import json
from urllib.parse import parse_qsl

import httpx
import pytest

from zello_client import ZelloClient
from zello_client.config_types import ClientConfig


class FakeServer:
    """Answers requests by command path and remembers what it was sent."""

    def __init__(self) -> None:
        self.routes: dict[str, httpx.Response | dict] = {}
        self.default: httpx.Response | dict = {"status": "OK"}
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        reply = self.routes.get(request.url.path.lstrip("/"), self.default)
        if isinstance(reply, httpx.Response):
            return reply
        return httpx.Response(200, json=reply)

    def form(self, index: int = -1) -> list[tuple[str, str]]:
        return parse_qsl(self.requests[index].content.decode("utf-8"))

    def json_field(self, name: str, index: int = -1):
        return json.loads(dict(self.form(index))[name])


@pytest.fixture
def server() -> FakeServer:
    return FakeServer()


@pytest.fixture
def client_factory(server):
    clients: list[ZelloClient] = []

    def _make(**cfg_kwargs) -> ZelloClient:
        cfg_kwargs.setdefault("host", "zello.example.test")
        cfg_kwargs.setdefault("api_key", "key")
        http = httpx.Client(transport=httpx.MockTransport(server))
        client = ZelloClient(ClientConfig(**cfg_kwargs), http_client=http)
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.close()
