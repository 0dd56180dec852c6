from __future__ import annotations

import pytest
from zello_client import CallResult

from zello_cli.config import AppConfig, SessionConfig


class FakeClient:
    """Stands in for ZelloClient: records calls, answers with canned results."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple, dict]] = []
        self.results: dict[str, CallResult] = {}
        self.sid = ""
        self.closed = False

    def reply(self, method: str, data: dict | None = None, **failure) -> None:
        if failure:
            self.results[method] = CallResult.failure("http://zello.example.test/x", **failure)
        else:
            self.results[method] = CallResult.success("http://zello.example.test/x", {"status": "OK", **(data or {})})

    def close(self) -> None:
        self.closed = True

    def __getattr__(self, method: str):
        if method.startswith("_"):
            raise AttributeError(method)

        def _call(*args, **kwargs) -> CallResult:
            self.calls.append((method, args, kwargs))
            if method in self.results:
                return self.results[method]
            return CallResult.success("http://zello.example.test/x", {"status": "OK"})

        return _call


def make_cfg(**kwargs) -> AppConfig:
    kwargs.setdefault("host", "zello.example.test")
    kwargs.setdefault("api_key", "key")
    kwargs.setdefault("session", SessionConfig(sid="S1", username="admin"))
    return AppConfig(**kwargs)


@pytest.fixture
def fake_client() -> FakeClient:
    return FakeClient()


@pytest.fixture
def wire(monkeypatch, fake_client):
    """Point a command module at the fake client and an in-memory config."""

    def _wire(module, cfg: AppConfig | None = None) -> AppConfig:
        cfg = cfg or make_cfg()
        monkeypatch.setattr(module, "load_config", lambda: cfg)
        monkeypatch.setattr(module, "make_client", lambda *_args, **_kwargs: fake_client)
        return cfg

    return _wire


@pytest.fixture
def cfg_factory():
    return make_cfg
