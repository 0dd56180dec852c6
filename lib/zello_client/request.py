from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote_plus, urlencode


def as_list(value: str | Iterable[Any] | None) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return [str(v) for v in value]


def _text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass
class ApiRequest:
    """A remote command with its path arguments, query and form fields.

    Values are kept raw until ``path``/``query_string``/``body`` are read, so
    every value is percent-encoded exactly once.
    """

    command: str
    segments: list[tuple[str | None, str]] = field(default_factory=list)
    query: list[tuple[str, str]] = field(default_factory=list)
    form: list[tuple[str, str]] = field(default_factory=list)

    def segment(self, name: str, value: Any) -> "ApiRequest":
        self.segments.append((name, _text(value)))
        return self

    def arg(self, value: Any) -> "ApiRequest":
        self.segments.append((None, _text(value)))
        return self

    def query_param(self, name: str, value: Any) -> "ApiRequest":
        self.query.append((name, _text(value)))
        return self

    def query_params(self, name: str, values: Iterable[Any]) -> "ApiRequest":
        for value in values:
            self.query_param(name, value)
        return self

    def form_field(self, name: str, value: Any) -> "ApiRequest":
        self.form.append((name, _text(value)))
        return self

    def form_fields(self, name: str, values: Iterable[Any]) -> "ApiRequest":
        for value in values:
            self.form_field(name, value)
        return self

    @property
    def method(self) -> str:
        return "POST" if self.form else "GET"

    @property
    def path(self) -> str:
        parts = [self.command.strip("/")]
        for name, value in self.segments:
            if name:
                parts.append(name)
            parts.append(quote_plus(value, safe=""))
        return "/".join(parts)

    @property
    def query_string(self) -> str:
        return urlencode(self.query)

    @property
    def body(self) -> str:
        return urlencode(self.form)
