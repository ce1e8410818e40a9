from __future__ import annotations

from types import SimpleNamespace
from typing import Any

import pytest

import classroom_proxy.serve.upstream as upstream_mod


class _FakeResponse:
    def __init__(self, status_code: int, json_data: Any) -> None:
        self.status_code = status_code
        self._json = json_data

    def json(self) -> Any:
        if isinstance(self._json, Exception):
            raise self._json
        return self._json


class FakeUpstream:
    """Stands in for httpx.Client and records every outbound call."""

    def __init__(self) -> None:
        self.status_code = 200
        self.data: Any = {"output_text": "Hello test"}
        self.error: Exception | None = None
        self.calls: list[dict[str, Any]] = []
        self.timeouts: list[Any] = []

    def reply(self, data: Any, status_code: int = 200) -> None:
        self.data = data
        self.status_code = status_code

    def fail(self, error: Exception) -> None:
        self.error = error

    @property
    def last_payload(self) -> dict[str, Any]:
        return self.calls[-1]["json"]

    def client(self, timeout: float | int | None = None) -> "_FakeClient":  # signature-compatible
        self.timeouts.append(timeout)
        return _FakeClient(self)


class _FakeClient:
    def __init__(self, upstream: FakeUpstream) -> None:
        self.upstream = upstream

    def __enter__(self) -> "_FakeClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        return None

    def post(self, url: str, headers: dict[str, str] | None = None, json: dict[str, Any] | None = None) -> _FakeResponse:  # noqa: A002
        self.upstream.calls.append({"url": url, "headers": headers, "json": json})
        if self.upstream.error is not None:
            raise self.upstream.error
        return _FakeResponse(self.upstream.status_code, self.upstream.data)


@pytest.fixture
def upstream(monkeypatch: pytest.MonkeyPatch) -> FakeUpstream:
    fake = FakeUpstream()
    monkeypatch.setattr(upstream_mod, "httpx", SimpleNamespace(Client=fake.client))
    return fake
