from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from classroom_proxy.common.config import ProxyConfig
from classroom_proxy.serve.fastapi_app import create_app


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app(ProxyConfig(api_key="sk-test", app_token="secret")))


def test_health_ok(client: TestClient) -> None:
    r = client.get("/health")
    assert r.status_code == 200
    data = r.json()
    assert data.get("status") == "ok"
    assert data.get("model") == "gpt-4.1-mini"


def test_generate_with_mocked_httpx(client: TestClient, upstream) -> None:
    r = client.post("/api/generate", json={"prompt": "test"}, headers={"x-app-token": "secret"})
    assert r.status_code == 200
    assert r.json() == {"text": "Hello test"}


@pytest.mark.parametrize("method", ["GET", "PUT", "DELETE"])
def test_generate_wrong_method(client: TestClient, method: str, upstream) -> None:
    r = client.request(method, "/api/generate")
    assert r.status_code == 405
    assert r.headers["allow"] == "POST"
    assert r.json() == {"error": "Method Not Allowed"}


def test_generate_requires_token(client: TestClient, upstream) -> None:
    r = client.post("/api/generate", json={"prompt": "test"})
    assert r.status_code == 401
    assert r.json() == {"error": "Unauthorized"}


def test_generate_invalid_prompt(client: TestClient, upstream) -> None:
    r = client.post("/api/generate", json={"prompt": 5}, headers={"x-app-token": "secret"})
    assert r.status_code == 400
    assert r.json() == {"error": "Missing or invalid 'prompt'."}


def test_generate_upstream_status_passthrough(client: TestClient, upstream) -> None:
    upstream.reply({"error": "rate limited"}, status_code=429)
    r = client.post("/api/generate", json={"prompt": "test"}, headers={"x-app-token": "secret"})
    assert r.status_code == 429
    assert r.json() == {"error": "OpenAI request failed", "details": {"error": "rate limited"}}


def test_open_access_without_app_token(upstream) -> None:
    client = TestClient(create_app(ProxyConfig(api_key="sk-test")))
    r = client.post("/api/generate", json={"prompt": "test"})
    assert r.status_code == 200


@pytest.mark.parametrize("method", ["TRACE", "PROPFIND", "MKCOL"])
def test_generate_unrouted_method_keeps_error_shape(client: TestClient, method: str) -> None:
    r = client.request(method, "/api/generate")
    assert r.status_code == 405
    assert r.headers["allow"] == "POST"
    assert r.json() == {"error": "Method Not Allowed"}


def test_other_routes_keep_default_405(client: TestClient) -> None:
    r = client.post("/health")
    assert r.status_code == 405
    assert "detail" in r.json()
