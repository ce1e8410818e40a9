"""Error types raised inside the proxy pipeline.

Each carries the HTTP status and JSON body it should be answered with.
"""
from __future__ import annotations
from typing import Any

_UNSET: Any = object()


class ProxyError(Exception):
    """Base for failures that map to a well-formed JSON error response."""

    def __init__(self, status: int, error: str, details: Any = _UNSET, headers: dict[str, str] | None = None) -> None:
        super().__init__(error)
        self.status = status
        self.error = error
        self.details = details
        self.headers = dict(headers or {})

    @property
    def has_details(self) -> bool:
        return self.details is not _UNSET

    def to_body(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.error}
        if self.has_details:
            body["details"] = self.details
        return body


class ClientError(ProxyError):
    """Caller must fix the request (bad method, token or payload)."""


class ConfigurationError(ProxyError):
    """Operator must fix the deployment."""

    def __init__(self, error: str) -> None:
        super().__init__(500, error)


class UpstreamError(ProxyError):
    """Upstream answered with a non-success status; passed through verbatim."""

    def __init__(self, status: int, details: Any) -> None:
        super().__init__(status, "OpenAI request failed", details)


def method_not_allowed() -> ClientError:
    return ClientError(405, "Method Not Allowed", headers={"Allow": "POST"})


def unauthorized() -> ClientError:
    return ClientError(401, "Unauthorized")


def invalid_prompt() -> ClientError:
    return ClientError(400, "Missing or invalid 'prompt'.")


def missing_api_key() -> ConfigurationError:
    return ConfigurationError("Server misconfigured: missing OPENAI_API_KEY")
