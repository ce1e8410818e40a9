"""Process-wide proxy configuration.

Values are read once (from the environment and optionally a YAML file) and
passed explicitly into the handler and app factory.
"""
from __future__ import annotations
import os
from dataclasses import dataclass, fields, replace
from typing import Any, Mapping

import yaml

DEFAULT_UPSTREAM_URL = "https://api.openai.com/v1/responses"
DEFAULT_MODEL = "gpt-4.1-mini"
MAX_OUTPUT_TOKENS = 900

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def parse_bool(value: str) -> bool:
    v = value.strip().lower()
    if v in _TRUE:
        return True
    if v in _FALSE:
        return False
    raise ValueError(f"Invalid boolean value: {value!r}")


def load_cfg(path: str) -> dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    return data


_BOOL_KEYS = {"guardrails", "plain_text_math"}


def _coerce(key: str, value: Any) -> Any:
    """Coerce a YAML override to the field's type, the way env values are parsed."""
    if key in _BOOL_KEYS:
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return parse_bool(value)
        raise ValueError(f"Config key {key!r} must be a boolean, got {value!r}")
    if key == "max_output_tokens":
        if isinstance(value, bool):
            raise ValueError(f"Config key {key!r} must be an integer, got {value!r}")
        return int(value)
    if key == "upstream_timeout":
        return None if value is None else float(value)
    if value is None:
        return None
    return str(value)


@dataclass(frozen=True)
class ProxyConfig:
    """Settings shared by every request.

    Attributes:
        api_key: Upstream bearer credential. Requests fail with 500 when unset.
        app_token: Shared secret for the ``x-app-token`` header. Unset or empty
            disables the access gate.
        upstream_url: Responses endpoint to forward to.
        default_model: Model used when the caller's choice is absent or rejected.
        max_output_tokens: Output-token ceiling sent upstream.
        guardrails: Apply length caps to model, system and prompt.
        plain_text_math: Append the formatting note and clean LaTeX delimiters.
        upstream_timeout: Seconds to wait for upstream; ``None`` waits forever.
    """

    api_key: str | None = None
    app_token: str | None = None
    upstream_url: str = DEFAULT_UPSTREAM_URL
    default_model: str = DEFAULT_MODEL
    max_output_tokens: int = MAX_OUTPUT_TOKENS
    guardrails: bool = True
    plain_text_math: bool = True
    upstream_timeout: float | None = None

    @property
    def gate_enabled(self) -> bool:
        return bool(self.app_token)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ProxyConfig":
        env = os.environ if environ is None else environ
        timeout = env.get("UPSTREAM_TIMEOUT", "").strip()
        return cls(
            api_key=env.get("OPENAI_API_KEY") or None,
            app_token=env.get("APP_TOKEN") or None,
            upstream_url=env.get("OPENAI_RESPONSES_URL", DEFAULT_UPSTREAM_URL),
            default_model=env.get("DEFAULT_MODEL", DEFAULT_MODEL),
            guardrails=parse_bool(env.get("PROXY_GUARDRAILS", "1")),
            plain_text_math=parse_bool(env.get("PROXY_PLAIN_TEXT_MATH", "1")),
            upstream_timeout=float(timeout) if timeout else None,
        )

    @classmethod
    def from_file(cls, path: str, environ: Mapping[str, str] | None = None) -> "ProxyConfig":
        """
        Build config from the environment, then overlay keys from a YAML file.

        Args:
            path: YAML file whose keys match the dataclass field names.
            environ: Environment mapping; defaults to ``os.environ``.
        """
        base = cls.from_env(environ)
        overrides = load_cfg(path)
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ValueError(f"Unknown config keys in {path}: {', '.join(unknown)}")
        return replace(base, **{k: _coerce(k, v) for k, v in overrides.items()})


def load_config(environ: Mapping[str, str] | None = None) -> ProxyConfig:
    """Load config from ``PROXY_CONFIG`` if set, else from the environment alone."""
    env = os.environ if environ is None else environ
    path = env.get("PROXY_CONFIG")
    if path:
        return ProxyConfig.from_file(path, env)
    return ProxyConfig.from_env(env)
