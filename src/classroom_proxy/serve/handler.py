"""Request pipeline: validate, forward upstream, extract, clean, respond.

The handler knows nothing about the HTTP framework; the FastAPI app and the
CLI both feed it a method, headers and a body and get a ``ProxyResponse``.
"""
from __future__ import annotations
import json
import logging
from typing import Any, Mapping

from classroom_proxy.common import errors
from classroom_proxy.common.config import ProxyConfig
from classroom_proxy.common.formatting import augment_system, clean_text, extract_text
from classroom_proxy.common.schema import (
    ErrorOut,
    GenerateIn,
    GenerateOut,
    OutboundGenerationRequest,
    ProxyResponse,
)
from classroom_proxy.serve.upstream import call_upstream

LOGGER = logging.getLogger("classroom_proxy.serve.handler")

TOKEN_HEADER = "x-app-token"
MAX_MODEL_LEN = 60
MAX_SYSTEM_LEN = 4000
MAX_PROMPT_LEN = 20000


def _parse_body(body: Any) -> GenerateIn:
    if isinstance(body, (bytes, bytearray)):
        body = body.decode("utf-8")
    if isinstance(body, str):
        body = json.loads(body) if body.strip() else None
    if not isinstance(body, dict):
        body = {}
    return GenerateIn.model_validate(body)


class RequestProxyHandler:
    """Turns one inbound call into one upstream call and a JSON response."""

    def __init__(self, config: ProxyConfig) -> None:
        self.config = config

    def handle(self, method: str, headers: Mapping[str, str], body: Any) -> ProxyResponse:
        try:
            self._check_method(method)
            self._check_token(headers)
            text = self._generate(body)
        except errors.ProxyError as e:
            if isinstance(e, errors.UpstreamError):
                LOGGER.error("Upstream request failed with status %s", e.status)
            return ProxyResponse(status=e.status, body=e.to_body(), headers=e.headers)
        except Exception as e:
            LOGGER.exception("Unhandled error while proxying request")
            return ProxyResponse(
                status=500,
                body=ErrorOut(error="Server error", details=str(e)).model_dump(),
            )
        return ProxyResponse(status=200, body=GenerateOut(text=text).model_dump())

    def _check_method(self, method: str) -> None:
        if method.upper() != "POST":
            raise errors.method_not_allowed()

    def _check_token(self, headers: Mapping[str, str]) -> None:
        if not self.config.gate_enabled:
            return
        provided = {k.lower(): v for k, v in headers.items()}.get(TOKEN_HEADER)
        if not provided or provided != self.config.app_token:
            raise errors.unauthorized()

    def _generate(self, body: Any) -> str:
        if not self.config.api_key:
            raise errors.missing_api_key()

        payload = _parse_body(body)
        if not payload.prompt or not isinstance(payload.prompt, str):
            raise errors.invalid_prompt()

        request = self.build_request(payload)
        upstream = call_upstream(self.config, request)
        if not upstream.ok:
            raise errors.UpstreamError(upstream.status, upstream.raw)

        text = extract_text(upstream)
        if text and self.config.plain_text_math:
            text = clean_text(text)
        return text

    def build_request(self, payload: GenerateIn) -> OutboundGenerationRequest:
        """
        Normalize caller fields into the outbound request.

        Args:
            payload: Parsed body with a string prompt.
        """
        model, system, prompt = payload.model, payload.system, payload.prompt
        if self.config.guardrails:
            if not (isinstance(model, str) and len(model) <= MAX_MODEL_LEN):
                model = self.config.default_model
            if not (isinstance(system, str) and len(system) <= MAX_SYSTEM_LEN):
                system = ""
            prompt = prompt[:MAX_PROMPT_LEN]
        else:
            if not isinstance(model, str):
                model = self.config.default_model
            if not isinstance(system, str):
                system = ""

        if self.config.plain_text_math:
            system = augment_system(system)

        return OutboundGenerationRequest(
            model=model,
            system_text=system,
            user_text=prompt,
            max_output_tokens=self.config.max_output_tokens,
        )
