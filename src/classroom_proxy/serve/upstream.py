"""Outbound call to the OpenAI Responses endpoint."""
from __future__ import annotations
import logging
import time

import httpx

from classroom_proxy.common.config import ProxyConfig
from classroom_proxy.common.schema import OutboundGenerationRequest, UpstreamResponse

LOGGER = logging.getLogger("classroom_proxy.serve.upstream")


def call_upstream(config: ProxyConfig, request: OutboundGenerationRequest) -> UpstreamResponse:
    """
    Send one generation request upstream. No retries.

    Args:
        config: Proxy config providing URL, credential and timeout.
        request: Normalized outbound request.

    Raises:
        httpx.HTTPError: On transport failure.
        ValueError: If the upstream body is not JSON.
    """
    headers = {
        "Authorization": f"Bearer {config.api_key}",
        "Content-Type": "application/json",
    }
    start = time.time()
    with httpx.Client(timeout=config.upstream_timeout) as client:
        r = client.post(config.upstream_url, headers=headers, json=request.to_payload())
        data = r.json()
    latency = int((time.time() - start) * 1000)
    LOGGER.info("Upstream %s responded %s in %sms", request.model, r.status_code, latency)
    return UpstreamResponse.from_json(r.status_code, data)
