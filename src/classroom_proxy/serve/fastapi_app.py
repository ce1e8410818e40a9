"""FastAPI surface for the classroom proxy.

Endpoints:
- GET /health
- POST /api/generate  { "model"?: "...", "system"?: "...", "prompt": "..." }
"""
from __future__ import annotations
import logging

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from classroom_proxy.common import errors
from classroom_proxy.common.config import ProxyConfig, load_config
from classroom_proxy.common.logging_setup import setup_logging
from classroom_proxy.common.schema import ErrorOut, GenerateOut
from classroom_proxy.serve.handler import RequestProxyHandler

LOGGER = logging.getLogger("classroom_proxy.serve.app")

GENERATE_PATH = "/api/generate"
ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def create_app(config: ProxyConfig | None = None) -> FastAPI:
    """
    Build the app around a handler.

    Args:
        config: Proxy config; loaded from the environment when omitted.
    """
    config = config or load_config()
    handler = RequestProxyHandler(config)
    app = FastAPI(title="Classroom Proxy")
    app.state.config = config

    @app.on_event("startup")
    def _warn_on_missing_key() -> None:
        if not config.api_key:
            LOGGER.warning("OPENAI_API_KEY is not set; generate requests will fail with 500")
        if not config.gate_enabled:
            LOGGER.warning("APP_TOKEN is not set; /api/generate is open to anyone")

    @app.exception_handler(StarletteHTTPException)
    async def _method_not_allowed(request: Request, exc: StarletteHTTPException):
        # Methods outside ALL_METHODS are rejected by routing before the handler runs.
        if exc.status_code == 405 and request.url.path == GENERATE_PATH:
            err = errors.method_not_allowed()
            return JSONResponse(status_code=err.status, content=err.to_body(), headers=err.headers)
        return await http_exception_handler(request, exc)

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok", "model": config.default_model}

    @app.api_route(
        GENERATE_PATH,
        methods=ALL_METHODS,
        responses={200: {"model": GenerateOut}, 400: {"model": ErrorOut}, 500: {"model": ErrorOut}},
    )
    async def generate(request: Request) -> JSONResponse:
        body = await request.body()
        result = await run_in_threadpool(handler.handle, request.method, request.headers, body)
        return JSONResponse(status_code=result.status, content=result.body, headers=result.headers)

    return app


setup_logging()
app = create_app()
