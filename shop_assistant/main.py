from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import get_settings
from .routers import catalog, chat, settings as settings_router
from .services.error_handling import (
    AppError,
    build_error_response,
    log_exception,
    map_exception_to_error,
    new_trace_id,
)
from .services.metrics import get_metrics_service

logger = logging.getLogger(__name__)


def _request_trace_id(request: Request) -> str:
    return getattr(request.state, "trace_id", None) or new_trace_id()


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(
        title="Storefront Shopping Assistant",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/api/health")
    async def health() -> dict:
        return {
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "metrics": asdict(get_metrics_service().snapshot()),
        }

    async def _handled(request: Request, exc: Exception):
        trace_id = _request_trace_id(request)
        await log_exception(request=request, exc=exc, trace_id=trace_id, handled=True)
        message, status_code, _reason = map_exception_to_error(exc)
        return build_error_response(
            message=message,
            status_code=status_code,
            error_type=getattr(exc, "error_type", None),
            trace_id=trace_id,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return await _handled(request, exc)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return await _handled(request, exc)

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        return await _handled(request, exc)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        trace_id = _request_trace_id(request)
        await log_exception(request=request, exc=exc, trace_id=trace_id, handled=False)
        message, status_code, _reason = map_exception_to_error(exc)
        return build_error_response(message=message, status_code=status_code, trace_id=trace_id)

    app.include_router(chat.router)
    app.include_router(catalog.router)
    app.include_router(settings_router.router)

    if settings.langsmith_api_key and settings.langsmith_tracing_v2:
        logger.info(
            "LangSmith tracing enabled for project=%s",
            settings.langsmith_project or "storefront-assistant",
        )
    else:
        logger.info("LangSmith tracing disabled (no API key or flag)")
    logger.info("FastAPI app initialized (env=%s)", settings.env)
    return app


app = create_app()
