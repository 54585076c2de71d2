from __future__ import annotations

import logging
import traceback
import uuid
from typing import Any, Tuple

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

SAFE_ERROR_TEXT = "Internal Server Error"


class AppError(Exception):
    """Base application error for unified handling."""

    error_type: str | None = None

    def __init__(
        self,
        message: str | None = None,
        *,
        reason: str | None = None,
        http_status: int | None = None,
    ) -> None:
        super().__init__(message or reason or "")
        self.message = message
        self.reason = reason
        self.http_status = http_status


class BadRequestError(AppError):
    """Raised when the request is invalid or cannot be processed."""


class ValidationError(BadRequestError):
    """Raised when the payload fails validation."""


class UpstreamError(AppError):
    """Raised when a third-party dependency fails."""


def _detail_to_reason(detail: Any) -> str:
    if isinstance(detail, dict):
        return detail.get("reason") or detail.get("message") or "unknown"
    if isinstance(detail, list):
        return detail[0] if detail else "unknown"
    if detail:
        return str(detail)
    return "unknown"


def map_exception_to_error(exc: Exception) -> Tuple[str, int, str]:
    """Return the client-facing message, HTTP status and log reason for an exception.

    Only client and upstream errors expose their message; everything else is
    reported with the generic text so internals never reach the caller.
    """

    if isinstance(exc, BadRequestError):
        return (
            exc.message or "Bad request",
            exc.http_status or status.HTTP_400_BAD_REQUEST,
            exc.reason or "bad_request",
        )

    if isinstance(exc, RequestValidationError):
        return ("Invalid request payload", status.HTTP_400_BAD_REQUEST, "request_validation_error")

    if isinstance(exc, UpstreamError):
        return (
            exc.message or "Upstream service unavailable",
            exc.http_status or status.HTTP_502_BAD_GATEWAY,
            exc.reason or "upstream_error",
        )

    if isinstance(exc, StarletteHTTPException):
        status_code = exc.status_code or status.HTTP_500_INTERNAL_SERVER_ERROR
        reason = _detail_to_reason(exc.detail)
        if status_code == status.HTTP_404_NOT_FOUND:
            return ("Route not found", status_code, reason)
        if status_code < status.HTTP_500_INTERNAL_SERVER_ERROR:
            return (reason, status_code, reason)
        return (SAFE_ERROR_TEXT, status_code, reason)

    return (
        SAFE_ERROR_TEXT,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        getattr(exc, "reason", None) or exc.__class__.__name__,
    )


def build_error_response(
    *,
    message: str,
    status_code: int,
    error_type: str | None = None,
    trace_id: str | None = None,
) -> JSONResponse:
    error: dict[str, Any] = {"message": message, "status": status_code}
    if error_type:
        error["type"] = error_type
    headers = {"X-Trace-Id": trace_id} if trace_id else None
    return JSONResponse(status_code=status_code, content={"error": error}, headers=headers)


def new_trace_id() -> str:
    return uuid.uuid4().hex


async def get_request_payload(request: Request) -> str | None:
    try:
        body = await request.body()
    except RuntimeError:
        # Body already consumed by the route.
        return None
    if not body:
        return None
    return body.decode("utf-8", errors="replace")


async def log_exception(
    *,
    request: Request,
    exc: Exception,
    trace_id: str,
    handled: bool,
) -> None:
    payload = await get_request_payload(request)
    log_message = "Handled application error" if handled else "Unhandled application error"
    log_method = logger.warning if handled else logger.error
    log_method(
        "%s trace_id=%s path=%s reason=%s payload=%s",
        log_message,
        trace_id,
        request.url.path,
        getattr(exc, "reason", None) or exc.__class__.__name__,
        payload,
        exc_info=exc if not handled else None,
    )
    if handled:
        logger.debug(
            "Full traceback for trace_id=%s\n%s",
            trace_id,
            "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
        )
