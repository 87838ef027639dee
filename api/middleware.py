"""
Consolidated middleware for the MacroPlan API
"""

import time
import logging
from datetime import datetime, timezone
from uuid import UUID, uuid4
from decimal import Decimal

from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from app.exceptions import AppError, ConflictError, NotFoundError, ServiceValidationError

logger = logging.getLogger("macroplan.middleware")


# ============================================================================
# Helper Functions
# ============================================================================


def make_serializable(obj):
    """Convert objects to JSON-serializable format"""
    if isinstance(obj, Decimal):
        return float(obj)
    elif isinstance(obj, (UUID, BaseException)):
        return str(obj)
    elif isinstance(obj, dict):
        return {k: make_serializable(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [make_serializable(item) for item in obj]
    return obj


def _error_body(code: str, message: str, details=None) -> dict:
    error = {"code": code, "message": message}
    if details:
        error["details"] = make_serializable(details)
    return {
        "success": False,
        "error": error,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


def _app_error_response(exc: AppError, default_code: str) -> JSONResponse:
    return JSONResponse(
        status_code=exc.http_status,
        content=_error_body(exc.code or default_code, exc.message, exc.details),
    )


# ============================================================================
# Request Logging Middleware
# ============================================================================


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Tags each request with an X-Request-ID and logs its outcome and duration"""

    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid4())
        request.state.request_id = request_id
        context = {
            "request_id": request_id,
            "method": request.method,
            "url": str(request.url),
        }
        logger.info(
            "Request started",
            extra={**context, "client": request.client.host if request.client else None},
        )

        started = time.perf_counter()
        try:
            response: Response = await call_next(request)
        except Exception as exc:
            elapsed = time.perf_counter() - started
            logger.error(
                "Request failed",
                extra={**context, "error": str(exc), "process_time": f"{elapsed:.4f}s"},
                exc_info=True,
            )
            raise

        elapsed = time.perf_counter() - started
        logger.info(
            "Request completed",
            extra={**context, "status_code": response.status_code, "process_time": f"{elapsed:.4f}s"},
        )
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = f"{elapsed:.4f}"
        return response


# ============================================================================
# Error Handlers
# ============================================================================


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle Pydantic validation errors"""
    logger.warning(f"Validation error on {request.url}: {exc.errors()}")

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
        content=_error_body("VALIDATION_ERROR", "Request validation failed", exc.errors()),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions"""
    logger.warning(f"HTTP {exc.status_code} on {request.url}: {exc.detail}")

    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(f"HTTP_{exc.status_code}", exc.detail),
    )


async def service_validation_exception_handler(request: Request, exc: ServiceValidationError):
    """Handle service validation errors"""
    logger.warning(f"Service validation error on {request.url}: {exc}")
    return _app_error_response(exc, "SERVICE_VALIDATION_ERROR")


async def not_found_exception_handler(request: Request, exc: NotFoundError):
    """Handle not found errors"""
    logger.warning(f"Resource not found on {request.url}: {exc}")
    return _app_error_response(exc, "NOT_FOUND")


async def conflict_exception_handler(request: Request, exc: ConflictError):
    """Handle duplicate and still-referenced conflicts"""
    logger.warning(f"Conflict on {request.url}: {exc}")
    return _app_error_response(exc, "CONFLICT")


async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected errors"""
    logger.exception(f"Unexpected error on {request.url}: {str(exc)}")

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("INTERNAL_SERVER_ERROR", "An unexpected error occurred"),
    )


def register_exception_handlers(app) -> None:
    """Install every handler above so all failures share one envelope"""
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(ServiceValidationError, service_validation_exception_handler)
    app.add_exception_handler(NotFoundError, not_found_exception_handler)
    app.add_exception_handler(ConflictError, conflict_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
