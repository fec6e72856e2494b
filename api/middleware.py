"""
Consolidated middleware for the MealPlanner API
"""

import time
import logging
from datetime import datetime, timezone
from uuid import uuid4
from decimal import Decimal

from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from app.exceptions import ServiceError, MissingConfigError
from security.log_sanitizer import sanitize_for_log

logger = logging.getLogger("mealplanner.middleware")


# ============================================================================
# Helper Functions
# ============================================================================


def make_serializable(obj):
    """Convert objects to JSON-serializable format"""
    if isinstance(obj, Decimal):
        return float(obj)
    elif isinstance(obj, BaseException):
        return str(obj)
    elif isinstance(obj, bytes):
        return obj.decode("utf-8", errors="replace")
    elif isinstance(obj, dict):
        return {k: make_serializable(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [make_serializable(item) for item in obj]
    return obj


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def error_response(status_code: int, error: dict) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": error, "timestamp": _timestamp()},
    )


# ============================================================================
# Request Logging Middleware
# ============================================================================


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log all HTTP requests and responses"""

    async def dispatch(self, request: Request, call_next):
        # Generate unique request ID
        request_id = str(uuid4())
        request.state.request_id = request_id
        url = sanitize_for_log(str(request.url))

        logger.info(
            "Request started",
            extra={
                "request_id": request_id,
                "method": request.method,
                "url": url,
                "client": request.client.host if request.client else None,
            },
        )

        start_time = time.time()

        try:
            response: Response = await call_next(request)
            process_time = time.time() - start_time

            logger.info(
                "Request completed",
                extra={
                    "request_id": request_id,
                    "method": request.method,
                    "url": url,
                    "status_code": response.status_code,
                    "process_time": f"{process_time:.4f}s",
                },
            )

            response.headers["X-Request-ID"] = request_id
            response.headers["X-Process-Time"] = f"{process_time:.4f}"

            return response

        except Exception as exc:
            process_time = time.time() - start_time
            logger.error(
                "Request failed",
                extra={
                    "request_id": request_id,
                    "method": request.method,
                    "url": url,
                    "error": sanitize_for_log(str(exc)),
                    "process_time": f"{process_time:.4f}s",
                },
                exc_info=True,
            )
            raise


# ============================================================================
# Error Handlers
# ============================================================================


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle Pydantic validation errors"""
    serializable_errors = make_serializable(exc.errors())
    logger.warning(
        f"Validation error on {sanitize_for_log(request.url.path)}: "
        f"{sanitize_for_log(serializable_errors, max_length=500)}"
    )

    return error_response(
        status.HTTP_422_UNPROCESSABLE_CONTENT,
        {
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed",
            "details": serializable_errors,
        },
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions"""
    logger.warning(f"HTTP {exc.status_code} on {sanitize_for_log(request.url.path)}: {exc.detail}")

    return error_response(
        exc.status_code, {"code": f"HTTP_{exc.status_code}", "message": exc.detail}
    )


async def service_exception_handler(request: Request, exc: ServiceError):
    """Handle typed service and security errors using their own status and code"""
    path = sanitize_for_log(request.url.path)
    if isinstance(exc, MissingConfigError):
        # Key name stays in the server log only
        logger.error(f"Missing configuration on {path}: key={exc.key}")
    elif exc.http_status >= 500:
        logger.error(f"{exc.code} on {path}: {sanitize_for_log(str(exc))}")
    else:
        logger.warning(f"{exc.code} on {path}: {sanitize_for_log(str(exc))}")

    return error_response(exc.http_status, make_serializable(exc.to_dict()))


async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected errors"""
    logger.exception(f"Unexpected error on {sanitize_for_log(request.url.path)}: {type(exc).__name__}")

    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        {"code": "INTERNAL_SERVER_ERROR", "message": "An unexpected error occurred"},
    )
