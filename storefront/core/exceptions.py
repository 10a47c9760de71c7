"""
Application Exception Handling

Single AppException class for all application errors with FastAPI integration.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException


# Module logger
logger = logging.getLogger(__name__)


class AppException(Exception):
    """
    Unified application exception for all error scenarios.

    Provides consistent error response format across the entire API.

    Usage:
        raise AppException("Product not found", "PRODUCT_NOT_FOUND", 404)
        raise AppException("Missing required fields", "MISSING_FIELDS", 400,
                           {"missing_fields": ["price"]})

    Error Codes:
        Input:
            - MISSING_FIELDS (400)
            - INVALID_PRODUCT (400)
            - VALIDATION_ERROR (422)

        Catalog:
            - PRODUCT_NOT_FOUND (404)
            - CATALOG_READ_ERROR (500)
            - CATALOG_FORMAT_ERROR (500)
            - CATALOG_WRITE_ERROR (500)

        General:
            - INTERNAL_ERROR (500)
    """

    def __init__(
        self,
        message: str,
        code: str,
        status_code: int = 400,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize application exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code (e.g., "MISSING_FIELDS")
            status_code: HTTP status code (default: 400)
            details: Additional error context (optional)
        """
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON response."""
        error_dict = {
            "success": False,
            "error": {
                "code": self.code,
                "message": self.message,
                "timestamp": self.timestamp
            }
        }

        if self.details:
            error_dict["error"]["details"] = self.details

        return error_dict


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Convert AppException to consistent JSON error response."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: [{exc.code}] {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render framework HTTP errors, unmatched routes included."""
    if exc.status_code == 404:
        logger.info(f"Route not found: {request.method} {request.url.path}")
        return JSONResponse(
            status_code=404,
            content={"success": False, "message": "Not Found"}
        )

    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.detail},
        headers=getattr(exc, "headers", None)
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render request parameter validation failures."""
    error = AppException(
        "Request validation failed",
        "VALIDATION_ERROR",
        422,
        {"errors": [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg")}
            for err in exc.errors()
        ]}
    )
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler producing a JSON error body."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    error = internal_error()
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register all exception handlers with FastAPI app.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


# ============================================
# CONVENIENCE FACTORY FUNCTIONS
# ============================================

def missing_fields(fields: List[str]) -> AppException:
    """Create missing required fields exception."""
    return AppException(
        f"Missing required fields: {', '.join(fields)}",
        "MISSING_FIELDS",
        400,
        {"missing_fields": fields}
    )


def invalid_product(field: str, reason: str) -> AppException:
    """Create invalid product value exception."""
    return AppException(
        f"Invalid value for '{field}': {reason}",
        "INVALID_PRODUCT",
        400,
        {"field": field, "reason": reason}
    )


def product_not_found(product_id: int) -> AppException:
    """Create product not found exception."""
    return AppException(
        "Product not found",
        "PRODUCT_NOT_FOUND",
        404,
        {"product_id": product_id}
    )


def catalog_read_error() -> AppException:
    """Create catalog read failure exception."""
    return AppException("Error reading products data", "CATALOG_READ_ERROR", 500)


def catalog_format_error(reason: str) -> AppException:
    """Create corrupt catalog exception."""
    return AppException(
        "Products data is not a valid catalog",
        "CATALOG_FORMAT_ERROR",
        500,
        {"reason": reason}
    )


def catalog_write_error() -> AppException:
    """Create catalog write failure exception."""
    return AppException("Error saving product", "CATALOG_WRITE_ERROR", 500)


def internal_error(message: str = "Internal server error") -> AppException:
    """Create internal server error exception."""
    return AppException(message, "INTERNAL_ERROR", 500)
