"""
==============================================================================
Core Package
==============================================================================

Core infrastructure for the application.

Modules:
--------
- exceptions: AppException class, handlers and error factory functions
- dependencies: FastAPI dependencies resolving the store, hub and service
- middleware: Request logging middleware

Usage:
------
    from storefront.core import exceptions
    raise exceptions.missing_fields(["price"])

==============================================================================
"""

from .exceptions import (
    AppException,
    register_exception_handlers,
)
from .middleware import RequestLoggingMiddleware

__all__ = [
    "AppException",
    "register_exception_handlers",
    "RequestLoggingMiddleware",
]
