"""Server-rendered HTML views."""

from .pages import router as views_router

__all__ = ["views_router"]
