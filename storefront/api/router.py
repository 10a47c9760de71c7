"""
==============================================================================
Main API Router
==============================================================================

Combines all JSON API routes under the /api prefix.

==============================================================================
"""

from fastapi import APIRouter

from storefront.api import health, products


class MainAPIRouter:
    """
    Main API router combining the JSON routes.

    Provides a single entry point for all API endpoints.
    """

    def __init__(self):
        self._router = APIRouter(prefix="/api")
        self._include_routers()

    def _include_routers(self) -> None:
        self._router.include_router(health.router)
        self._router.include_router(products.router)

    @property
    def router(self):
        """Get the FastAPI router instance."""
        return self._router


api_router = MainAPIRouter().router
