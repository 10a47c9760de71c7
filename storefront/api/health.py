"""
==============================================================================
Health Check Endpoints
==============================================================================

System health status endpoints for monitoring and orchestration.

==============================================================================
"""

from fastapi import APIRouter, Depends
from starlette.concurrency import run_in_threadpool

from storefront.catalog.store import CatalogStore
from storefront.core.exceptions import AppException
from storefront.core.dependencies import get_catalog_store, get_hub
from storefront.realtime.hub import FanoutHub


router = APIRouter(prefix="/health", tags=["Health"])


class HealthController:
    """Controller for health check operations."""

    def __init__(self, store: CatalogStore, hub: FanoutHub):
        self._store = store
        self._hub = hub

    async def check_catalog(self) -> dict:
        """Check that the catalog file can be read and parsed."""
        try:
            products = await run_in_threadpool(self._store.list_products)
        except AppException as e:
            return {"status": "unhealthy", "products": 0, "error": e.code}
        return {"status": "healthy", "products": len(products)}

    async def get_health(self) -> dict:
        """Get full health status."""
        catalog_info = await self.check_catalog()

        overall = "healthy" if catalog_info["status"] == "healthy" else "degraded"

        return {
            "status": overall,
            "components": {
                "api": "healthy",
                "catalog": catalog_info["status"],
            },
            "details": {
                "products_loaded": catalog_info["products"],
                "subscribers": self._hub.subscriber_count,
            },
        }


@router.get("")
async def health_check(
    store: CatalogStore = Depends(get_catalog_store),
    hub: FanoutHub = Depends(get_hub),
):
    """
    Health check endpoint.

    Returns system status including the catalog file and live subscribers.
    """
    controller = HealthController(store, hub)
    return await controller.get_health()


@router.get("/ready")
async def readiness_check():
    """Readiness check for container orchestration."""
    return {"ready": True}


@router.get("/live")
async def liveness_check():
    """Liveness check for container orchestration."""
    return {"alive": True}
