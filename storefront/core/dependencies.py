"""
==============================================================================
FastAPI Dependencies Module
==============================================================================

Dependency injection for the catalog store, fan-out hub and product service.

The application factory constructs exactly one CatalogStore and one FanoutHub
at startup and stores them on ``app.state``. Routes and WebSocket handlers
receive them through these dependencies, so tests can build isolated
applications without touching module globals.

Usage Examples:
--------------
    @router.post("")
    async def add_product(service: ProductService = Depends(get_product_service)):
        ...

==============================================================================
"""

from __future__ import annotations

from fastapi import Depends
from starlette.requests import HTTPConnection

from storefront.catalog.store import CatalogStore
from storefront.realtime.hub import FanoutHub
from storefront.services.product_service import ProductService


def get_catalog_store(connection: HTTPConnection) -> CatalogStore:
    """Get the application's catalog store (HTTP and WebSocket routes)."""
    return connection.app.state.catalog_store


def get_hub(connection: HTTPConnection) -> FanoutHub:
    """Get the application's fan-out hub (HTTP and WebSocket routes)."""
    return connection.app.state.hub


def get_product_service(
    store: CatalogStore = Depends(get_catalog_store),
    hub: FanoutHub = Depends(get_hub),
) -> ProductService:
    """Build a product service bound to the application's store and hub."""
    return ProductService(store, hub)
