"""
==============================================================================
Product Service Module
==============================================================================

Business logic joining the catalog store and the fan-out hub.

Durable add:
------------
1. Store validates, assigns id and code, rewrites the catalog file
2. Only after the write returns, one "newProduct" broadcast is scheduled;
   the response does not wait for delivery

A failed add raises before step 2, so no event is ever published for a
product that is not on disk.

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Any, List, Mapping

from starlette.concurrency import run_in_threadpool

from storefront.catalog.models import Product
from storefront.catalog.store import CatalogStore
from storefront.realtime.hub import FanoutHub


# Module logger
logger = logging.getLogger(__name__)


class ProductService:
    """
    Service for catalog reads and durable additions.

    Blocking store calls run in the threadpool so the event loop keeps
    serving WebSocket subscribers during file I/O.

    Attributes:
        _store: Catalog store owning the products file
        _hub: Fan-out hub for change events

    Example:
        >>> service = ProductService(store, hub)
        >>> product = await service.add_product({"title": "Pen", ...})
    """

    def __init__(self, store: CatalogStore, hub: FanoutHub) -> None:
        self._store = store
        self._hub = hub

    async def list_products(self) -> List[Product]:
        """Get every product in catalog order."""
        return await run_in_threadpool(self._store.list_products)

    async def get_product(self, product_id: int) -> Product:
        """Get one product by id."""
        return await run_in_threadpool(self._store.get_product, product_id)

    async def add_product(self, data: Mapping[str, Any]) -> Product:
        """
        Persist a new product, then announce it to all subscribers.

        Args:
            data: Raw product fields from the request body

        Returns:
            The stored product
        """
        product = await run_in_threadpool(self._store.add_product, data)
        self._hub.publish("newProduct", product)
        logger.info(f"Scheduled newProduct for product {product.id} (subscribers={self._hub.subscriber_count})")
        return product
