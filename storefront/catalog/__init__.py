"""
==============================================================================
Catalog Package - Product Storage
==============================================================================

File-backed product catalog.

Classes:
--------
- Product: Pydantic model for stored products
- ProductInput: Pydantic model for submitted product data
- CatalogStore: Owner of the catalog JSON file

==============================================================================
"""

from .models import EPHEMERAL_PRODUCT_FIELDS, Product, ProductInput
from .store import CatalogStore

__all__ = [
    "EPHEMERAL_PRODUCT_FIELDS",
    "Product",
    "ProductInput",
    "CatalogStore",
]
