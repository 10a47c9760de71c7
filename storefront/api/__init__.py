"""
==============================================================================
API Endpoints
==============================================================================

JSON API mounted under /api.

Routers:
--------
- health: Health check endpoints
- products: Product catalog read and add

==============================================================================
"""

from . import health, products

__all__ = ["health", "products"]
