"""
==============================================================================
Services Package - Business Logic Layer
==============================================================================

Service classes sitting between the HTTP routes and the catalog store.

    ┌─────────────────┐
    │   API Router    │
    └────────┬────────┘
             │
    ┌────────▼────────┐
    │ ProductService  │  ← Durable add + broadcast
    └───┬─────────┬───┘
        │         │
┌───────▼──┐  ┌───▼───────┐
│  Store   │  │ FanoutHub │
└──────────┘  └───────────┘

==============================================================================
"""

from .product_service import ProductService

__all__ = ["ProductService"]
