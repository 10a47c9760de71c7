"""
==============================================================================
Pytest Configuration and Fixtures
==============================================================================

Provides an isolated catalog file, application and client per test.

==============================================================================
"""

import json
from pathlib import Path
from typing import Any, Callable, Dict, Generator, List

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from storefront.catalog.store import CatalogStore
from storefront.config import Settings
from storefront.main import Application


# ============================================================================
# CATALOG FIXTURES
# ============================================================================

@pytest.fixture
def products_file(tmp_path: Path) -> Path:
    """Empty catalog file for each test."""
    path = tmp_path / "products.json"
    path.write_text("[]", encoding="utf-8")
    return path


@pytest.fixture
def store(products_file: Path) -> CatalogStore:
    """Catalog store bound to the test catalog file."""
    return CatalogStore(products_file)


@pytest.fixture
def pen() -> Dict[str, Any]:
    """Valid product body with every required field."""
    return {
        "title": "Pen",
        "price": 1.5,
        "description": "blue pen",
        "stock": 10,
        "category": "office",
    }


@pytest.fixture
def seed_catalog(products_file: Path) -> Callable[[List[Dict[str, Any]]], None]:
    """Overwrite the test catalog file with the given products."""
    def _seed(products: List[Dict[str, Any]]) -> None:
        products_file.write_text(json.dumps(products, indent=2), encoding="utf-8")
    return _seed


def make_product(product_id: int, **overrides: Any) -> Dict[str, Any]:
    """Stored product dict with sensible defaults."""
    product = {
        "id": product_id,
        "title": f"Product {product_id}",
        "price": 10.0,
        "description": "seeded product",
        "code": f"C{product_id}",
        "stock": 5,
        "category": "general",
        "thumbnails": [],
    }
    product.update(overrides)
    return product


@pytest.fixture
def product_factory() -> Callable[..., Dict[str, Any]]:
    return make_product


# ============================================================================
# APPLICATION FIXTURES
# ============================================================================

@pytest.fixture
def settings(products_file: Path) -> Settings:
    """Settings pointing at the test catalog file."""
    return Settings(products_file=str(products_file), create_catalog_if_missing=False)


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    """Fresh application with its own store and hub."""
    return Application(settings).app


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """Test client running the application lifespan."""
    with TestClient(app) as test_client:
        yield test_client
