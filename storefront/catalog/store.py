"""
==============================================================================
Catalog Store Module
==============================================================================

File-backed product catalog.

Features:
---------
- The whole catalog lives in one pretty-printed JSON array
- Every addition reads, appends and rewrites the full file
- Writes go through a temporary file and ``os.replace`` so a failed write
  never leaves a partial catalog behind
- Read-modify-write is serialized with a lock; concurrent additions get
  distinct, consecutive ids

JSON Structure:
--------------
[
  {
    "id": 1,
    "title": "Pen",
    "price": 1.5,
    "description": "blue pen",
    "code": "P1718000000000",
    "stock": 10,
    "category": "office",
    "thumbnails": []
  }
]

==============================================================================
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
import time
from pathlib import Path
from typing import Any, List, Mapping, Set

from pydantic import ValidationError

from storefront.core import exceptions
from .models import Product, ProductInput


# Module logger
logger = logging.getLogger(__name__)


class CatalogStore:
    """
    Owner of the on-disk product catalog.

    Methods block on file I/O; async callers run them in a threadpool.

    Attributes:
        path: Location of the catalog JSON file

    Example:
        >>> store = CatalogStore(Path("data/products.json"))
        >>> product = store.add_product({"title": "Pen", "price": 1.5,
        ...     "description": "blue pen", "stock": 10, "category": "office"})
        >>> product.id
        1
    """

    def __init__(self, products_file: Path) -> None:
        """
        Initialize the store.

        Args:
            products_file: Path to products.json
        """
        self._path = Path(products_file)
        self._write_lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        """Check whether the catalog file is present."""
        return self._path.is_file()

    def initialize(self) -> None:
        """Create an empty catalog file if none exists yet."""
        with self._write_lock:
            if self._path.exists():
                return
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._write([])
            logger.info(f"Created empty catalog at {self._path}")

    # =========================================================================
    # READ OPERATIONS
    # =========================================================================

    def list_products(self) -> List[Product]:
        """
        Read the full catalog in insertion order.

        Raises:
            AppException: CATALOG_READ_ERROR if the file is missing or
                unreadable, CATALOG_FORMAT_ERROR if it is not a valid catalog
        """
        return self._read()

    def get_product(self, product_id: int) -> Product:
        """
        Find a product by id.

        Raises:
            AppException: PRODUCT_NOT_FOUND, or any read failure
        """
        for product in self._read():
            if product.id == product_id:
                return product
        raise exceptions.product_not_found(product_id)

    # =========================================================================
    # WRITE OPERATIONS
    # =========================================================================

    def add_product(self, data: Mapping[str, Any]) -> Product:
        """
        Validate, assign id and code, append and persist a new product.

        Args:
            data: Raw product fields (title, price, description, stock,
                category required; code and thumbnails optional)

        Returns:
            The stored product

        Raises:
            AppException: MISSING_FIELDS or INVALID_PRODUCT before any I/O;
                CATALOG_READ_ERROR, CATALOG_FORMAT_ERROR or
                CATALOG_WRITE_ERROR from the file
        """
        missing = ProductInput.missing_required(data)
        if missing:
            raise exceptions.missing_fields(missing)

        try:
            product_input = ProductInput.model_validate(dict(data))
        except ValidationError as e:
            error = e.errors()[0]
            field = ".".join(str(part) for part in error.get("loc", ())) or "body"
            raise exceptions.invalid_product(field, error.get("msg", "invalid value")) from e

        with self._write_lock:
            products = self._read()

            new_id = max((p.id for p in products), default=0) + 1
            code = product_input.code or self._generate_code({p.code for p in products})

            product = Product(
                id=new_id,
                title=product_input.title,
                price=product_input.price,
                description=product_input.description,
                code=code,
                stock=product_input.stock,
                category=product_input.category,
                thumbnails=product_input.thumbnails or [],
            )
            products.append(product)
            self._write(products)

        logger.info(f"Product added: id={product.id} code={product.code}")
        return product

    # =========================================================================
    # FILE HANDLING
    # =========================================================================

    def _read(self) -> List[Product]:
        try:
            with self._path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as e:
            logger.error(f"Products file not found: {self._path}")
            raise exceptions.catalog_read_error() from e
        except OSError as e:
            logger.error(f"Cannot read products file {self._path}: {e}")
            raise exceptions.catalog_read_error() from e
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.error(f"Invalid JSON in {self._path}: {e}")
            raise exceptions.catalog_format_error("invalid JSON") from e

        if not isinstance(data, list):
            logger.error(f"Catalog root is not an array: {self._path}")
            raise exceptions.catalog_format_error("catalog root must be an array")

        try:
            return [Product.model_validate(item) for item in data]
        except ValidationError as e:
            logger.error(f"Invalid product entry in {self._path}: {e}")
            raise exceptions.catalog_format_error("invalid product entry") from e

    def _write(self, products: List[Product]) -> None:
        """Atomically replace the catalog file with ``products``."""
        try:
            payload = json.dumps(
                [p.model_dump(mode="json") for p in products],
                indent=2,
                ensure_ascii=False,
                allow_nan=False,
            )
        except ValueError as e:
            logger.error(f"Refusing to write non-standard JSON to {self._path}: {e}")
            raise exceptions.catalog_write_error() from e

        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.",
                suffix=".tmp",
                dir=self._path.parent,
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self._path)
        except OSError as e:
            logger.error(f"Failed to write products file {self._path}: {e}")
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
            raise exceptions.catalog_write_error() from e

    @staticmethod
    def _generate_code(used: Set[str]) -> str:
        """Generate a "P<epoch ms>" code not present in ``used``."""
        stamp = int(time.time() * 1000)
        while f"P{stamp}" in used:
            stamp += 1
        return f"P{stamp}"
