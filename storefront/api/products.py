"""
==============================================================================
Product API Endpoints
==============================================================================

JSON endpoints for reading the catalog and adding products.

==============================================================================
"""

import json
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Request

from storefront.catalog.models import Product
from storefront.core import exceptions
from storefront.core.dependencies import get_product_service
from storefront.services.product_service import ProductService


router = APIRouter(prefix="/products", tags=["Products"])


async def read_product_body(request: Request) -> Dict[str, Any]:
    """
    Read a product body sent as JSON or as an HTML form.

    Repeated ``thumbnails`` form fields are collected into a list.
    """
    content_type = request.headers.get("content-type", "")

    if content_type.startswith(("application/x-www-form-urlencoded", "multipart/form-data")):
        form = await request.form()
        body: Dict[str, Any] = {key: form.get(key) for key in form.keys()}
        thumbnails = form.getlist("thumbnails")
        if thumbnails:
            body["thumbnails"] = [str(t) for t in thumbnails]
        return body

    raw = await request.body()
    if not raw:
        return {}

    try:
        body = json.loads(raw)
    except json.JSONDecodeError:
        raise exceptions.invalid_product("body", "malformed JSON")

    if not isinstance(body, dict):
        raise exceptions.invalid_product("body", "expected a JSON object")

    return body


@router.get("", response_model=List[Product])
async def list_products(service: ProductService = Depends(get_product_service)):
    """List every product in catalog order."""
    return await service.list_products()


@router.get("/{product_id}", response_model=Product)
async def get_product(product_id: int, service: ProductService = Depends(get_product_service)):
    """Get a single product by id."""
    return await service.get_product(product_id)


@router.post("", status_code=201, response_model=Product)
async def add_product(
    body: Dict[str, Any] = Depends(read_product_body),
    service: ProductService = Depends(get_product_service),
):
    """
    Add a product to the catalog and announce it to live clients.

    Required: title, price, description, stock, category.
    Optional: code (generated when absent), thumbnails.
    """
    return await service.add_product(body)
