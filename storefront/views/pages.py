"""
==============================================================================
View Routes
==============================================================================

Server-rendered pages listing the catalog.

- /products           static product list
- /realtimeproducts   product list kept live over the /ws feed

==============================================================================
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from storefront.core.dependencies import get_product_service
from storefront.services.product_service import ProductService


router = APIRouter(tags=["Views"])


@router.get("/", include_in_schema=False)
async def root():
    """Redirect to the product list."""
    return RedirectResponse(url="/products")


@router.get("/products", response_class=HTMLResponse)
async def products_page(request: Request, service: ProductService = Depends(get_product_service)):
    """Render the product list."""
    products = await service.list_products()
    return request.app.state.templates.TemplateResponse(
        request, "home.html", {"products": products}
    )


@router.get("/realtimeproducts", response_class=HTMLResponse)
async def realtime_products_page(request: Request, service: ProductService = Depends(get_product_service)):
    """Render the live-updating product list."""
    products = await service.list_products()
    return request.app.state.templates.TemplateResponse(
        request, "realTimeProducts.html", {"products": products}
    )
