"""
==============================================================================
Storefront - Application Entry Point
==============================================================================

FastAPI application with:
- Server-rendered product views
- JSON product API backed by a flat JSON file
- WebSocket fan-out of product added/deleted events

Usage:
------
    # Development
    uvicorn storefront.main:app --reload

    # Production
    uvicorn storefront.main:app --host 0.0.0.0 --port 8080

==============================================================================
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from storefront.config import Settings, get_settings
from storefront.core.exceptions import register_exception_handlers
from storefront.core.middleware import RequestLoggingMiddleware
from storefront.api.router import api_router
from storefront.catalog.store import CatalogStore
from storefront.realtime.hub import FanoutHub
from storefront.realtime.websocket import router as realtime_router
from storefront.views import views_router


# ============================================================================
# LOGGING SETUP
# ============================================================================

settings = get_settings()

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
)

logger = logging.getLogger(__name__)


# ============================================================================
# APPLICATION FACTORY
# ============================================================================

class Application:
    """
    FastAPI application factory and manager.

    Builds one CatalogStore and one FanoutHub per application and exposes
    them on ``app.state`` for dependency injection.
    """

    def __init__(self, settings: Optional[Settings] = None):
        """
        Initialize the application.

        Args:
            settings: Explicit settings (environment-derived when None)
        """
        self._settings = settings or get_settings()
        self._store = CatalogStore(self._settings.products_path)
        self._hub = FanoutHub()
        self._app = self._create_app()

    def _create_app(self) -> FastAPI:
        """Create and configure the FastAPI application."""
        app = FastAPI(
            title=self._settings.app_name,
            version="1.0.0",
            description="Product catalog with real-time updates",
            lifespan=self._lifespan,
            docs_url=None if self._settings.is_production else "/docs",
            redoc_url=None,
        )

        app.state.settings = self._settings
        app.state.catalog_store = self._store
        app.state.hub = self._hub
        app.state.templates = Jinja2Templates(directory=str(self._settings.templates_path))

        self._configure_middleware(app)
        register_exception_handlers(app)
        self._register_routers(app)

        app.mount("/static", StaticFiles(directory=str(self._settings.static_path)), name="static")

        return app

    @asynccontextmanager
    async def _lifespan(self, app: FastAPI):
        """Application lifespan manager."""
        self._startup()
        yield
        await self._hub.drain()
        self._shutdown()

    def _startup(self) -> None:
        """Application startup tasks."""
        logger.info("=" * 60)
        logger.info(f"🚀 Starting {self._settings.app_name}")
        logger.info("=" * 60)

        self._prepare_catalog()

        logger.info(f"📍 Running on http://{self._settings.host}:{self._settings.port}")
        logger.info(f"🛒 Live view: http://{self._settings.host}:{self._settings.port}/realtimeproducts")

    def _shutdown(self) -> None:
        """Application shutdown tasks."""
        logger.info(f"🛑 Shutting down with {self._hub.subscriber_count} live subscribers")

    def _prepare_catalog(self) -> None:
        """Make sure the catalog file exists, or warn when it does not."""
        if self._store.exists():
            logger.info(f"✅ Using catalog {self._store.path}")
        elif self._settings.create_catalog_if_missing:
            self._store.initialize()
        else:
            logger.warning(f"⚠️ Products file not found: {self._store.path}")

    def _configure_middleware(self, app: FastAPI) -> None:
        """Configure application middleware."""
        app.add_middleware(RequestLoggingMiddleware)
        app.add_middleware(
            CORSMiddleware,
            allow_origins=self._settings.cors_origins_list,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    def _register_routers(self, app: FastAPI) -> None:
        """Register view, API and WebSocket routers."""
        app.include_router(views_router)
        app.include_router(api_router)
        app.include_router(realtime_router)

    @property
    def app(self) -> FastAPI:
        """Get the FastAPI application instance."""
        return self._app


# ============================================================================
# APPLICATION INSTANCE
# ============================================================================

application = Application(settings)
app = application.app


# ============================================================================
# ENTRY POINT
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "storefront.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info"
    )
