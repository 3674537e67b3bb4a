"""
Starlette application serving the product listing.

The repository is handed to `create_app` explicitly; route handlers read
it from `app.state` instead of resolving it from a container. When the app owns
the PostgreSQL pool, every lifespan start rebinds the repository to the freshly
opened pool. Storage failures are translated into 503 responses here and
nowhere else.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional

import psycopg
from psycopg_pool import AsyncConnectionPool
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route
from starlette.templating import Jinja2Templates

from storefront.config import Settings, get_settings
from storefront.domain.errors import StorageAccessError
from storefront.infrastructure.db_factory import PoolManager
from storefront.repositories.abstract import ProductRepository
from storefront.repositories.registry import build_repository
from storefront.utils.logging import get_logger

log = get_logger(__name__)

STORAGE_ERRORS = (psycopg.Error, StorageAccessError)
TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"


def create_app(
    repository: Optional[ProductRepository] = None,
    settings: Optional[Settings] = None,
    pool: Optional[AsyncConnectionPool] = None,
) -> Starlette:
    """
    Build the ASGI application.

    Parameters
    ----------
    repository : ProductRepository | None
        Repository used by every route. Built from settings when omitted.
    settings : Settings | None
        Effective settings; defaults to the cached environment settings.
    pool : AsyncConnectionPool | None
        Pool for the PostgreSQL backend. When neither a repository nor a pool is
        given, the app opens and closes the PoolManager pool in its lifespan.
    """
    settings = settings or get_settings()
    owns_pool = repository is None and pool is None and settings.backend == "postgres"
    templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

    def repo_of(request: Request) -> ProductRepository:
        return request.app.state.repository

    @asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        if owns_pool:
            # Each start gets a fresh pool; rebind the repository to it.
            opened = await PoolManager().open_async_pool(settings)
            app.state.repository = build_repository(settings, opened)
        repo = app.state.repository
        log.info("Storefront started", extra={"backend": repo.name, "env": settings.app_env})
        try:
            yield
        finally:
            if owns_pool:
                await PoolManager().close_async_pool()
            log.info("Storefront stopped", extra={"backend": repo.name})

    async def list_products(request: Request) -> Response:
        try:
            products = await repo_of(request).fetch_all()
        except STORAGE_ERRORS:
            log.exception("Product listing failed", extra={"backend": repo_of(request).name})
            return templates.TemplateResponse(
                request,
                "error.html",
                {"message": "The product catalogue is temporarily unavailable."},
                status_code=503,
            )
        return templates.TemplateResponse(request, "products.html", {"products": products})

    async def list_products_json(request: Request) -> JSONResponse:
        try:
            products = await repo_of(request).fetch_all()
        except STORAGE_ERRORS:
            log.exception("Product listing failed", extra={"backend": repo_of(request).name})
            return JSONResponse({"error": "storage unavailable"}, status_code=503)
        return JSONResponse(
            [
                {"id": product.id, "name": product.name, "price": str(product.price)}
                for product in products
            ]
        )

    async def health(request: Request) -> JSONResponse:
        return JSONResponse({"status": "healthy", "backend": repo_of(request).name})

    app = Starlette(
        routes=[
            Route("/", endpoint=list_products, methods=["GET"]),
            Route("/products", endpoint=list_products, methods=["GET"]),
            Route("/api/products", endpoint=list_products_json, methods=["GET"]),
            Route("/health", endpoint=health, methods=["GET"]),
        ],
        lifespan=lifespan,
    )
    app.state.repository = repository or build_repository(settings, pool)
    app.state.settings = settings
    return app


__all__ = ["STORAGE_ERRORS", "create_app"]
