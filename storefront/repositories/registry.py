"""
Backend registry for product repositories.

Maps the `STOREFRONT_BACKEND` setting to a repository factory. The PostgreSQL
factory reuses the pool handed in by the caller, falling back to the
process-wide PoolManager pool.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional

from psycopg_pool import AsyncConnectionPool

from storefront.config import Settings, get_settings
from storefront.domain.models import Product
from storefront.infrastructure.db_factory import PoolManager
from storefront.infrastructure.schema import SAMPLE_PRODUCTS
from storefront.repositories.abstract import ProductRepository
from storefront.repositories.memory import InMemoryProductRepository
from storefront.repositories.postgres import PostgresProductRepository

RepositoryFactory = Callable[[Settings, Optional[AsyncConnectionPool]], ProductRepository]


def _postgres(settings: Settings, pool: Optional[AsyncConnectionPool]) -> ProductRepository:
    return PostgresProductRepository(
        pool or PoolManager().get_async_pool(settings),
        statement_timeout_ms=settings.db_statement_timeout_ms,
    )


def _memory(settings: Settings, pool: Optional[AsyncConnectionPool]) -> ProductRepository:
    del settings, pool
    return InMemoryProductRepository(
        Product(id=index, name=name, price=price)
        for index, (name, price) in enumerate(SAMPLE_PRODUCTS, start=1)
    )


def _repository_factories() -> Dict[str, RepositoryFactory]:
    """Registry of available backends."""
    return {
        "postgres": _postgres,
        "memory": _memory,
    }


def available_backends() -> List[str]:
    """List available backend names."""
    return sorted(_repository_factories().keys())


def build_repository(
    settings: Optional[Settings] = None,
    pool: Optional[AsyncConnectionPool] = None,
) -> ProductRepository:
    """
    Construct the repository selected by `settings.backend`.

    Raises
    ------
    ValueError
        If the backend name is not registered.
    """
    settings = settings or get_settings()
    factories = _repository_factories()
    if settings.backend not in factories:
        raise ValueError(
            f"Unknown backend '{settings.backend}'. Available: {', '.join(available_backends())}"
        )
    return factories[settings.backend](settings, pool)


__all__ = ["available_backends", "build_repository"]
