"""
Storefront - a product listing page over a repository layer.

The package is organised in layers:

- Domain: the `Product` record and the storage error type
- Infrastructure: DSN building, the async connection pool, schema bootstrap
- Repositories: the fetch-all contract with PostgreSQL and in-memory backends
- Web: a Starlette application rendering the product list

Configuration comes from environment variables via pydantic-settings.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from storefront.config import Settings, get_settings
from storefront.domain import Product, StorageAccessError
from storefront.repositories import (
    AbstractProductRepository,
    InMemoryProductRepository,
    PostgresProductRepository,
    ProductRepository,
    available_backends,
    build_repository,
)
from storefront.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Domain
    "Product",
    "StorageAccessError",
    # Repositories
    "AbstractProductRepository",
    "InMemoryProductRepository",
    "PostgresProductRepository",
    "ProductRepository",
    "available_backends",
    "build_repository",
    # Logging
    "configure_logging",
    "get_logger",
]
