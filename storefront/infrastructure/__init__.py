"""
Infrastructure package for the Storefront product listing.

Centralizes database connectivity concerns (DSN, pooling, schema bootstrap).
Keep this layer focused on I/O and resource management, decoupled from the
repository contract and the web layer.
"""

from storefront.infrastructure.db_factory import (
    PoolManager,
    apply_statement_timeout,
    build_dsn,
    get_sync_connection,
)
from storefront.infrastructure.schema import SAMPLE_PRODUCTS, init_schema, insert_products

__all__ = [
    "PoolManager",
    "SAMPLE_PRODUCTS",
    "apply_statement_timeout",
    "build_dsn",
    "get_sync_connection",
    "init_schema",
    "insert_products",
]
