"""
Error types shared across the Storefront layers.
"""
from __future__ import annotations


class StorageAccessError(Exception):
    """
    Raised by non-PostgreSQL backends when the underlying storage cannot be read.

    The PostgreSQL backend lets `psycopg.Error` propagate as-is; both are treated
    as storage access failures at the request and CLI boundaries.
    """


__all__ = ["StorageAccessError"]
