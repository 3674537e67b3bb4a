"""
Utilities package for the Storefront product listing.

Exports shared helpers for cross-cutting concerns. Keep this package
lightweight and free of domain-specific logic.
"""

from storefront.utils.logging import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "get_logger",
]
