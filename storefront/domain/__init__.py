"""
Domain package for the Storefront product listing.

Exports the product record and the storage error type. Keep this package
focused on data definitions and validation concerns.
"""

from storefront.domain.errors import StorageAccessError
from storefront.domain.models import Product

__all__ = [
    "Product",
    "StorageAccessError",
]
