"""
In-memory product repository.

Backs the `memory` backend for demos and serves as the test double for the
web layer and the CLI. It can be told to fail so callers can exercise their
storage-error handling without a database.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from storefront.domain.errors import StorageAccessError
from storefront.domain.models import Product
from storefront.repositories.abstract import AbstractProductRepository


class InMemoryProductRepository(AbstractProductRepository):
    """
    Hold a snapshot of products in a list.

    Parameters
    ----------
    products : iterable[Product]
        Initial contents.
    error : Exception | None
        When set, every `fetch_all` call raises it instead of returning data.
    """

    name: str = "memory"

    def __init__(
        self,
        products: Iterable[Product] = (),
        error: Optional[Exception] = None,
    ) -> None:
        self._products: List[Product] = list(products)
        self._error = error
        self.fetch_calls = 0

    def add(self, product: Product) -> None:
        self._products.append(product)

    def fail_with(self, error: Optional[Exception] = None) -> None:
        """Make subsequent reads raise `error` (a StorageAccessError by default)."""
        self._error = error or StorageAccessError("in-memory store unavailable")

    def recover(self) -> None:
        self._error = None

    async def fetch_all(self) -> List[Product]:
        self.fetch_calls += 1
        if self._error is not None:
            raise self._error
        return list(self._products)


__all__ = ["InMemoryProductRepository"]
