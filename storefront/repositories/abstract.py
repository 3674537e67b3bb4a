"""
Repository interfaces for the Storefront product listing.

Concrete repositories (PostgreSQL, in-memory) implement the ProductRepository
protocol so the web layer and the CLI depend on a single narrow capability:
fetch every stored product.
"""

from __future__ import annotations

import abc
from typing import List, Protocol, runtime_checkable

from storefront.domain.models import Product


@runtime_checkable
class ProductRepository(Protocol):
    """
    Common interface all product repositories must implement.

    Attributes
    ----------
    name : str
        A short machine-friendly identifier of the backend.
    """

    name: str

    async def fetch_all(self) -> List[Product]:
        """
        Return every product currently visible to the backing store.

        Returns
        -------
        List[Product]
            The stored products, possibly empty; never None.

        Raises
        ------
        Exception
            Storage failures propagate unchanged to the caller.
        """
        ...


class AbstractProductRepository(abc.ABC):
    """
    Optional ABC helper for class-based implementations.

    Subclasses should set `name` and implement `fetch_all`.
    """

    name: str

    @abc.abstractmethod
    async def fetch_all(self) -> List[Product]:  # pragma: no cover - interface only
        """Fetch all products."""
        raise NotImplementedError


__all__ = [
    "AbstractProductRepository",
    "ProductRepository",
]
