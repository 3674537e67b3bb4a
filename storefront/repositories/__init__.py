"""
Repositories package for the Storefront product listing.

This module re-exports the repository contract, the concrete backends and the
backend registry so downstream code can import from `storefront.repositories`
directly.
"""

from storefront.repositories.abstract import AbstractProductRepository, ProductRepository
from storefront.repositories.memory import InMemoryProductRepository
from storefront.repositories.postgres import PostgresProductRepository
from storefront.repositories.registry import available_backends, build_repository

__all__ = [
    # Abstracts
    "AbstractProductRepository",
    "ProductRepository",
    # Concrete repositories
    "InMemoryProductRepository",
    "PostgresProductRepository",
    # Registry
    "available_backends",
    "build_repository",
]
