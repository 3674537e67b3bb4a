"""
PostgreSQL product repository.

Borrows a connection from the shared async pool and reads the whole
`products` table in one query. Failures raised by psycopg (connectivity,
authorization, statement timeout, malformed SQL) reach the caller untouched.
"""

from __future__ import annotations

from typing import List

from psycopg.rows import dict_row
from psycopg_pool import AsyncConnectionPool

from storefront.domain.models import Product
from storefront.infrastructure.db_factory import apply_statement_timeout
from storefront.repositories.abstract import AbstractProductRepository
from storefront.utils.logging import get_logger

log = get_logger(__name__)

_SELECT_ALL = "SELECT id, name, price FROM public.products ORDER BY id;"


class PostgresProductRepository(AbstractProductRepository):
    """
    Fetch products through a psycopg `AsyncConnectionPool`.

    The pool is owned by the caller; this class never opens or closes it.
    """

    name: str = "postgres"

    def __init__(self, pool: AsyncConnectionPool, statement_timeout_ms: int = 0) -> None:
        self._pool = pool
        self._statement_timeout_ms = statement_timeout_ms

    async def fetch_all(self) -> List[Product]:
        async with self._pool.connection() as conn:
            async with conn.cursor(row_factory=dict_row) as cur:
                await apply_statement_timeout(cur, self._statement_timeout_ms)
                await cur.execute(_SELECT_ALL)
                rows = await cur.fetchall()

        products = [Product.model_validate(row) for row in rows]
        log.debug("Fetched products", extra={"backend": self.name, "rows": len(products)})
        return products


__all__ = ["PostgresProductRepository"]
