"""
Schema bootstrap helpers for the `products` table.

Creates the table from the packaged `init.sql` and inserts a small sample
catalogue so a fresh database renders something on the listing page.
"""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path
from typing import Iterable, Tuple

from psycopg import Connection

from storefront.utils.logging import get_logger

log = get_logger(__name__)

INIT_SQL_PATH = Path(__file__).resolve().parent.parent / "sql" / "init.sql"

SAMPLE_PRODUCTS: Tuple[Tuple[str, Decimal], ...] = (
    ("Pen", Decimal("1.50")),
    ("Notebook", Decimal("3.25")),
    ("Stapler", Decimal("7.99")),
    ("Desk Lamp", Decimal("24.00")),
)


def init_schema(conn: Connection) -> None:
    """Create the `products` table if it does not exist yet."""
    with conn.cursor() as cur:
        cur.execute(INIT_SQL_PATH.read_text(encoding="utf-8"))
    conn.commit()
    log.info("Schema initialized", extra={"sql": str(INIT_SQL_PATH)})


def insert_products(conn: Connection, items: Iterable[Tuple[str, Decimal]]) -> int:
    """
    Insert `(name, price)` pairs and return how many rows were written.

    Identifiers are assigned by the database.
    """
    rows = list(items)
    if not rows:
        return 0
    with conn.cursor() as cur:
        cur.executemany("INSERT INTO public.products (name, price) VALUES (%s, %s);", rows)
    conn.commit()
    log.info("Products inserted", extra={"rows": len(rows)})
    return len(rows)


__all__ = ["INIT_SQL_PATH", "SAMPLE_PRODUCTS", "init_schema", "insert_products"]
