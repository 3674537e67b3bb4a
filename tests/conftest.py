"""
Pytest configuration for the Storefront product listing.

Provides fixtures for:
- Sample products and in-memory repositories for unit tests
- Database connection management
- Test data seeding
- Settings override for integration tests
"""

from __future__ import annotations

import os
import tempfile
from decimal import Decimal
from pathlib import Path
from typing import Generator, List

import psycopg
import pytest

from storefront.config import Settings
from storefront.domain.models import Product
from storefront.infrastructure.schema import init_schema
from storefront.repositories.memory import InMemoryProductRepository


@pytest.fixture
def sample_products() -> List[Product]:
    """The two-product catalogue used across unit tests."""
    return [
        Product(id=1, name="Pen", price=Decimal("1.50")),
        Product(id=2, name="Notebook", price=Decimal("3.25")),
    ]


@pytest.fixture
def memory_repository(sample_products: List[Product]) -> InMemoryProductRepository:
    return InMemoryProductRepository(sample_products)


@pytest.fixture
def memory_settings() -> Settings:
    """Settings selecting the in-memory backend so no database is needed."""
    return Settings(backend="memory", log_level="DEBUG")


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Settings fixture with test-specific overrides.

    Can be overridden via environment variables in CI or local testing.
    """
    return Settings(
        db_host=os.getenv("DB_HOST", "localhost"),
        db_port=int(os.getenv("DB_PORT", "5432")),
        db_user=os.getenv("DB_USER", "postgres"),
        db_password=os.getenv("DB_PASSWORD", "postgres"),
        db_name=os.getenv("DB_NAME", "storefront"),
        log_level="DEBUG",
    )


@pytest.fixture(scope="session")
def test_dsn(test_settings: Settings) -> str:
    """
    Database connection string for tests.
    """
    return (
        f"postgresql://{test_settings.db_user}:{test_settings.db_password}"
        f"@{test_settings.db_host}:{test_settings.db_port}/{test_settings.db_name}"
    )


@pytest.fixture(scope="session")
def db_connection_available(test_dsn: str) -> bool:
    """
    Check if database is reachable.

    Used to conditionally skip integration tests when DB is not available.
    """
    try:
        with psycopg.connect(test_dsn, connect_timeout=5) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1;")
                cur.fetchone()
        return True
    except psycopg.Error:
        return False


@pytest.fixture(scope="session")
def db_connection(
    test_dsn: str, db_connection_available: bool
) -> Generator[psycopg.Connection, None, None]:
    """
    Provide a session-scoped database connection for integration tests.

    Skips tests if database is not available.
    """
    if not db_connection_available:
        pytest.skip("Database not available for integration tests")

    conn = psycopg.connect(test_dsn)
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="session")
def db_schema_initialized(db_connection: psycopg.Connection) -> bool:
    """
    Ensure the products table exists.
    """
    init_schema(db_connection)
    return True


@pytest.fixture(scope="function")
def clean_products_table(db_connection: psycopg.Connection, db_schema_initialized: bool):
    """
    Empty the products table before and after each test function.
    """
    with db_connection.cursor() as cur:
        cur.execute("TRUNCATE TABLE public.products RESTART IDENTITY;")
    db_connection.commit()
    yield
    with db_connection.cursor() as cur:
        cur.execute("TRUNCATE TABLE public.products RESTART IDENTITY;")
    db_connection.commit()


@pytest.fixture(scope="function")
def seeded_db_small(
    db_connection: psycopg.Connection,
    clean_products_table,
    test_dsn: str,
) -> int:
    """
    Seed a small dataset (100 products) and return the number of rows seeded.
    """
    rows_to_seed = 100

    with tempfile.TemporaryDirectory() as tmpdir:
        csv_path = Path(tmpdir) / "products.csv"

        from scripts.seed_data import _copy_into_db, _generate_rows_csv

        _generate_rows_csv(csv_path, rows=rows_to_seed, batch_size=50, seed=42)
        _copy_into_db(test_dsn, csv_path)

    with db_connection.cursor() as cur:
        cur.execute("SELECT COUNT(*) FROM public.products;")
        count = cur.fetchone()[0]

    return count
