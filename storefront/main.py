from __future__ import annotations

import asyncio
import sys
from typing import List, Optional
from urllib.parse import urlsplit, urlunsplit

import typer
from psycopg.conninfo import conninfo_to_dict, make_conninfo
from rich.console import Console
from rich.table import Table

from storefront.config import Settings, get_settings
from storefront.domain.models import Product
from storefront.infrastructure.db_factory import PoolManager, build_dsn, get_sync_connection
from storefront.infrastructure.schema import SAMPLE_PRODUCTS, init_schema, insert_products
from storefront.repositories.registry import available_backends, build_repository
from storefront.utils.logging import configure_logging
from storefront.web.app import STORAGE_ERRORS, create_app

app = typer.Typer(help="Storefront product listing CLI.")


def _mask_dsn(dsn: str) -> str:
    """Hide the password of a URL or key=value DSN."""
    parts = conninfo_to_dict(dsn)
    if not parts.get("password"):
        return dsn
    if "://" in dsn:
        url = urlsplit(dsn)
        userinfo, sep, host = url.netloc.rpartition("@")
        if ":" in userinfo:
            user = userinfo.split(":", 1)[0]
            return urlunsplit(url._replace(netloc=f"{user}:***{sep}{host}"))
    parts["password"] = "***"
    return make_conninfo(**parts)


async def _fetch_products(settings: Settings) -> List[Product]:
    """Fetch every product through the configured backend, owning the pool if needed."""
    needs_pool = settings.backend == "postgres"
    manager = PoolManager()
    if needs_pool:
        await manager.open_async_pool(settings)
    try:
        repository = build_repository(settings)
        return await repository.fetch_all()
    finally:
        if needs_pool:
            await manager.close_async_pool()


def _render_table(products: List[Product]) -> Table:
    table = Table(title="Products")
    table.add_column("ID", justify="right")
    table.add_column("Name")
    table.add_column("Price", justify="right")
    for product in products:
        table.add_row(str(product.id), product.name, str(product.price))
    return table


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"DSN={_mask_dsn(build_dsn(settings))} | backend={settings.backend} "
        f"(available: {', '.join(available_backends())}) | "
        f"pool=({settings.db_pool_min_size},{settings.db_pool_max_size}) "
        f"statement_timeout_ms={settings.db_statement_timeout_ms} | "
        f"web={settings.web_host}:{settings.web_port}"
    )


@app.command("list")
def list_products() -> None:
    """
    Fetch all products through the configured repository and print them.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)

    try:
        products = asyncio.run(_fetch_products(settings))
    except STORAGE_ERRORS as exc:
        typer.echo(f"Could not read products: {exc}", err=True)
        raise typer.Exit(code=1)

    if not products:
        typer.echo("No products found.")
        return
    Console().print(_render_table(products))


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address (default from settings)."),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Bind port (default from settings)."),
) -> None:
    """
    Serve the product listing over HTTP with uvicorn.
    """
    import uvicorn

    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    uvicorn.run(
        create_app(settings=settings),
        host=host or settings.web_host,
        port=port or settings.web_port,
        log_config=None,  # Keep our logging configuration
    )


@app.command("init-db")
def init_db(
    seed: bool = typer.Option(True, "--seed/--no-seed", help="Insert the sample products."),
) -> None:
    """
    Create the products table and optionally insert sample rows.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)

    with get_sync_connection(build_dsn(settings)) as conn:
        init_schema(conn)
        inserted = insert_products(conn, SAMPLE_PRODUCTS) if seed else 0
    typer.echo(f"Schema ready; inserted {inserted} sample product(s).")


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
