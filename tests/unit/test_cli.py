from __future__ import annotations

from typing import Any

import pytest
import uvicorn
from typer.testing import CliRunner

from storefront import main as cli
from storefront.config import Settings
from storefront.domain.errors import StorageAccessError
from storefront.repositories import InMemoryProductRepository

runner = CliRunner()


@pytest.fixture
def use_settings(monkeypatch):
    def _apply(settings: Settings) -> Settings:
        monkeypatch.setattr(cli, "get_settings", lambda: settings)
        return settings

    return _apply


class _FakeSyncConnection:
    def __enter__(self) -> "_FakeSyncConnection":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        del exc_type, exc, tb


def test_info_masks_password(use_settings) -> None:
    use_settings(Settings(_env_file=None, database_url="postgresql://app:secret@db:5432/shop"))

    result = runner.invoke(cli.app, ["info"])

    assert result.exit_code == 0
    assert "postgresql://app:***@db:5432/shop" in result.output
    assert "secret" not in result.output
    assert "backend=postgres" in result.output


def test_info_masks_password_in_key_value_dsn(use_settings) -> None:
    use_settings(Settings(_env_file=None, database_url="host=db dbname=shop user=app password=secret"))

    result = runner.invoke(cli.app, ["info"])

    assert result.exit_code == 0
    assert "secret" not in result.output
    assert "password=***" in result.output
    assert "host=db" in result.output
    assert "user=app" in result.output


def test_info_leaves_passwordless_dsn_untouched(use_settings) -> None:
    use_settings(Settings(_env_file=None, database_url="postgresql://app@db/shop"))

    result = runner.invoke(cli.app, ["info"])

    assert "DSN=postgresql://app@db/shop " in result.output


def test_list_prints_products_table(use_settings, memory_settings: Settings) -> None:
    use_settings(memory_settings)

    result = runner.invoke(cli.app, ["list"])

    assert result.exit_code == 0
    assert "Pen" in result.output
    assert "Notebook" in result.output
    assert "1.50" in result.output


def test_list_reports_empty_catalogue(use_settings, memory_settings: Settings, monkeypatch) -> None:
    use_settings(memory_settings)
    monkeypatch.setattr(cli, "build_repository", lambda settings: InMemoryProductRepository())

    result = runner.invoke(cli.app, ["list"])

    assert result.exit_code == 0
    assert "No products found." in result.output


def test_list_exits_non_zero_on_storage_failure(
    use_settings, memory_settings: Settings, monkeypatch
) -> None:
    use_settings(memory_settings)
    monkeypatch.setattr(
        cli,
        "build_repository",
        lambda settings: InMemoryProductRepository(error=StorageAccessError("store offline")),
    )

    result = runner.invoke(cli.app, ["list"])

    assert result.exit_code == 1
    assert "No products found." not in result.output


def test_list_opens_and_closes_pool_for_postgres_backend(use_settings, monkeypatch) -> None:
    use_settings(Settings(_env_file=None, backend="postgres"))
    calls: list[str] = []

    async def fake_open(self, settings=None):
        calls.append("open")

    async def fake_close(self):
        calls.append("close")

    monkeypatch.setattr(cli.PoolManager, "open_async_pool", fake_open)
    monkeypatch.setattr(cli.PoolManager, "close_async_pool", fake_close)
    monkeypatch.setattr(
        cli,
        "build_repository",
        lambda settings: InMemoryProductRepository(error=StorageAccessError("down")),
    )

    result = runner.invoke(cli.app, ["list"])

    assert result.exit_code == 1
    assert calls == ["open", "close"]


def test_init_db_creates_schema_and_seeds(use_settings, monkeypatch) -> None:
    use_settings(Settings(_env_file=None, database_url="postgresql://app@db/shop"))
    seen: dict[str, Any] = {}

    def fake_connect(dsn: str) -> _FakeSyncConnection:
        seen["dsn"] = dsn
        return _FakeSyncConnection()

    monkeypatch.setattr(cli, "get_sync_connection", fake_connect)
    monkeypatch.setattr(cli, "init_schema", lambda conn: seen.setdefault("schema", True))
    monkeypatch.setattr(cli, "insert_products", lambda conn, items: len(list(items)))

    result = runner.invoke(cli.app, ["init-db"])

    assert result.exit_code == 0
    assert seen == {"dsn": "postgresql://app@db/shop", "schema": True}
    assert f"inserted {len(cli.SAMPLE_PRODUCTS)} sample product(s)" in result.output


def test_init_db_without_seed_skips_inserts(use_settings, monkeypatch) -> None:
    use_settings(Settings(_env_file=None))
    monkeypatch.setattr(cli, "get_sync_connection", lambda dsn: _FakeSyncConnection())
    monkeypatch.setattr(cli, "init_schema", lambda conn: None)

    def fail_insert(conn, items):
        raise AssertionError("insert_products should not run")

    monkeypatch.setattr(cli, "insert_products", fail_insert)

    result = runner.invoke(cli.app, ["init-db", "--no-seed"])

    assert result.exit_code == 0
    assert "inserted 0 sample product(s)" in result.output


def test_serve_runs_uvicorn_with_overrides(use_settings, memory_settings: Settings, monkeypatch) -> None:
    use_settings(memory_settings)
    seen: dict[str, Any] = {}

    def fake_run(app, **kwargs):
        seen["app"] = app
        seen.update(kwargs)

    monkeypatch.setattr(uvicorn, "run", fake_run)

    result = runner.invoke(cli.app, ["serve", "--port", "9001"])

    assert result.exit_code == 0
    assert seen["host"] == memory_settings.web_host
    assert seen["port"] == 9001
    assert seen["log_config"] is None
    assert isinstance(seen["app"].state.repository, InMemoryProductRepository)


def test_main_exits_130_on_keyboard_interrupt(monkeypatch) -> None:
    def interrupted() -> None:
        raise KeyboardInterrupt

    monkeypatch.setattr(cli, "app", interrupted)

    with pytest.raises(SystemExit) as exc_info:
        cli.main()

    assert exc_info.value.code == 130
