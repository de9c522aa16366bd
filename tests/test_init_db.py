import pytest
from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import create_async_engine

import init_db
from credstore.core.config import Settings


def use_settings(monkeypatch, settings):
    monkeypatch.setattr(init_db, "get_settings", lambda: settings)


@pytest.mark.asyncio
async def test_init_models_creates_tables(settings, monkeypatch):
    use_settings(monkeypatch, settings)

    assert await init_db.init_models() == 0

    engine = create_async_engine(settings.DATABASE_URL)
    try:
        async with engine.connect() as conn:
            has_users = await conn.run_sync(lambda c: inspect(c).has_table("users"))
    finally:
        await engine.dispose()
    assert has_users


@pytest.mark.asyncio
async def test_init_models_unreachable_store_returns_1(unreachable_settings, monkeypatch, caplog):
    use_settings(monkeypatch, unreachable_settings)

    assert await init_db.init_models() == 1
    assert any("DB CONNECTION ERR" in r.getMessage() for r in caplog.records)


@pytest.mark.asyncio
@pytest.mark.parametrize("url", ["mysql://u:p@localhost/db", "sqlite+pysqlite:///./sync.db", "not a url"])
async def test_init_models_unusable_url_returns_1(url, monkeypatch):
    use_settings(monkeypatch, Settings(_env_file=None, DATABASE_URL=url))

    assert await init_db.init_models() == 1
