import pytest

from credstore.core.config import DEFAULT_DATABASE_URL, Settings


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("postgres://u:p@db/app", "postgresql+asyncpg://u:p@db/app"),
        ("postgresql://u:p@db/app", "postgresql+asyncpg://u:p@db/app"),
        ("postgresql+asyncpg://u:p@db/app", "postgresql+asyncpg://u:p@db/app"),
        ("sqlite:///./local.db", "sqlite+aiosqlite:///./local.db"),
        ("  sqlite+aiosqlite:///./local.db  ", "sqlite+aiosqlite:///./local.db"),
    ],
)
def test_database_url_is_normalized(raw, expected):
    assert Settings(_env_file=None, DATABASE_URL=raw).DATABASE_URL == expected


def test_defaults(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("DATABASE_CONNECT_TIMEOUT", raising=False)
    settings = Settings(_env_file=None)
    assert settings.DATABASE_URL == DEFAULT_DATABASE_URL
    assert settings.DATABASE_CONNECT_TIMEOUT is None
    assert settings.is_sqlite
    assert not settings.is_production


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgres://u:p@db/app")
    monkeypatch.setenv("database_connect_timeout", "2.5")
    monkeypatch.setenv("ENVIRONMENT", "Production")

    settings = Settings(_env_file=None)
    assert settings.DATABASE_URL == "postgresql+asyncpg://u:p@db/app"
    assert settings.DATABASE_CONNECT_TIMEOUT == 2.5
    assert settings.is_production
    assert not settings.is_sqlite
