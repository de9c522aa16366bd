import pytest
import pytest_asyncio

from credstore.core.config import Settings
from credstore.core.context import AppContext
from credstore.db.bootstrap import connect_store


def make_settings(url: str, **overrides) -> Settings:
    return Settings(_env_file=None, DATABASE_URL=url, **overrides)


@pytest.fixture
def settings(tmp_path):
    return make_settings(f"sqlite+aiosqlite:///{tmp_path / 'credstore.db'}")


@pytest.fixture
def unreachable_settings(tmp_path):
    # Parent directory does not exist, so SQLite cannot open the file
    return make_settings(f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'dir' / 'credstore.db'}")


@pytest_asyncio.fixture
async def ctx(settings):
    context = AppContext.create(settings, quiet=True)
    yield context
    await context.dispose()


@pytest_asyncio.fixture
async def ready_ctx(ctx):
    await connect_store(ctx)
    return ctx


@pytest_asyncio.fixture
async def db(ready_ctx):
    async with ready_ctx.session_factory() as session:
        yield session
