import pytest
from fastapi.testclient import TestClient

from credstore.core.context import AppContext
from credstore.core.errors import StoreConnectionError
from credstore.core.hooks import POST_ENTITIES, HookRegistry
from credstore.main import create_app


def test_app_serves_after_store_is_ready(settings):
    hooks = HookRegistry()
    seen = []
    hooks.register(POST_ENTITIES, lambda ctx: seen.append(sorted(ctx.entities)))

    app = create_app(settings, hooks=hooks)
    with TestClient(app) as client:
        response = client.get("/")

    assert response.status_code == 200
    assert response.json() == {"status": "ready", "entities": ["users"]}
    assert seen == [["users"]]


@pytest.mark.asyncio
async def test_lifespan_aborts_on_unreachable_store(unreachable_settings):
    app = create_app(unreachable_settings)
    with pytest.raises(StoreConnectionError):
        async with app.router.lifespan_context(app):
            pass
    assert not hasattr(app.state, "context")


@pytest.mark.asyncio
async def test_lifespan_aborts_on_unusable_url():
    from credstore.core.config import Settings

    app = create_app(Settings(_env_file=None, DATABASE_URL="mysql://u:p@localhost/db"))
    with pytest.raises(StoreConnectionError):
        async with app.router.lifespan_context(app):
            pass


@pytest.mark.asyncio
async def test_lifespan_disposes_engine_when_shutdown_fails(settings, monkeypatch):
    disposed = []
    original_dispose = AppContext.dispose

    async def dispose(self):
        disposed.append(self)
        await original_dispose(self)

    monkeypatch.setattr(AppContext, "dispose", dispose)
    app = create_app(settings)
    with pytest.raises(RuntimeError, match="shutdown failed"):
        async with app.router.lifespan_context(app):
            raise RuntimeError("shutdown failed")

    assert disposed == [app.state.context]
