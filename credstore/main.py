import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request

from credstore.core.config import Settings, get_settings
from credstore.core.context import AppContext
from credstore.core.hooks import HookRegistry
from credstore.db.bootstrap import connect_store

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, hooks: Optional[HookRegistry] = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL)

    # --- LIFESPAN: the store must be ready before the app serves anything ---
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        ctx = AppContext.create(settings, hooks=hooks)
        try:
            await connect_store(ctx)
            app.state.context = ctx
            yield
        finally:
            await ctx.dispose()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.PROJECT_VERSION,
        lifespan=lifespan,
    )

    @app.get("/")
    def root(request: Request):
        ctx: AppContext = request.app.state.context
        return {"status": "ready", "entities": sorted(ctx.entities)}

    return app


app = create_app()
