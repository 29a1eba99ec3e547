"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from modgraph.explorer import ModulesExplorer
from modgraph.web.api import router


def create_app(explorer: ModulesExplorer | None = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        app.state.explorer.dispose()

    app = FastAPI(title="modgraph", version="0.1.0", lifespan=lifespan)
    # Routes reach the explorer through app.state, never a module-level global
    app.state.explorer = explorer or ModulesExplorer()
    app.include_router(router)
    return app
