"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from torus_snake.config import RuntimeConfig
from torus_snake.server.hub import WatcherHub
from torus_snake.server.routes import router
from torus_snake.server.websocket import ws_router
from torus_snake.session import SessionRegistry


def install_registry(
    app: FastAPI, config: RuntimeConfig | None = None,
) -> SessionRegistry:
    """Attach a fresh hub and session registry to *app*."""
    hub = WatcherHub()
    registry = SessionRegistry(hub, config)
    app.state.hub = hub
    app.state.sessions = registry
    return registry


def create_app(config: RuntimeConfig | None = None) -> FastAPI:
    """Build and return the FastAPI application."""

    @asynccontextmanager
    async def _lifespan(app: FastAPI):
        install_registry(app, config)
        yield
        await app.state.sessions.cleanup()

    app = FastAPI(
        title="Torus Snake API", version="0.1.0", lifespan=_lifespan,
    )
    app.include_router(router)
    app.include_router(ws_router)
    return app
