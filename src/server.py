"""Main FastAPI server for the live voice relay."""

from __future__ import annotations

import logging
from typing import Any
from datetime import datetime, timezone
from collections.abc import Callable, Awaitable
from contextlib import asynccontextmanager

from fastapi import FastAPI, WebSocket
from fastapi.staticfiles import StaticFiles
from fastapi.responses import ORJSONResponse

from src.state import RuntimeDeps
from src.config.server import APP_NAME, PUBLIC_DIR, APP_VERSION, APP_FEATURES
from src.runtime.logging import configure_logging
from src.config.websocket import WS_ENDPOINT_PATH, WS_ROOT_ENDPOINT_PATH
from src.runtime.dependencies import build_runtime_deps
from src.handlers.websocket.manager import handle_websocket_connection

logger = logging.getLogger(__name__)

configure_logging()

RuntimeDepsBuilder = Callable[[], Awaitable[RuntimeDeps]]


def _runtime_deps(app: FastAPI) -> RuntimeDeps:
    runtime_deps = getattr(app.state, "runtime_deps", None)
    if runtime_deps is None:
        raise RuntimeError("Runtime dependencies are not initialized")
    return runtime_deps


def create_app(build_deps: RuntimeDepsBuilder = build_runtime_deps) -> FastAPI:
    @asynccontextmanager
    async def _lifespan(app: FastAPI):
        runtime_deps = await build_deps()
        app.state.runtime_deps = runtime_deps
        logger.info(
            "runtime: ready model=%s ws_path=%s",
            runtime_deps.settings.upstream.model,
            runtime_deps.settings.websocket.endpoint_path,
        )
        try:
            yield
        finally:
            deps = getattr(app.state, "runtime_deps", None)
            if deps is not None:
                await deps.shutdown()

    app = FastAPI(default_response_class=ORJSONResponse, lifespan=_lifespan)

    @app.get("/health")
    async def health() -> dict[str, Any]:
        return {
            "status": "ok",
            "connections": _runtime_deps(app).connections.size(),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    @app.get("/api/info")
    async def info() -> dict[str, Any]:
        return {
            "name": APP_NAME,
            "version": APP_VERSION,
            "model": _runtime_deps(app).settings.upstream.model,
            "features": list(APP_FEATURES),
        }

    async def websocket_endpoint(websocket: WebSocket) -> None:
        await handle_websocket_connection(websocket, _runtime_deps(app))

    app.add_api_websocket_route(WS_ENDPOINT_PATH, websocket_endpoint)
    if WS_ENDPOINT_PATH != WS_ROOT_ENDPOINT_PATH:
        app.add_api_websocket_route(WS_ROOT_ENDPOINT_PATH, websocket_endpoint)

    # Static mount goes last so it never shadows the API or WebSocket routes.
    if PUBLIC_DIR.is_dir():
        app.mount("/", StaticFiles(directory=PUBLIC_DIR, html=True), name="public")

    return app


app = create_app()

__all__ = ["app", "create_app"]
