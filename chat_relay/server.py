"""Main FastAPI server for the chat relay."""

from __future__ import annotations

import logging
from typing import Any
from contextlib import asynccontextmanager
from collections.abc import Callable, Awaitable

from fastapi import FastAPI, Request, WebSocket
from fastapi.responses import ORJSONResponse, PlainTextResponse

from chat_relay.state import RuntimeDeps
from chat_relay.config.websocket import (
    WS_ENDPOINT_PATH,
    HISTORY_ENDPOINT_PATH,
    WS_MESSAGE_MISSING_SESSION_KEY,
)
from chat_relay.handlers.history import read_history
from chat_relay.handlers.websocket.session_key import get_session_key
from chat_relay.runtime.logging import configure_logging
from chat_relay.runtime.dependencies import build_runtime_deps
from chat_relay.handlers.websocket.manager import handle_websocket_connection

logger = logging.getLogger(__name__)

configure_logging()


def _runtime_deps(app: FastAPI) -> RuntimeDeps:
    runtime_deps = getattr(app.state, "runtime_deps", None)
    if runtime_deps is None:
        raise RuntimeError("Runtime dependencies are not initialized")
    return runtime_deps


def create_app(build_deps: Callable[[], Awaitable[RuntimeDeps]] = build_runtime_deps) -> FastAPI:
    @asynccontextmanager
    async def _lifespan(app: FastAPI):
        runtime_deps = await build_deps()
        app.state.runtime_deps = runtime_deps
        logger.info("runtime: ready")
        try:
            yield
        finally:
            deps = getattr(app.state, "runtime_deps", None)
            if deps is not None:
                await deps.shutdown()
                app.state.runtime_deps = None

    app = FastAPI(default_response_class=ORJSONResponse, lifespan=_lifespan)

    @app.get("/")
    async def root() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/healthz")
    async def healthz() -> dict[str, str]:
        return {"status": "ok"}

    @app.get(HISTORY_ENDPOINT_PATH, response_model=None)
    async def history(request: Request) -> Any:
        session_key = get_session_key(request)
        if not session_key:
            return PlainTextResponse(WS_MESSAGE_MISSING_SESSION_KEY, status_code=400)
        records = await read_history(_runtime_deps(app).transcripts, session_key)
        return ORJSONResponse(records)

    @app.websocket(WS_ENDPOINT_PATH)
    async def websocket_endpoint(websocket: WebSocket) -> None:
        await handle_websocket_connection(websocket, _runtime_deps(app))

    return app


app = create_app()


__all__ = ["app", "create_app"]
