"""Runtime dependency construction (generation client, transcripts, sessions, admission control)."""

from __future__ import annotations

import logging
import contextlib

import httpx

from chat_relay.state import RuntimeDeps
from chat_relay.storage import TranscriptStore, build_backend
from chat_relay.session import SessionRegistry
from chat_relay.generation import GenerationSource, HttpGenerationSource
from chat_relay.state.settings import AppSettings, GenerationSettings
from chat_relay.handlers.connections import ConnectionManager

from .settings import load_settings

logger = logging.getLogger(__name__)


def build_http_client(settings: GenerationSettings) -> httpx.AsyncClient:
    # Read timeout stays open-ended unless configured; generations may pause between tokens.
    timeout = httpx.Timeout(
        connect=settings.connect_timeout_s,
        read=settings.read_timeout_s,
        write=settings.connect_timeout_s,
        pool=settings.connect_timeout_s,
    )
    return httpx.AsyncClient(timeout=timeout)


async def build_runtime_deps(
    settings: AppSettings | None = None,
    *,
    source: GenerationSource | None = None,
) -> RuntimeDeps:
    settings = settings or load_settings()
    resource_stack = contextlib.AsyncExitStack()

    if source is None:
        client = await resource_stack.enter_async_context(build_http_client(settings.generation))
        source = HttpGenerationSource(
            client,
            url=settings.generation.url,
            api_token=settings.generation.api_token,
        )
        logger.info("generation backend: %s", settings.generation.url)

    backend = build_backend(settings.storage.backend, directory=settings.storage.directory)
    transcripts = TranscriptStore(backend)
    logger.info("transcript backend: %s", settings.storage.backend)

    sessions = SessionRegistry(
        store=transcripts,
        source=source,
        failure_notice=settings.generation.failure_notice,
        max_buffer_chars=settings.generation.max_buffer_chars,
    )
    connections = ConnectionManager(max_connections=settings.limits.max_concurrent_connections)

    return RuntimeDeps(
        connections=connections,
        sessions=sessions,
        transcripts=transcripts,
        settings=settings,
        _resource_stack=resource_stack,
    )


__all__ = ["RuntimeDeps", "build_runtime_deps"]
