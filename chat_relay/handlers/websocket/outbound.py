"""Queued outbound channel for one chat socket.

The relay must never block on the socket, so `send` only enqueues. A writer
task drains the queue in order. A full queue or a failed socket write closes
the channel; the relay then treats the active generation as abandoned.
"""

from __future__ import annotations

import asyncio
import logging
import contextlib
from collections.abc import Callable

from fastapi import WebSocket

from .errors import safe_send_text

logger = logging.getLogger(__name__)


class WebSocketOutbound:
    def __init__(
        self,
        ws: WebSocket,
        *,
        queue_max: int,
        on_activity: Callable[[], None] | None = None,
    ) -> None:
        self._ws = ws
        self._queue: asyncio.Queue[str] = asyncio.Queue(maxsize=max(1, int(queue_max)))
        self._on_activity = on_activity
        self._closed = False
        self._task: asyncio.Task | None = None

    @property
    def closed(self) -> bool:
        return self._closed

    def start(self) -> asyncio.Task:
        if self._task is None:
            self._task = asyncio.create_task(self._writer_loop())
        return self._task

    def send(self, text: str) -> bool:
        if self._closed:
            return False
        try:
            self._queue.put_nowait(text)
        except asyncio.QueueFull:
            logger.warning("outbound queue full (%s frames); treating client as gone", self._queue.maxsize)
            self._closed = True
            return False
        return True

    async def aclose(self) -> None:
        self._closed = True
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError, Exception):
            await self._task
        self._task = None

    async def _writer_loop(self) -> None:
        while True:
            item = await self._queue.get()
            try:
                if self._closed:
                    continue
                if not await safe_send_text(self._ws, item):
                    self._closed = True
                    continue
                if self._on_activity is not None:
                    self._on_activity()
            finally:
                self._queue.task_done()


__all__ = ["WebSocketOutbound"]
