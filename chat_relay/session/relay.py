"""Per-session conversational relay.

One `SessionRelay` owns one session key. It accepts inbound client text,
starts at most one generation at a time, pumps decoded tokens to the outbound
channel, and commits turns to the transcript store.

All transitions run on the event loop. The inbound path and the pump task
interleave only at awaits (chunk reads, decoded events, store writes); the
cancellation token is the only state both paths write, and its transitions
are one-way.
"""

from __future__ import annotations

import asyncio
import logging
import contextlib
from typing import Literal

from chat_relay.errors import GenerationFailure, StorageUnavailable
from chat_relay.state.session import IDLE, Generating, SessionState
from chat_relay.state.transcript import Turn, Transcript
from chat_relay.storage.store import TranscriptStore
from chat_relay.stream import FrameDecoder, decode_stream
from chat_relay.config.websocket import WS_TURN_ENDED_SENTINEL
from chat_relay.generation.source import GenerationSource

from .inbound import parse_inbound
from .outbound import OutboundChannel
from .cancellation import CancellationCoordinator

logger = logging.getLogger(__name__)

InboundOutcome = Literal["started", "busy", "ignored", "stop_signaled", "stop_ignored"]

DEFAULT_FAILURE_NOTICE = "AI request failed"
DEFAULT_CLOSE_GRACE_S = 1.0


class SessionRelay:
    def __init__(
        self,
        key: str,
        *,
        store: TranscriptStore,
        source: GenerationSource,
        coordinator: CancellationCoordinator | None = None,
        failure_notice: str = DEFAULT_FAILURE_NOTICE,
        max_buffer_chars: int = 0,
    ) -> None:
        self.key = key
        self._store = store
        self._source = source
        self._coordinator = coordinator or CancellationCoordinator()
        self._failure_notice = failure_notice
        self._max_buffer_chars = max(0, int(max_buffer_chars))
        self._state: SessionState = IDLE

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_generating(self) -> bool:
        return isinstance(self._state, Generating)

    def is_generating_for(self, outbound: OutboundChannel) -> bool:
        state = self._state
        return isinstance(state, Generating) and state.outbound is outbound

    async def prime(self) -> Transcript:
        """Load the persisted transcript; degrade to the in-memory turns when storage is unreachable."""
        return await self._transcript()

    async def handle_inbound(self, raw: str | None, outbound: OutboundChannel) -> InboundOutcome:
        message = parse_inbound(raw)
        if message.is_stop:
            return self._request_stop()
        if message.is_empty:
            return "ignored"

        if isinstance(self._state, Generating):
            logger.info("session=%s busy; dropping message while a generation is active", self.key)
            return "busy"

        # Claim the session before the first await so no second generation can start.
        generating = Generating(token=self._coordinator.begin(), outbound=outbound)
        self._state = generating

        try:
            await self._append(Turn.user(message.text), what="user")
            transcript = await self._transcript()
            generating.task = asyncio.create_task(
                self._run_generation(generating, transcript),
                name=f"generation-{generating.token.generation_id}",
            )
        except BaseException:
            # Interrupted before the pump started; release the claim.
            self._coordinator.complete(generating.token)
            if self._state is generating:
                self._state = IDLE
            raise
        return "started"

    async def handle_closed(self, outbound: OutboundChannel) -> None:
        """Connection loss: stop the generation feeding `outbound` without committing."""
        state = self._state
        if isinstance(state, Generating) and state.outbound is outbound:
            state.abandoned = True
            if self._coordinator.signal(state.token):
                logger.info("session=%s connection closed; abandoning active generation", self.key)

    async def wait_idle(self) -> None:
        state = self._state
        if isinstance(state, Generating) and state.task is not None:
            await asyncio.wait({state.task})

    async def aclose(self, *, grace_s: float = DEFAULT_CLOSE_GRACE_S) -> None:
        """Stop the active generation; a commit already under way gets `grace_s` to finish."""
        state = self._state
        if not isinstance(state, Generating):
            return
        self._coordinator.signal(state.token)
        task = state.task
        if task is not None and not task.done():
            done, _ = await asyncio.wait({task}, timeout=grace_s)
            if not done:
                task.cancel()
                with contextlib.suppress(asyncio.CancelledError, Exception):
                    await task
        self._coordinator.complete(state.token)
        if self._state is state:
            self._state = IDLE

    def _request_stop(self) -> InboundOutcome:
        state = self._state
        if not isinstance(state, Generating):
            return "stop_ignored"
        if self._coordinator.signal(state.token):
            logger.info("session=%s stop requested for generation %s", self.key, state.token.generation_id)
        return "stop_signaled"

    def _stopped(self, generating: Generating) -> bool:
        return self._coordinator.is_signaled(generating.token) or generating.outbound.closed

    async def _transcript(self) -> Transcript:
        try:
            return await self._store.load(self.key)
        except StorageUnavailable:
            logger.warning("session=%s transcript unavailable; continuing with in-memory turns", self.key, exc_info=True)
            return self._store.cached(self.key)

    async def _append(self, turn: Turn, *, what: str) -> None:
        try:
            await self._store.append(self.key, turn)
        except StorageUnavailable:
            logger.exception("session=%s failed to persist %s turn; kept in memory only", self.key, what)

    async def _pump(self, generating: Generating, transcript: Transcript) -> bool:
        """Forward decoded tokens; True on natural completion, False when stopped."""
        decoder = FrameDecoder(max_buffer_chars=self._max_buffer_chars)
        events = decode_stream(
            self._source.start(transcript),
            decoder=decoder,
            should_stop=lambda: self._stopped(generating),
        )
        async with contextlib.aclosing(events):
            async for event in events:
                if self._stopped(generating):
                    return False
                if event.terminal:
                    return True
                generating.accumulator.append(event.payload)
                if not generating.outbound.send(event.payload):
                    return False
        return not self._stopped(generating)

    def _end_cancelled(self, generating: Generating) -> None:
        generating.accumulator.clear()
        if not generating.abandoned and not generating.outbound.closed:
            generating.outbound.send(WS_TURN_ENDED_SENTINEL)

    async def _commit(self, generating: Generating) -> None:
        text = generating.accumulated_text()
        if not text.strip():
            logger.info("session=%s generation produced no text; nothing to commit", self.key)
            return
        await self._append(Turn.assistant(text), what="assistant")

    async def _run_generation(self, generating: Generating, transcript: Transcript) -> None:
        generation_id = generating.token.generation_id
        try:
            completed = await self._pump(generating, transcript)
            if completed:
                generating.outbound.send(WS_TURN_ENDED_SENTINEL)
                await self._commit(generating)
                logger.info("session=%s generation %s completed", self.key, generation_id)
            else:
                self._end_cancelled(generating)
                logger.info("session=%s generation %s cancelled", self.key, generation_id)
        except asyncio.CancelledError:
            logger.info("session=%s generation %s aborted", self.key, generation_id)
            raise
        except Exception as exc:
            if self._stopped(generating):
                self._end_cancelled(generating)
                logger.info("session=%s generation %s cancelled (%s)", self.key, generation_id, exc)
            else:
                if isinstance(exc, GenerationFailure):
                    logger.warning("session=%s generation %s failed: %s", self.key, generation_id, exc)
                else:
                    logger.exception("session=%s generation %s crashed", self.key, generation_id)
                generating.outbound.send(self._failure_notice)
                generating.outbound.send(WS_TURN_ENDED_SENTINEL)
        finally:
            self._coordinator.complete(generating.token)
            if self._state is generating:
                self._state = IDLE


__all__ = ["DEFAULT_FAILURE_NOTICE", "InboundOutcome", "SessionRelay"]
