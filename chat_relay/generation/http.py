"""HTTP streaming generation source (httpx)."""

from __future__ import annotations

import logging
from typing import Any
from collections.abc import AsyncIterator

import httpx

from chat_relay.errors import GenerationFailure
from chat_relay.state.transcript import Transcript, transcript_to_records

logger = logging.getLogger(__name__)

_ERROR_BODY_PREVIEW_CHARS = 200


class HttpGenerationSource:
    """POSTs the transcript to a streaming endpoint and yields raw response bytes."""

    def __init__(self, client: httpx.AsyncClient, *, url: str, api_token: str = "") -> None:
        self._client = client
        self._url = url
        self._api_token = api_token

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "text/event-stream"}
        if self._api_token:
            headers["Authorization"] = f"Bearer {self._api_token}"
        return headers

    @staticmethod
    def build_request_body(transcript: Transcript) -> dict[str, Any]:
        return {"messages": transcript_to_records(transcript), "stream": True}

    async def start(self, transcript: Transcript) -> AsyncIterator[bytes]:
        try:
            async with self._client.stream(
                "POST",
                self._url,
                headers=self._headers(),
                json=self.build_request_body(transcript),
            ) as response:
                if response.status_code >= 400:
                    body = (await response.aread()).decode("utf-8", errors="replace")
                    raise GenerationFailure(
                        f"generation backend returned HTTP {response.status_code}: "
                        f"{body[:_ERROR_BODY_PREVIEW_CHARS]}",
                        status_code=response.status_code,
                    )
                async for chunk in response.aiter_bytes():
                    if chunk:
                        yield chunk
        except httpx.HTTPError as exc:
            raise GenerationFailure(f"generation request failed: {exc!r}") from exc


__all__ = ["HttpGenerationSource"]
