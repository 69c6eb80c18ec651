"""Completion request pipeline.

Validates a chat history, applies generation defaults, forwards the request
to the language-model backend and relays its output chunk by chunk.

Hidden design decisions:
- Which provider serves the request (injected ``LLMProvider``)
- When a backend failure still becomes an error response (before the first
  chunk) and when it can only end the stream (after)
- How the backend stream is released when the consumer stops pulling
"""

import logging
from collections.abc import AsyncIterator
from typing import Any

from ..errors import BackendFailureError
from ..llm.base import LLMProvider
from ..llm.models import StreamingResponse
from .config import GENERIC_ERROR
from .models import CompletionRequest

logger = logging.getLogger("nightchat.api.pipeline")


class CompletionPipeline:
    """Stateless bridge between the HTTP layer and an LLM provider.

    Holds nothing per request, so one instance serves concurrent requests.
    """

    def __init__(self, llm: LLMProvider):
        self._llm = llm

    @property
    def llm(self) -> LLMProvider:
        return self._llm

    async def complete_chat(self, payload: Any) -> AsyncIterator[str]:
        """Start a streaming completion for a decoded request body.

        The backend call is made and its first chunk pulled before this
        returns, so request-time failures surface here rather than after a
        response has started.

        Args:
            payload: Decoded JSON body

        Returns:
            Async iterator of text chunks, in arrival order

        Raises:
            InvalidRequestError: If the body fails validation (no backend call)
            BackendFailureError: If the backend call could not be started
        """
        request = CompletionRequest.from_payload(payload)
        params = request.params

        try:
            stream = await self._llm.chat_completion_stream(
                request.messages,
                temperature=params.temperature,
                max_tokens=params.max_tokens,
                top_p=params.top_p,
            )
            try:
                first_chunk = await anext(stream)
            except StopAsyncIteration:
                first_chunk = None
        except Exception as exc:
            logger.exception("Error in chat API")
            raise BackendFailureError(GENERIC_ERROR) from exc

        logger.debug(
            "Streaming completion: %d messages, max_tokens=%s temperature=%s top_p=%s",
            len(request.messages), params.max_tokens, params.temperature, params.top_p,
        )
        return self._relay(first_chunk, stream)

    async def _relay(self, first_chunk: str | None, stream: StreamingResponse) -> AsyncIterator[str]:
        """Pass chunks through one at a time.

        The consumer pulls each chunk, so a slow client slows the backend read
        and a disconnected client stops it. A backend failure after the first
        chunk is logged and ends the stream.
        """
        try:
            if first_chunk is not None:
                yield first_chunk
            async for chunk in stream:
                yield chunk
        except Exception:
            logger.exception("Completion stream failed mid-response")
        finally:
            await stream.aclose()
            if stream.usage:
                logger.info("Completion usage: %s", stream.usage)
