"""Anthropic Messages API backend.

Built on the official SDK's raw event stream
(https://github.com/anthropics/anthropic-sdk-python).
"""

from collections.abc import AsyncIterator
from typing import Any

from anthropic import AsyncAnthropic

from ..base import LLMProvider
from ..models import ChatMessage, StreamingResponse

# The Messages API rejects requests without max_tokens
FALLBACK_MAX_TOKENS = 4096


def _text_of(content: str | list[dict[str, Any]]) -> str:
    if isinstance(content, str):
        return content
    return "".join(part.get("text", "") for part in content if part.get("type") == "text")


def split_system_prompt(messages: list[ChatMessage]) -> tuple[str | None, list[dict[str, Any]]]:
    """Separate system turns from the conversation.

    Anthropic takes the system prompt as a top-level string. Several system
    turns are joined with blank lines, in order; only the text parts of a
    content-part list are kept there.
    """
    system_parts = []
    turns = []
    for msg in messages:
        if msg.role == "system":
            system_parts.append(_text_of(msg.content))
        else:
            turns.append({"role": msg.role, "content": msg.content})
    return ("\n\n".join(system_parts) or None), turns


class AnthropicProvider(LLMProvider):
    """Streams Claude completions.

    Hidden design decisions:
    - Where the system prompt goes (top-level ``system``, not a turn)
    - Which raw events carry text and token counts
    """

    def __init__(
        self,
        api_key: str,
        model: str = "claude-sonnet-4-20250514",
        base_url: str | None = None,
        **client_kwargs: Any
    ):
        self._model = model
        self._client = AsyncAnthropic(api_key=api_key, base_url=base_url, **client_kwargs)

    @property
    def name(self) -> str:
        return "anthropic"

    @property
    def model(self) -> str:
        return self._model

    async def chat_completion_stream(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | float | None = None,
        top_p: float | None = None,
        **kwargs: Any
    ) -> StreamingResponse:
        """Open a streamed Messages API call.

        ``max_tokens`` falls back to 4096 when not given.
        """
        system, turns = split_system_prompt(messages)
        params: dict[str, Any] = {
            "model": model or self._model,
            "messages": turns,
            "temperature": temperature,
            "max_tokens": max_tokens or FALLBACK_MAX_TOKENS,
            "stream": True,
            **kwargs,
        }
        if top_p is not None:
            params["top_p"] = top_p
        if system:
            params["system"] = system

        events = await self._client.messages.create(**params)

        response = StreamingResponse()
        return response.bind(self._relay_events(events, response))

    async def _relay_events(self, events: Any, response: StreamingResponse) -> AsyncIterator[str]:
        prompt_tokens = 0
        completion_tokens = 0
        try:
            async for event in events:
                if event.type == "message_start":
                    prompt_tokens = event.message.usage.input_tokens
                elif event.type == "message_delta":
                    # Cumulative count for the whole message
                    completion_tokens = event.usage.output_tokens
                elif event.type == "content_block_delta" and event.delta.type == "text_delta":
                    yield event.delta.text
            response.set_usage({
                "prompt_tokens": prompt_tokens,
                "completion_tokens": completion_tokens,
                "total_tokens": prompt_tokens + completion_tokens,
            })
        finally:
            await events.close()

    async def close(self) -> None:
        await self._client.close()
