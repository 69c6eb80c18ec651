from collections.abc import AsyncIterator
from typing import Any

from openai import AsyncOpenAI

from ..base import LLMProvider
from ..models import ChatMessage, StreamingResponse


class OpenAIProvider(LLMProvider):
    """Streams Chat Completions from OpenAI or any API-compatible vendor.

    Hidden design decisions:
    - The request is opened eagerly, so HTTP and auth errors raise at call time
    - Usage arrives on a final choice-less chunk (``include_usage``)
    """

    provider_name = "openai"

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o",
        base_url: str | None = None,
        organization: str | None = None,
        **client_kwargs: Any
    ):
        """
        Args:
            api_key: Vendor API key
            model: Model used when a request names none
            base_url: Endpoint of an OpenAI-compatible vendor
            organization: OpenAI organization id
            **client_kwargs: Passed to ``AsyncOpenAI`` (timeouts, retries, ...)
        """
        self._model = model
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            organization=organization,
            **client_kwargs
        )

    @property
    def name(self) -> str:
        return self.provider_name

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
        params: dict[str, Any] = {
            "model": model or self._model,
            "messages": [msg.model_dump() for msg in messages],
            "temperature": temperature,
            "stream": True,
            "stream_options": {"include_usage": True},
            **kwargs,
        }
        if max_tokens is not None:
            params["max_tokens"] = max_tokens
        if top_p is not None:
            params["top_p"] = top_p

        chunks = await self._client.chat.completions.create(**params)

        response = StreamingResponse()
        return response.bind(self._relay_chunks(chunks, response))

    async def _relay_chunks(self, chunks: Any, response: StreamingResponse) -> AsyncIterator[str]:
        try:
            async for chunk in chunks:
                if chunk.usage is not None:
                    response.set_usage(chunk.usage.model_dump(
                        include={"prompt_tokens", "completion_tokens", "total_tokens"}
                    ))
                if chunk.choices and chunk.choices[0].delta.content:
                    yield chunk.choices[0].delta.content
        finally:
            await chunks.close()

    async def close(self) -> None:
        await self._client.close()
