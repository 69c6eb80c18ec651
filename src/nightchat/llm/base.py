from abc import ABC, abstractmethod
from typing import Any

from .models import ChatMessage, StreamingResponse


class LLMProvider(ABC):
    """A generative-model backend the completion pipeline forwards to.

    Hides which vendor serves completions. Implementations own:
    - the vendor SDK client and its credentials
    - translation of chat turns into the vendor's request shape
    - turning the vendor's stream into plain text chunks plus usage

    Providers are shared by concurrent requests, so per-request state lives
    on the returned ``StreamingResponse`` and never on the provider.

        async with provider:
            stream = await provider.chat_completion_stream(turns, max_tokens=500)
            async for text in stream:
                ...
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Short vendor name reported by /health ('openai', 'deepseek', ...)."""

    @property
    @abstractmethod
    def model(self) -> str:
        """Model used when a request does not name one."""

    @abstractmethod
    async def chat_completion_stream(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | float | None = None,
        top_p: float | None = None,
        **kwargs: Any
    ) -> StreamingResponse:
        """Start a completion for ``messages`` and stream its text.

        The request is sent before this returns where the vendor SDK allows
        it, so connection and authentication errors raise here rather than
        on the first chunk.

        Args:
            messages: Chat turns, oldest first
            model: Override for the default model
            temperature: Sampling temperature
            max_tokens: Cap on generated tokens (None leaves the vendor default)
            top_p: Nucleus sampling mass (None leaves the vendor default)
            **kwargs: Passed to the vendor request unchanged

        Returns:
            StreamingResponse yielding text chunks; ``usage`` is filled once
            the stream is exhausted
        """

    @abstractmethod
    async def close(self) -> None:
        """Release the vendor client's connection pool."""

    async def __aenter__(self) -> "LLMProvider":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        # httpx may raise this while the loop shuts down; the pool is gone anyway
        try:
            await self.close()
        except RuntimeError as e:
            if "Event loop is closed" not in str(e):
                raise
