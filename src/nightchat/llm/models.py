from collections.abc import AsyncIterator
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class StreamingResponse:
    """Text chunks of one completion, plus its token usage.

    Providers create the response first and then ``bind`` the generator that
    fills it, so the generator can report usage into its own response:

        response = StreamingResponse()
        return response.bind(self._relay(vendor_stream, response))

    ``usage`` stays None until the stream is exhausted (and stays None if
    the vendor never reports it).
    """

    def __init__(self, async_iter: AsyncIterator[str] | None = None):
        self._iter = async_iter
        self._usage: dict[str, Any] | None = None

    def bind(self, async_iter: AsyncIterator[str]) -> "StreamingResponse":
        self._iter = async_iter
        return self

    @property
    def usage(self) -> dict[str, Any] | None:
        """``prompt_tokens``, ``completion_tokens`` and ``total_tokens``."""
        return self._usage

    def set_usage(self, usage: dict[str, Any]) -> None:
        self._usage = usage

    def __aiter__(self) -> "StreamingResponse":
        return self

    async def __anext__(self) -> str:
        if self._iter is None:
            raise StopAsyncIteration
        return await self._iter.__anext__()

    async def aclose(self) -> None:
        """Stop the bound generator early so the vendor connection is released."""
        aclose = getattr(self._iter, "aclose", None)
        if aclose is not None:
            await aclose()


class ChatMessage(BaseModel):
    """One role-tagged turn of a completion request.

    Content parts are forwarded to the vendor untouched.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    role: Literal["system", "user", "assistant"]
    content: str | list[dict[str, Any]] = Field(
        description='Turn text, or content parts such as {"type": "text", "text": ...}'
    )
