"""Request models for the completion endpoint.

Validation is lenient about generation parameters (bad values fall back to
defaults) and strict about the message history.
"""

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..errors import InvalidRequestError
from ..llm.models import ChatMessage
from .config import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_TEMPERATURE,
    DEFAULT_TOP_P,
    INVALID_MESSAGES_ERROR,
)


def _as_number(value: Any) -> float | int | None:
    """Return ``value`` if it is a finite JSON number, else None."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        if not math.isfinite(value):
            return None
    except OverflowError:
        return None
    return value


class GenerationParams(BaseModel):
    """Sampling parameters forwarded to the backend."""

    model_config = ConfigDict(frozen=True)

    max_tokens: int | float = Field(default=DEFAULT_MAX_TOKENS, gt=0)
    temperature: float = Field(default=DEFAULT_TEMPERATURE)
    top_p: float = Field(default=DEFAULT_TOP_P)

    @classmethod
    def resolve(cls, payload: dict[str, Any]) -> "GenerationParams":
        """Take caller values where usable, defaults otherwise.

        ``max_tokens`` must be a positive number and is forwarded as given;
        ``temperature`` and ``top_p`` must be numbers. Anything else is
        silently replaced by the default.
        """
        max_tokens = _as_number(payload.get("max_tokens"))
        if max_tokens is None or max_tokens <= 0:
            max_tokens = DEFAULT_MAX_TOKENS

        temperature = _as_number(payload.get("temperature"))
        if temperature is None:
            temperature = DEFAULT_TEMPERATURE

        top_p = _as_number(payload.get("top_p"))
        if top_p is None:
            top_p = DEFAULT_TOP_P

        return cls(max_tokens=max_tokens, temperature=float(temperature), top_p=float(top_p))


class CompletionRequest(BaseModel):
    """A validated completion request."""

    model_config = ConfigDict(frozen=True)

    messages: list[ChatMessage]
    params: GenerationParams = Field(default_factory=GenerationParams)

    @classmethod
    def from_payload(cls, payload: Any) -> "CompletionRequest":
        """Validate a decoded JSON body.

        Raises:
            InvalidRequestError: If ``messages`` is missing, not a list, or
                holds anything other than role-tagged chat turns
        """
        if not isinstance(payload, dict):
            raise InvalidRequestError(INVALID_MESSAGES_ERROR)

        raw_messages = payload.get("messages")
        if not isinstance(raw_messages, list):
            raise InvalidRequestError(INVALID_MESSAGES_ERROR)

        try:
            messages = [ChatMessage.model_validate(item) for item in raw_messages]
        except ValidationError as exc:
            raise InvalidRequestError(INVALID_MESSAGES_ERROR) from exc

        return cls(messages=messages, params=GenerationParams.resolve(payload))
