from .base import LLMProvider
from .factory import SUPPORTED_PROVIDERS, create_llm_provider
from .models import ChatMessage, StreamingResponse
from .providers import AnthropicProvider, DeepSeekProvider, OpenAIProvider

__all__ = [
    "SUPPORTED_PROVIDERS",
    "AnthropicProvider",
    "ChatMessage",
    "DeepSeekProvider",
    "LLMProvider",
    "OpenAIProvider",
    "StreamingResponse",
    "create_llm_provider",
]
