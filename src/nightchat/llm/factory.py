from typing import Any

from .base import LLMProvider
from .providers import AnthropicProvider, DeepSeekProvider, OpenAIProvider

_PROVIDERS: dict[str, type[LLMProvider]] = {
    "openai": OpenAIProvider,
    "deepseek": DeepSeekProvider,
    "anthropic": AnthropicProvider,
}

_ALIASES = {"claude": "anthropic"}

SUPPORTED_PROVIDERS = tuple(_PROVIDERS)


def create_llm_provider(provider: str, **config: Any) -> LLMProvider:
    """Create the backend that serves completions.

    Args:
        provider: 'openai', 'deepseek' or 'anthropic' ('claude' is accepted
            as an alias), case-insensitive
        **config: Constructor arguments. ``api_key`` is always required;
            ``model`` and ``base_url`` override the vendor defaults
            (gpt-4o, deepseek-chat on https://api.deepseek.com,
            claude-sonnet-4-20250514)

    Returns:
        Provider instance

    Raises:
        ValueError: If the provider name is unknown
        TypeError: If ``api_key`` is missing

    Examples:
        >>> llm = create_llm_provider("deepseek", api_key="sk-...")
        >>> llm.name, llm.model
        ('deepseek', 'deepseek-chat')
    """
    key = provider.lower()
    key = _ALIASES.get(key, key)

    provider_cls = _PROVIDERS.get(key)
    if provider_cls is None:
        raise ValueError(
            f"Unsupported provider: {provider}. "
            f"Supported providers: {', '.join(SUPPORTED_PROVIDERS)}"
        )
    if "api_key" not in config:
        raise TypeError(f"{key} provider requires 'api_key' in config")
    return provider_cls(**config)
