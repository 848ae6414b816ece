from typing import Any

from ..errors import ConfigError
from .base import LLMProvider
from .providers import AnthropicProvider, DeepSeekProvider, OpenAIProvider


def create_llm_provider(provider: str, **config: Any) -> LLMProvider:
    """Create an LLM provider instance.

    Args:
        provider: Provider type ('openai', 'deepseek', 'anthropic' or 'claude')
        **config: Provider-specific configuration
            - api_key: str (required)
            - model: str (provider default if omitted)
            - base_url: str | None
            - timeout: float, request timeout in seconds

    Returns:
        Initialized LLM provider instance

    Raises:
        ConfigError: If the provider is unknown or api_key is missing

    Examples:
        >>> provider = create_llm_provider("openai", api_key="sk-...")
        >>> provider = create_llm_provider(
        ...     "anthropic",
        ...     api_key="sk-ant-...",
        ...     model="claude-sonnet-4-20250514",
        ... )
    """
    provider_lower = provider.lower()

    providers: dict[str, type[LLMProvider]] = {
        "openai": OpenAIProvider,
        "deepseek": DeepSeekProvider,
        "anthropic": AnthropicProvider,
        "claude": AnthropicProvider,
    }

    provider_cls = providers.get(provider_lower)
    if provider_cls is None:
        raise ConfigError(
            f"Unsupported provider: {provider}. "
            f"Supported providers: 'openai', 'deepseek', 'anthropic'"
        )

    if not config.get("api_key"):
        raise ConfigError(f"{provider_cls.__name__} requires 'api_key' in config")

    return provider_cls(**config)
