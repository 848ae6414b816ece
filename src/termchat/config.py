"""Runtime configuration.

Hides where settings come from (environment, .env file, CLI overrides)
from the rest of the application.
"""

import os
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import ConfigError

# Taken from chatbot-ui
# https://github.com/mckaywrigley/chatbot-ui/blob/main/utils/app/const.ts
DEFAULT_SYSTEM_PROMPT = (
    "You are ChatGPT, a large language model trained by OpenAI. "
    "Follow the user's instructions carefully. Respond using markdown."
)

SUPPORTED_PROVIDERS = ("openai", "deepseek", "anthropic")

# Environment variable holding the API key for each provider
API_KEY_ENV = {
    "openai": "OPENAI_API_KEY",
    "deepseek": "DEEPSEEK_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
}

DEFAULT_MODELS = {
    "openai": "gpt-3.5-turbo",
    "deepseek": "deepseek-chat",
    "anthropic": "claude-sonnet-4-20250514",
}

# Environment variable overriding the default model for each provider
MODEL_ENV = {
    "openai": "OPENAI_CHAT_MODEL",
    "deepseek": "DEEPSEEK_MODEL",
    "anthropic": "ANTHROPIC_MODEL",
}


def normalize_provider(name: str) -> str:
    """Canonical provider name ('claude' is an alias of 'anthropic').

    Raises:
        ConfigError: If the provider is not supported
    """
    provider = name.lower()
    if provider == "claude":
        provider = "anthropic"
    if provider not in SUPPORTED_PROVIDERS:
        raise ConfigError(
            f"Unsupported provider: {provider}. "
            f"Supported providers: {', '.join(SUPPORTED_PROVIDERS)}"
        )
    return provider


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class ChatConfig(BaseModel):
    """Settings for one chat session."""

    model_config = ConfigDict(frozen=True)

    provider: str = Field(default="openai", description="LLM provider name")
    api_key: str | None = Field(default=None, description="API key for the provider")
    model: str = Field(default=DEFAULT_MODELS["openai"], description="Chat model name")
    stream: bool = Field(default=True, description="Stream tokens as they arrive")
    timeout: float = Field(default=60.0, gt=0, description="Request timeout in seconds")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    system_prompt: str = Field(default=DEFAULT_SYSTEM_PROMPT)
    base_url: str | None = Field(default=None, description="Custom API base URL")

    @field_validator("provider")
    @classmethod
    def _known_provider(cls, value: str) -> str:
        try:
            return normalize_provider(value)
        except ConfigError as e:
            raise ValueError(str(e)) from e

    def require_api_key(self) -> str:
        """Return the API key or raise ConfigError if it is not set."""
        if not self.api_key:
            raise ConfigError(f"{API_KEY_ENV[self.provider]} not set in environment")
        return self.api_key

    def provider_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for create_llm_provider()."""
        kwargs: dict[str, Any] = {
            "api_key": self.require_api_key(),
            "model": self.model,
            "timeout": self.timeout,
        }
        if self.base_url:
            kwargs["base_url"] = self.base_url
        return kwargs


def load_config(**overrides: Any) -> ChatConfig:
    """Build a ChatConfig from the environment.

    Loads a .env file first (if present). Keyword arguments whose value is
    not None take precedence over environment variables.

    Environment variables:
        TERMCHAT_PROVIDER: openai, deepseek or anthropic (default: openai)
        OPENAI_API_KEY / DEEPSEEK_API_KEY / ANTHROPIC_API_KEY: credentials
        OPENAI_CHAT_MODEL / DEEPSEEK_MODEL / ANTHROPIC_MODEL: model names
        TERMCHAT_STREAM: stream responses (default: true)
        TERMCHAT_TIMEOUT: request timeout in seconds (default: 60)
        TERMCHAT_SYSTEM_PROMPT: system preamble sent with every request
        TERMCHAT_BASE_URL: custom API base URL
    """
    load_dotenv()
    overrides = {key: value for key, value in overrides.items() if value is not None}

    provider = normalize_provider(str(overrides.get("provider") or os.getenv("TERMCHAT_PROVIDER", "openai")))
    overrides["provider"] = provider

    values: dict[str, Any] = {
        "provider": provider,
        "api_key": os.getenv(API_KEY_ENV[provider]),
        "model": os.getenv(MODEL_ENV[provider], DEFAULT_MODELS[provider]),
        "stream": _env_flag("TERMCHAT_STREAM", True),
        "timeout": float(os.getenv("TERMCHAT_TIMEOUT", "60")),
        "system_prompt": os.getenv("TERMCHAT_SYSTEM_PROMPT", DEFAULT_SYSTEM_PROMPT),
        "base_url": os.getenv("TERMCHAT_BASE_URL") or None,
    }
    values.update(overrides)
    return ChatConfig(**values)
