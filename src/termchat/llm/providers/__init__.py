from .anthropic import AnthropicProvider
from .openai import DeepSeekProvider, OpenAIProvider

__all__ = ["AnthropicProvider", "DeepSeekProvider", "OpenAIProvider"]
