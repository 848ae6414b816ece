from .base import LLMProvider
from .factory import create_llm_provider
from .models import LLMResponse, RequestMessage, StreamingResponse
from .providers import AnthropicProvider, DeepSeekProvider, OpenAIProvider

__all__ = [
    "LLMProvider",
    "create_llm_provider",
    "LLMResponse",
    "RequestMessage",
    "StreamingResponse",
    "AnthropicProvider",
    "DeepSeekProvider",
    "OpenAIProvider",
]
