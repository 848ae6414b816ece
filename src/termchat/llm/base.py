from abc import ABC, abstractmethod
from typing import Any

from .models import LLMResponse, RequestMessage, StreamingResponse


class LLMProvider(ABC):
    """Abstract base class for chat-completion providers.

    Hides which remote service answers the chat:
    - API client setup, authentication and request timeout
    - Request/response format conversion

    Supports the async context manager protocol:
        async with provider:
            response = await provider.chat_completion(messages)
    """

    @property
    @abstractmethod
    def model(self) -> str:
        """Default model name."""

    @abstractmethod
    async def chat_completion(
        self,
        messages: list[RequestMessage],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> LLMResponse:
        """Generate a whole-shot chat completion.

        Args:
            messages: Request messages, system preamble first
            model: Model to use (None uses provider's default)
            temperature: Sampling temperature (0.0 to 2.0)
            max_tokens: Maximum tokens to generate
            **kwargs: Provider-specific parameters

        Returns:
            LLMResponse containing the full generated content
        """

    @abstractmethod
    async def chat_completion_stream(
        self,
        messages: list[RequestMessage],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> StreamingResponse:
        """Generate a streaming chat completion.

        Returns:
            StreamingResponse yielding text chunks in arrival order
        """

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections."""

    async def __aenter__(self) -> "LLMProvider":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Close the provider, ignoring httpx's "Event loop is closed" race.

        See https://github.com/encode/httpx/issues/914
        """
        try:
            await self.close()
        except RuntimeError as e:
            if "Event loop is closed" not in str(e):
                raise
