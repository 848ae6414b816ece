from collections.abc import AsyncIterator
from typing import Any

from openai import AsyncOpenAI

from ...errors import MalformedResponse
from ..base import LLMProvider
from ..models import LLMResponse, RequestMessage, StreamingResponse


def _to_openai_messages(messages: list[RequestMessage]) -> list[dict[str, str]]:
    return [{"role": msg.role, "content": msg.content} for msg in messages]


class OpenAIProvider(LLMProvider):
    """OpenAI Chat Completions provider.

    Hidden design decisions:
    - AsyncOpenAI client initialization and request timeout
    - Message format conversion
    - Extraction of text deltas from streamed chunks
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-3.5-turbo",
        base_url: str | None = None,
        organization: str | None = None,
        timeout: float = 60.0,
        **client_kwargs: Any
    ):
        """Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key
            model: Default model to use
            base_url: Optional custom API base URL
            organization: Optional organization ID
            timeout: Request timeout in seconds
            **client_kwargs: Additional kwargs for AsyncOpenAI client
        """
        self._model = model
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            organization=organization,
            timeout=timeout,
            **client_kwargs
        )
        self._current_stream_response: StreamingResponse | None = None

    @property
    def model(self) -> str:
        return self._model

    async def chat_completion(
        self,
        messages: list[RequestMessage],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> LLMResponse:
        """Generate a whole-shot completion with the Chat Completions API.

        Raises:
            MalformedResponse: If the response carries no choices
        """
        request_params: dict[str, Any] = {
            "model": model or self._model,
            "messages": _to_openai_messages(messages),
            "temperature": temperature,
            **kwargs
        }
        if max_tokens is not None:
            request_params["max_tokens"] = max_tokens

        completion = await self._client.chat.completions.create(**request_params)

        if not completion.choices:
            raise MalformedResponse("completion returned no choices")

        usage = None
        if completion.usage:
            usage = {
                "prompt_tokens": completion.usage.prompt_tokens,
                "completion_tokens": completion.usage.completion_tokens,
                "total_tokens": completion.usage.total_tokens
            }

        return LLMResponse(
            content=completion.choices[0].message.content or "",
            model=completion.model,
            usage=usage
        )

    async def chat_completion_stream(
        self,
        messages: list[RequestMessage],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> StreamingResponse:
        """Generate a streaming completion with the Chat Completions API.

        The request is only sent once the returned stream is iterated.
        """
        response = StreamingResponse(self._chat_stream_generator(
            model or self._model,
            _to_openai_messages(messages),
            temperature,
            max_tokens,
            **kwargs,
        ))
        self._current_stream_response = response
        return response

    async def _chat_stream_generator(
        self,
        model: str,
        messages: list[dict[str, str]],
        temperature: float,
        max_tokens: int | None,
        **kwargs: Any,
    ) -> AsyncIterator[str]:
        request_params: dict[str, Any] = {
            "model": model,
            "messages": messages,
            "temperature": temperature,
            "stream": True,
            "stream_options": {"include_usage": True},
            **kwargs,
        }
        if max_tokens is not None:
            request_params["max_tokens"] = max_tokens

        stream = await self._client.chat.completions.create(**request_params)

        async for chunk in stream:
            # The final chunk carries usage and no choices
            if chunk.usage is not None and self._current_stream_response is not None:
                self._current_stream_response.set_usage({
                    "prompt_tokens": chunk.usage.prompt_tokens,
                    "completion_tokens": chunk.usage.completion_tokens,
                    "total_tokens": chunk.usage.total_tokens,
                })
            if chunk.choices and chunk.choices[0].delta.content:
                yield chunk.choices[0].delta.content

    async def close(self) -> None:
        await self._client.close()


class DeepSeekProvider(OpenAIProvider):
    """DeepSeek provider, served through the OpenAI-compatible API."""

    def __init__(
        self,
        api_key: str,
        model: str = "deepseek-chat",
        base_url: str = "https://api.deepseek.com",
        timeout: float = 60.0,
        **client_kwargs: Any
    ):
        super().__init__(
            api_key=api_key,
            model=model,
            base_url=base_url,
            timeout=timeout,
            **client_kwargs
        )
