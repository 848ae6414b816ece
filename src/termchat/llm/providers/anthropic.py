"""Anthropic Claude provider.

Uses the official Anthropic Python SDK for async chat completions.
Reference: https://github.com/anthropics/anthropic-sdk-python
"""

from collections.abc import AsyncIterator
from typing import Any

from anthropic import AsyncAnthropic

from ..base import LLMProvider
from ..models import LLMResponse, RequestMessage, StreamingResponse

# Anthropic requires max_tokens on every request
DEFAULT_MAX_TOKENS = 4096


def _split_system(messages: list[RequestMessage]) -> tuple[str | None, list[dict[str, str]]]:
    """Pull the system preamble out of the message list.

    Anthropic takes the system prompt as a separate request field.
    """
    system_message = None
    anthropic_messages = []
    for msg in messages:
        if msg.role == "system":
            system_message = msg.content
        else:
            anthropic_messages.append({"role": msg.role, "content": msg.content})
    return system_message, anthropic_messages


class AnthropicProvider(LLMProvider):
    """Anthropic Claude provider.

    Hidden design decisions:
    - AsyncAnthropic client initialization and request timeout
    - System prompt handling
    - Extraction of text deltas from stream events
    """

    def __init__(
        self,
        api_key: str,
        model: str = "claude-sonnet-4-20250514",
        base_url: str | None = None,
        timeout: float = 60.0,
        **client_kwargs: Any
    ):
        self._model = model
        self._client = AsyncAnthropic(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            **client_kwargs
        )
        self._current_stream_response: StreamingResponse | None = None

    @property
    def model(self) -> str:
        return self._model

    def _request_params(
        self,
        messages: list[RequestMessage],
        model: str | None,
        temperature: float,
        max_tokens: int | None,
        **kwargs: Any
    ) -> dict[str, Any]:
        system_message, anthropic_messages = _split_system(messages)
        request_params: dict[str, Any] = {
            "model": model or self._model,
            "messages": anthropic_messages,
            "temperature": temperature,
            "max_tokens": max_tokens or DEFAULT_MAX_TOKENS,
            **kwargs
        }
        if system_message:
            request_params["system"] = system_message
        return request_params

    async def chat_completion(
        self,
        messages: list[RequestMessage],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> LLMResponse:
        """Generate a whole-shot completion with the Messages API."""
        request_params = self._request_params(messages, model, temperature, max_tokens, **kwargs)
        response = await self._client.messages.create(**request_params)

        usage = None
        if response.usage:
            usage = {
                "prompt_tokens": response.usage.input_tokens,
                "completion_tokens": response.usage.output_tokens,
                "total_tokens": response.usage.input_tokens + response.usage.output_tokens
            }

        content = "".join(
            block.text for block in response.content if hasattr(block, "text")
        )

        return LLMResponse(content=content, model=response.model, usage=usage)

    async def chat_completion_stream(
        self,
        messages: list[RequestMessage],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> StreamingResponse:
        """Generate a streaming completion with the Messages API."""
        request_params = self._request_params(messages, model, temperature, max_tokens, **kwargs)
        response = StreamingResponse(self._stream_generator(request_params))
        self._current_stream_response = response
        return response

    async def _stream_generator(
        self,
        request_params: dict[str, Any],
    ) -> AsyncIterator[str]:
        input_tokens = 0
        output_tokens = 0

        async with self._client.messages.stream(**request_params) as stream:
            async for event in stream:
                event_type = getattr(event, "type", None)
                if event_type == "message_start":
                    input_tokens = event.message.usage.input_tokens
                elif event_type == "message_delta":
                    # output_tokens is cumulative
                    output_tokens = event.usage.output_tokens
                elif event_type == "content_block_delta" and hasattr(event.delta, "text"):
                    yield event.delta.text

        if self._current_stream_response is not None:
            self._current_stream_response.set_usage({
                "prompt_tokens": input_tokens,
                "completion_tokens": output_tokens,
                "total_tokens": input_tokens + output_tokens,
            })

    async def close(self) -> None:
        await self._client.close()
