"""Response channels.

Hides how a reply is obtained from the completion service. Whatever the
provider does, a channel yields zero or more TextIncrement events followed by
exactly one terminal event (Done, Complete or Failed). Provider errors never
escape a channel: they become a Failed event.
"""

import asyncio
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Callable
from dataclasses import dataclass

import anthropic
import openai

from ..errors import MalformedResponse, RequestFailed
from ..llm.base import LLMProvider
from ..llm.models import RequestMessage

DebugCallback = Callable[[str, str, str], None]


@dataclass(frozen=True)
class TextIncrement:
    """A partial chunk of assistant text."""

    text: str


@dataclass(frozen=True)
class Done:
    """The stream finished without error."""


@dataclass(frozen=True)
class Complete:
    """A whole-shot reply, delivered in one piece."""

    text: str


@dataclass(frozen=True)
class Failed:
    """The request failed; reason is shown to the user."""

    reason: str


ChannelEvent = TextIncrement | Done | Complete | Failed

_TIMEOUT_ERRORS = (
    TimeoutError,
    asyncio.TimeoutError,
    openai.APITimeoutError,
    anthropic.APITimeoutError,
)


def describe_failure(error: BaseException) -> str:
    """Short, user-facing reason for a failed request."""
    if isinstance(error, _TIMEOUT_ERRORS):
        return "timeout"
    if isinstance(error, RequestFailed):
        return error.reason
    return str(error) or type(error).__name__


class ResponseChannel(ABC):
    """Abstract source of assistant replies."""

    def __init__(self) -> None:
        self._debug_callback: DebugCallback | None = None

    def set_debug_callback(self, callback: DebugCallback | None) -> None:
        """Set the callback receiving (level, component, message) log lines."""
        self._debug_callback = callback

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback is not None:
            self._debug_callback(level, "Channel", message)

    async def send(
        self,
        history: list[RequestMessage],
        new_message: str,
    ) -> AsyncIterator[ChannelEvent]:
        """Request a reply to new_message given the conversation history.

        Args:
            history: Request messages built from the log, preamble first
            new_message: Text the user just submitted

        Yields:
            TextIncrement events, then one Done, Complete or Failed
        """
        messages = [*history, RequestMessage(role="user", content=new_message)]
        self._debug("debug", f"Sending {len(messages)} message(s)")
        try:
            async for event in self._produce(messages):
                yield event
        except asyncio.CancelledError:
            self._debug("info", "Request cancelled")
            raise
        except Exception as e:
            reason = describe_failure(e)
            self._debug("error", f"Request failed: {reason}")
            yield Failed(reason)

    @abstractmethod
    def _produce(self, messages: list[RequestMessage]) -> AsyncIterator[ChannelEvent]:
        """Yield the events for one request. May raise."""


class StreamingChannel(ResponseChannel):
    """Streams the reply token by token from an LLM provider."""

    def __init__(self, llm: LLMProvider, temperature: float = 0.7) -> None:
        super().__init__()
        self._llm = llm
        self._temperature = temperature

    async def _produce(self, messages: list[RequestMessage]) -> AsyncIterator[ChannelEvent]:
        stream = await self._llm.chat_completion_stream(messages, temperature=self._temperature)
        chunks = 0
        async for chunk in stream:
            if not isinstance(chunk, str):
                raise MalformedResponse(f"unexpected stream chunk: {type(chunk).__name__}")
            chunks += 1
            yield TextIncrement(chunk)
        self._debug("debug", f"Stream finished after {chunks} chunk(s), usage: {stream.usage}")
        yield Done()


class BlockingChannel(ResponseChannel):
    """Fetches the whole reply with a single request."""

    def __init__(self, llm: LLMProvider, temperature: float = 0.7) -> None:
        super().__init__()
        self._llm = llm
        self._temperature = temperature

    async def _produce(self, messages: list[RequestMessage]) -> AsyncIterator[ChannelEvent]:
        response = await self._llm.chat_completion(messages, temperature=self._temperature)
        self._debug("debug", f"Reply from {response.model}, usage: {response.usage}")
        yield Complete(response.content)


def create_channel(llm: LLMProvider, stream: bool = True, temperature: float = 0.7) -> ResponseChannel:
    """Pick the channel implementation for the given mode."""
    if stream:
        return StreamingChannel(llm, temperature=temperature)
    return BlockingChannel(llm, temperature=temperature)
