"""Pytest configuration and shared fixtures."""
import asyncio
from collections.abc import AsyncIterator
from typing import Any

import pytest

from termchat.chat import ChatSession, MessageLog, ResponseChannel
from termchat.chat.channel import ChannelEvent
from termchat.llm import LLMProvider, LLMResponse, RequestMessage, StreamingResponse


class FakeProvider(LLMProvider):
    """In-memory LLM provider returning canned replies."""

    def __init__(
        self,
        chunks: list[Any] | None = None,
        error: Exception | None = None,
        fail_after: int = 0,
    ) -> None:
        self.chunks = chunks if chunks is not None else ["Hel", "lo", " world"]
        self.error = error
        self.fail_after = fail_after
        self.calls: list[list[RequestMessage]] = []
        self.closed = False

    @property
    def model(self) -> str:
        return "fake-model"

    async def chat_completion(self, messages, model=None, temperature=0.7, max_tokens=None, **kwargs):
        self.calls.append(list(messages))
        if self.error is not None:
            raise self.error
        return LLMResponse(content="".join(self.chunks), model=self.model)

    async def chat_completion_stream(self, messages, model=None, temperature=0.7, max_tokens=None, **kwargs):
        self.calls.append(list(messages))
        response = StreamingResponse(self._generate())
        self._response = response
        return response

    async def _generate(self) -> AsyncIterator[Any]:
        for index, chunk in enumerate(self.chunks):
            if self.error is not None and index == self.fail_after:
                raise self.error
            yield chunk
        if self.error is not None and self.fail_after >= len(self.chunks):
            raise self.error
        self._response.set_usage({"prompt_tokens": 1, "completion_tokens": len(self.chunks)})

    async def close(self) -> None:
        self.closed = True


class ScriptedChannel(ResponseChannel):
    """Response channel replaying a fixed list of events.

    If a gate is given, the channel waits for it before the terminal event.
    """

    def __init__(self, events: list[ChannelEvent], gate: asyncio.Event | None = None) -> None:
        super().__init__()
        self.events = events
        self.gate = gate
        self.requests: list[tuple[list[RequestMessage], str]] = []

    async def send(self, history, new_message):
        self.requests.append((list(history), new_message))
        for event in self.events[:-1]:
            yield event
        if self.gate is not None:
            await self.gate.wait()
        if self.events:
            yield self.events[-1]

    async def _produce(self, messages):
        raise NotImplementedError
        yield  # pragma: no cover


@pytest.fixture
def message_log():
    """Return an empty message log."""
    return MessageLog()


@pytest.fixture
def session():
    """Return an idle session with a short preamble."""
    return ChatSession(preamble="Be brief.")


@pytest.fixture
def fake_provider():
    """Return a fake provider streaming 'Hello world' in three chunks."""
    return FakeProvider()


@pytest.fixture(autouse=True)
def _no_dotenv(monkeypatch):
    """Keep a developer's .env file out of configuration tests."""
    monkeypatch.setattr("termchat.config.load_dotenv", lambda *args, **kwargs: False)


@pytest.fixture
def provider_factory():
    """Return the FakeProvider class for tests needing custom replies."""
    return FakeProvider


@pytest.fixture
def channel_factory():
    """Return the ScriptedChannel class."""
    return ScriptedChannel
