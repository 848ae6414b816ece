"""Unit tests for LLM providers and configuration."""
import pytest
from pydantic import ValidationError

from termchat.config import DEFAULT_SYSTEM_PROMPT, ChatConfig, load_config, normalize_provider
from termchat.errors import ConfigError
from termchat.llm import (
    AnthropicProvider,
    DeepSeekProvider,
    OpenAIProvider,
    RequestMessage,
    StreamingResponse,
    create_llm_provider,
)
from termchat.llm.providers.anthropic import DEFAULT_MAX_TOKENS, _split_system

ENV_VARS = (
    "TERMCHAT_PROVIDER",
    "TERMCHAT_STREAM",
    "TERMCHAT_TIMEOUT",
    "TERMCHAT_SYSTEM_PROMPT",
    "TERMCHAT_BASE_URL",
    "OPENAI_API_KEY",
    "OPENAI_CHAT_MODEL",
    "DEEPSEEK_API_KEY",
    "DEEPSEEK_MODEL",
    "ANTHROPIC_API_KEY",
    "ANTHROPIC_MODEL",
)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove termchat and provider variables from the environment."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestFactory:
    """Tests for create_llm_provider."""

    def test_unknown_provider(self):
        with pytest.raises(ConfigError, match="Unsupported provider"):
            create_llm_provider("gemini", api_key="key")

    def test_missing_api_key(self):
        with pytest.raises(ConfigError, match="api_key"):
            create_llm_provider("openai")

    def test_openai(self):
        provider = create_llm_provider("openai", api_key="sk-test", model="gpt-4o-mini")

        assert isinstance(provider, OpenAIProvider)
        assert provider.model == "gpt-4o-mini"

    def test_deepseek_defaults(self):
        provider = create_llm_provider("DeepSeek", api_key="sk-test")

        assert isinstance(provider, DeepSeekProvider)
        assert provider.model == "deepseek-chat"
        assert "api.deepseek.com" in str(provider._client.base_url)

    @pytest.mark.parametrize("name", ["anthropic", "claude"])
    def test_anthropic(self, name):
        provider = create_llm_provider(name, api_key="sk-ant-test")

        assert isinstance(provider, AnthropicProvider)


class TestAnthropicRequest:
    def test_system_message_is_split_out(self):
        system, messages = _split_system([
            RequestMessage(role="system", content="Be brief."),
            RequestMessage(role="user", content="hi"),
            RequestMessage(role="user", content="Hello"),
        ])

        assert system == "Be brief."
        assert messages == [
            {"role": "user", "content": "hi"},
            {"role": "user", "content": "Hello"},
        ]

    def test_request_params(self):
        provider = AnthropicProvider(api_key="sk-ant-test", model="claude-test")
        params = provider._request_params(
            [RequestMessage(role="system", content="Be brief."), RequestMessage(role="user", content="hi")],
            model=None,
            temperature=0.5,
            max_tokens=None,
        )

        assert params["model"] == "claude-test"
        assert params["system"] == "Be brief."
        assert params["max_tokens"] == DEFAULT_MAX_TOKENS
        assert params["messages"] == [{"role": "user", "content": "hi"}]


class TestModels:
    def test_request_message_is_frozen(self):
        message = RequestMessage(role="user", content="hi")

        with pytest.raises(ValidationError):
            message.content = "changed"

    @pytest.mark.asyncio
    async def test_streaming_response_iterates_and_keeps_usage(self):
        async def chunks():
            yield "a"
            yield "b"

        stream = StreamingResponse(chunks())
        collected = [chunk async for chunk in stream]
        stream.set_usage({"total_tokens": 2})

        assert collected == ["a", "b"]
        assert stream.usage == {"total_tokens": 2}


class TestConfig:
    """Tests for load_config and ChatConfig."""

    def test_defaults(self, clean_env):
        config = load_config()

        assert config.provider == "openai"
        assert config.model == "gpt-3.5-turbo"
        assert config.stream is True
        assert config.timeout == 60.0
        assert config.system_prompt == DEFAULT_SYSTEM_PROMPT
        assert config.api_key is None

    def test_reads_environment(self, clean_env):
        clean_env.setenv("TERMCHAT_PROVIDER", "deepseek")
        clean_env.setenv("DEEPSEEK_API_KEY", "sk-deep")
        clean_env.setenv("TERMCHAT_STREAM", "false")
        clean_env.setenv("TERMCHAT_TIMEOUT", "15")

        config = load_config()

        assert config.provider == "deepseek"
        assert config.api_key == "sk-deep"
        assert config.model == "deepseek-chat"
        assert config.stream is False
        assert config.timeout == 15.0

    def test_overrides_take_precedence(self, clean_env):
        clean_env.setenv("OPENAI_CHAT_MODEL", "gpt-4o")

        config = load_config(model="gpt-4o-mini", stream=None)

        assert config.model == "gpt-4o-mini"
        assert config.stream is True

    def test_claude_alias(self, clean_env):
        clean_env.setenv("ANTHROPIC_API_KEY", "sk-ant")

        config = load_config(provider="claude")

        assert config.provider == "anthropic"
        assert config.api_key == "sk-ant"

    def test_unknown_provider(self, clean_env):
        with pytest.raises(ConfigError):
            load_config(provider="gemini")

    def test_require_api_key(self, clean_env):
        config = load_config()

        with pytest.raises(ConfigError, match="OPENAI_API_KEY"):
            config.require_api_key()

    def test_provider_kwargs(self):
        config = ChatConfig(api_key="sk-test", timeout=30, base_url="http://localhost:8080/v1")

        assert config.provider_kwargs() == {
            "api_key": "sk-test",
            "model": "gpt-3.5-turbo",
            "timeout": 30.0,
            "base_url": "http://localhost:8080/v1",
        }

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            ChatConfig(timeout=0)

    @pytest.mark.parametrize("name, expected", [("OpenAI", "openai"), ("claude", "anthropic"), ("deepseek", "deepseek")])
    def test_provider_name_is_normalized(self, name, expected):
        assert normalize_provider(name) == expected
        assert ChatConfig(provider=name).provider == expected

    def test_unknown_provider_name(self):
        with pytest.raises(ConfigError):
            normalize_provider("gemini")
        with pytest.raises(ValidationError):
            ChatConfig(provider="gemini")
