"""Unit tests for transcript rendering."""
from hypothesis import given, settings
from hypothesis import strategies as st
from rich.text import Text

from termchat.chat import (
    ChatMessage,
    MessageLog,
    MessageStatus,
    Role,
    TranscriptRenderer,
    TranscriptStyle,
    render_transcript,
)
from termchat.chat.render import THINKING_FRAMES, render_message, thinking_frame


def plain(rendered: str) -> str:
    """Strip ANSI styling from rendered output."""
    return Text.from_ansi(rendered).plain


def conversation() -> MessageLog:
    log = MessageLog()
    log.append(ChatMessage(role=Role.USER, content="hi"))
    log.append(ChatMessage(role=Role.ASSISTANT, content="**Hello** world"))
    return log


class TestRenderTranscript:
    """Tests for the pure rendering function."""

    def test_labels_and_content(self):
        output = plain(render_transcript(conversation(), 60))

        assert "You:" in output
        assert "AI:" in output
        assert "hi" in output
        assert "Hello world" in output
        assert output.index("You:") < output.index("AI:")

    def test_markdown_markup_is_formatted(self):
        output = plain(render_transcript(conversation(), 60))
        assert "**" not in output

    def test_empty_log_renders_nothing(self):
        assert render_transcript([], 60) == ""

    def test_idempotent(self):
        log = conversation()
        first = render_transcript(log, 60)
        render_message.cache_clear()
        second = render_transcript(log, 60)

        assert first == second

    @settings(max_examples=25, deadline=None)
    @given(
        st.lists(st.text(alphabet=st.characters(min_codepoint=32, max_codepoint=126), max_size=80), max_size=4),
        st.integers(min_value=10, max_value=120),
    )
    def test_idempotent_for_any_log(self, contents, width):
        """Property: same log and width always give identical text."""
        messages = [
            ChatMessage(role=Role.USER if i % 2 == 0 else Role.ASSISTANT, content=c)
            for i, c in enumerate(contents)
        ]
        first = render_transcript(messages, width)
        render_message.cache_clear()
        assert render_transcript(messages, width) == first

    def test_empty_content_renders_label_only(self):
        message = ChatMessage(role=Role.ASSISTANT, content="")
        output = plain(render_transcript([message], 40))

        assert output.strip() == "AI:"

    def test_pending_placeholder_shows_indicator(self):
        message = ChatMessage(role=Role.ASSISTANT, content="", status=MessageStatus.PENDING)
        output = plain(render_transcript([message], 40, indicator="Thinking..."))

        assert "Thinking..." in output

    def test_indicator_ignored_for_finished_messages(self):
        output = plain(render_transcript(conversation(), 40, indicator="Thinking..."))
        assert "Thinking" not in output

    def test_failed_reply_is_marked(self):
        message = ChatMessage(role=Role.ASSISTANT, content="Hel", status=MessageStatus.FAILED)
        output = plain(render_transcript([message], 40))

        assert "failed" in output
        assert "Hel" in output

    def test_cancelled_reply_is_marked(self):
        message = ChatMessage(role=Role.ASSISTANT, content="Hel", status=MessageStatus.CANCELLED)
        assert "cancelled" in plain(render_transcript([message], 40))

    def test_body_wraps_at_width_minus_label(self):
        style = TranscriptStyle()
        message = ChatMessage(role=Role.ASSISTANT, content="word " * 40)
        output = plain(render_transcript([message], 40, style))

        body_lines = output.splitlines()[1:]
        assert body_lines
        assert all(len(line.rstrip()) <= 40 - style.label_width for line in body_lines)

    def test_custom_labels(self):
        style = TranscriptStyle(user_label="Me:", assistant_label="Bot:")
        output = plain(render_transcript(conversation(), 60, style))

        assert "Me:" in output
        assert "Bot:" in output


class TestThinkingFrame:
    def test_cycles_through_frames(self):
        frames = [thinking_frame(tick) for tick in range(len(THINKING_FRAMES) * 2)]
        assert frames[:len(THINKING_FRAMES)] == list(THINKING_FRAMES)
        assert frames[len(THINKING_FRAMES):] == list(THINKING_FRAMES)


class TestTranscriptRenderer:
    """Tests for the caching renderer."""

    def test_reuses_output_until_log_changes(self):
        log = conversation()
        renderer = TranscriptRenderer()

        first = renderer.render(log, 60)
        assert not renderer.is_stale(log, 60)
        assert renderer.render(log, 60) is first

        log.append(ChatMessage(role=Role.USER, content="again"))
        assert renderer.is_stale(log, 60)
        assert "again" in plain(renderer.render(log, 60))

    def test_width_change_invalidates(self):
        log = conversation()
        renderer = TranscriptRenderer()
        renderer.render(log, 60)

        assert renderer.is_stale(log, 80)

    def test_streaming_updates_are_visible(self):
        log = MessageLog()
        log.append(ChatMessage(role=Role.USER, content="hi"))
        log.open_slot()
        renderer = TranscriptRenderer()

        assert "Thinking" in plain(renderer.render(log, 60, "Thinking"))
        log.replace_last("Hello")
        assert "Hello" in plain(renderer.render(log, 60, None))

    def test_invalidate_forces_render(self):
        log = conversation()
        renderer = TranscriptRenderer()
        renderer.render(log, 60)
        renderer.invalidate()

        assert renderer.is_stale(log, 60)
