"""Unit tests for the message log."""
import pytest
from hypothesis import given
from hypothesis import strategies as st

from termchat.chat import ChatMessage, MessageLog, MessageStatus, Role
from termchat.errors import SlotClosedError


class TestAppend:
    """Tests for appending messages."""

    def test_append_keeps_order(self, message_log):
        message_log.append(ChatMessage(role=Role.USER, content="first"))
        message_log.append(ChatMessage(role=Role.ASSISTANT, content="second"))

        assert [m.content for m in message_log] == ["first", "second"]
        assert len(message_log) == 2
        assert message_log.last.content == "second"

    def test_append_rejects_missing_content(self, message_log):
        with pytest.raises(TypeError):
            message_log.append(ChatMessage(role=Role.USER, content=None))  # type: ignore

    def test_append_rejects_plain_string_role(self, message_log):
        with pytest.raises(TypeError):
            message_log.append(ChatMessage(role="user", content="hi"))  # type: ignore

    def test_append_refused_while_slot_open(self, message_log):
        message_log.open_slot()
        with pytest.raises(SlotClosedError):
            message_log.append(ChatMessage(role=Role.USER, content="again"))

    def test_every_mutation_bumps_revision(self, message_log):
        revisions = [message_log.revision]
        message_log.append(ChatMessage(role=Role.USER, content="hi"))
        revisions.append(message_log.revision)
        message_log.open_slot()
        revisions.append(message_log.revision)
        message_log.replace_last("Hel")
        revisions.append(message_log.revision)
        message_log.close_slot()
        revisions.append(message_log.revision)

        assert revisions == sorted(set(revisions))

    def test_messages_is_read_only_view(self, message_log):
        message_log.append(ChatMessage(role=Role.USER, content="hi"))
        assert isinstance(message_log.messages, tuple)


class TestOpenSlot:
    """Tests for the in-progress assistant slot."""

    def test_open_slot_appends_pending_placeholder(self, message_log):
        index = message_log.open_slot()

        assert index == 0
        assert message_log.has_open_slot
        assert message_log.last.role == Role.ASSISTANT
        assert message_log.last.content == ""
        assert message_log.last.is_pending

    def test_replace_last_without_slot_fails(self, message_log):
        message_log.append(ChatMessage(role=Role.ASSISTANT, content="done"))
        with pytest.raises(SlotClosedError):
            message_log.replace_last("changed")

    def test_replace_last_writes_whole_content(self, message_log):
        message_log.open_slot()
        message_log.replace_last("Hel")
        message_log.replace_last("Hello")

        assert message_log.last.content == "Hello"

    def test_append_to_last_extends_content(self, message_log):
        message_log.open_slot()
        message_log.append_to_last("Hel")
        message_log.append_to_last("lo")

        assert message_log.last.content == "Hello"

    @given(st.lists(st.text(), max_size=20))
    def test_accumulated_writes_equal_concatenation(self, chunks):
        """Property: content after N writes equals the chunks joined in order."""
        log = MessageLog()
        log.open_slot()
        accumulated = ""
        for chunk in chunks:
            accumulated += chunk
            log.replace_last(accumulated)

        assert log.last.content == "".join(chunks)

    def test_close_slot_sets_status(self, message_log):
        message_log.open_slot()
        message_log.replace_last("partial")
        closed = message_log.close_slot(MessageStatus.FAILED)

        assert closed.status == MessageStatus.FAILED
        assert closed.content == "partial"
        assert not message_log.has_open_slot
        with pytest.raises(SlotClosedError):
            message_log.replace_last("more")

    def test_discard_slot_removes_placeholder(self, message_log):
        message_log.append(ChatMessage(role=Role.USER, content="hi"))
        message_log.open_slot()
        message_log.discard_slot()

        assert len(message_log) == 1
        assert message_log.last.role == Role.USER

    def test_earlier_entries_are_untouched(self, message_log):
        first = ChatMessage(role=Role.USER, content="hi")
        message_log.append(first)
        message_log.open_slot()
        message_log.replace_last("Hello")

        assert message_log[0] is first


class TestSnapshotForRequest:
    """Tests for building the outgoing request history."""

    def test_preamble_comes_first(self, message_log):
        snapshot = message_log.snapshot_for_request("Be brief.")

        assert len(snapshot) == 1
        assert snapshot[0].role == "system"
        assert snapshot[0].content == "Be brief."

    def test_roles_are_flattened_to_user(self, message_log):
        message_log.append(ChatMessage(role=Role.USER, content="hi"))
        message_log.append(ChatMessage(role=Role.ASSISTANT, content="Hello"))

        snapshot = message_log.snapshot_for_request("Be brief.")

        assert [(m.role, m.content) for m in snapshot] == [
            ("system", "Be brief."),
            ("user", "hi"),
            ("user", "Hello"),
        ]

    def test_unfinished_replies_are_left_out(self, message_log):
        message_log.append(ChatMessage(role=Role.USER, content="one"))
        message_log.open_slot()
        message_log.replace_last("partial")
        message_log.close_slot(MessageStatus.FAILED)
        message_log.append(ChatMessage(role=Role.USER, content="two"))
        message_log.open_slot()

        contents = [m.content for m in message_log.snapshot_for_request("p")]

        assert contents == ["p", "one", "two"]

    def test_empty_entries_are_left_out(self, message_log):
        message_log.append(ChatMessage(role=Role.USER, content="hi"))
        message_log.open_slot()
        message_log.close_slot(MessageStatus.COMPLETE)

        snapshot = message_log.snapshot_for_request("p")

        assert [(m.role, m.content) for m in snapshot] == [("system", "p"), ("user", "hi")]
