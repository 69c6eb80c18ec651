"""Unit tests for the send/reply simulator and the chat client."""
import asyncio
import random

import pytest
from hypothesis import given
from hypothesis import strategies as st

from conftest import FakeHistoryProvider, FakeReplySource
from nightchat.chat import (
    Conversation,
    ConversationSessionController,
    MessageStatus,
    ReplySimulator,
    SessionEvent,
    User,
    create_chat_client,
)


class TestSendMessage:
    """Tests for sending messages."""

    @pytest.mark.asyncio
    async def test_send_appends_optimistically(self, client, session_user, conversations):
        """Test that the outgoing message shows up before any reply."""
        await client.login(session_user, conversations)
        before = len(client.messages)

        sent = client.send("  hello there  ")

        assert sent is not None
        assert sent.text == "hello there"
        assert sent.status == MessageStatus.SENT
        assert sent.sender_id == session_user.id
        assert sent.receiver_id == "100"
        assert len(client.messages) == before + 1
        assert client.messages[-1] == sent
        assert client.active_conversation.last_message == sent
        await client.logout()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    async def test_blank_text_is_noop(self, client, session_user, conversations, text):
        """Test that whitespace-only messages are ignored."""
        await client.login(session_user, conversations)
        before = client.messages

        assert client.send(text) is None
        assert client.messages == before
        assert client.simulator.pending_count() == 0

    @pytest.mark.asyncio
    async def test_send_without_active_conversation_is_noop(
        self, client, session_user, conversations
    ):
        await client.login(session_user, conversations)
        client.new_chat()

        assert client.send("anyone?") is None
        assert client.messages == ()
        assert client.simulator.pending_count() == 0

    @pytest.mark.asyncio
    async def test_reply_delivered(self, client, session_user, conversations):
        """Test that each send is followed by one reply from the contact."""
        await client.login(session_user, conversations)
        before = len(client.messages)

        client.send("ping")
        assert client.is_typing
        await client.simulator.wait_idle()

        reply = client.messages[-1]
        assert len(client.messages) == before + 2
        assert reply.sender_id == "100"
        assert reply.receiver_id == session_user.id
        assert reply.status == MessageStatus.DELIVERED
        assert reply.text == "reply 1 from Alex Adler"
        assert client.active_conversation.last_message == reply
        assert not client.is_typing

    @pytest.mark.asyncio
    async def test_n_sends_n_replies(self, client, session_user, conversations):
        """Test that N rapid sends produce N sent and N delivered messages."""
        await client.login(session_user, conversations)
        history = len(client.messages)

        for i in range(5):
            client.send(f"message {i}")
        assert client.simulator.pending_count("100") == 5
        await client.simulator.wait_idle()

        new = client.messages[history:]
        assert len(new) == 10
        assert sum(m.status == MessageStatus.SENT for m in new) == 5
        assert sum(m.status == MessageStatus.DELIVERED for m in new) == 5

    @pytest.mark.asyncio
    async def test_message_ids_increase(self, client, session_user, conversations):
        await client.login(session_user, conversations)

        client.send("a")
        client.send("b")
        await client.simulator.wait_idle()

        ids = [m.sort_key for m in client.messages]
        assert ids == sorted(ids)
        assert len(set(ids)) == len(ids)


class TestSwitchWhilePending:
    """Tests for replies that arrive after the user switched conversations."""

    @pytest.mark.asyncio
    async def test_reply_stays_in_originating_conversation(
        self, client, session_user, conversations
    ):
        """Test that a late reply never lands in another conversation's list."""
        await client.login(session_user, conversations)
        client.send("are you there?")

        await client.select("300")
        assert not client.is_typing
        await client.simulator.wait_idle()

        assert all(m.involves(session_user.id, "300") for m in client.messages)
        origin = client.controller.registry.get("100")
        assert origin.last_message.sender_id == "100"
        assert origin.last_message.status == MessageStatus.DELIVERED
        assert origin.unread == 1

    @pytest.mark.asyncio
    async def test_reselect_after_late_reply_resets_unread(
        self, client, session_user, conversations
    ):
        await client.login(session_user, conversations)
        client.send("hello")
        await client.select("300")
        await client.simulator.wait_idle()

        await client.select("100")

        assert client.controller.registry.get("100").unread == 0

    @pytest.mark.asyncio
    async def test_new_chat_while_pending(self, client, session_user, conversations):
        """Test that a reply after 'new chat' leaves the empty list alone."""
        await client.login(session_user, conversations)
        client.send("hello")
        client.new_chat()
        await client.simulator.wait_idle()

        assert client.messages == ()
        assert client.controller.registry.get("100").unread == 1


class TestTypingIndicator:
    """Tests for the derived typing state."""

    @pytest.mark.asyncio
    async def test_typing_events(self, client, session_user, conversations):
        """Test that TYPING is announced when a reply starts and ends."""
        events = []
        client.add_listener(lambda event, cid: events.append(event))
        await client.login(session_user, conversations)
        events.clear()

        client.send("hi")
        await client.simulator.wait_idle()

        assert events[:2] == [SessionEvent.SENT, SessionEvent.TYPING]
        assert events[-2:] == [SessionEvent.TYPING, SessionEvent.DELIVERED]

    @pytest.mark.asyncio
    async def test_typing_follows_active_conversation(self, client, session_user, conversations):
        await client.login(session_user, conversations)
        client.send("hi")
        assert client.is_typing

        await client.select("200")
        assert not client.is_typing

        await client.select("100")
        assert client.is_typing
        await client.simulator.wait_idle()
        assert not client.is_typing


class TestFailuresAndCancellation:
    """Tests for dropped and cancelled replies."""

    @pytest.mark.asyncio
    async def test_reply_source_failure_is_dropped(
        self, history_provider, session_user, conversations, caplog
    ):
        """Test that a failing reply source leaves the sent message in place."""
        client = create_chat_client(
            history_provider=history_provider,
            reply_source=FakeReplySource(fail=True),
            delay_range=(0.0, 0.01),
        )
        await client.login(session_user, conversations)

        sent = client.send("hello?")
        await client.simulator.wait_idle()

        assert client.messages[-1] == sent
        assert not client.is_typing
        assert "Dropping simulated reply" in caplog.text

    @pytest.mark.asyncio
    async def test_logout_cancels_pending(self, history_provider, session_user, conversations):
        """Test that logout cancels replies instead of delivering them."""
        source = FakeReplySource()
        client = create_chat_client(
            history_provider=history_provider,
            reply_source=source,
            delay_range=(10.0, 20.0),
        )
        await client.login(session_user, conversations)
        client.send("bye")

        await client.logout()

        assert source.count == 0
        assert client.simulator.pending_count() == 0
        assert not client.is_logged_in

    @pytest.mark.asyncio
    async def test_relogin_drops_replies_of_previous_session(
        self, session_user, contacts, conversations
    ):
        """Test that a reply sent before a second login never reaches the new session."""
        source = FakeReplySource()
        client = create_chat_client(
            history_provider=FakeHistoryProvider(length=0),
            reply_source=source,
            delay_range=(0.01, 0.02),
        )
        await client.login(session_user, conversations)
        client.send("still there?")

        other_user = User(id="2", name="other", email="other@example.com")
        await client.login(other_user, [Conversation.for_contact(c) for c in contacts])
        await client.simulator.wait_idle()

        assert source.count == 0
        assert client.messages == ()
        assert all(conv.last_message is None for conv in client.conversations)
        assert not client.is_typing
        await client.logout()

    @pytest.mark.asyncio
    async def test_cancel_single_conversation(self, history_provider, session_user, conversations):
        client = create_chat_client(
            history_provider=history_provider,
            reply_source=FakeReplySource(),
            delay_range=(10.0, 20.0),
        )
        await client.login(session_user, conversations)
        client.send("one")
        await client.select("200")
        client.send("two")

        assert client.simulator.cancel_pending("100") == 1
        await asyncio.sleep(0.01)

        assert client.simulator.pending_count("100") == 0
        assert client.simulator.pending_count("200") == 1
        await client.logout()


class TestReplyDelay:
    """Tests for the reply delay distribution."""

    @given(st.integers(min_value=0, max_value=2**32))
    def test_default_delay_within_bounds(self, seed: int):
        """Property test: default delays fall in [1, 3) seconds."""
        simulator = ReplySimulator(
            ConversationSessionController(None),  # type: ignore
            FakeReplySource(),
            rng=random.Random(seed),
        )

        delay = simulator.draw_delay()

        assert 1.0 <= delay < 3.0

    @pytest.mark.parametrize("bad_range", [(-1.0, 2.0), (3.0, 1.0)])
    def test_invalid_range_rejected(self, bad_range):
        with pytest.raises(ValueError):
            ReplySimulator(
                ConversationSessionController(None),  # type: ignore
                FakeReplySource(),
                delay_range=bad_range,
            )
