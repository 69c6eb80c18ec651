"""Tests for the Textual chat client."""
import pytest

from nightchat.chat import create_chat_client
from nightchat.ui import NightChatApp
from nightchat.ui.widgets import (
    ChatInputBar,
    ConversationItem,
    ConversationList,
    DebugPanel,
    MessageBubble,
    MessageList,
    TypingIndicator,
)


@pytest.fixture
def tui_app(session_user, history_provider, reply_source):
    client = create_chat_client(
        history_provider=history_provider,
        reply_source=reply_source,
        seed=1,
        delay_range=(0.01, 0.02),
    )
    return NightChatApp(user=session_user, seed=1, client=client)


class TestNightChatApp:
    """Tests for NightChatApp."""

    @pytest.mark.asyncio
    async def test_mount_logs_in_and_shows_first_chat(self, tui_app):
        """Test that the first conversation is displayed after startup."""
        async with tui_app.run_test() as pilot:
            await pilot.pause()

            client = tui_app.client
            assert client.is_logged_in
            items = tui_app.query_one(ConversationList).query(ConversationItem)
            assert len(items) == len(client.conversations)
            bubbles = tui_app.query_one(MessageList).query(MessageBubble)
            assert len(bubbles) == len(client.messages)

    @pytest.mark.asyncio
    async def test_send_and_receive(self, tui_app):
        """Test that typed text is sent and the reply rendered."""
        async with tui_app.run_test() as pilot:
            await pilot.pause()
            before = len(tui_app.client.messages)

            tui_app.query_one(ChatInputBar).post_message(ChatInputBar.Submitted("hello"))
            await pilot.pause()
            await tui_app.client.simulator.wait_idle()
            await pilot.pause()

            assert len(tui_app.client.messages) == before + 2
            bubbles = tui_app.query_one(MessageList).query(MessageBubble)
            assert len(bubbles) == before + 2

    @pytest.mark.asyncio
    async def test_new_chat_binding(self, tui_app):
        async with tui_app.run_test() as pilot:
            await pilot.pause()

            await pilot.press("ctrl+n")
            await pilot.pause()

            assert tui_app.client.active_conversation is None
            assert len(tui_app.query_one(MessageList).query(MessageBubble)) == 0

    @pytest.mark.asyncio
    async def test_toggle_log_panel(self, tui_app):
        async with tui_app.run_test() as pilot:
            panel = tui_app.query_one(DebugPanel)
            assert not panel.display

            await pilot.press("ctrl+d")

            assert panel.display

    @pytest.mark.asyncio
    async def test_exit_logs_out(self, tui_app):
        async with tui_app.run_test() as pilot:
            await pilot.pause()
        assert not tui_app.client.is_logged_in


class TestTypingIndicator:
    """Tests for TypingIndicator rendering."""

    @pytest.mark.asyncio
    async def test_typing_text(self, tui_app):
        async with tui_app.run_test() as pilot:
            indicator = tui_app.query_one(TypingIndicator)

            indicator.set_typing("Alex", True)
            await pilot.pause()
            assert "Alex is typing" in str(indicator.render())

            indicator.set_typing("Alex", False)
            await pilot.pause()
            assert "typing" not in str(indicator.render())
