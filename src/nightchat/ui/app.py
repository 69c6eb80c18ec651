"""The NightChat terminal client: a Textual front end over ChatClient."""

import asyncio
import logging
import random

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import Footer, Header, ListView

from ..chat import ChatClient, SessionEvent, User, create_chat_client
from ..chat.demo import build_demo_conversations
from ..errors import ConversationNotFoundError
from .config import parse_log_level
from .styles import APP_CSS
from .themes import NIGHT
from .widgets import (
    ChatInputBar,
    ConversationItem,
    ConversationList,
    DebugPanel,
    MessageList,
    PanelLogHandler,
    TypingIndicator,
)

logger = logging.getLogger("nightchat.ui")


class NightChatApp(App):
    """Textual TUI for a NightChat session."""

    CSS = APP_CSS
    TITLE = "NightChat"

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit"),
        Binding("ctrl+n", "new_chat", "New Chat", priority=True),
        Binding("ctrl+d", "toggle_debug", "Log", priority=True),
    ]

    def __init__(
        self,
        user: User,
        seed: int | None = None,
        log_level: str | None = None,
        client: ChatClient | None = None,
    ) -> None:
        super().__init__()
        self._user = user
        self._seed = seed
        self._log_level = log_level
        self._client = client or create_chat_client(seed=seed)
        self._log_handler: PanelLogHandler | None = None

    @property
    def client(self) -> ChatClient:
        return self._client

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)

        yield ConversationList(id="conversation-list")

        with Vertical(id="conversation-panel"):
            yield MessageList(id="message-list")
            yield TypingIndicator(id="typing-indicator")
            yield DebugPanel(id="debug-panel")

        with Vertical(id="bottom-bar"):
            yield ChatInputBar(id="chat-input-bar")

        yield Footer()

    async def on_mount(self) -> None:
        """Log in and show the first conversation."""
        self.register_theme(NIGHT)
        self.theme = "nightchat"
        self.sub_title = f"{self._user.name} <{self._user.email}>"

        log_panel = self.query_one("#debug-panel", DebugPanel)
        self._log_handler = PanelLogHandler(log_panel)
        logging.getLogger("nightchat").addHandler(self._log_handler)
        if self._log_level is not None:
            log_panel.log_level = parse_log_level(self._log_level)
            logging.getLogger("nightchat").setLevel(log_panel.log_level)
            log_panel.show()
            logger.info("Log panel enabled with level: %s", self._log_level.upper())

        self._client.add_listener(self._on_session_event)
        conversations = build_demo_conversations(self._user, rng=random.Random(self._seed))
        await self._client.login(self._user, conversations)
        await self._refresh_view()
        self.query_one("#chat-input-bar", ChatInputBar).focus_input()

    async def on_unmount(self) -> None:
        """Detach the log handler and cancel pending replies."""
        if self._log_handler is not None:
            logging.getLogger("nightchat").removeHandler(self._log_handler)
            self._log_handler = None
        await self._client.logout()

    def _on_session_event(self, event: SessionEvent, conversation_id: str | None) -> None:
        logger.debug("Session event %s (%s)", event.value, conversation_id)
        if event is SessionEvent.CLOSED:
            return
        self.call_later(self._refresh_view)

    async def _refresh_view(self) -> None:
        """Redraw every panel from the client's current state."""
        if not self._client.is_logged_in:
            return
        active = self._client.active_conversation
        await self.query_one("#conversation-list", ConversationList).set_conversations(
            self._client.conversations,
            active.id if active else None,
        )
        await self.query_one("#message-list", MessageList).show_messages(
            self._client.messages,
            self._user.id,
            active,
        )
        self.query_one("#typing-indicator", TypingIndicator).set_typing(
            active.user.name if active else None,
            self._client.is_typing,
        )

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        item = event.item
        if isinstance(item, ConversationItem):
            active = self._client.active_conversation
            if active is None or active.id != item.conversation_id:
                self._select_conversation(item.conversation_id)

    @work(exclusive=True, group="select")
    async def _select_conversation(self, conversation_id: str) -> None:
        try:
            await self._client.select(conversation_id)
        except ConversationNotFoundError as e:
            self.notify(str(e), severity="error", timeout=5)
            return
        self.query_one("#chat-input-bar", ChatInputBar).focus_input()

    def on_chat_input_bar_submitted(self, event: ChatInputBar.Submitted) -> None:
        """Send the submitted text to the active conversation."""
        if self._client.active_conversation is None:
            self.notify("Select a chat first", severity="warning", timeout=2)
            return
        self._client.send(event.value)

    def action_new_chat(self) -> None:
        """Leave the active conversation."""
        self._client.new_chat()

    def action_toggle_debug(self) -> None:
        shown = self.query_one("#debug-panel", DebugPanel).toggle()
        logger.debug("Log panel %s", "shown" if shown else "hidden")


async def run_chat_tui(
    user: User,
    seed: int | None = None,
    log_level: str | None = None,
) -> None:
    """Run the chat client until the user quits.

    ``seed`` fixes demo contacts, history and replies. ``log_level`` (debug,
    info, warning or error) opens the log panel at that threshold.
    """
    app = NightChatApp(user=user, seed=seed, log_level=log_level)
    try:
        await app.run_async()
    except (KeyboardInterrupt, asyncio.CancelledError):
        pass
