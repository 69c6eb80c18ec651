"""Widgets of the chat screen.

The sidebar, message list, typing line, compose bar and log panel each
render from plain session state and know nothing about the chat client.
"""

import logging
from collections.abc import Iterable
from datetime import datetime

from rich.text import Text
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.events import Click
from textual.message import Message as TextualMessage
from textual.widgets import Button, Input, Label, ListItem, ListView, RichLog, Static

from ..chat.demo import format_time
from ..chat.models import Conversation, Message
from .config import (
    LAST_MESSAGE_PREVIEW_LENGTH,
    LEVEL_COLORS,
    LOG_MAX_MESSAGE_LENGTH,
    LOG_TIMESTAMP_FORMAT,
    TYPING_TEXT,
)


def _preview(text: str, limit: int = LAST_MESSAGE_PREVIEW_LENGTH) -> str:
    text = " ".join(text.split())
    if len(text) <= limit:
        return text
    return text[: limit - 3] + "..."


class ConversationItem(ListItem):
    """One contact in the sidebar: name, unread badge and last message."""

    def __init__(self, conversation: Conversation, active: bool = False) -> None:
        classes = "-unread" if conversation.unread else ""
        super().__init__(classes=classes)
        self.conversation_id = conversation.id
        self._conversation = conversation
        self._active = active

    def compose(self):
        conv = self._conversation
        marker = "> " if self._active else ""
        badge = f" ({conv.unread})" if conv.unread else ""
        yield Label(f"{marker}{conv.user.name}{badge}", classes="contact-name", markup=False)
        if conv.last_message is not None:
            when = format_time(conv.last_message.timestamp)
            yield Label(f"{when} {_preview(conv.last_message.text)}", classes="contact-preview", markup=False)


class ConversationList(ListView):
    """Sidebar listing every conversation of the session."""

    BORDER_TITLE = "Chats"

    async def set_conversations(
        self,
        conversations: Iterable[Conversation],
        active_id: str | None,
    ) -> None:
        """Rebuild the list, keeping the highlight on the active conversation."""
        conversations = list(conversations)
        await self.clear()
        await self.extend(
            ConversationItem(conv, active=conv.id == active_id) for conv in conversations
        )
        total_unread = sum(conv.unread for conv in conversations)
        self.border_subtitle = f"{total_unread} unread" if total_unread else ""
        for index, conv in enumerate(conversations):
            if conv.id == active_id:
                self.index = index
                break


class MessageBubble(Vertical):
    """A single message with a header line and its text."""

    def __init__(self, message: Message, author: str, own: bool) -> None:
        css_class = "own-message" if own else "contact-message"
        super().__init__(classes=f"chat-message {css_class}")
        self._message = message
        self._author = author
        self._own = own

    def compose(self):
        msg = self._message
        icon = ">" if self._own else "<"
        status = f" {msg.status.value}" if self._own else ""
        yield Static(
            f"{icon} {self._author} [{format_time(msg.timestamp)}]{status}",
            classes="message-header",
            markup=False,
        )
        yield Static(msg.text, classes="message-content", markup=False)


class MessageList(VerticalScroll):
    """Scrollable list of the active conversation's messages."""

    BORDER_TITLE = "Conversation"
    BORDER_SUBTITLE = "Select a chat"

    async def show_messages(
        self,
        messages: Iterable[Message],
        session_user_id: str,
        contact: Conversation | None,
    ) -> None:
        """Replace the displayed bubbles with ``messages``."""
        messages = list(messages)
        await self.remove_children()
        if contact is None:
            self.border_title = "Conversation"
            self.border_subtitle = "Select a chat"
            return

        self.border_title = contact.user.name
        self.border_subtitle = f"{len(messages)} messages"
        await self.mount_all(
            MessageBubble(
                msg,
                author="You" if msg.sender_id == session_user_id else contact.user.name,
                own=msg.sender_id == session_user_id,
            )
            for msg in messages
        )
        self.scroll_end(animate=False)


class TypingIndicator(Static):
    """Single line showing whether the counterpart is composing a reply."""

    def set_typing(self, name: str | None, typing: bool) -> None:
        if typing and name:
            self.update(f"{name} is {TYPING_TEXT}")
        else:
            self.update("")


class ChatInputBar(Horizontal):
    """Compose line with a Send button; up/down recall earlier sends."""

    BINDINGS = [
        Binding("up", "recall(-1)", "Previous", show=False),
        Binding("down", "recall(1)", "Next", show=False),
    ]

    class Submitted(TextualMessage):
        """Posted with the stripped, non-empty text the user sent."""

        def __init__(self, value: str) -> None:
            super().__init__()
            self.value = value

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._sent: list[str] = []
        self._cursor: int | None = None

    def compose(self):
        yield Input(id="chat-input", placeholder="Message")
        yield Button("Send", id="send-btn", variant="primary")

    @property
    def input_field(self) -> Input:
        return self.query_one("#chat-input", Input)

    def focus_input(self) -> None:
        self.input_field.focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self._send()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        self._send()
        self.focus_input()

    def action_recall(self, step: int) -> None:
        if not self._sent:
            return
        last = len(self._sent) - 1
        if self._cursor is None:
            self._cursor = last if step < 0 else None
        else:
            self._cursor = max(0, self._cursor + step)
            if self._cursor > last:
                self._cursor = None
        self.input_field.value = "" if self._cursor is None else self._sent[self._cursor]
        self.input_field.cursor_position = len(self.input_field.value)

    def _send(self) -> None:
        text = self.input_field.value.strip()
        if not text:
            return
        if text not in self._sent[-1:]:
            self._sent.append(text)
        self._cursor = None
        self.input_field.value = ""
        self.post_message(self.Submitted(text))


class DebugPanel(RichLog):
    """Live view of the ``nightchat`` log records.

    Starts hidden; ``--log-level`` or Ctrl+D shows it. Records under
    ``log_level`` are dropped. Clicking the panel copies its text.
    """

    BORDER_TITLE = "Log"

    def __init__(self, *args, log_level: int = logging.DEBUG, **kwargs) -> None:
        kwargs.setdefault("wrap", True)
        super().__init__(*args, markup=False, highlight=False, **kwargs)
        self._log_level = log_level

    @property
    def log_level(self) -> int:
        return self._log_level

    @log_level.setter
    def log_level(self, level: int) -> None:
        self._log_level = level
        self._refresh_subtitle()

    def on_mount(self) -> None:
        self.hide()

    def _refresh_subtitle(self) -> None:
        self.border_subtitle = (
            f">= {logging.getLevelName(self._log_level)}" if self.display else ""
        )

    def log_entry(
        self,
        component: str,
        message: str,
        level: int = logging.DEBUG,
        created: datetime | None = None,
    ) -> None:
        """Append one record unless it is below ``log_level``.

        Args:
            component: Last part of the logger name (session, simulator, ...)
            message: Formatted record text, clipped to LOG_MAX_MESSAGE_LENGTH
            level: ``logging`` level of the record
            created: Record time, defaults to now
        """
        if level < self._log_level:
            return
        if len(message) > LOG_MAX_MESSAGE_LENGTH:
            message = message[:LOG_MAX_MESSAGE_LENGTH] + "..."
        stamp = (created or datetime.now()).strftime(LOG_TIMESTAMP_FORMAT)
        self.write(Text.assemble(
            (f"{stamp} ", "dim"),
            (f"{logging.getLevelName(level):<8}", LEVEL_COLORS.get(level, "white")),
            (f"{component}: ", "magenta"),
            message,
        ))

    def show(self) -> None:
        self.display = True
        self._refresh_subtitle()

    def hide(self) -> None:
        self.display = False
        self._refresh_subtitle()

    def toggle(self) -> bool:
        """Flip visibility and return whether the panel is now shown."""
        if self.display:
            self.hide()
        else:
            self.show()
        return self.display

    def on_click(self, event: Click) -> None:
        event.stop()
        content = "\n".join(strip.text for strip in self.lines).strip()
        if content:
            self.app.copy_to_clipboard(content)
        self.app.notify("Log copied" if content else "Log is empty", timeout=2)


class PanelLogHandler(logging.Handler):
    """Routes ``logging`` records into a DebugPanel.

    Records must be emitted on the app's event loop thread, which holds for
    everything the chat session logs.
    """

    def __init__(self, panel: DebugPanel, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self._panel = panel

    def emit(self, record: logging.LogRecord) -> None:
        try:
            component = record.name.rsplit(".", 1)[-1]
            self._panel.log_entry(
                component,
                record.getMessage(),
                record.levelno,
                datetime.fromtimestamp(record.created),
            )
        except Exception:
            self.handleError(record)
