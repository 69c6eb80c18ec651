"""Conversation session controller.

Mediates which conversation is active, loads its history into the message
store and keeps the unread invariant: the active conversation always has an
unread count of zero.
"""

import logging
from collections.abc import Callable, Iterable
from enum import Enum

from ..errors import ConversationNotFoundError, SessionClosedError
from .base import HistoryProvider
from .models import Conversation, Message, User
from .registry import ConversationRegistry
from .store import MessageStore

logger = logging.getLogger("nightchat.chat.session")


class SessionEvent(str, Enum):
    """State changes a presentation layer may want to redraw for."""

    OPENED = "opened"
    CLOSED = "closed"
    SELECTED = "selected"
    CLEARED = "cleared"
    SENT = "sent"
    TYPING = "typing"
    DELIVERED = "delivered"


SessionListener = Callable[[SessionEvent, str | None], None]


class SessionContext:
    """Explicit holder of the logged-in user.

    Opened on login and closed on logout; nothing else in the session keeps
    a reference to ambient user state.
    """

    def __init__(self, user: User | None = None) -> None:
        self._user = user

    @property
    def is_open(self) -> bool:
        return self._user is not None

    @property
    def user(self) -> User:
        """The logged-in user.

        Raises:
            SessionClosedError: If nobody is logged in
        """
        if self._user is None:
            raise SessionClosedError("No user is logged in")
        return self._user

    def open(self, user: User) -> None:
        self._user = user

    def close(self) -> None:
        self._user = None


class ConversationSessionController:
    """Switches the active conversation and owns the displayed messages.

    At most one conversation is active at a time. Activating one implicitly
    deactivates the previous one.
    """

    def __init__(
        self,
        history_provider: HistoryProvider,
        context: SessionContext | None = None,
        registry: ConversationRegistry | None = None,
        store: MessageStore | None = None,
    ) -> None:
        self._history_provider = history_provider
        self._context = context or SessionContext()
        self._registry = registry or ConversationRegistry()
        self._store = store or MessageStore()
        self._active_id: str | None = None
        self._selection_seq = 0
        self._listeners: list[SessionListener] = []

    @property
    def context(self) -> SessionContext:
        return self._context

    @property
    def session_user(self) -> User:
        return self._context.user

    @property
    def registry(self) -> ConversationRegistry:
        return self._registry

    @property
    def store(self) -> MessageStore:
        return self._store

    @property
    def active_conversation_id(self) -> str | None:
        return self._active_id

    @property
    def active_conversation(self) -> Conversation | None:
        if self._active_id is None:
            return None
        return self._registry.get(self._active_id)

    @property
    def messages(self) -> tuple[Message, ...]:
        return self._store.messages

    def is_active(self, conversation_id: str) -> bool:
        return self._active_id is not None and self._active_id == conversation_id

    def add_listener(self, listener: SessionListener) -> None:
        """Register a callback invoked after every session state change."""
        self._listeners.append(listener)

    def remove_listener(self, listener: SessionListener) -> None:
        self._listeners.remove(listener)

    def notify(self, event: SessionEvent, conversation_id: str | None = None) -> None:
        """Dispatch an event to every listener."""
        for listener in list(self._listeners):
            listener(event, conversation_id)

    async def open(
        self,
        user: User,
        conversations: Iterable[Conversation],
        select_first: bool = True,
    ) -> None:
        """Start a session for ``user`` with the given conversations.

        Conversations with the session user as counterpart are skipped.

        Args:
            user: The logged-in user
            conversations: One conversation per contact
            select_first: Activate the first conversation once registered
        """
        self.close()
        self._context.open(user)
        for conversation in conversations:
            if conversation.id == user.id:
                continue
            self._registry.add(conversation)
        logger.info("Session opened for %s with %d conversations", user.id, len(self._registry))
        self.notify(SessionEvent.OPENED)

        ids = self._registry.ids()
        if select_first and ids:
            await self.select_conversation(ids[0])

    def close(self) -> None:
        """Tear the session down and forget every conversation."""
        was_open = self._context.is_open
        self._selection_seq += 1
        self._active_id = None
        self._store.clear()
        self._registry.clear()
        self._context.close()
        if was_open:
            logger.info("Session closed")
            self.notify(SessionEvent.CLOSED)

    async def select_conversation(self, conversation_id: str) -> tuple[Message, ...]:
        """Make ``conversation_id`` the active conversation.

        Loads its history, resets its unread count and replaces the displayed
        messages. If another selection starts while the history is loading,
        this one is abandoned without touching state.

        Returns:
            The messages now displayed

        Raises:
            ConversationNotFoundError: If the id is unknown (no state changes)
        """
        if conversation_id not in self._registry:
            logger.error("Attempted to select unknown conversation %s", conversation_id)
            raise ConversationNotFoundError(conversation_id)

        conversation = self._registry.get(conversation_id)
        self._selection_seq += 1
        seq = self._selection_seq

        history = await self._history_provider.load_history(self.session_user, conversation.user)

        if seq != self._selection_seq:
            logger.debug("Discarding stale history load for %s", conversation_id)
            return self._store.messages
        if conversation_id not in self._registry:
            raise ConversationNotFoundError(conversation_id)

        self._active_id = conversation_id
        self._registry.mark_read(conversation_id)
        self._store.replace(history)
        logger.debug("Selected conversation %s (%d messages)", conversation_id, len(history))
        self.notify(SessionEvent.SELECTED, conversation_id)
        return self._store.messages

    def start_new_conversation(self) -> None:
        """Deactivate the current conversation and empty the message list.

        The conversation stays in the registry.
        """
        self._selection_seq += 1
        self._active_id = None
        self._store.clear()
        self.notify(SessionEvent.CLEARED)
