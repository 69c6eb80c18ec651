"""Conversation registry.

Owns every ``Conversation`` record of the session: the denormalized last
message and the unread counter of each contact thread.
"""

from collections.abc import Iterator

from ..errors import ConversationNotFoundError
from .models import Conversation, Message


class ConversationRegistry:
    """Set of known conversations, kept in insertion order."""

    def __init__(self) -> None:
        self._conversations: dict[str, Conversation] = {}

    def add(self, conversation: Conversation) -> Conversation:
        """Register a conversation.

        Raises:
            ValueError: If a conversation with the same id already exists
        """
        if conversation.id in self._conversations:
            raise ValueError(f"Conversation already registered: {conversation.id}")
        self._conversations[conversation.id] = conversation
        return conversation

    def get(self, conversation_id: str) -> Conversation:
        """Look up a conversation.

        Raises:
            ConversationNotFoundError: If the id is unknown
        """
        try:
            return self._conversations[conversation_id]
        except KeyError:
            raise ConversationNotFoundError(conversation_id) from None

    def remove(self, conversation_id: str) -> Conversation:
        conversation = self.get(conversation_id)
        del self._conversations[conversation_id]
        return conversation

    def clear(self) -> None:
        self._conversations.clear()

    def ids(self) -> list[str]:
        return list(self._conversations)

    def conversations(self) -> list[Conversation]:
        return list(self._conversations.values())

    def record_message(self, conversation_id: str, message: Message) -> Conversation:
        """Make ``message`` the conversation's last message."""
        conversation = self.get(conversation_id)
        conversation.last_message = message
        return conversation

    def mark_read(self, conversation_id: str) -> Conversation:
        """Reset the unread counter to zero."""
        conversation = self.get(conversation_id)
        conversation.unread = 0
        return conversation

    def increment_unread(self, conversation_id: str, by: int = 1) -> Conversation:
        if by < 0:
            raise ValueError("Unread increment must be non-negative")
        conversation = self.get(conversation_id)
        conversation.unread += by
        return conversation

    def __contains__(self, conversation_id: object) -> bool:
        return conversation_id in self._conversations

    def __len__(self) -> int:
        return len(self._conversations)

    def __iter__(self) -> Iterator[Conversation]:
        return iter(self.conversations())
