"""Abstract collaborators of the chat session.

The session controller and the reply simulator never know where history or
reply text comes from. The abstraction hides:
- Whether history is fetched over the network or synthesized
- How reply text is chosen
"""

from abc import ABC, abstractmethod

from .models import Conversation, Message, User


class HistoryProvider(ABC):
    """Supplies the message history of a conversation."""

    @abstractmethod
    async def load_history(self, session_user: User, contact: User) -> list[Message]:
        """Return the messages exchanged between the two users, newest last."""


class ReplySource(ABC):
    """Supplies the text of simulated inbound replies."""

    @abstractmethod
    async def next_reply(self, conversation: Conversation) -> str:
        """Return the reply text the contact of ``conversation`` sends next."""
