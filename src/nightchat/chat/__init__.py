"""Chat session module for NightChat.

Provides the conversation/message state machine and the simulated replies.
"""

from .base import HistoryProvider, ReplySource
from .client import ChatClient
from .factory import create_chat_client
from .identity import IdentityStore, login_user
from .models import Conversation, Message, MessageIdGenerator, MessageStatus, User
from .registry import ConversationRegistry
from .session import ConversationSessionController, SessionContext, SessionEvent
from .simulator import ReplySimulator
from .store import MessageStore

__all__ = [
    "ChatClient",
    "Conversation",
    "ConversationRegistry",
    "ConversationSessionController",
    "HistoryProvider",
    "IdentityStore",
    "Message",
    "MessageIdGenerator",
    "MessageStatus",
    "MessageStore",
    "ReplySimulator",
    "ReplySource",
    "SessionContext",
    "SessionEvent",
    "User",
    "create_chat_client",
    "login_user",
]
