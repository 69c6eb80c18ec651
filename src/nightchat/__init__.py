"""
NightChat: a demo real-time chat client with a streaming completion endpoint.

Each subpackage hides one design decision:
- chat: conversation/message state machine and simulated replies
- llm: which generative-model provider serves completions
- api: HTTP surface and the completion request pipeline
- ui: terminal presentation of the chat session
"""

__version__ = "0.1.0"

from .chat import (
    Conversation,
    ConversationRegistry,
    ConversationSessionController,
    Message,
    MessageStatus,
    MessageStore,
    ReplySimulator,
    SessionContext,
    User,
)
from .errors import (
    BackendFailureError,
    ConversationNotFoundError,
    InvalidRequestError,
    NightChatError,
    SessionClosedError,
)

__all__ = [
    "BackendFailureError",
    "Conversation",
    "ConversationNotFoundError",
    "ConversationRegistry",
    "ConversationSessionController",
    "InvalidRequestError",
    "Message",
    "MessageStatus",
    "MessageStore",
    "NightChatError",
    "ReplySimulator",
    "SessionClosedError",
    "SessionContext",
    "User",
]
