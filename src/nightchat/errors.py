"""Error kinds shared by the chat client core and the completion endpoint.

No component retries automatically: every error below describes a failed
attempt that is reported (or logged) exactly once.
"""


class NightChatError(Exception):
    """Base class for all NightChat errors."""


class InvalidRequestError(NightChatError):
    """Malformed completion payload.

    User-correctable; the message is returned to the client verbatim.
    """


class BackendFailureError(NightChatError):
    """The generative-model backend call failed.

    Reported to clients with a generic message only. The underlying exception
    is chained as ``__cause__`` and logged for operators.
    """


class ConversationNotFoundError(NightChatError, KeyError):
    """A conversation id does not exist in the registry."""

    def __init__(self, conversation_id: str):
        super().__init__(conversation_id)
        self.conversation_id = conversation_id

    def __str__(self) -> str:
        return f"Conversation not found: {self.conversation_id}"


class SessionClosedError(NightChatError):
    """An operation needs a logged-in session but none is open."""
