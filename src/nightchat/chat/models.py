"""Data models for the chat session.

These models define users, messages and conversations independent of how
history is fetched or how the session is presented.
"""

import threading
import time
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class MessageStatus(str, Enum):
    """Delivery status of a message."""

    SENT = "sent"            # Authored locally, not yet acknowledged
    DELIVERED = "delivered"  # Reached the counterpart
    READ = "read"            # Seen by the counterpart


class User(BaseModel):
    """A chat participant, either the session user or a contact."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Stable user identifier")
    name: str = Field(description="Display name")
    email: str = Field(description="Contact email address")
    avatar: str = Field(default="", description="Avatar image URL")


class Message(BaseModel):
    """A single message exchanged between two users.

    Immutable once created. Use ``with_status`` to derive a copy with a new
    delivery status.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Identifier, increasing with creation time")
    sender_id: str
    receiver_id: str
    text: str
    timestamp: datetime = Field(default_factory=datetime.now)
    status: MessageStatus = Field(default=MessageStatus.SENT)

    @field_serializer("timestamp")
    def serialize_timestamp(self, value: datetime) -> str:
        """Serialize timestamp to ISO format."""
        return value.isoformat()

    @property
    def sort_key(self) -> int:
        """Numeric form of the id, for ordering."""
        return int(self.id)

    def involves(self, user_a: str, user_b: str) -> bool:
        """Whether this message was exchanged between exactly these two users."""
        return {self.sender_id, self.receiver_id} == {user_a, user_b}

    def with_status(self, status: MessageStatus) -> "Message":
        """Return a copy of this message with a different status."""
        return self.model_copy(update={"status": status})


class Conversation(BaseModel):
    """A one-to-one thread between the session user and a contact.

    ``id`` equals the contact's user id. ``last_message`` is denormalized
    from the thread and must track the most recent message appended by
    either side.
    """

    model_config = ConfigDict(validate_assignment=True)

    id: str
    user: User
    last_message: Message | None = None
    unread: int = Field(default=0, ge=0, description="Messages received since last active")

    @classmethod
    def for_contact(
        cls,
        contact: User,
        last_message: Message | None = None,
        unread: int = 0
    ) -> "Conversation":
        """Create the conversation with ``contact``."""
        return cls(id=contact.id, user=contact, last_message=last_message, unread=unread)


class MessageIdGenerator:
    """Produces message ids that strictly increase with creation time.

    Ids are millisecond timestamps rendered as strings. When two messages are
    created within the same millisecond (or the clock steps backwards), the
    id is bumped past the previous one.
    """

    def __init__(self, clock=time.time) -> None:
        self._clock = clock
        self._last = 0
        self._lock = threading.Lock()

    def __call__(self) -> str:
        with self._lock:
            candidate = int(self._clock() * 1000)
            if candidate <= self._last:
                candidate = self._last + 1
            self._last = candidate
            return str(candidate)


# Shared by the simulator and the demo data generators
next_message_id = MessageIdGenerator()
