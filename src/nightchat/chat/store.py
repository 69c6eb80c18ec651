"""Message store for the active conversation.

Holds the materialized message list shown to the user. It belongs to one
conversation at a time; switching conversations replaces it wholesale.
"""

from collections.abc import Iterable, Iterator

from .models import Message


class MessageStore:
    """Ordered messages of the currently loaded conversation, newest last."""

    def __init__(self, messages: Iterable[Message] | None = None):
        self._messages: list[Message] = list(messages or [])

    @property
    def messages(self) -> tuple[Message, ...]:
        """Snapshot of the stored messages."""
        return tuple(self._messages)

    def append(self, message: Message) -> None:
        """Append a message at the end of the list."""
        self._messages.append(message)

    def replace(self, messages: Iterable[Message]) -> None:
        """Replace the whole list. No merge with the previous contents."""
        self._messages = list(messages)

    def clear(self) -> None:
        self._messages.clear()

    def last(self) -> Message | None:
        return self._messages[-1] if self._messages else None

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(tuple(self._messages))

    def __bool__(self) -> bool:
        return bool(self._messages)
