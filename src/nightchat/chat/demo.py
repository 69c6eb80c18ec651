"""Demo data collaborators.

Stand-ins for a real chat backend: random contacts, random message text and
synthesized conversation history.
"""

import random
from datetime import datetime, timedelta

from .base import HistoryProvider, ReplySource
from .config import (
    DEMO_CONTACT_COUNT,
    HISTORY_SPACING_MINUTES,
    SELECTED_HISTORY_LENGTH,
    UNREAD_SEED_MAX,
    UNREAD_SEED_PROBABILITY,
)
from .models import Conversation, Message, MessageStatus, User, next_message_id

FIRST_NAMES = [
    "Alex", "Blake", "Casey", "Dana", "Eli", "Finley", "Gray", "Harper",
    "Indigo", "Jordan", "Kai", "Logan", "Morgan", "Noor", "Oakley", "Parker",
    "Quinn", "Riley", "Sage", "Taylor",
]

LAST_NAMES = [
    "Adler", "Brooks", "Chen", "Diaz", "Evans", "Fischer", "Garcia", "Hughes",
    "Ivanova", "Jensen", "Kowalski", "Lopez", "Moreau", "Nakamura", "Okafor",
    "Patel",
]

MESSAGE_TEXTS = [
    "Hey, how's it going?",
    "Did you see the game last night?",
    "Can we move our call to tomorrow?",
    "I just finished the report, sending it over.",
    "Lunch later?",
    "That sounds great!",
    "I'll be there in 10 minutes.",
    "Have you tried the new place downtown?",
    "Thanks for your help earlier.",
    "Let me check and get back to you.",
    "Happy Friday!",
    "Any plans for the weekend?",
]

REPLY_TEXTS = [
    "Sounds good to me!",
    "Haha, totally.",
    "Let me think about it.",
    "Sure, why not?",
    "I was just about to message you!",
    "Interesting, tell me more.",
    "Can't talk right now, call you later?",
    "Absolutely!",
    "I'm not sure about that one.",
    "Okay, see you then.",
]

_rng = random.Random()


def get_random_user(rng: random.Random | None = None) -> User:
    """Create a random contact."""
    r = rng or _rng
    first = r.choice(FIRST_NAMES)
    last = r.choice(LAST_NAMES)
    user_id = str(r.randint(2, 10**9))
    return User(
        id=user_id,
        name=f"{first} {last}",
        email=f"{first.lower()}.{last.lower()}@example.com",
        avatar=f"https://i.pravatar.cc/150?u={user_id}",
    )


def generate_random_message(
    from_id: str,
    to_id: str,
    as_last_message: bool,
    timestamp: datetime | None = None,
    rng: random.Random | None = None,
) -> Message:
    """Create a message with random text.

    Args:
        from_id: Sender id
        to_id: Receiver id
        as_last_message: The message seeds a conversation preview; it gets a
            recent random timestamp when none is given
        timestamp: Explicit creation time
        rng: Random source (module default if None)
    """
    r = rng or _rng
    if timestamp is None:
        timestamp = datetime.now()
        if as_last_message:
            timestamp -= timedelta(minutes=r.randint(1, 24 * 60))
    return Message(
        id=next_message_id(),
        sender_id=from_id,
        receiver_id=to_id,
        text=r.choice(MESSAGE_TEXTS),
        timestamp=timestamp,
        status=r.choice([MessageStatus.DELIVERED, MessageStatus.READ]),
    )


def get_random_reply(rng: random.Random | None = None) -> str:
    return (rng or _rng).choice(REPLY_TEXTS)


def format_time(value: datetime) -> str:
    """Format a timestamp as ``HH:MM``."""
    return value.strftime("%H:%M")


def build_demo_conversations(
    session_user: User,
    count: int = DEMO_CONTACT_COUNT,
    rng: random.Random | None = None,
) -> list[Conversation]:
    """Create demo conversations for ``session_user``.

    Contacts that collide with the session user's id are dropped. Each
    conversation gets a random preview message, and some start unread.
    """
    r = rng or _rng
    contacts = [get_random_user(r) for _ in range(count)]
    conversations = []
    seen: set[str] = set()
    for contact in contacts:
        if contact.id == session_user.id or contact.id in seen:
            continue
        seen.add(contact.id)
        unread = r.randint(1, UNREAD_SEED_MAX) if r.random() < UNREAD_SEED_PROBABILITY else 0
        conversations.append(Conversation.for_contact(
            contact,
            last_message=generate_random_message(contact.id, session_user.id, True, rng=r),
            unread=unread,
        ))
    return conversations


class RandomHistoryProvider(HistoryProvider):
    """Synthesizes alternating history for each conversation.

    The first history requested for a contact is cached, so reselecting a
    conversation shows the same messages again.
    """

    def __init__(
        self,
        length: int = SELECTED_HISTORY_LENGTH,
        spacing: timedelta = timedelta(minutes=HISTORY_SPACING_MINUTES),
        rng: random.Random | None = None,
        first_length: int | None = None,
    ) -> None:
        self._length = length
        self._spacing = spacing
        self._rng = rng or random.Random()
        self._first_length = first_length
        self._cache: dict[tuple[str, str], list[Message]] = {}

    async def load_history(self, session_user: User, contact: User) -> list[Message]:
        key = (session_user.id, contact.id)
        if key not in self._cache:
            length = self._length
            if self._first_length is not None and not self._cache:
                length = self._first_length
            self._cache[key] = self._generate(session_user, contact, length)
        return list(self._cache[key])

    def _generate(self, session_user: User, contact: User, length: int) -> list[Message]:
        now = datetime.now()
        messages = []
        for i in range(length):
            from_user = i % 2 != 0
            messages.append(generate_random_message(
                session_user.id if from_user else contact.id,
                contact.id if from_user else session_user.id,
                False,
                timestamp=now - (length - i) * self._spacing,
                rng=self._rng,
            ))
        return messages


class RandomReplySource(ReplySource):
    """Picks canned reply text at random."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    async def next_reply(self, conversation: Conversation) -> str:
        return get_random_reply(self._rng)
