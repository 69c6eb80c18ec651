"""Pytest configuration and shared fixtures."""
import os
from collections.abc import AsyncIterator
from datetime import datetime, timedelta
from typing import Any

import pytest

from nightchat.chat import (
    Conversation,
    HistoryProvider,
    Message,
    MessageStatus,
    ReplySource,
    User,
    create_chat_client,
)
from nightchat.chat.models import next_message_id
from nightchat.llm.base import LLMProvider
from nightchat.llm.models import ChatMessage, StreamingResponse


class FakeHistoryProvider(HistoryProvider):
    """Deterministic history: ``length`` alternating messages per contact.

    Tests can gate a load on an ``asyncio.Event`` to interleave selections.
    """

    def __init__(self, length: int = 4):
        self.length = length
        self.calls: list[str] = []
        self.gates: dict[str, Any] = {}
        self._cache: dict[str, list[Message]] = {}

    async def load_history(self, session_user: User, contact: User) -> list[Message]:
        self.calls.append(contact.id)
        gate = self.gates.get(contact.id)
        if gate is not None:
            await gate.wait()
        if contact.id not in self._cache:
            start = datetime(2024, 1, 1, 12, 0)
            history = []
            for i in range(self.length):
                from_user = i % 2 != 0
                history.append(Message(
                    id=next_message_id(),
                    sender_id=session_user.id if from_user else contact.id,
                    receiver_id=contact.id if from_user else session_user.id,
                    text=f"{contact.name} message {i}",
                    timestamp=start + timedelta(minutes=10 * i),
                    status=MessageStatus.DELIVERED,
                ))
            self._cache[contact.id] = history
        return list(self._cache[contact.id])


class FakeReplySource(ReplySource):
    """Numbered replies, or a failure when ``fail`` is set."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.count = 0

    async def next_reply(self, conversation: Conversation) -> str:
        if self.fail:
            raise RuntimeError("reply backend down")
        self.count += 1
        return f"reply {self.count} from {conversation.user.name}"


class FakeLLMProvider(LLMProvider):
    """Streams fixed chunks and records every call's arguments."""

    def __init__(
        self,
        chunks: list[str] | None = None,
        fail_on_call: bool = False,
        fail_after: int | None = None,
        usage: dict[str, Any] | None = None,
    ):
        self.chunks = chunks if chunks is not None else ["Hello", ", ", "world"]
        self.fail_on_call = fail_on_call
        self.fail_after = fail_after
        self.usage = usage
        self.calls: list[dict[str, Any]] = []
        self.closed = False
        self.stream_closed = False

    @property
    def name(self) -> str:
        return "fake"

    @property
    def model(self) -> str:
        return "fake-model"

    async def chat_completion_stream(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | float | None = None,
        top_p: float | None = None,
        **kwargs: Any
    ) -> StreamingResponse:
        self.calls.append({
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
            "top_p": top_p,
        })
        if self.fail_on_call:
            raise ConnectionError("upstream unreachable: secret-host:443")
        response = StreamingResponse()
        return response.bind(self._generate(response))

    async def _generate(self, response: StreamingResponse) -> AsyncIterator[str]:
        try:
            for i, chunk in enumerate(self.chunks):
                if self.fail_after is not None and i >= self.fail_after:
                    raise ConnectionError("stream reset")
                yield chunk
            if self.usage:
                response.set_usage(self.usage)
        finally:
            self.stream_closed = True

    async def close(self) -> None:
        self.closed = True


@pytest.fixture(scope="session")
def api_keys():
    """Return API keys from environment."""
    return {
        "openai": os.getenv("OPENAI_API_KEY"),
        "deepseek": os.getenv("DEEPSEEK_API_KEY"),
        "anthropic": os.getenv("ANTHROPIC_API_KEY"),
    }


@pytest.fixture
def session_user():
    """The logged-in user."""
    return User(id="1", name="me", email="me@example.com")


@pytest.fixture
def contacts():
    """Three contacts with distinct ids."""
    return [
        User(id="100", name="Alex Adler", email="alex@example.com"),
        User(id="200", name="Blake Brooks", email="blake@example.com"),
        User(id="300", name="Casey Chen", email="casey@example.com"),
    ]


@pytest.fixture
def conversations(contacts):
    """One conversation per contact; the second starts with unread messages."""
    return [
        Conversation.for_contact(contacts[0]),
        Conversation.for_contact(contacts[1], unread=3),
        Conversation.for_contact(contacts[2]),
    ]


@pytest.fixture
def history_provider():
    return FakeHistoryProvider()


@pytest.fixture
def reply_source():
    return FakeReplySource()


@pytest.fixture
def client(history_provider, reply_source):
    """Chat client with near-instant simulated replies."""
    return create_chat_client(
        history_provider=history_provider,
        reply_source=reply_source,
        seed=7,
        delay_range=(0.01, 0.02),
    )


@pytest.fixture
def fake_llm():
    return FakeLLMProvider()
