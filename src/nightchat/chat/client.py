"""Chat client orchestration.

Binds the session controller and the reply simulator into the operations a
presentation layer needs: login, logout, select, send, new chat.
"""

import logging

from .models import Conversation, Message, User
from .session import ConversationSessionController, SessionListener
from .simulator import ReplySimulator

logger = logging.getLogger("nightchat.chat")


class ChatClient:
    """A single in-memory chat session."""

    def __init__(self, controller: ConversationSessionController, simulator: ReplySimulator):
        self._controller = controller
        self._simulator = simulator

    @property
    def controller(self) -> ConversationSessionController:
        return self._controller

    @property
    def simulator(self) -> ReplySimulator:
        return self._simulator

    @property
    def user(self) -> User:
        return self._controller.session_user

    @property
    def is_logged_in(self) -> bool:
        return self._controller.context.is_open

    @property
    def conversations(self) -> list[Conversation]:
        return self._controller.registry.conversations()

    @property
    def active_conversation(self) -> Conversation | None:
        return self._controller.active_conversation

    @property
    def messages(self) -> tuple[Message, ...]:
        return self._controller.messages

    @property
    def is_typing(self) -> bool:
        return self._simulator.is_typing

    def add_listener(self, listener: SessionListener) -> None:
        self._controller.add_listener(listener)

    async def login(self, user: User, conversations: list[Conversation]) -> None:
        """Open the session and activate the first conversation.

        Replies still pending from an earlier session are dropped first.
        """
        await self._drop_pending_replies("login")
        await self._controller.open(user, conversations)

    async def logout(self) -> None:
        """Cancel pending replies and tear the session down."""
        await self._drop_pending_replies("logout")
        self._controller.close()

    async def _drop_pending_replies(self, reason: str) -> None:
        cancelled = self._simulator.cancel_pending()
        if cancelled:
            logger.debug("Cancelled %d pending replies on %s", cancelled, reason)
        await self._simulator.wait_idle()

    async def select(self, conversation_id: str) -> tuple[Message, ...]:
        return await self._controller.select_conversation(conversation_id)

    def send(self, text: str) -> Message | None:
        return self._simulator.send_message(text)

    def new_chat(self) -> None:
        self._controller.start_new_conversation()
