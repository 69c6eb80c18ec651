"""Send/reply simulator.

Appends outgoing messages optimistically and, after a randomized delay,
delivers a simulated reply from the contact. Each send runs through
``Idle -> Sent -> ReplyPending -> Delivered -> Idle``.

Hidden design decisions:
- How the reply delay is scheduled (one asyncio task per send)
- Which conversation a reply lands in (the one active at send time)
- How the typing indicator is derived (pending replies of the active conversation)
"""

import asyncio
import logging
import random
from collections.abc import Callable
from datetime import datetime

from .base import ReplySource
from .config import REPLY_DELAY_MAX_SECONDS, REPLY_DELAY_MIN_SECONDS
from .models import Message, MessageStatus, next_message_id
from .session import ConversationSessionController, SessionEvent

logger = logging.getLogger("nightchat.chat.simulator")


class ReplySimulator:
    """Simulates the counterpart of the active conversation.

    Pending replies are not cancelled when the user switches conversations:
    they complete in the background, update the originating conversation's
    last message and unread count, and never touch the message list of a
    different conversation.
    """

    def __init__(
        self,
        controller: ConversationSessionController,
        reply_source: ReplySource,
        delay_range: tuple[float, float] = (REPLY_DELAY_MIN_SECONDS, REPLY_DELAY_MAX_SECONDS),
        rng: random.Random | None = None,
        id_factory: Callable[[], str] = next_message_id,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        low, high = delay_range
        if low < 0 or high < low:
            raise ValueError(f"Invalid reply delay range: {delay_range}")
        self._controller = controller
        self._reply_source = reply_source
        self._delay_range = (low, high)
        self._rng = rng or random.Random()
        self._id_factory = id_factory
        self._clock = clock
        self._pending: dict[str, set[asyncio.Task]] = {}

    @property
    def is_typing(self) -> bool:
        """Whether a reply for the active conversation is pending."""
        active_id = self._controller.active_conversation_id
        return active_id is not None and bool(self._pending.get(active_id))

    def pending_count(self, conversation_id: str | None = None) -> int:
        """Number of in-flight replies, for one conversation or overall."""
        if conversation_id is not None:
            return len(self._pending.get(conversation_id, ()))
        return sum(len(tasks) for tasks in self._pending.values())

    def draw_delay(self) -> float:
        """Draw a reply delay in seconds, uniformly from ``[low, high)``."""
        low, high = self._delay_range
        return low + self._rng.random() * (high - low)

    def send_message(self, text: str) -> Message | None:
        """Send ``text`` in the active conversation and schedule a reply.

        Must be called from a running event loop. Empty or whitespace-only
        text, or no active conversation, makes this a silent no-op.

        Returns:
            The appended outgoing message, or None if nothing was sent
        """
        text = text.strip()
        conversation = self._controller.active_conversation
        if not text or conversation is None:
            return None

        session_user = self._controller.session_user
        message = Message(
            id=self._id_factory(),
            sender_id=session_user.id,
            receiver_id=conversation.user.id,
            text=text,
            timestamp=self._clock(),
            status=MessageStatus.SENT,
        )
        self._controller.store.append(message)
        self._controller.registry.record_message(conversation.id, message)
        logger.debug("Sent message %s to %s", message.id, conversation.id)
        self._controller.notify(SessionEvent.SENT, conversation.id)

        delay = self.draw_delay()
        task = asyncio.get_running_loop().create_task(
            self._deliver_reply(conversation.id, session_user.id, delay),
            name=f"reply-{conversation.id}-{message.id}",
        )
        self._pending.setdefault(conversation.id, set()).add(task)
        task.add_done_callback(lambda t, cid=conversation.id: self._on_reply_done(cid, t))
        self._controller.notify(SessionEvent.TYPING, conversation.id)
        return message

    async def _deliver_reply(self, conversation_id: str, session_user_id: str, delay: float) -> None:
        task = asyncio.current_task()
        try:
            await asyncio.sleep(delay)
            conversation = self._controller.registry.get(conversation_id)
            text = await self._reply_source.next_reply(conversation)

            self._discard(conversation_id, task)
            self._controller.notify(SessionEvent.TYPING, conversation_id)

            reply = Message(
                id=self._id_factory(),
                sender_id=conversation.user.id,
                receiver_id=session_user_id,
                text=text,
                timestamp=self._clock(),
                status=MessageStatus.DELIVERED,
            )
            self._controller.registry.record_message(conversation_id, reply)
            if self._controller.is_active(conversation_id):
                self._controller.store.append(reply)
            else:
                self._controller.registry.increment_unread(conversation_id)
            logger.debug("Delivered reply %s in %s", reply.id, conversation_id)
            self._controller.notify(SessionEvent.DELIVERED, conversation_id)
        except asyncio.CancelledError:
            logger.debug("Reply for %s cancelled", conversation_id)
            raise
        except Exception:
            logger.warning("Dropping simulated reply for %s", conversation_id, exc_info=True)

    def _on_reply_done(self, conversation_id: str, task: asyncio.Task) -> None:
        if self._discard(conversation_id, task):
            self._controller.notify(SessionEvent.TYPING, conversation_id)

    def _discard(self, conversation_id: str, task: asyncio.Task | None) -> bool:
        tasks = self._pending.get(conversation_id)
        if not tasks or task not in tasks:
            return False
        tasks.discard(task)
        if not tasks:
            del self._pending[conversation_id]
        return True

    def cancel_pending(self, conversation_id: str | None = None) -> int:
        """Cancel in-flight replies.

        Args:
            conversation_id: Only cancel replies for this conversation (None for all)

        Returns:
            Number of replies cancelled
        """
        if conversation_id is not None:
            tasks = list(self._pending.get(conversation_id, ()))
        else:
            tasks = [t for group in self._pending.values() for t in group]
        for task in tasks:
            task.cancel()
        return len(tasks)

    async def wait_idle(self) -> None:
        """Wait until every in-flight reply has completed or been cancelled."""
        while self._pending:
            tasks = [t for group in self._pending.values() for t in group]
            await asyncio.gather(*tasks, return_exceptions=True)
            for conversation_id, group in list(self._pending.items()):
                for task in [t for t in group if t.done()]:
                    self._discard(conversation_id, task)
