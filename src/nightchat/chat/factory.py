"""Factory for assembling a chat client."""

import random
from typing import Any

from .base import HistoryProvider, ReplySource
from .client import ChatClient
from .config import INITIAL_HISTORY_LENGTH
from .session import ConversationSessionController, SessionContext
from .simulator import ReplySimulator


def create_chat_client(
    history_provider: HistoryProvider | None = None,
    reply_source: ReplySource | None = None,
    seed: int | None = None,
    **simulator_config: Any
) -> ChatClient:
    """Create a chat client wired to its collaborators.

    Args:
        history_provider: Source of conversation history (demo generator if None)
        reply_source: Source of simulated reply text (canned replies if None)
        seed: Seed for the demo generators and reply delays
        **simulator_config: Extra ReplySimulator options (delay_range, clock, ...)

    Returns:
        ChatClient with an empty, logged-out session
    """
    rng = random.Random(seed)

    if history_provider is None or reply_source is None:
        from .demo import RandomHistoryProvider, RandomReplySource

        if history_provider is None:
            history_provider = RandomHistoryProvider(rng=rng, first_length=INITIAL_HISTORY_LENGTH)
        if reply_source is None:
            reply_source = RandomReplySource(rng=rng)

    controller = ConversationSessionController(history_provider, context=SessionContext())
    simulator_config.setdefault("rng", rng)
    simulator = ReplySimulator(controller, reply_source, **simulator_config)
    return ChatClient(controller, simulator)
