"""
Outbound intent queue for the streaming client.

Every outbound intent passes through this FIFO; the connection manager
drains it whenever the socket is open, so queued and immediate sends
share a single ordering.
"""

from collections import deque
from typing import Awaitable, Callable, Deque, Iterable, List, Optional

from loguru import logger

from .models import IntentAction, OutboundIntent, SubscriptionMode


class OutboundQueue:
    """FIFO of intents; an intent leaves the queue only once it was sent"""

    def __init__(self):
        self._intents: Deque[OutboundIntent] = deque()
        self.total_sent = 0

    def __len__(self) -> int:
        return len(self._intents)

    def __bool__(self) -> bool:
        return bool(self._intents)

    def enqueue(self, intent: OutboundIntent) -> None:
        self._intents.append(intent)
        logger.debug(f"Queued {intent.action.value} intent (pending={len(self._intents)})")

    def prepend(self, intents: Iterable[OutboundIntent]) -> None:
        """Put intents ahead of everything already queued, keeping their order"""
        self._intents.extendleft(reversed(list(intents)))

    def has_pending(self, action: IntentAction, mode: Optional[SubscriptionMode] = None) -> bool:
        return any(
            intent.action is action and (mode is None or intent.mode is mode)
            for intent in self._intents
        )

    def snapshot(self) -> List[OutboundIntent]:
        """Pending intents in transmission order"""
        return list(self._intents)

    async def flush_all(self, send: Callable[[OutboundIntent], Awaitable[None]]) -> int:
        """
        Transmit queued intents in order.

        The head intent is removed only after ``send`` returns, so an
        exception from ``send`` propagates with the failed intent and
        everything behind it still queued in the original order. Intents
        enqueued while a send is in flight are picked up by the same flush.

        Returns:
            Number of intents transmitted
        """
        sent = 0
        while self._intents:
            intent = self._intents[0]
            await send(intent)
            self._intents.popleft()
            sent += 1
            self.total_sent += 1

        if sent:
            logger.debug(f"Flushed {sent} outbound intent(s)")
        return sent
