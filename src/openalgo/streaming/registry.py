"""
Subscription registry: one active callback per subscription mode.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from .models import Instrument, OutboundIntent, SubscriptionMode

DataCallback = Callable[[Any], None]


@dataclass
class Subscription:
    """Active callback for a mode and the instruments last subscribed under it"""
    mode: SubscriptionMode
    callback: DataCallback
    instruments: Tuple[Instrument, ...]


class SubscriptionRegistry:
    """
    Maps each SubscriptionMode to at most one Subscription.

    A later register() for the same mode replaces the earlier entry
    without error; callbacks never stack.
    """

    def __init__(self):
        self._subscriptions: Dict[SubscriptionMode, Subscription] = {}

    def __len__(self) -> int:
        return len(self._subscriptions)

    def __contains__(self, mode: SubscriptionMode) -> bool:
        return mode in self._subscriptions

    def register(self,
                 mode: SubscriptionMode,
                 callback: DataCallback,
                 instruments: Tuple[Instrument, ...]) -> Optional[Subscription]:
        """Register callback under mode; returns the replaced entry, if any"""
        previous = self._subscriptions.get(mode)
        self._subscriptions[mode] = Subscription(mode=mode, callback=callback, instruments=tuple(instruments))
        return previous

    def remove(self, mode: SubscriptionMode) -> Optional[Subscription]:
        return self._subscriptions.pop(mode, None)

    def get_callback(self, mode: SubscriptionMode) -> Optional[DataCallback]:
        subscription = self._subscriptions.get(mode)
        return subscription.callback if subscription else None

    def clear(self) -> None:
        self._subscriptions.clear()

    def modes(self) -> List[SubscriptionMode]:
        return list(self._subscriptions)

    def replay_intents(self) -> List[OutboundIntent]:
        """Fresh subscribe intents for every active entry, in registration order"""
        return [
            OutboundIntent.subscribe(subscription.mode, subscription.instruments)
            for subscription in self._subscriptions.values()
        ]
