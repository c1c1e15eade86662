"""
Streaming Data Model
====================

Value types shared by the streaming components: instruments, the closed
set of subscription modes with their wire translations, connection
states and outbound intents.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union

from ..exceptions import InvalidModeError


@dataclass(frozen=True)
class Instrument:
    """One tradable symbol on one exchange"""
    exchange: str
    symbol: str

    @classmethod
    def from_value(cls, value: Union["Instrument", Mapping[str, Any]]) -> "Instrument":
        """Accept an Instrument or a mapping with exchange/symbol keys"""
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            try:
                return cls(exchange=str(value["exchange"]), symbol=str(value["symbol"]))
            except KeyError as e:
                raise ValueError(f"Instrument mapping is missing {e.args[0]!r}: {dict(value)}") from e
        raise TypeError(f"Cannot build Instrument from {type(value).__name__}")

    def to_wire(self) -> Dict[str, str]:
        return {"exchange": self.exchange, "symbol": self.symbol}


class SubscriptionMode(Enum):
    """Streaming data kinds; values are the outbound wire names"""
    LTP = "LTP"
    QUOTE = "Quote"
    DEPTH = "Depth"

    @property
    def wire_name(self) -> str:
        return self.value

    @property
    def tag(self) -> int:
        """Numeric tag carried by inbound market data frames"""
        return MODE_TO_TAG[self]

    @classmethod
    def from_tag(cls, tag: Any) -> Optional["SubscriptionMode"]:
        """Translate an inbound tag; unknown tags give None"""
        # bool is an int subclass and True == 1
        if isinstance(tag, bool):
            return None
        # JSON numbers have no int/float split: 1.0 is tag 1
        if isinstance(tag, float) and tag.is_integer():
            tag = int(tag)
        if not isinstance(tag, int):
            return None
        return TAG_TO_MODE.get(tag)

    @classmethod
    def parse(cls, value: Union["SubscriptionMode", str]) -> "SubscriptionMode":
        """Resolve a caller-supplied mode ("ltp", "Quote", SubscriptionMode.DEPTH ...)"""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            mode = _NAME_TO_MODE.get(value.strip().lower())
            if mode is not None:
                return mode
        raise InvalidModeError(f"Unknown subscription mode: {value!r}")


MODE_TO_TAG: Dict[SubscriptionMode, int] = {
    SubscriptionMode.LTP: 1,
    SubscriptionMode.QUOTE: 2,
    SubscriptionMode.DEPTH: 3,
}

TAG_TO_MODE: Dict[int, SubscriptionMode] = {tag: mode for mode, tag in MODE_TO_TAG.items()}

_NAME_TO_MODE: Dict[str, SubscriptionMode] = {
    "ltp": SubscriptionMode.LTP,
    "quote": SubscriptionMode.QUOTE,
    "depth": SubscriptionMode.DEPTH,
}


class ConnectionState(Enum):
    """Lifecycle of the single streaming socket"""
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    AUTHENTICATING = "authenticating"
    OPEN = "open"
    CLOSING = "closing"


class IntentAction(Enum):
    AUTHENTICATE = "authenticate"
    SUBSCRIBE = "subscribe"
    UNSUBSCRIBE = "unsubscribe"


@dataclass(frozen=True)
class OutboundIntent:
    """A client-originated protocol action awaiting transmission"""
    action: IntentAction
    mode: Optional[SubscriptionMode] = None
    instruments: Tuple[Instrument, ...] = ()
    api_key: Optional[str] = field(default=None, repr=False)

    @classmethod
    def authenticate(cls, api_key: str) -> "OutboundIntent":
        return cls(action=IntentAction.AUTHENTICATE, api_key=api_key)

    @classmethod
    def subscribe(cls, mode: SubscriptionMode, instruments: Iterable[Instrument]) -> "OutboundIntent":
        return cls(action=IntentAction.SUBSCRIBE, mode=mode, instruments=tuple(instruments))

    @classmethod
    def unsubscribe(cls, mode: SubscriptionMode, instruments: Iterable[Instrument]) -> "OutboundIntent":
        return cls(action=IntentAction.UNSUBSCRIBE, mode=mode, instruments=tuple(instruments))

    def to_message(self) -> Dict[str, Any]:
        """Wire representation of the intent"""
        if self.action is IntentAction.AUTHENTICATE:
            return {"action": self.action.value, "api_key": self.api_key}
        return {
            "action": self.action.value,
            "mode": self.mode.wire_name,
            "symbols": [instrument.to_wire() for instrument in self.instruments],
        }

    def to_json(self) -> str:
        return json.dumps(self.to_message())
