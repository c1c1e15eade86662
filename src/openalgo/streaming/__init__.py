"""
Streaming Module
================

Real-time market data over the OpenAlgo WebSocket:
- Connection lifecycle with bounded fixed-delay reconnection
- One callback per subscription mode (LTP, Quote, Depth)
- Ordered outbound queue for intents issued while disconnected
- Inbound frame classification and routing
"""

from .models import (
    Instrument,
    SubscriptionMode,
    ConnectionState,
    IntentAction,
    OutboundIntent
)
from .outbound_queue import OutboundQueue
from .registry import SubscriptionRegistry, Subscription
from .dispatcher import InboundDispatcher, FrameKind
from .websocket_manager import OpenAlgoWebSocket

__all__ = [
    'Instrument',
    'SubscriptionMode',
    'ConnectionState',
    'IntentAction',
    'OutboundIntent',
    'OutboundQueue',
    'SubscriptionRegistry',
    'Subscription',
    'InboundDispatcher',
    'FrameKind',
    'OpenAlgoWebSocket'
]
