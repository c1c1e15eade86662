"""
OpenAlgo Python Client
======================

Client library for the OpenAlgo trading platform: order management,
account and market data over REST, and real-time LTP/Quote/Depth
streaming over a persistent WebSocket connection.

Project Structure:
- openalgo/api: REST endpoint groups and the strategy webhook client
- openalgo/streaming: WebSocket subscription client
- openalgo/utils: Configuration and logging
"""

__version__ = "1.0.3"

from .client import OpenAlgo
from .api import OrderAPI, DataAPI, AccountAPI, AnalyzerAPI, Strategy
from .streaming import OpenAlgoWebSocket, Instrument, SubscriptionMode, ConnectionState
from .exceptions import (
    OpenAlgoError,
    NotConnectedError,
    ConnectionSetupError,
    InvalidModeError,
    WebhookError
)

__all__ = [
    "OpenAlgo",
    "OrderAPI",
    "DataAPI",
    "AccountAPI",
    "AnalyzerAPI",
    "Strategy",
    "OpenAlgoWebSocket",
    "Instrument",
    "SubscriptionMode",
    "ConnectionState",
    "OpenAlgoError",
    "NotConnectedError",
    "ConnectionSetupError",
    "InvalidModeError",
    "WebhookError"
]
