"""
Inbound frame dispatcher.

Parses each frame received on the streaming socket, classifies it and
routes market data to the callback registered for the frame's mode.
"""

import json
from enum import Enum
from typing import Any, Dict, Union

from loguru import logger

from .models import SubscriptionMode
from .registry import SubscriptionRegistry


class FrameKind(Enum):
    """Classification of one inbound frame"""
    MARKET_DATA = "market_data"
    STATUS = "status"
    UNRECOGNIZED = "unrecognized"
    MALFORMED = "malformed"


class InboundDispatcher:
    """
    Routes inbound frames to subscription callbacks.

    Frames are handled synchronously and in arrival order. A failing
    callback is logged and does not affect other modes or later frames.
    """

    def __init__(self, registry: SubscriptionRegistry):
        self.registry = registry
        self.stats = {
            'frames_received': 0,
            'frames_dispatched': 0,
            'frames_dropped': 0,
            'malformed_frames': 0,
            'status_frames': 0,
            'callback_errors': 0
        }

    def dispatch(self, raw: Union[str, bytes]) -> FrameKind:
        """Parse and route one raw frame"""
        self.stats['frames_received'] += 1

        try:
            message = json.loads(raw)
        except (ValueError, TypeError) as e:
            self.stats['malformed_frames'] += 1
            logger.warning(f"Discarding malformed WebSocket frame: {e}")
            return FrameKind.MALFORMED

        return self.route(message)

    def route(self, message: Any) -> FrameKind:
        """Route an already parsed frame"""
        if not isinstance(message, dict):
            logger.debug(f"Unrecognized WebSocket frame: {message!r}")
            return FrameKind.UNRECOGNIZED

        if message.get('type') == 'market_data':
            mode = SubscriptionMode.from_tag(message.get('mode'))
            if mode is None:
                logger.debug(f"Market data frame with unknown mode {message.get('mode')!r}")
                return FrameKind.UNRECOGNIZED
            self._deliver(mode, message.get('data'))
            return FrameKind.MARKET_DATA

        if message.get('status') or message.get('type'):
            self.stats['status_frames'] += 1
            logger.info(f"WebSocket status: {message}")
            return FrameKind.STATUS

        logger.debug(f"Unrecognized WebSocket frame: {list(message.keys())}")
        return FrameKind.UNRECOGNIZED

    def _deliver(self, mode: SubscriptionMode, data: Any) -> None:
        callback = self.registry.get_callback(mode)
        if callback is None:
            self.stats['frames_dropped'] += 1
            logger.debug(f"No subscriber for {mode.wire_name} data, frame dropped")
            return

        try:
            callback(data)
            self.stats['frames_dispatched'] += 1
        except Exception:
            self.stats['callback_errors'] += 1
            logger.exception(f"{mode.wire_name} callback raised")

    def get_stats(self) -> Dict[str, int]:
        return dict(self.stats)
