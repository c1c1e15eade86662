"""
OpenAlgo Strategy Webhook Client
================================

Sends TradingView-style strategy signals to an OpenAlgo strategy webhook.
The strategy's mode (LONG_ONLY, SHORT_ONLY, BOTH) is configured server side.
"""

from typing import Any, Dict, Optional

import requests
from loguru import logger

from ..exceptions import WebhookError


class Strategy:
    """
    Args:
        host_url: OpenAlgo server URL, e.g. ``http://127.0.0.1:5000``
        webhook_id: Strategy webhook id from OpenAlgo
    """

    def __init__(self,
                 host_url: str,
                 webhook_id: str,
                 timeout: float = 30.0,
                 session: Optional[requests.Session] = None):
        self.host_url = host_url.rstrip('/')
        self.webhook_id = webhook_id
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def webhook_url(self) -> str:
        return f"{self.host_url}/strategy/webhook/{self.webhook_id}"

    def strategy_order(self, symbol: str, action: str, position_size: Optional[Any] = None) -> Dict[str, Any]:
        """
        Send a strategy signal.

        Args:
            symbol: Trading symbol, e.g. "RELIANCE"
            action: "BUY" or "SELL" (case-insensitive)
            position_size: Required when the strategy runs in BOTH mode

        Raises:
            WebhookError: request failed or the server rejected it
        """
        message = {'symbol': symbol, 'action': action.upper()}
        if position_size is not None:
            message['position_size'] = str(position_size)

        try:
            response = self.session.post(self.webhook_url, json=message, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.exceptions.HTTPError as e:
            logger.error(f"Strategy order failed: {e}")
            raise WebhookError(self.webhook_url, str(e), status_code=e.response.status_code) from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Strategy order failed: {e}")
            raise WebhookError(self.webhook_url, str(e)) from e
