"""
OpenAlgo REST API - Account Methods
"""

from typing import Any, Dict

from .base import BaseAPI


class AccountAPI(BaseAPI):
    """Funds, books and holdings of the connected trading account"""

    def funds(self) -> Dict[str, Any]:
        return self.submit_request('funds', self._payload())

    def orderbook(self) -> Dict[str, Any]:
        return self.submit_request('orderbook', self._payload())

    def tradebook(self) -> Dict[str, Any]:
        return self.submit_request('tradebook', self._payload())

    def positionbook(self) -> Dict[str, Any]:
        return self.submit_request('positionbook', self._payload())

    def holdings(self) -> Dict[str, Any]:
        return self.submit_request('holdings', self._payload())
