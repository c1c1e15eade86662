"""
OpenAlgo REST API - Market Data Methods
"""

from typing import Any, Dict, Optional, Union

from .base import BaseAPI


class DataAPI(BaseAPI):
    """Quotes, depth, symbol lookup and historical candles"""

    def quotes(self, *, symbol: str, exchange: str) -> Dict[str, Any]:
        return self.submit_request('quotes/', self._payload(symbol=symbol, exchange=exchange))

    def depth(self, *, symbol: str, exchange: str) -> Dict[str, Any]:
        """Market depth (order book) for a symbol"""
        return self.submit_request('depth/', self._payload(symbol=symbol, exchange=exchange))

    def symbol(self, *, symbol: str, exchange: str) -> Dict[str, Any]:
        return self.submit_request('symbol', self._payload(symbol=symbol, exchange=exchange))

    def history(self,
                *,
                symbol: str,
                exchange: str,
                interval: str,
                start_date: Optional[str] = None,
                end_date: Optional[str] = None,
                count: Optional[int] = None) -> Union[Any, Dict[str, Any]]:
        """
        Historical candles for a symbol.

        Args:
            symbol: Trading symbol
            exchange: Exchange code
            interval: Candle interval, e.g. "1m", "5m", "1h", "D"
            start_date: YYYY-MM-DD
            end_date: YYYY-MM-DD
            count: Number of candles

        Returns:
            The ``data`` field on success, otherwise the error result
        """
        payload = self._payload(symbol=symbol, exchange=exchange, interval=interval)
        if start_date:
            payload['start_date'] = start_date
        if end_date:
            payload['end_date'] = end_date
        if count:
            payload['count'] = str(count)

        response = self.submit_request('history/', payload)
        if response.get('status') == 'success' and response.get('data') is not None:
            return response['data']
        return response

    def intervals(self) -> Dict[str, Any]:
        """Supported history intervals"""
        return self.submit_request('intervals', self._payload())

    def expiry(self, *, symbol: str, exchange: str, instrumenttype: str) -> Dict[str, Any]:
        """Expiry dates for a derivative underlying ("options" or "futures")"""
        payload = self._payload(symbol=symbol, exchange=exchange, instrumenttype=instrumenttype)
        return self.submit_request('expiry', payload)

    def search(self, *, query: str, exchange: str) -> Dict[str, Any]:
        return self.submit_request('search', self._payload(query=query, exchange=exchange))
