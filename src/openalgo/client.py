"""
OpenAlgo Client
===============

Single entry point combining the order, market data, account and
analyzer REST endpoints with the streaming market data client.
"""

from typing import Any, Dict, Iterable, Optional

from .api.account import AccountAPI
from .api.analyzer import AnalyzerAPI
from .api.data import DataAPI
from .api.orders import OrderAPI
from .streaming.registry import DataCallback
from .streaming.websocket_manager import InstrumentLike, ModeLike, OpenAlgoWebSocket


class OpenAlgo(OrderAPI):
    """
    OpenAlgo API client.

    Order methods are inherited; data, account and analyzer calls are
    delegated to their endpoint groups over one shared HTTP session. The
    streaming client is created on first use.

    Example:
        client = OpenAlgo(api_key="...")
        client.place_order(symbol="RELIANCE", action="BUY", exchange="NSE", quantity=1)

        await client.connect()
        client.subscribe_ltp([{"exchange": "NSE", "symbol": "INFY"}], print)
    """

    def __init__(self,
                 api_key: Optional[str] = None,
                 host: Optional[str] = None,
                 version: Optional[str] = None,
                 ws_url: Optional[str] = None,
                 timeout: Optional[float] = None,
                 **ws_options):
        super().__init__(api_key, host, version, timeout)

        self._data_api = DataAPI(self.api_key, self.host, self.version, self.timeout, session=self.session)
        self._account_api = AccountAPI(self.api_key, self.host, self.version, self.timeout, session=self.session)
        self._analyzer_api = AnalyzerAPI(self.api_key, self.host, self.version, self.timeout, session=self.session)

        self._ws_url = ws_url
        self._ws_options = ws_options
        self._websocket: Optional[OpenAlgoWebSocket] = None

    # Data API methods
    def quotes(self, **params) -> Dict[str, Any]:
        return self._data_api.quotes(**params)

    def depth(self, **params) -> Dict[str, Any]:
        return self._data_api.depth(**params)

    def symbol(self, **params) -> Dict[str, Any]:
        return self._data_api.symbol(**params)

    def history(self, **params) -> Any:
        return self._data_api.history(**params)

    def intervals(self) -> Dict[str, Any]:
        return self._data_api.intervals()

    def expiry(self, **params) -> Dict[str, Any]:
        return self._data_api.expiry(**params)

    def search(self, **params) -> Dict[str, Any]:
        return self._data_api.search(**params)

    # Account API methods
    def funds(self) -> Dict[str, Any]:
        return self._account_api.funds()

    def orderbook(self) -> Dict[str, Any]:
        return self._account_api.orderbook()

    def tradebook(self) -> Dict[str, Any]:
        return self._account_api.tradebook()

    def positionbook(self) -> Dict[str, Any]:
        return self._account_api.positionbook()

    def holdings(self) -> Dict[str, Any]:
        return self._account_api.holdings()

    # Analyzer API methods
    def analyzer_status(self) -> Dict[str, Any]:
        return self._analyzer_api.analyzer_status()

    def analyzer_toggle(self, *, mode: bool) -> Dict[str, Any]:
        return self._analyzer_api.analyzer_toggle(mode=mode)

    # Streaming
    @property
    def websocket(self) -> OpenAlgoWebSocket:
        if self._websocket is None:
            self._websocket = OpenAlgoWebSocket(self.api_key, self._ws_url, **self._ws_options)
        return self._websocket

    async def connect(self) -> None:
        await self.websocket.connect()

    async def disconnect(self) -> None:
        if self._websocket is not None:
            await self._websocket.disconnect()

    def subscribe(self, mode: ModeLike, instruments: Iterable[InstrumentLike], callback: DataCallback) -> None:
        self.websocket.subscribe(mode, instruments, callback)

    def unsubscribe(self, mode: ModeLike, instruments: Iterable[InstrumentLike]) -> None:
        self.websocket.unsubscribe(mode, instruments)

    def subscribe_ltp(self, instruments: Iterable[InstrumentLike], on_data_received: DataCallback) -> None:
        self.websocket.subscribe_ltp(instruments, on_data_received)

    def unsubscribe_ltp(self, instruments: Iterable[InstrumentLike]) -> None:
        self.websocket.unsubscribe_ltp(instruments)

    def subscribe_quote(self, instruments: Iterable[InstrumentLike], on_data_received: DataCallback) -> None:
        self.websocket.subscribe_quote(instruments, on_data_received)

    def unsubscribe_quote(self, instruments: Iterable[InstrumentLike]) -> None:
        self.websocket.unsubscribe_quote(instruments)

    def subscribe_depth(self, instruments: Iterable[InstrumentLike], on_data_received: DataCallback) -> None:
        self.websocket.subscribe_depth(instruments, on_data_received)

    def unsubscribe_depth(self, instruments: Iterable[InstrumentLike]) -> None:
        self.websocket.unsubscribe_depth(instruments)
