"""
OpenAlgo REST API - Order Methods
"""

from typing import Any, Dict, List, Optional

from .base import BaseAPI, merge_params, stringify


class OrderAPI(BaseAPI):
    """Order management endpoints"""

    def _strategy(self, strategy: Optional[str]) -> str:
        return strategy or self.default_strategy

    def place_order(self,
                    *,
                    symbol: str,
                    action: str,
                    exchange: str,
                    price_type: str = "MARKET",
                    product: str = "MIS",
                    quantity: Any = 1,
                    strategy: Optional[str] = None,
                    price: Any = None,
                    trigger_price: Any = None,
                    **other_params) -> Dict[str, Any]:
        """
        Place an order.

        Args:
            symbol: Trading symbol
            action: BUY or SELL
            exchange: Exchange code
            price_type: MARKET, LIMIT, SL or SL-M
            product: Product type (MIS, CNC, NRML)
            quantity: Quantity to trade
            strategy: Strategy name, defaults to the configured one
            price: Required for LIMIT orders
            trigger_price: Required for SL and SL-M orders
            other_params: disclosed_quantity, target, stoploss, ... (camelCase accepted)
        """
        payload = self._payload(
            strategy=self._strategy(strategy),
            symbol=symbol,
            action=action,
            exchange=exchange,
            pricetype=price_type,
            product=product,
            quantity=str(quantity)
        )
        merge_params(payload, {'price': price, 'trigger_price': trigger_price})
        merge_params(payload, other_params)
        return self.submit_request('placeorder', payload)

    def place_smart_order(self,
                          *,
                          symbol: str,
                          action: str,
                          exchange: str,
                          quantity: Any,
                          position_size: Any,
                          price_type: str = "MARKET",
                          product: str = "MIS",
                          strategy: Optional[str] = None,
                          **other_params) -> Dict[str, Any]:
        """Place an order that takes the current position into account"""
        payload = self._payload(
            strategy=self._strategy(strategy),
            symbol=symbol,
            action=action,
            exchange=exchange,
            pricetype=price_type,
            product=product,
            quantity=str(quantity),
            position_size=str(position_size)
        )
        merge_params(payload, other_params)
        return self.submit_request('placesmartorder', payload)

    def basket_order(self, *, orders: List[Dict[str, Any]], strategy: Optional[str] = None) -> Dict[str, Any]:
        processed = [{key: stringify(value) for key, value in order.items()} for order in orders]
        payload = self._payload(strategy=self._strategy(strategy), orders=processed)
        return self.submit_request('basketorder', payload)

    def split_order(self,
                    *,
                    symbol: str,
                    action: str,
                    exchange: str,
                    quantity: Any,
                    split_size: Any,
                    price_type: str = "MARKET",
                    product: str = "MIS",
                    strategy: Optional[str] = None,
                    **other_params) -> Dict[str, Any]:
        """Split a large order into orders of at most split_size"""
        payload = self._payload(
            strategy=self._strategy(strategy),
            symbol=symbol,
            action=action,
            exchange=exchange,
            quantity=str(quantity),
            splitsize=str(split_size),
            pricetype=price_type,
            product=product
        )
        merge_params(payload, other_params)
        return self.submit_request('splitorder', payload)

    def modify_order(self,
                     *,
                     order_id: str,
                     symbol: str,
                     action: str,
                     exchange: str,
                     product: str,
                     quantity: Any,
                     price: Any,
                     price_type: str = "LIMIT",
                     disclosed_quantity: Any = 0,
                     trigger_price: Any = 0,
                     strategy: Optional[str] = None,
                     **other_params) -> Dict[str, Any]:
        payload = self._payload(
            orderid=order_id,
            strategy=self._strategy(strategy),
            symbol=symbol,
            action=action,
            exchange=exchange,
            pricetype=price_type,
            product=product,
            quantity=str(quantity),
            price=str(price),
            disclosed_quantity=str(disclosed_quantity),
            trigger_price=str(trigger_price)
        )
        merge_params(payload, other_params)
        return self.submit_request('modifyorder', payload)

    def cancel_order(self, *, order_id: str, strategy: Optional[str] = None) -> Dict[str, Any]:
        payload = self._payload(orderid=order_id, strategy=self._strategy(strategy))
        return self.submit_request('cancelorder', payload)

    def cancel_all_order(self, *, strategy: Optional[str] = None) -> Dict[str, Any]:
        payload = self._payload(strategy=self._strategy(strategy))
        return self.submit_request('cancelallorder', payload)

    def close_position(self,
                       *,
                       strategy: Optional[str] = None,
                       product: Optional[str] = None,
                       symbol_group: Optional[str] = None) -> Dict[str, Any]:
        """Close all open positions, optionally filtered by product and symbol group"""
        payload = self._payload(strategy=self._strategy(strategy))
        if product:
            payload['product'] = product
        if symbol_group:
            payload['symbolgroup'] = symbol_group
        return self.submit_request('closeposition', payload)
