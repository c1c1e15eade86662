"""
OpenAlgo REST Example
=====================

Demonstration of the REST client.
This example shows how to:
1. Check funds and analyzer mode
2. Place, modify and cancel an order
3. Fetch quotes and historical candles

Run against analyzer mode first: orders then go to the sandbox.
"""

from openalgo import OpenAlgo
from openalgo.utils.logger import setup_production_logging


def show(title, response):
    status = response.get('status') if isinstance(response, dict) else 'success'
    marker = "✅" if status == 'success' else "❌"
    print(f"{marker} {title}: {response}")


def main():
    """Main demonstration function"""
    print("🚀 OpenAlgo REST Demonstration")
    print("=" * 60)

    setup_production_logging()
    client = OpenAlgo()

    show("Analyzer", client.analyzer_status())
    show("Funds", client.funds())

    print(f"\n💹 ORDERS")
    print("-" * 30)
    order = client.place_order(
        symbol="RELIANCE",
        action="BUY",
        exchange="NSE",
        price_type="LIMIT",
        product="MIS",
        quantity=1,
        price=2400
    )
    show("Place", order)

    if order.get('status') == 'success':
        order_id = order['orderid']
        show("Modify", client.modify_order(
            order_id=order_id,
            symbol="RELIANCE",
            action="BUY",
            exchange="NSE",
            product="MIS",
            quantity=1,
            price=2390
        ))
        show("Cancel", client.cancel_order(order_id=order_id))

    print(f"\n📈 MARKET DATA")
    print("-" * 30)
    show("Quotes", client.quotes(symbol="RELIANCE", exchange="NSE"))
    candles = client.history(
        symbol="RELIANCE",
        exchange="NSE",
        interval="5m",
        start_date="2024-01-01",
        end_date="2024-01-05"
    )
    if isinstance(candles, list):
        print(f"✅ History: {len(candles)} candles")
    else:
        show("History", candles)

    client.close()


if __name__ == "__main__":
    main()
