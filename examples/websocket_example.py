"""
OpenAlgo Streaming Example
==========================

Demonstration of the WebSocket market data client.
This example shows how to:
1. Connect and authenticate
2. Subscribe to LTP, Quote and Depth streams
3. Unsubscribe and disconnect cleanly

Set OPENALGO_API_KEY and OPENALGO_WS_URL in .env before running.
"""

import asyncio

from openalgo import OpenAlgoWebSocket, ConnectionState
from openalgo.utils.config import config
from openalgo.utils.logger import setup_development_logging

INSTRUMENTS = [
    {"exchange": "NSE", "symbol": "RELIANCE"},
    {"exchange": "NSE", "symbol": "INFY"},
]


def on_ltp(data):
    print(f"LTP    {data.get('symbol')}: {data.get('ltp')}")


def on_quote(data):
    print(f"Quote  {data.get('symbol')}: open={data.get('open')} high={data.get('high')} "
          f"low={data.get('low')} ltp={data.get('ltp')} volume={data.get('volume')}")


def on_depth(data):
    depth = data.get('depth', {})
    buys = depth.get('buy', [])
    sells = depth.get('sell', [])
    best_bid = buys[0]['price'] if buys else None
    best_ask = sells[0]['price'] if sells else None
    print(f"Depth  {data.get('symbol')}: bid={best_bid} ask={best_ask} levels={len(buys)}/{len(sells)}")


def on_state_change(state: ConnectionState):
    print(f"🔌 Connection state: {state.value}")


def on_max_reconnect():
    print("❌ Gave up reconnecting, call connect() to start over")


async def main():
    """Main demonstration function"""
    print("🚀 OpenAlgo Streaming Demonstration")
    print("=" * 60)

    setup_development_logging()

    client = OpenAlgoWebSocket(
        config.api.api_key,
        config.streaming.ws_url,
        on_state_change=on_state_change,
        on_max_reconnect=on_max_reconnect
    )

    try:
        async with client:
            client.subscribe_ltp(INSTRUMENTS, on_ltp)
            client.subscribe_quote(INSTRUMENTS, on_quote)
            client.subscribe_depth(INSTRUMENTS[:1], on_depth)

            await asyncio.sleep(20)

            print("\n📴 Unsubscribing Depth")
            client.unsubscribe_depth(INSTRUMENTS[:1])
            await asyncio.sleep(10)

            stats = client.get_connection_stats()
            print(f"\n📊 CONNECTION SUMMARY")
            print("-" * 30)
            print(f"Messages Received:   {stats['messages_received']}")
            print(f"Messages Dispatched: {stats['messages_dispatched']}")
            print(f"Reconnections:       {stats['reconnections']}")
            print(f"Subscribed Modes:    {', '.join(stats['subscribed_modes'])}")

    except Exception as e:
        print(f"\n❌ Error during demonstration: {e}")
        print("Please check that the OpenAlgo WebSocket server is running.")


if __name__ == "__main__":
    asyncio.run(main())
