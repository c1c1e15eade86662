from unittest.mock import Mock

from openalgo.streaming import Instrument, IntentAction, SubscriptionMode, SubscriptionRegistry

RELIANCE = Instrument("NSE", "RELIANCE")
INFY = Instrument("NSE", "INFY")


def test_one_callback_per_mode():
    registry = SubscriptionRegistry()
    first, second = Mock(), Mock()

    assert registry.register(SubscriptionMode.LTP, first, (RELIANCE,)) is None
    replaced = registry.register(SubscriptionMode.LTP, second, (INFY,))

    assert replaced.callback is first
    assert len(registry) == 1
    assert registry.get_callback(SubscriptionMode.LTP) is second


def test_remove_and_clear():
    registry = SubscriptionRegistry()
    registry.register(SubscriptionMode.QUOTE, Mock(), (RELIANCE,))
    registry.register(SubscriptionMode.DEPTH, Mock(), (RELIANCE,))

    assert registry.remove(SubscriptionMode.QUOTE) is not None
    assert registry.remove(SubscriptionMode.QUOTE) is None
    assert registry.get_callback(SubscriptionMode.QUOTE) is None

    registry.clear()
    assert len(registry) == 0


def test_replay_intents_carry_latest_instruments():
    registry = SubscriptionRegistry()
    registry.register(SubscriptionMode.DEPTH, Mock(), (RELIANCE,))
    registry.register(SubscriptionMode.LTP, Mock(), (RELIANCE,))
    registry.register(SubscriptionMode.DEPTH, Mock(), (RELIANCE, INFY))

    replay = registry.replay_intents()

    assert [intent.mode for intent in replay] == [SubscriptionMode.DEPTH, SubscriptionMode.LTP]
    assert all(intent.action is IntentAction.SUBSCRIBE for intent in replay)
    assert replay[0].instruments == (RELIANCE, INFY)
