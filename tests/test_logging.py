import io
import json
from unittest.mock import Mock

import pytest
from loguru import logger

from openalgo.utils.config import Config, StreamingConfig
from openalgo.streaming import InboundDispatcher, SubscriptionMode, SubscriptionRegistry
from openalgo.utils import logger as client_logging
from openalgo.utils.logger import LogConfig, LogLevel, get_logger


@pytest.fixture
def log_setup():
    log_config = LogConfig()
    yield log_config
    if log_config._console_handler_id is not None:
        logger.remove(log_config._console_handler_id)


def test_level_filters_records(log_setup):
    sink = io.StringIO()
    log_setup.setup_logging(level=LogLevel.QUIET, sink=sink)

    logger.info("connected")
    logger.warning("connection closed")

    output = sink.getvalue()
    assert "connection closed" in output
    assert "connected\n" not in output


def test_reconfigure_replaces_console_handler(log_setup):
    first, second = io.StringIO(), io.StringIO()
    log_setup.setup_logging(level=LogLevel.NORMAL, sink=first)
    log_setup.setup_logging(level=LogLevel.VERBOSE, sink=second)

    logger.debug("queued subscribe")

    assert "queued subscribe" not in first.getvalue()
    assert "queued subscribe" in second.getvalue()
    assert log_setup.current_level is LogLevel.VERBOSE


def test_suppress_and_enable_module(log_setup):
    sink = io.StringIO()
    log_setup.setup_logging(level=LogLevel.VERBOSE, sink=sink)

    log_setup.suppress_module_logging([__name__])
    logger.warning("hidden")
    log_setup.enable_module_logging([__name__])
    logger.warning("visible")

    assert "hidden" not in sink.getvalue()
    assert "visible" in sink.getvalue()


def test_production_preset_keeps_streaming_warnings_and_errors(log_setup, monkeypatch):
    monkeypatch.setattr(client_logging, "log_config", log_setup)
    sink = io.StringIO()
    client_logging.setup_production_logging(sink=sink)

    registry = SubscriptionRegistry()
    registry.register(SubscriptionMode.LTP, Mock(side_effect=RuntimeError("callback exploded")), ())
    dispatcher = InboundDispatcher(registry)
    dispatcher.dispatch("{not json")
    dispatcher.dispatch(json.dumps({"type": "market_data", "mode": 1, "data": {}}))
    dispatcher.dispatch(json.dumps({"status": "success", "message": "subscribed"}))

    output = sink.getvalue()
    assert "Discarding malformed WebSocket frame" in output
    assert "LTP callback raised" in output
    assert "callback exploded" in output
    assert "WebSocket status" not in output


def test_get_logger_binds_component():
    component_logger = get_logger("websocket_manager")
    records = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    try:
        component_logger.debug("hello")
    finally:
        logger.remove(handler_id)

    assert records[-1]["extra"]["component"] == "websocket_manager"


def test_streaming_defaults():
    streaming = StreamingConfig()

    assert streaming.max_reconnect_attempts == 5
    assert streaming.reconnect_delay == 3.0
    assert streaming.resubscribe_on_reconnect is True


def test_config_reads_environment(monkeypatch):
    monkeypatch.setenv("OPENALGO_API_KEY", "env-key")
    monkeypatch.setenv("OPENALGO_WS_URL", "ws://10.0.0.5:8765")

    settings = Config()

    assert settings.api.api_key == "env-key"
    assert settings.streaming.ws_url == "ws://10.0.0.5:8765"
    assert settings.to_dict()["api"]["host"] == "http://127.0.0.1:5000"
