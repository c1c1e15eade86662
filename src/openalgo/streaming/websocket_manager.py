"""
OpenAlgo WebSocket Manager
==========================

Real-time WebSocket connection to the OpenAlgo streaming server.
Handles authentication, LTP/Quote/Depth subscriptions, intents issued
while disconnected, and bounded automatic reconnection.
"""

import asyncio
import contextlib
import time
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Union

import websockets
from websockets.exceptions import ConnectionClosed, WebSocketException

from ..exceptions import ConnectionSetupError, NotConnectedError
from ..utils.config import config
from ..utils.logger import get_logger
from .dispatcher import InboundDispatcher
from .models import ConnectionState, Instrument, IntentAction, OutboundIntent, SubscriptionMode
from .outbound_queue import OutboundQueue
from .registry import DataCallback, SubscriptionRegistry

InstrumentLike = Union[Instrument, Mapping[str, Any]]
ModeLike = Union[SubscriptionMode, str]

# Errors raised by a send on a dying or missing socket
SEND_ERRORS = (NotConnectedError, WebSocketException, OSError, asyncio.TimeoutError)

# Errors raised while the transport is being set up
SETUP_ERRORS = (WebSocketException, OSError, asyncio.TimeoutError)


class OpenAlgoWebSocket:
    """
    Streaming subscription client for OpenAlgo market data.

    Features:
    - One callback per mode (LTP, Quote, Depth); re-subscribing replaces it
    - Intents issued before the socket opens are queued and flushed in order
    - Fixed-delay reconnection with a bounded attempt count
    - Active subscriptions replayed after every reconnect
    - Malformed frames and failing callbacks are logged, never raised
    """

    def __init__(self,
                 api_key: str,
                 ws_url: Optional[str] = None,
                 *,
                 max_reconnect_attempts: Optional[int] = None,
                 reconnect_delay: Optional[float] = None,
                 resubscribe_on_reconnect: Optional[bool] = None,
                 on_state_change: Optional[Callable[[ConnectionState], None]] = None,
                 on_max_reconnect: Optional[Callable[[], None]] = None,
                 connect_factory: Optional[Callable[..., Any]] = None):

        settings = config.streaming
        self.api_key = api_key
        self.ws_url = ws_url or settings.ws_url
        self.logger = get_logger('websocket_manager')

        # Callbacks
        self.on_state_change = on_state_change
        self.on_max_reconnect = on_max_reconnect

        # Transport
        self._connect_factory = connect_factory or websockets.connect
        self._connect_kwargs = {
            'ping_interval': settings.ping_interval,
            'ping_timeout': settings.ping_timeout,
            'close_timeout': settings.close_timeout
        }

        # Connection state
        self.websocket = None
        self.state = ConnectionState.DISCONNECTED
        self.reconnect_attempts = 0
        self.max_reconnect_attempts = (
            settings.max_reconnect_attempts if max_reconnect_attempts is None else max_reconnect_attempts
        )
        self.reconnect_delay = settings.reconnect_delay if reconnect_delay is None else reconnect_delay
        self.resubscribe_on_reconnect = (
            settings.resubscribe_on_reconnect if resubscribe_on_reconnect is None else resubscribe_on_reconnect
        )
        self.max_reconnect_reached = False
        self._should_reconnect = False
        self._session_active = False
        # Bumped by every connect() and disconnect(); an _open() from an older session aborts
        self._session = 0

        # Owned components
        self.registry = SubscriptionRegistry()
        self.outbound_queue = OutboundQueue()
        self.dispatcher = InboundDispatcher(self.registry)

        # Tasks
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._open_lock = asyncio.Lock()
        self._reader_task: Optional[asyncio.Task] = None
        self._flush_task: Optional[asyncio.Task] = None
        self._reconnect_task: Optional[asyncio.Task] = None

        # Monitoring
        self.last_message_time = 0.0
        self.reconnections = 0

    @property
    def is_connected(self) -> bool:
        return self.state is ConnectionState.OPEN

    async def __aenter__(self) -> "OpenAlgoWebSocket":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.disconnect()

    # ------------------------------------------------------------------
    # Connection lifecycle
    # ------------------------------------------------------------------

    async def connect(self) -> None:
        """
        Open the connection and authenticate.

        Returns once the socket is open and the authenticate intent has
        been sent. Server acknowledgement is not awaited.

        Raises:
            ConnectionSetupError: transport failed before opening
        """
        self._loop = asyncio.get_running_loop()
        self._session += 1
        session = self._session
        self._should_reconnect = True
        self._session_active = True
        self.max_reconnect_reached = False

        await self._cancel_task(self._reconnect_task)

        async with self._open_lock:
            if self.state is ConnectionState.OPEN:
                self.logger.debug("connect() called on an open connection")
                return
            try:
                await self._open(session)
            except ConnectionSetupError:
                # A failed manual connect ends the session; no automatic retry
                if self._session == session:
                    self._should_reconnect = False
                    self._session_active = False
                raise

    async def disconnect(self) -> None:
        """Close the connection, stop reconnecting and drop all subscriptions"""
        self._session += 1
        self._should_reconnect = False
        self._session_active = False

        await self._cancel_task(self._reconnect_task)

        websocket = self.websocket
        if websocket is not None:
            self.logger.info("Disconnecting WebSocket...")
            self._set_state(ConnectionState.CLOSING)
            self.websocket = None
            await self._cancel_task(self._flush_task)
            try:
                await websocket.close()
            except SETUP_ERRORS as e:
                self.logger.error(f"Error disconnecting WebSocket: {e}")
            await self._cancel_task(self._reader_task)
            self.logger.info("WebSocket disconnected")

        self.registry.clear()
        self._set_state(ConnectionState.DISCONNECTED)

    async def _open(self, session: int) -> None:
        # Any writer left over from the previous connection is stale
        await self._cancel_task(self._flush_task)
        self._set_state(ConnectionState.CONNECTING)
        self.logger.info(f"Connecting to OpenAlgo WebSocket: {self.ws_url}")

        try:
            websocket = await self._connect_factory(self.ws_url, **self._connect_kwargs)
        except asyncio.CancelledError:
            self._set_state(ConnectionState.DISCONNECTED)
            raise
        except SETUP_ERRORS as e:
            self._set_state(ConnectionState.DISCONNECTED)
            self.logger.error(f"WebSocket connection failed: {e}")
            raise ConnectionSetupError(self.ws_url, str(e)) from e

        await self._check_session(session, websocket)
        self.websocket = websocket
        self._set_state(ConnectionState.AUTHENTICATING)

        try:
            await self._send_intent(OutboundIntent.authenticate(self.api_key))
        except asyncio.CancelledError:
            await self._abort(websocket)
            raise
        except SEND_ERRORS as e:
            await self._abort(websocket)
            self.logger.error(f"WebSocket authentication could not be sent: {e}")
            raise ConnectionSetupError(self.ws_url, f"authentication send failed: {e}") from e
        await self._check_session(session, websocket)

        self.reconnect_attempts = 0
        self._set_state(ConnectionState.OPEN)
        self.logger.info("WebSocket connected and authentication sent")

        self._reader_task = asyncio.get_running_loop().create_task(self._message_handler(websocket))

        if self.resubscribe_on_reconnect:
            self._queue_resubscription()
        # wait() rather than await: a close during the flush cancels the writer
        await asyncio.wait({self._schedule_flush()})

    async def _check_session(self, session: int, websocket) -> None:
        """Close a socket that opened after disconnect() ended its session"""
        if session == self._session:
            return
        await self._abort(websocket)
        self.logger.info("Connection superseded by disconnect(), socket closed")
        raise ConnectionSetupError(self.ws_url, "disconnected while connecting")

    async def _abort(self, websocket) -> None:
        if self.websocket is websocket:
            self.websocket = None
        with contextlib.suppress(*SETUP_ERRORS):
            await websocket.close()
        self._set_state(ConnectionState.DISCONNECTED)

    async def _message_handler(self, websocket) -> None:
        """Read frames until the socket closes, then run the close policy"""
        try:
            async for message in websocket:
                self.last_message_time = time.time()
                self.dispatcher.dispatch(message)
        except ConnectionClosed as e:
            self.logger.warning(f"WebSocket connection closed: {e}")
        except SETUP_ERRORS as e:
            self.logger.error(f"Error in message handler: {e}")

        self._handle_close(websocket)

    def _handle_close(self, websocket) -> None:
        if websocket is not self.websocket:
            # Stale reader from a connection we already replaced or closed
            return

        self.websocket = None
        if self._flush_task is not None and not self._flush_task.done():
            self._flush_task.cancel()
        self._set_state(ConnectionState.DISCONNECTED)
        self.logger.warning("WebSocket disconnected")

        if not self._should_reconnect:
            return
        self._reconnect_task = asyncio.get_running_loop().create_task(self._handle_reconnection())

    async def _handle_reconnection(self) -> None:
        """Fixed-delay reconnection, bounded by max_reconnect_attempts"""
        while self._should_reconnect:
            if self.reconnect_attempts >= self.max_reconnect_attempts:
                self.max_reconnect_reached = True
                self.logger.error(f"Max reconnection attempts ({self.max_reconnect_attempts}) reached")
                self._notify(self.on_max_reconnect)
                return

            self.reconnect_attempts += 1
            self.logger.info(
                f"Attempting reconnection ({self.reconnect_attempts}/{self.max_reconnect_attempts}) "
                f"in {self.reconnect_delay}s"
            )
            await asyncio.sleep(self.reconnect_delay)

            if not self._should_reconnect:
                return

            async with self._open_lock:
                if self.state is ConnectionState.OPEN:
                    return
                try:
                    await self._open(self._session)
                except ConnectionSetupError as e:
                    self.logger.error(f"Reconnection failed: {e}")
                    continue

            self.reconnections += 1
            return

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, mode: ModeLike, instruments: Iterable[InstrumentLike], callback: DataCallback) -> None:
        """
        Register callback for mode and request the instruments.

        Replaces any callback already registered for the mode. The
        subscribe intent is sent right away when the socket is open,
        otherwise it is queued until the connection opens.

        Raises:
            NotConnectedError: no connect() has started a session
        """
        mode = SubscriptionMode.parse(mode)
        if not callable(callback):
            raise TypeError("callback must be callable")
        self._require_session("subscribe")

        symbols = tuple(Instrument.from_value(i) for i in instruments)
        previous = self.registry.register(mode, callback, symbols)
        if previous is not None:
            self.logger.debug(f"Replacing {mode.wire_name} callback")

        self._submit(OutboundIntent.subscribe(mode, symbols))

    def unsubscribe(self, mode: ModeLike, instruments: Iterable[InstrumentLike]) -> None:
        """
        Drop the callback for mode and request the server to stop sending.

        The local callback is always removed; the unsubscribe intent is
        sent when open, queued otherwise.

        Raises:
            NotConnectedError: no connect() has started a session
        """
        mode = SubscriptionMode.parse(mode)
        symbols = tuple(Instrument.from_value(i) for i in instruments)
        self.registry.remove(mode)
        self._require_session("unsubscribe")

        self._submit(OutboundIntent.unsubscribe(mode, symbols))

    def subscribe_ltp(self, instruments: Iterable[InstrumentLike], on_data_received: DataCallback) -> None:
        self.subscribe(SubscriptionMode.LTP, instruments, on_data_received)

    def unsubscribe_ltp(self, instruments: Iterable[InstrumentLike]) -> None:
        self.unsubscribe(SubscriptionMode.LTP, instruments)

    def subscribe_quote(self, instruments: Iterable[InstrumentLike], on_data_received: DataCallback) -> None:
        self.subscribe(SubscriptionMode.QUOTE, instruments, on_data_received)

    def unsubscribe_quote(self, instruments: Iterable[InstrumentLike]) -> None:
        self.unsubscribe(SubscriptionMode.QUOTE, instruments)

    def subscribe_depth(self, instruments: Iterable[InstrumentLike], on_data_received: DataCallback) -> None:
        self.subscribe(SubscriptionMode.DEPTH, instruments, on_data_received)

    def unsubscribe_depth(self, instruments: Iterable[InstrumentLike]) -> None:
        self.unsubscribe(SubscriptionMode.DEPTH, instruments)

    def _require_session(self, action: str) -> None:
        if not self._session_active:
            raise NotConnectedError(f"Cannot {action}: call connect() first")

    # ------------------------------------------------------------------
    # Outbound path
    # ------------------------------------------------------------------

    def _submit(self, intent: OutboundIntent) -> None:
        self.outbound_queue.enqueue(intent)
        if self.state is ConnectionState.OPEN:
            self._schedule_flush()
        else:
            self.logger.debug(
                f"{intent.action.value} {intent.mode.wire_name} queued until connection opens "
                f"(state={self.state.value})"
            )

    def _queue_resubscription(self) -> None:
        replay = [
            intent for intent in self.registry.replay_intents()
            if not self.outbound_queue.has_pending(IntentAction.SUBSCRIBE, intent.mode)
        ]
        if replay:
            self.outbound_queue.prepend(replay)
            self.logger.info(f"Resubscribing {', '.join(i.mode.wire_name for i in replay)}")

    def _schedule_flush(self) -> asyncio.Task:
        # One writer at a time keeps the wire order equal to the queue order
        if self._flush_task is None or self._flush_task.done():
            self._flush_task = self._loop.create_task(self._flush_outbound())
        return self._flush_task

    async def _flush_outbound(self) -> None:
        if self.state is not ConnectionState.OPEN:
            return
        try:
            await self.outbound_queue.flush_all(self._send_intent)
        except SEND_ERRORS as e:
            self.logger.warning(
                f"Outbound flush interrupted, {len(self.outbound_queue)} intent(s) kept queued: {e}"
            )

    async def _send_intent(self, intent: OutboundIntent) -> None:
        websocket = self.websocket
        if websocket is None:
            raise NotConnectedError("WebSocket is not open")
        await websocket.send(intent.to_json())
        if intent.action is IntentAction.AUTHENTICATE:
            self.logger.debug("Sent authenticate")
        else:
            self.logger.debug(f"Sent {intent.action.value} {intent.mode.wire_name} ({len(intent.instruments)} symbols)")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _set_state(self, state: ConnectionState) -> None:
        if state is self.state:
            return
        previous, self.state = self.state, state
        self.logger.debug(f"Connection state {previous.value} -> {state.value}")
        self._notify(self.on_state_change, state)

    def _notify(self, callback: Optional[Callable], *args) -> None:
        if callback is None:
            return
        try:
            callback(*args)
        except Exception:
            self.logger.exception("Connection observer raised")

    @staticmethod
    async def _cancel_task(task: Optional[asyncio.Task]) -> None:
        if task is None or task.done() or task is asyncio.current_task():
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    def get_connection_stats(self) -> Dict:
        """Get connection statistics"""
        dispatch = self.dispatcher.get_stats()
        return {
            'state': self.state.value,
            'is_connected': self.is_connected,
            'ws_url': self.ws_url,
            'messages_received': dispatch['frames_received'],
            'messages_dispatched': dispatch['frames_dispatched'],
            'malformed_frames': dispatch['malformed_frames'],
            'callback_errors': dispatch['callback_errors'],
            'last_message_time': self.last_message_time,
            'reconnect_attempts': self.reconnect_attempts,
            'max_reconnect_reached': self.max_reconnect_reached,
            'reconnections': self.reconnections,
            'queued_intents': len(self.outbound_queue),
            'subscribed_modes': [mode.wire_name for mode in self.registry.modes()]
        }
