"""
Session manager: the connect → authenticate → serve → reconnect loop.

The manager owns the single transport of the process. Each cycle dials the
server, hands the fresh connection to the protocol handler for the
handshake and the serve loop, and closes it once the loop returns. Dial
failures are retried forever with a fixed delay; failures after a
successful dial reconnect immediately.
"""

import asyncio
from enum import Enum
from typing import Awaitable, Callable, Optional

import websockets
from websockets.exceptions import WebSocketException

from dogent.config import SessionConfig
from dogent.errors import NotConnectedError, TransportError
from dogent.executor import ShellExecutor
from dogent.logger import get_logger
from dogent.protocol.handler import TRANSPORT_ERRORS, ProtocolHandler, Transport
from dogent.protocol.models import OutboundMessage

logger = get_logger(__name__)

Connector = Callable[[str], Awaitable[Transport]]
Sleeper = Callable[[float], Awaitable[None]]

DIAL_ERRORS = (OSError, asyncio.TimeoutError, WebSocketException)


class SessionState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    AUTHENTICATING = "authenticating"
    SERVING = "serving"


class SessionManager:
    """Keeps exactly one authenticated connection to the control server.

    Args:
        config: Immutable agent settings.
        handler: Protocol handler used for each cycle. Defaults to one
            backed by a ShellExecutor with ``config.command_timeout``.
        connect: Coroutine function that dials a URL and returns an open
            transport. Defaults to ``websockets.connect``.
        sleep: Coroutine function used for the backoff after a failed
            dial. Defaults to a wait that ends early on ``stop()``.
    """

    def __init__(
        self,
        config: SessionConfig,
        handler: ProtocolHandler | None = None,
        connect: Connector | None = None,
        sleep: Sleeper | None = None,
    ):
        self.config = config
        self.handler = handler or ProtocolHandler(
            ShellExecutor(timeout=config.command_timeout)
        )
        self._connect = connect or self._dial
        self._sleep = sleep or self._wait_or_stop
        self._state = SessionState.DISCONNECTED
        self._transport: Optional[Transport] = None
        self._serve_task: Optional[asyncio.Task] = None
        self._stop_cancelled = False
        self._stopping = asyncio.Event()

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def connected(self) -> bool:
        return self._transport is not None

    async def run(self) -> None:
        """Run session cycles until ``stop()`` is called.

        Raises:
            ConfigError: If the server URL is malformed. Never retried.
        """
        self.config.endpoint()
        logger.info(f"Agent {self.config.server_id!r} starting")

        while not self._stopping.is_set():
            await self.run_once()

        logger.info("🛑 Agent stopped.")

    async def run_once(self) -> bool:
        """Run a single session cycle.

        Returns:
            True if the agent authenticated and served, False if the dial or
            the handshake failed or stop() arrived before serving began.
        """
        url = self.config.server_url
        self._set_state(SessionState.CONNECTING)
        logger.info(f"🔌 Connecting to {url}...")

        try:
            transport = await self._connect(url)
        except DIAL_ERRORS as e:
            self._set_state(SessionState.DISCONNECTED)
            delay = self.config.reconnect_delay
            logger.warning(f"❌ Connection failed: {e}. Retrying in {delay:g}s...")
            await self._sleep(delay)
            return False

        self._transport = transport
        logger.info("✅ Connected!")
        try:
            if self._stopping.is_set():
                return False

            self._set_state(SessionState.AUTHENTICATING)
            try:
                await self.handler.authenticate(transport, self.config)
            except TransportError as e:
                logger.warning(f"Authentication write failed: {e}")
                return False

            if self._stopping.is_set():
                return False

            self._set_state(SessionState.SERVING)
            self._stop_cancelled = False
            self._serve_task = asyncio.create_task(self.handler.serve(transport))
            try:
                await self._serve_task
            except asyncio.CancelledError:
                # Only swallow the cancellation stop() issued
                if not self._stop_cancelled:
                    raise
            finally:
                self._serve_task = None
            return True
        finally:
            self._transport = None
            await self._close(transport)
            self._set_state(SessionState.DISCONNECTED)

    async def send_message(self, message: OutboundMessage) -> None:
        """Send a message on the current connection.

        Raises:
            NotConnectedError: If no connection is open.
            TransportError: If the write fails.
        """
        if self._transport is None:
            raise NotConnectedError()
        await self.handler.send(self._transport, message)

    def stop(self) -> None:
        """Signal the manager to stop and abort the current serve loop."""
        logger.info("Shutting down...")
        self._stopping.set()
        if self._serve_task is not None and not self._serve_task.done():
            self._stop_cancelled = True
            self._serve_task.cancel()

    async def _dial(self, url: str) -> Transport:
        return await websockets.connect(url, open_timeout=self.config.connect_timeout)

    async def _wait_or_stop(self, delay: float) -> None:
        try:
            await asyncio.wait_for(self._stopping.wait(), timeout=delay)
        except asyncio.TimeoutError:
            pass

    async def _close(self, transport: Transport) -> None:
        try:
            await transport.close()
        except TRANSPORT_ERRORS as e:
            logger.debug(f"Error while closing connection: {e}")

    def _set_state(self, state: SessionState) -> None:
        if state is not self._state:
            logger.debug(f"Session state: {self._state.value} → {state.value}")
        self._state = state
