"""
Protocol handler: authentication handshake, receive loop and dispatch.

The handler borrows a transport from the session manager for one cycle and
never closes it. Frames are processed strictly one at a time, so at most one
command is in flight and every command gets exactly one ``command_result``.
"""

from typing import Protocol

from websockets.exceptions import WebSocketException

from dogent.config import SessionConfig
from dogent.errors import FrameDecodeError, TransportError
from dogent.executor import CommandExecutor, ShellExecutor
from dogent.logger import get_logger
from dogent.protocol.models import (
    AuthMessage,
    CommandMessage,
    CommandResultMessage,
    InboundMessage,
    OutboundMessage,
    PongMessage,
    StatusMessage,
    decode_frame,
    encode_frame,
)

logger = get_logger(__name__)


class Transport(Protocol):
    """The subset of a websockets client connection the agent uses."""

    async def send(self, message: str) -> None: ...

    async def recv(self) -> str | bytes: ...

    async def close(self) -> None: ...


# Errors that mean the transport is no longer usable
TRANSPORT_ERRORS = (WebSocketException, OSError)


class ProtocolHandler:
    """Speaks the agent protocol over an established transport.

    Args:
        executor: Facility used to run ``command`` frames. Defaults to a
            ShellExecutor.
    """

    def __init__(self, executor: CommandExecutor | None = None):
        self.executor = executor or ShellExecutor()

    async def send(self, transport: Transport, message: OutboundMessage) -> None:
        """Encode and write one outbound frame.

        Raises:
            TransportError: If the write fails.
        """
        try:
            await transport.send(encode_frame(message))
        except TRANSPORT_ERRORS as e:
            raise TransportError(f"send failed: {e}") from e

    async def authenticate(self, transport: Transport, config: SessionConfig) -> None:
        """Send the auth record. No reply is awaited.

        Raises:
            TransportError: If the write fails.
        """
        await self.send(
            transport, AuthMessage(token=config.token, server_id=config.server_id)
        )
        logger.debug(f"Sent authentication for server_id={config.server_id!r}")

    async def serve(self, transport: Transport) -> None:
        """Read and dispatch frames until the transport stops working."""
        while True:
            try:
                frame = await transport.recv()
            except TRANSPORT_ERRORS as e:
                logger.warning(f"Read error: {e}")
                return

            try:
                message = decode_frame(frame)
            except FrameDecodeError as e:
                logger.error(f"Frame parse error: {e}")
                continue

            try:
                await self.dispatch(transport, message)
            except TransportError as e:
                logger.warning(f"Reply failed, dropping connection: {e}")
                return

    async def dispatch(self, transport: Transport, message: InboundMessage) -> None:
        """Act on a single decoded frame.

        Raises:
            TransportError: If a reply could not be sent.
        """
        if isinstance(message, StatusMessage):
            logger.info(f"ℹ️ Status: {message.content}")
        elif isinstance(message, PongMessage):
            pass
        elif isinstance(message, CommandMessage):
            await self._handle_command(transport, message)
        else:
            logger.warning(f"Unknown message: {message.model_dump()}")

    async def _handle_command(
        self, transport: Transport, message: CommandMessage
    ) -> None:
        logger.info(f"📢 Received command: {message.content}")
        try:
            output = await self.executor.execute(message.content)
        except Exception as e:
            logger.error(f"Execution error: {e}")
            output = format_execution_error(e)

        await self.send(transport, CommandResultMessage(content=output))


def format_execution_error(error: BaseException) -> str:
    """Render an execution failure as the ``command_result`` payload."""
    text = f"Error: {error}" if str(error) else f"Error: {type(error).__name__}"
    output = getattr(error, "output", "")
    if output:
        text = f"{text}\n{output}"
    return text
