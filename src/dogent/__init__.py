"""
dogent: persistent remote-control agent.

The agent keeps one authenticated WebSocket session to its control server,
runs the commands it receives and reports their output back.
"""

from dogent.config import SessionConfig
from dogent.errors import (
    CommandExecutionError,
    ConfigError,
    DogentError,
    FrameDecodeError,
    NotConnectedError,
    TransportError,
)
from dogent.executor import CommandExecutor, ShellExecutor
from dogent.protocol import ProtocolHandler
from dogent.session import SessionManager, SessionState

__version__ = "0.1.0"

__all__ = [
    "SessionConfig",
    "SessionManager",
    "SessionState",
    "ProtocolHandler",
    "CommandExecutor",
    "ShellExecutor",
    "DogentError",
    "ConfigError",
    "TransportError",
    "NotConnectedError",
    "FrameDecodeError",
    "CommandExecutionError",
]
