"""
Wire protocol between the agent and its control server.

Messages are JSON objects carried one per WebSocket frame; see
dogent.protocol.models for the schema and dogent.protocol.handler for the
receive loop and dispatch policy.
"""

from dogent.protocol.handler import ProtocolHandler, Transport
from dogent.protocol.models import (
    AuthMessage,
    CommandMessage,
    CommandResultMessage,
    InboundMessage,
    OutboundMessage,
    PongMessage,
    StatusMessage,
    UnknownMessage,
    decode_frame,
    encode_frame,
)

__all__ = [
    "ProtocolHandler",
    "Transport",
    "AuthMessage",
    "CommandMessage",
    "CommandResultMessage",
    "InboundMessage",
    "OutboundMessage",
    "PongMessage",
    "StatusMessage",
    "UnknownMessage",
    "decode_frame",
    "encode_frame",
]
