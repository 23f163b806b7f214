"""
Pydantic models for the agent wire protocol.

One WebSocket text frame carries one JSON object:

    Agent  -> Server: {"token": "...", "server_id": "..."}        (once, on connect)
    Server -> Agent:  {"type": "status", "content": "..."}
    Server -> Agent:  {"type": "pong"}
    Server -> Agent:  {"type": "command", "content": "uname -a"}
    Agent  -> Server: {"type": "command_result", "content": "..."}

Inbound frames with a missing or unrecognized ``type`` decode to
UnknownMessage rather than failing.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Tag,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from dogent.errors import FrameDecodeError

# ─── Server → Agent ──────────────────────────────────────────────────


class StatusMessage(BaseModel):
    """Informational notice from the server."""

    type: Literal["status"] = "status"
    content: Any = None


class PongMessage(BaseModel):
    """Heartbeat acknowledgment."""

    type: Literal["pong"] = "pong"


class CommandMessage(BaseModel):
    """Request to run a shell command."""

    type: Literal["command"] = "command"
    content: str = ""

    @field_validator("content", mode="before")
    @classmethod
    def non_string_is_empty(cls, value: Any) -> Any:
        # A bad payload still runs (and fails) as an empty command
        return value if isinstance(value, str) else ""


class UnknownMessage(BaseModel):
    """Any frame whose ``type`` is missing or not understood."""

    model_config = ConfigDict(extra="allow")

    type: Any = None


# ─── Agent → Server ──────────────────────────────────────────────────


class AuthMessage(BaseModel):
    """Handshake record sent once right after connecting."""

    token: str
    server_id: str


class CommandResultMessage(BaseModel):
    """Output (or error text) of a single command."""

    type: Literal["command_result"] = "command_result"
    content: str


KNOWN_TYPES = ("status", "pong", "command")


def _frame_kind(value: Any) -> str | None:
    if isinstance(value, dict):
        kind = value.get("type")
    elif isinstance(value, BaseModel):
        kind = getattr(value, "type", None)
    else:
        return None
    return kind if kind in KNOWN_TYPES else "unknown"


InboundMessage = Annotated[
    Union[
        Annotated[StatusMessage, Tag("status")],
        Annotated[PongMessage, Tag("pong")],
        Annotated[CommandMessage, Tag("command")],
        Annotated[UnknownMessage, Tag("unknown")],
    ],
    Discriminator(_frame_kind),
]

OutboundMessage = Union[AuthMessage, CommandResultMessage]

_inbound_adapter = TypeAdapter(InboundMessage)


def decode_frame(frame: str | bytes) -> InboundMessage:
    """Decode one raw frame into a typed inbound message.

    Raises:
        FrameDecodeError: If the frame is not a JSON object or does not
            match the schema for its ``type``.
    """
    try:
        return _inbound_adapter.validate_json(frame)
    except ValidationError as e:
        raise FrameDecodeError(str(e)) from e


def encode_frame(message: OutboundMessage) -> str:
    """Serialize an outbound message to a JSON text frame."""
    return message.model_dump_json()
