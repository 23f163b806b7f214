"""Shared pytest fixtures and fakes."""

import asyncio
import json

import pytest
from loguru import logger
from websockets.exceptions import ConnectionClosedOK

DOGENT_ENV_VARS = (
    "DOGENT_SERVER_URL",
    "DOGENT_TOKEN",
    "DOGENT_SERVER_ID",
    "DOGENT_RECONNECT_DELAY",
    "DOGENT_CONNECT_TIMEOUT",
    "DOGENT_COMMAND_TIMEOUT",
    "DOGENT_LOG_LEVEL",
    "DOGENT_LOG_FILE",
)


class FakeTransport:
    """In-memory stand-in for a websockets client connection.

    Inbound frames are returned by ``recv`` in order; once they run out the
    connection reports itself closed (or blocks forever with ``block=True``).
    """

    def __init__(self, frames=(), fail_send=False, block=False, events=None):
        self.inbound = list(frames)
        self.sent: list[str] = []
        self.fail_send = fail_send
        self.block = block
        self.events = events if events is not None else []
        self.closed = False

    async def send(self, message):
        if self.fail_send:
            raise OSError("broken pipe")
        self.events.append(("send", message))
        self.sent.append(message)

    async def recv(self):
        if self.inbound:
            return self.inbound.pop(0)
        if self.block:
            await asyncio.Future()
        raise ConnectionClosedOK(None, None)

    async def close(self):
        self.closed = True

    def sent_json(self):
        return [json.loads(m) for m in self.sent]


@pytest.fixture
def make_transport():
    """Factory for FakeTransport instances."""
    return FakeTransport


@pytest.fixture
def log_messages():
    """Collect loguru messages emitted during the test."""
    messages: list[str] = []
    handler_id = logger.add(
        lambda msg: messages.append(msg.record["message"]), level="DEBUG"
    )
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove DOGENT_* variables for the duration of the test."""
    for name in DOGENT_ENV_VARS:
        # setenv first so teardown restores the original state
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch
