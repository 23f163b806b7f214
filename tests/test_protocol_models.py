"""
Unit tests for the wire protocol models.
"""

import json

import pytest

from dogent.errors import FrameDecodeError
from dogent.protocol.models import (
    AuthMessage,
    CommandMessage,
    CommandResultMessage,
    PongMessage,
    StatusMessage,
    UnknownMessage,
    decode_frame,
    encode_frame,
)


class TestDecodeFrame:
    """Test decoding of inbound frames into typed messages."""

    def test_status(self):
        msg = decode_frame('{"type": "status", "content": "Authenticated"}')
        assert isinstance(msg, StatusMessage)
        assert msg.content == "Authenticated"

    def test_pong(self):
        msg = decode_frame('{"type": "pong"}')
        assert isinstance(msg, PongMessage)

    def test_command(self):
        msg = decode_frame('{"type": "command", "content": "uname -a"}')
        assert isinstance(msg, CommandMessage)
        assert msg.content == "uname -a"

    def test_command_without_content_defaults_to_empty(self):
        msg = decode_frame('{"type": "command"}')
        assert isinstance(msg, CommandMessage)
        assert msg.content == ""

    @pytest.mark.parametrize("content", ["5", "null", '["ls"]', "{}"])
    def test_command_with_non_string_content_is_empty(self, content):
        msg = decode_frame(f'{{"type": "command", "content": {content}}}')
        assert isinstance(msg, CommandMessage)
        assert msg.content == ""

    def test_bytes_frame(self):
        msg = decode_frame(b'{"type": "status", "content": "hi"}')
        assert isinstance(msg, StatusMessage)

    def test_unrecognized_type(self):
        msg = decode_frame('{"type": "ping_unexpected", "extra": 1}')
        assert isinstance(msg, UnknownMessage)
        assert msg.type == "ping_unexpected"

    def test_missing_type(self):
        msg = decode_frame('{"content": "orphan"}')
        assert isinstance(msg, UnknownMessage)
        assert msg.type is None

    def test_non_string_type(self):
        msg = decode_frame('{"type": 42}')
        assert isinstance(msg, UnknownMessage)

    @pytest.mark.parametrize(
        "frame",
        [
            "not json at all",
            "",
            "[1, 2, 3]",
            '"just a string"',
            b"\xff\xfe\x00",
        ],
    )
    def test_malformed_frames_raise(self, frame):
        with pytest.raises(FrameDecodeError):
            decode_frame(frame)


class TestEncodeFrame:
    """Test encoding of outbound messages."""

    def test_auth_record_has_only_token_and_server_id(self):
        frame = encode_frame(AuthMessage(token="s3cret", server_id="web-01"))
        assert json.loads(frame) == {"token": "s3cret", "server_id": "web-01"}

    def test_command_result(self):
        frame = encode_frame(CommandResultMessage(content="hi\n"))
        assert json.loads(frame) == {"type": "command_result", "content": "hi\n"}
