"""Tests for Glue wire format framing."""

import uuid
import zlib

import pytest

from glueserde.exceptions import InvalidWireFormatError
from glueserde.wire_format import GlueWireFormat

VERSION_ID = uuid.UUID("b7b4a7f0-0f9f-4a2e-9d7c-8d6b4f1e2a3c")


class TestGlueWireFormat:
    """Test cases for GlueWireFormat."""

    def test_encode_layout(self):
        message = GlueWireFormat.encode(VERSION_ID, b"payload")

        assert message[0] == 3
        assert message[1] == 0
        assert message[2:18] == VERSION_ID.bytes
        assert message[18:] == b"payload"

    def test_decode(self):
        message = bytes([3, 0]) + VERSION_ID.bytes + b"payload"

        assert GlueWireFormat.decode(message) == (VERSION_ID, b"payload")

    def test_decode_empty_body(self):
        assert GlueWireFormat.decode(GlueWireFormat.encode(VERSION_ID, b"")) == (VERSION_ID, b"")

    def test_decode_zlib(self):
        message = bytes([3, 5]) + VERSION_ID.bytes + zlib.compress(b'{"a":1}')

        assert GlueWireFormat.decode(message) == (VERSION_ID, b'{"a":1}')

    def test_decode_corrupt_zlib(self):
        message = bytes([3, 5]) + VERSION_ID.bytes + b"not zlib"

        with pytest.raises(InvalidWireFormatError, match="Corrupt zlib body"):
            GlueWireFormat.decode(message)

    def test_decode_too_short(self):
        with pytest.raises(InvalidWireFormatError, match="too short"):
            GlueWireFormat.decode(b"\x03\x00\x01")

    def test_decode_unknown_header_version(self):
        # Confluent framing starts with a zero magic byte
        message = b"\x00" + (42).to_bytes(4, "big") + b"x" * 20

        with pytest.raises(InvalidWireFormatError, match="header version"):
            GlueWireFormat.decode(message)

    def test_decode_unknown_compression(self):
        message = bytes([3, 7]) + VERSION_ID.bytes + b"payload"

        with pytest.raises(InvalidWireFormatError, match="compression byte: 7"):
            GlueWireFormat.decode(message)
