"""Glue Schema Registry wire format framing."""

import zlib
from uuid import UUID

from .exceptions import InvalidWireFormatError


class GlueWireFormat:
    """Encodes and decodes the header the Glue Schema Registry puts in front of every payload.

    Layout: one header version byte, one compression byte, the 16 byte
    schema version id, then the (possibly zlib compressed) body.
    """

    HEADER_VERSION_BYTE = 3
    COMPRESSION_NONE = 0
    COMPRESSION_ZLIB = 5
    HEADER_SIZE = 18

    @classmethod
    def encode(cls, schema_version_id: UUID, body: bytes) -> bytes:
        """Frame an uncompressed body with the Glue header.

        Args:
            schema_version_id: Registry id of the schema version the body was written with
            body: Encoded record

        Returns:
            Framed message bytes
        """
        return bytes((cls.HEADER_VERSION_BYTE, cls.COMPRESSION_NONE)) + schema_version_id.bytes + body

    @classmethod
    def decode(cls, message: bytes) -> tuple[UUID, bytes]:
        """Split a framed message into schema version id and body.

        Compressed bodies are inflated.

        Raises:
            InvalidWireFormatError: If the header is missing or unknown
        """
        if message is None or len(message) < cls.HEADER_SIZE:
            raise InvalidWireFormatError(
                f"Message too short for Glue wire format: expected at least {cls.HEADER_SIZE} bytes"
            )
        if message[0] != cls.HEADER_VERSION_BYTE:
            raise InvalidWireFormatError(f"Unknown header version byte: {message[0]}")

        compression = message[1]
        schema_version_id = UUID(bytes=bytes(message[2:cls.HEADER_SIZE]))
        body = bytes(message[cls.HEADER_SIZE:])

        if compression == cls.COMPRESSION_NONE:
            return schema_version_id, body
        if compression == cls.COMPRESSION_ZLIB:
            try:
                return schema_version_id, zlib.decompress(body)
            except zlib.error as e:
                raise InvalidWireFormatError(f"Corrupt zlib body: {e}") from e
        raise InvalidWireFormatError(f"Unknown compression byte: {compression}")
