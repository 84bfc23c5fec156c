"""Serialization and deserialization facades over the Glue wire format."""

import io
import logging
from collections.abc import Callable, Mapping
from functools import lru_cache
from typing import Any
from uuid import UUID

import fastavro
from google.protobuf.message import Message

from .codec import parse_avro_schema
from .exceptions import InvalidWireFormatError, SerializationError, UnsupportedDataFormatError
from .models import AvroRecord, DataFormat, JsonDataWithSchema, SchemaDefinition
from .protobuf_schema import ProtobufSchema, message_index
from .protocol import SchemaRegistryGateway
from .wire_format import GlueWireFormat

logger = logging.getLogger(__name__)

Encoder = Callable[[Any], bytes]
Decoder = Callable[[str, bytes], Any]


@lru_cache(maxsize=128)
def _avro_schema(definition: str) -> dict[str, Any]:
    return parse_avro_schema(definition)


@lru_cache(maxsize=128)
def _protobuf_schema(definition: str) -> ProtobufSchema:
    return ProtobufSchema(definition)


def encode_varint(value: int) -> bytes:
    out = bytearray()
    while True:
        bits = value & 0x7F
        value >>= 7
        if value:
            out.append(bits | 0x80)
        else:
            out.append(bits)
            return bytes(out)


def decode_varint(data: bytes) -> tuple[int, int]:
    """Read an unsigned varint, returning ``(value, bytes consumed)``."""
    result = 0
    for position, byte in enumerate(data[:10]):
        result |= (byte & 0x7F) << (7 * position)
        if not byte & 0x80:
            return result, position + 1
    raise InvalidWireFormatError("Truncated varint in Protobuf payload")


def encode_avro(value: AvroRecord) -> bytes:
    buffer = io.BytesIO()
    fastavro.schemaless_writer(buffer, value.schema, value.datum)
    return buffer.getvalue()


def encode_protobuf(value: Message) -> bytes:
    return encode_varint(message_index(value.DESCRIPTOR)) + value.SerializeToString()


def encode_json(value: JsonDataWithSchema) -> bytes:
    return value.payload.encode("utf-8")


def decode_avro(definition: str, body: bytes) -> AvroRecord:
    schema = _avro_schema(definition)
    return AvroRecord(schema, fastavro.schemaless_reader(io.BytesIO(body), schema))


def decode_protobuf(definition: str, body: bytes) -> Message:
    schema = _protobuf_schema(definition)
    index, offset = decode_varint(body)
    message = schema.new_message(schema.descriptor_at(index))
    message.ParseFromString(body[offset:])
    return message


def decode_json_safely(definition: str, body: bytes) -> JsonDataWithSchema:
    """Decode a JSON record without interpreting the schema.

    JSON schemas may carry a ``className`` hint naming a type to materialize
    the payload into. The hint is ignored: the result is always the raw
    payload text tagged with its schema.
    """
    return JsonDataWithSchema(definition, body.decode("utf-8"))


ENCODERS: Mapping[DataFormat, Encoder] = {
    DataFormat.AVRO: encode_avro,
    DataFormat.PROTOBUF: encode_protobuf,
    DataFormat.JSON: encode_json,
}

DECODERS: Mapping[DataFormat, Decoder] = {
    DataFormat.AVRO: decode_avro,
    DataFormat.PROTOBUF: decode_protobuf,
    DataFormat.JSON: decode_json_safely,
}


class SerializationFacade:
    """Encodes structured values and frames them for an existing schema version.

    Schemas are never registered: the version id must already exist in the
    registry.
    """

    def __init__(self, encoders: Mapping[DataFormat, Encoder] = ENCODERS):
        self._encoders = dict(encoders)

    def serialize(self, data_format: DataFormat, value: Any, schema_version_id: UUID) -> bytes:
        encoder = self._encoders.get(data_format)
        if encoder is None:
            raise UnsupportedDataFormatError(f"Unsupported schema data format: {data_format!r}")
        try:
            body = encoder(value)
        except (TypeError, ValueError, AttributeError) as e:
            raise SerializationError(f"Failed to encode {data_format.value} value: {e}") from e
        return GlueWireFormat.encode(schema_version_id, body)


class DeserializationFacade:
    """Decodes framed messages using the schema version named in their header.

    Decoders are a closed mapping from data format to a pure function of
    ``(definition, body)``. The JSON entry never instantiates types named by
    schema metadata.
    """

    def __init__(self, client: SchemaRegistryGateway, decoders: Mapping[DataFormat, Decoder] = DECODERS):
        self.client = client
        self._decoders = dict(decoders)
        # version id -> definition; a schema version never changes
        self._schema_cache: dict[UUID, SchemaDefinition] = {}

    def deserialize(self, message: bytes) -> Any:
        schema_version_id, body = GlueWireFormat.decode(message)
        schema = self._get_schema(schema_version_id)
        decoder = self._decoders.get(schema.data_format)
        if decoder is None:
            raise UnsupportedDataFormatError(f"Unsupported schema data format: {schema.data_format!r}")
        logger.debug("Decoding %s record with schema %s version %s",
                     schema.data_format.value, schema.name, schema_version_id)
        return decoder(schema.definition, body)

    def _get_schema(self, schema_version_id: UUID) -> SchemaDefinition:
        schema = self._schema_cache.get(schema_version_id)
        if schema is None:
            schema = self.client.get_schema_version_by_id(schema_version_id)
            self._schema_cache[schema_version_id] = schema
        return schema

    def close(self) -> None:
        self._schema_cache.clear()
