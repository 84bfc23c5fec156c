"""Conversion between JSON text and the structured values the facades encode."""

import io
import json
from typing import Any

import fastavro
from fastavro.schema import SchemaParseException
from google.protobuf import json_format
from google.protobuf.message import Message

from .exceptions import SchemaParseError, UnexpectedDeserializationResultError, UnsupportedDataFormatError
from .models import AvroRecord, DataFormat, JsonDataWithSchema
from .protobuf_schema import ProtobufSchema


def parse_avro_schema(definition: str) -> dict[str, Any]:
    """Parse an Avro schema definition for fastavro.

    Raises:
        SchemaParseError: If the definition is not a valid Avro schema
    """
    try:
        return fastavro.parse_schema(json.loads(definition))
    except (ValueError, SchemaParseException) as e:
        raise SchemaParseError(f"Invalid Avro schema: {e}") from e


class FormatCodec:
    """Converts JSON text typed by users into the value expected by the serialization
    facade for a data format, and decoded values back into JSON text.

    Avro values use the Avro JSON encoding (unions are wrapped in a single
    key object naming the branch). Protobuf values use the canonical
    Protobuf JSON mapping. JSON payloads pass through untouched.
    """

    def __init__(self, data_format: DataFormat, definition: str):
        self.data_format = data_format
        self.definition = definition
        if data_format is DataFormat.AVRO:
            self._schema = parse_avro_schema(definition)
        elif data_format is DataFormat.PROTOBUF:
            self._schema = ProtobufSchema(definition)
        elif data_format is DataFormat.JSON:
            self._schema = definition
        else:
            raise UnsupportedDataFormatError(f"Unsupported schema data format: {data_format!r}")

    def from_json(self, json_text: str) -> Any:
        """Convert JSON text into the structured value for this codec's data format."""
        if self.data_format is DataFormat.AVRO:
            return avro_from_json(json_text, self._schema)
        if self.data_format is DataFormat.PROTOBUF:
            return proto_from_json(json_text, self._schema)
        return JsonDataWithSchema(self.definition, json_text)

    @staticmethod
    def to_json(value: Any) -> str:
        """Convert a decoded value of any supported shape into JSON text.

        Raises:
            UnexpectedDeserializationResultError: If the value is of no supported shape
        """
        if isinstance(value, AvroRecord):
            return avro_record_to_json(value)
        if isinstance(value, Message):
            return proto_message_to_json(value)
        if isinstance(value, JsonDataWithSchema):
            return value.payload
        raise UnexpectedDeserializationResultError(f"Unexpected deserialization result: {value!r}")


def avro_from_json(json_text: str, schema: dict[str, Any]) -> AvroRecord:
    # json_reader consumes one record per line
    line = json.dumps(json.loads(json_text))
    records = list(fastavro.json_reader(io.StringIO(line), schema))
    if len(records) != 1:
        raise ValueError(f"Expected exactly one Avro record, got {len(records)}")
    return AvroRecord(schema, records[0])


def avro_record_to_json(record: AvroRecord) -> str:
    buffer = io.StringIO()
    fastavro.json_writer(buffer, record.schema, [record.datum])
    return buffer.getvalue().strip()


def proto_from_json(json_text: str, schema: ProtobufSchema) -> Message:
    message = schema.new_message()
    json_format.Parse(json_text, message)
    return message


def proto_message_to_json(message: Message) -> str:
    return json_format.MessageToJson(message, indent=None)
