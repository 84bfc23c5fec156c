"""Value types shared by the serde components."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional
from uuid import UUID

from .exceptions import UnsupportedDataFormatError


class Role(str, Enum):
    """Part of a Kafka record a serde operation applies to."""

    KEY = "KEY"
    VALUE = "VALUE"


class DataFormat(str, Enum):
    """Wire encodings supported by the Glue Schema Registry."""

    AVRO = "AVRO"
    PROTOBUF = "PROTOBUF"
    JSON = "JSON"

    @classmethod
    def parse(cls, tag: str) -> "DataFormat":
        try:
            return cls(tag)
        except ValueError:
            raise UnsupportedDataFormatError(f"Unsupported schema data format: {tag!r}") from None


@dataclass(frozen=True)
class SchemaDefinition:
    """A single schema version as stored in the registry."""

    name: str
    version_id: UUID
    data_format: DataFormat
    definition: str
    version_number: Optional[int] = None


@dataclass(frozen=True)
class AvroRecord:
    """An Avro datum together with the parsed schema it conforms to."""

    schema: Any
    datum: Any


@dataclass(frozen=True)
class JsonDataWithSchema:
    """A JSON payload bundled with the JSON Schema text that describes it."""

    schema: str
    payload: str


@dataclass(frozen=True)
class DeserializeResult:
    """Deserialized record part handed back to the host."""

    result: str
    type: str = "JSON"
    additional_properties: dict[str, Any] = field(default_factory=dict)
