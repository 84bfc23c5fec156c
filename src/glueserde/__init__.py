"""glueserde: Kafka record serde backed by the AWS Glue Schema Registry (Avro, Protobuf, JSON)."""

from collections.abc import Mapping
from typing import Any

from .config import GlueSerdeConfig
from .exceptions import (
    ConfigurationError,
    DeserializationError,
    GlueSerdeError,
    InvalidWireFormatError,
    RegistryRequestError,
    SchemaLookupError,
    SchemaNotFoundError,
    SchemaParseError,
    SerializationError,
    UnexpectedDeserializationResultError,
    UnsupportedDataFormatError,
)
from .existence_cache import ExistenceCache
from .inmemory_client import InMemoryRegistryClient
from .models import DataFormat, DeserializeResult, Role, SchemaDefinition
from .naming import NameMatcher, PatternRule
from .schema_client import GlueSchemaRegistryClient
from .serde import Deserializer, GlueSerde, Serializer

__all__ = [
    "GlueSerde",
    "Serializer",
    "Deserializer",
    "GlueSerdeConfig",
    "GlueSchemaRegistryClient",
    "InMemoryRegistryClient",
    "ExistenceCache",
    "NameMatcher",
    "PatternRule",
    "Role",
    "DataFormat",
    "SchemaDefinition",
    "DeserializeResult",
    "GlueSerdeError",
    "ConfigurationError",
    "SchemaNotFoundError",
    "RegistryRequestError",
    "SchemaLookupError",
    "UnsupportedDataFormatError",
    "InvalidWireFormatError",
    "SchemaParseError",
    "SerializationError",
    "DeserializationError",
    "UnexpectedDeserializationResultError",
    "create_serde",
]

__version__ = "0.1.0"


def create_serde(properties: Mapping[str, Any]) -> GlueSerde:
    """Convenience function to create a GlueSerde from host serde properties.

    Args:
        properties: Serde properties (``region``, ``registry``, templates,
            topic pattern maps, credential settings)

    Returns:
        Configured GlueSerde instance

    Note:
        The returned serde holds an HTTP connection pool that should be
        released with ``close()``, or by using the serde as a context manager.
    """
    return GlueSerde.from_properties(properties)
