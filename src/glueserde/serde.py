"""Glue Schema Registry serde for the Kafka inspection tool."""

import logging
from collections.abc import Mapping
from typing import Any, Optional

from .codec import FormatCodec
from .config import GlueSerdeConfig
from .credentials import create_credentials
from .exceptions import (
    ConfigurationError,
    DeserializationError,
    GlueSerdeError,
    SchemaLookupError,
    SerializationError,
)
from .existence_cache import ExistenceCache
from .facade import DeserializationFacade, SerializationFacade
from .models import DeserializeResult, Role, SchemaDefinition
from .naming import NameMatcher
from .protocol import SchemaRegistryGateway
from .schema_client import GlueSchemaRegistryClient

logger = logging.getLogger(__name__)


class Serializer:
    """Serializes JSON text with one schema version."""

    def __init__(self, schema: SchemaDefinition, facade: SerializationFacade):
        self.schema = schema
        self._facade = facade
        self._codec = FormatCodec(schema.data_format, schema.definition)

    def serialize(self, input: str) -> bytes:
        try:
            value = self._codec.from_json(input)
            return self._facade.serialize(self.schema.data_format, value, self.schema.version_id)
        except SerializationError:
            raise
        except Exception as e:
            raise SerializationError(
                f"Failed to serialize input with schema {self.schema.name} version {self.schema.version_id}: {e}"
            ) from e


class Deserializer:
    """Deserializes framed records into JSON text."""

    def __init__(self, facade: DeserializationFacade):
        self._facade = facade

    def deserialize(self, headers: Any, data: bytes) -> DeserializeResult:
        try:
            value = self._facade.deserialize(data)
            return DeserializeResult(FormatCodec.to_json(value))
        except DeserializationError:
            raise
        except Exception as e:
            raise DeserializationError(f"Failed to deserialize message: {e}") from e


class GlueSerde:
    """Serializes and deserializes record keys and values with schemas from the Glue Schema Registry.

    The schema for a topic key or value is resolved by name (pattern rules
    first, then the role's template) and probed for existence through a
    bounded, time-limited cache. Serializing always uses the latest version
    of the schema; deserializing uses the version named in the record header.
    """

    def __init__(
        self,
        config: GlueSerdeConfig,
        client: SchemaRegistryGateway,
        existence_cache: Optional[ExistenceCache] = None,
    ):
        """Initialize the serde.

        Args:
            config: Serde configuration
            client: Registry gateway, owned by the serde and closed with it
            existence_cache: Cache for schema existence checks; a default
                1000 entry / 5 minute cache over ``client`` when omitted
        """
        self.config = config
        self.client = client
        self.name_matcher = NameMatcher.from_config(config)
        if existence_cache is None:
            existence_cache = ExistenceCache(client.schema_exists)
        self.existence_cache = existence_cache
        self.serialization_facade = SerializationFacade()
        self.deserialization_facade = DeserializationFacade(client)
        self._closed = False

    @classmethod
    def from_properties(cls, properties: Mapping[str, Any]) -> "GlueSerde":
        """Configure a serde backed by the Glue API from host properties.

        The registry client is closed again if configuration fails after it
        was created.
        """
        config = GlueSerdeConfig.from_properties(properties)
        client = GlueSchemaRegistryClient(config, create_credentials(config))
        try:
            serde = cls(config, client)
        except Exception:
            client.close()
            raise
        logger.info("Configured GlueSerde for registry %s in %s", config.registry, config.region)
        return serde

    def __enter__(self) -> "GlueSerde":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def get_description(self) -> Optional[str]:
        return None

    def get_schema(self, topic: str, role: Role) -> None:
        return None

    def schema_name(self, topic: str, role: Role) -> Optional[str]:
        return self.name_matcher.resolve(topic, role)

    def can_serialize(self, topic: str, role: Role) -> bool:
        schema_name = self.schema_name(topic, role)
        return schema_name is not None and self._schema_exists_cached(schema_name)

    def can_deserialize(self, topic: str, role: Role) -> bool:
        # without the existence check every topic is considered deserializable,
        # the record header names the schema version anyway
        if not self.config.check_schema_existence_for_deserialize:
            return True
        schema_name = self.schema_name(topic, role)
        return schema_name is not None and self._schema_exists_cached(schema_name)

    def serializer(self, topic: str, role: Role) -> Serializer:
        """Create a serializer bound to the latest version of the topic's schema.

        Raises:
            ConfigurationError: If no schema name resolves for the topic or the
                schema does not exist in the registry
        """
        schema_name = self.schema_name(topic, role)
        schema = self.client.get_latest_definition(schema_name) if schema_name is not None else None
        if schema is None:
            raise ConfigurationError(f"No schema found for topic {topic} {role.value}")
        logger.debug("Serializing %s %s with schema %s version %s",
                     topic, role.value, schema.name, schema.version_number)
        return Serializer(schema, self.serialization_facade)

    def deserializer(self, topic: str, role: Role) -> Deserializer:
        return Deserializer(self.deserialization_facade)

    def _schema_exists_cached(self, schema_name: str) -> bool:
        try:
            return self.existence_cache.get(schema_name)
        except GlueSerdeError as e:
            raise SchemaLookupError(f"Failed to check existence of schema {schema_name}: {e}") from e

    def close(self) -> None:
        """Close the registry client and the deserialization facade."""
        if self._closed:
            return
        self._closed = True
        try:
            self.client.close()
        finally:
            self.deserialization_facade.close()

