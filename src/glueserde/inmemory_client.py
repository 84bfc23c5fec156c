"""In-memory implementation of the schema registry gateway for testing and development."""

import threading
import uuid
from types import TracebackType
from typing import Optional, Self
from uuid import UUID

from .exceptions import SchemaNotFoundError
from .models import DataFormat, SchemaDefinition


class InMemoryRegistryClient:
    """
    In-memory implementation of the schema registry gateway.

    This client provides the same interface as GlueSchemaRegistryClient but
    stores all schemas in memory without any external dependencies. It's
    useful for:

    - Testing without AWS credentials or a Glue registry
    - Local development and prototyping
    - Fast deterministic tests

    Every version gets a random version id, just like in Glue.
    """

    def __init__(self) -> None:
        """Initialize in-memory client with empty storage."""
        self._schemas: dict[str, list[SchemaDefinition]] = {}  # schema name -> versions
        self._versions: dict[UUID, SchemaDefinition] = {}  # version id -> version
        self._lock = threading.Lock()

    def __enter__(self) -> Self:
        """Context manager entry."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Context manager exit."""
        self.close()

    def close(self) -> None:
        """Close the client (no-op)."""

    def register_schema(self, schema_name: str, data_format: DataFormat, definition: str) -> SchemaDefinition:
        """
        Register a new schema version.

        Registering the same definition as the latest version of a schema
        is idempotent and returns that version.

        Args:
            schema_name: Name of the schema
            data_format: Data format of the schema
            definition: Schema definition text

        Returns:
            The registered schema version

        """
        with self._lock:
            versions = self._schemas.setdefault(schema_name, [])
            if versions and versions[-1].definition == definition and versions[-1].data_format is data_format:
                return versions[-1]

            schema = SchemaDefinition(
                name=schema_name,
                version_id=uuid.uuid4(),
                data_format=data_format,
                definition=definition,
                version_number=len(versions) + 1,
            )
            versions.append(schema)
            self._versions[schema.version_id] = schema
            return schema

    def schema_exists(self, schema_name: str) -> bool:
        with self._lock:
            return bool(self._schemas.get(schema_name))

    def get_latest_definition(self, schema_name: str) -> Optional[SchemaDefinition]:
        """
        Get the latest version of a schema.

        Returns:
            The latest version, or None if the schema is unknown

        """
        with self._lock:
            versions = self._schemas.get(schema_name)
            return versions[-1] if versions else None

    def get_schema_version_by_id(self, schema_version_id: UUID) -> SchemaDefinition:
        """
        Fetch a schema version by its id.

        Raises:
            SchemaNotFoundError: If no version has this id

        """
        with self._lock:
            if schema_version_id not in self._versions:
                msg = f"Schema version {schema_version_id} not found"
                raise SchemaNotFoundError(msg)
            return self._versions[schema_version_id]

    def reset(self) -> None:
        """
        Clear all internal state (helper for tests).

        This resets the client to a fresh state, removing all registered
        schemas and versions.
        """
        with self._lock:
            self._schemas.clear()
            self._versions.clear()
