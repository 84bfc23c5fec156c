"""Protocol definitions for glueserde."""

from typing import Optional, Protocol
from uuid import UUID

from .models import SchemaDefinition


class SchemaRegistryGateway(Protocol):
    """
    Protocol for schema registry clients.

    This protocol defines the registry operations GlueSerde and the
    deserialization facade rely on. Both GlueSchemaRegistryClient and
    InMemoryRegistryClient implement it.

    A registry "not found" answer is a normal result for the lookups below;
    every other failure is raised.
    """

    def schema_exists(self, schema_name: str) -> bool:
        """
        Check whether a schema with the given name exists in the registry.

        Args:
            schema_name: Name of the schema

        Returns:
            True if the schema exists, False if the registry does not know it

        Raises:
            RegistryRequestError: For any other registry failure

        """
        ...

    def get_latest_definition(self, schema_name: str) -> Optional[SchemaDefinition]:
        """
        Fetch the latest version of a schema.

        Args:
            schema_name: Name of the schema

        Returns:
            The latest schema version, or None if the schema is unknown

        Raises:
            RegistryRequestError: For any other registry failure

        """
        ...

    def get_schema_version_by_id(self, schema_version_id: UUID) -> SchemaDefinition:
        """
        Fetch a schema version by its registry id.

        Args:
            schema_version_id: Id written in the header of serialized records

        Returns:
            The schema version

        Raises:
            SchemaNotFoundError: If no version has this id
            RegistryRequestError: For any other registry failure

        """
        ...

    def close(self) -> None:
        """Release connections held by the client."""
        ...
