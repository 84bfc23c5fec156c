"""Client for the AWS Glue Schema Registry."""

import json
import logging
from typing import Any, Optional
from uuid import UUID

import httpx
from botocore.auth import SigV4Auth
from botocore.awsrequest import AWSRequest
from botocore.credentials import Credentials

from .config import GlueSerdeConfig
from .exceptions import RegistryRequestError, SchemaNotFoundError
from .models import DataFormat, SchemaDefinition

logger = logging.getLogger(__name__)

SIGNING_SERVICE = "glue"
CONTENT_TYPE = "application/x-amz-json-1.1"
TARGET_PREFIX = "AWSGlue."
NOT_FOUND_ERROR = "EntityNotFoundException"


class GlueSchemaRegistryClient:
    """Client for interacting with the AWS Glue Schema Registry.

    Talks to the Glue JSON API over a long-lived HTTP connection pool and
    signs every request with SigV4. Only the read operations needed to
    resolve, probe and decode schemas are implemented; schemas are never
    registered.
    """

    def __init__(self, config: GlueSerdeConfig, credentials: Credentials):
        """Initialize the Glue client.

        Args:
            config: Serde configuration (region, registry, endpoint, timeout)
            credentials: botocore credentials used to sign requests
        """
        self.config = config
        self.credentials = credentials
        self._client: Optional[httpx.Client] = None

    def __enter__(self) -> "GlueSchemaRegistryClient":
        """Context manager entry."""
        self._ensure_client()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.close()

    def _ensure_client(self) -> httpx.Client:
        """Ensure HTTP client is initialized."""
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.config.endpoint_url,
                timeout=self.config.timeout,
            )
        return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def _schema_id(self, schema_name: str) -> dict[str, str]:
        return {"RegistryName": self.config.registry, "SchemaName": schema_name}

    def _call(self, operation: str, payload: dict[str, Any]) -> dict[str, Any]:
        """Invoke a Glue API operation.

        Args:
            operation: Glue operation name, e.g. ``GetSchema``
            payload: Request body

        Returns:
            Decoded response body

        Raises:
            SchemaNotFoundError: If Glue answers with EntityNotFoundException
            RegistryRequestError: For any other API or transport error
        """
        client = self._ensure_client()
        body = json.dumps(payload).encode("utf-8")
        headers = {
            "Content-Type": CONTENT_TYPE,
            "X-Amz-Target": TARGET_PREFIX + operation,
        }
        request = AWSRequest(method="POST", url=self.config.endpoint_url + "/", data=body, headers=headers)
        SigV4Auth(self.credentials.get_frozen_credentials(), SIGNING_SERVICE, self.config.region).add_auth(request)

        logger.debug("Calling Glue %s with %s", operation, payload)
        try:
            response = client.post("/", content=body, headers=dict(request.headers.items()))
        except httpx.RequestError as e:
            raise RegistryRequestError(f"Request error: {e}")

        if response.status_code >= 400:
            error_type, message = _parse_error(response)
            if error_type == NOT_FOUND_ERROR:
                raise SchemaNotFoundError(message or f"{operation}: entity not found")
            raise RegistryRequestError(
                f"Glue {operation} failed with HTTP {response.status_code} ({error_type}): {message}"
            )

        try:
            return response.json()
        except json.JSONDecodeError as e:
            raise RegistryRequestError(f"Invalid JSON response from Glue {operation}: {e}")

    def get_schema(self, schema_name: str) -> Optional[dict[str, Any]]:
        """Fetch schema metadata.

        Args:
            schema_name: Name of the schema in the configured registry

        Returns:
            GetSchema response (including ``LatestSchemaVersion``), or None
            if the schema does not exist

        Raises:
            RegistryRequestError: For other API errors
        """
        try:
            return self._call("GetSchema", {"SchemaId": self._schema_id(schema_name)})
        except SchemaNotFoundError:
            return None

    def get_schema_version(self, schema_name: str, version_number: int) -> Optional[dict[str, Any]]:
        """Fetch one version of a schema.

        Args:
            schema_name: Name of the schema in the configured registry
            version_number: Version number to fetch

        Returns:
            GetSchemaVersion response, or None if the version does not exist

        Raises:
            RegistryRequestError: For other API errors
        """
        try:
            return self._call("GetSchemaVersion", {
                "SchemaId": self._schema_id(schema_name),
                "SchemaVersionNumber": {"VersionNumber": version_number},
            })
        except SchemaNotFoundError:
            return None

    def schema_exists(self, schema_name: str) -> bool:
        return self.get_schema(schema_name) is not None

    def get_latest_definition(self, schema_name: str) -> Optional[SchemaDefinition]:
        """Fetch the latest version of a schema.

        Two sequential calls: GetSchema to learn the latest version number,
        then GetSchemaVersion for that number.

        Returns:
            The latest schema version, or None if the schema is unknown
        """
        metadata = self.get_schema(schema_name)
        if metadata is None:
            return None
        latest = metadata.get("LatestSchemaVersion")
        if latest is None:
            raise RegistryRequestError(f"No latest version in metadata for schema {schema_name}")

        version = self.get_schema_version(schema_name, latest)
        if version is None:
            return None
        return _to_definition(schema_name, version)

    def get_schema_version_by_id(self, schema_version_id: UUID) -> SchemaDefinition:
        """Fetch a schema version by its id.

        Raises:
            SchemaNotFoundError: If no version has this id
            RegistryRequestError: For other API errors
        """
        try:
            version = self._call("GetSchemaVersion", {"SchemaVersionId": str(schema_version_id)})
        except SchemaNotFoundError:
            raise SchemaNotFoundError(f"Schema version {schema_version_id} not found")

        schema_name = _schema_name_from_arn(version.get("SchemaArn")) or str(schema_version_id)
        return _to_definition(schema_name, version)


def _parse_error(response: httpx.Response) -> tuple[str, str]:
    """Extract the AWS error type and message from an error response."""
    error_type = response.headers.get("x-amzn-ErrorType", "")
    message = ""
    try:
        body = response.json()
    except json.JSONDecodeError:
        body = {}
    if isinstance(body, dict):
        error_type = body.get("__type") or error_type
        message = body.get("message") or body.get("Message") or ""
    # "com.amazonaws.glue#EntityNotFoundException" or "EntityNotFoundException:http://..."
    error_type = error_type.rsplit("#", 1)[-1].split(":", 1)[0]
    return error_type, message or response.text


def _schema_name_from_arn(arn: Optional[str]) -> Optional[str]:
    # arn:aws:glue:<region>:<account>:schema/<registry>/<schema>
    if not arn or "/" not in arn:
        return None
    return arn.rsplit("/", 1)[-1]


def _to_definition(schema_name: str, version: dict[str, Any]) -> SchemaDefinition:
    try:
        return SchemaDefinition(
            name=schema_name,
            version_id=UUID(version["SchemaVersionId"]),
            data_format=DataFormat.parse(version["DataFormat"]),
            definition=version["SchemaDefinition"],
            version_number=version.get("VersionNumber"),
        )
    except (KeyError, ValueError) as e:
        raise RegistryRequestError(f"Malformed schema version response for {schema_name}: {e}")
