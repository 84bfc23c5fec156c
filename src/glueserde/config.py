"""Configuration classes for glueserde."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional

from .exceptions import ConfigurationError


@dataclass
class GlueSerdeConfig:
    """Configuration for the Glue Schema Registry serde.

    Args:
        region: AWS region of the Glue Schema Registry
        registry: Name of the Glue registry holding the schemas
        endpoint: Optional endpoint override for the Glue API
        role_arn: Optional role to assume through STS
        key_schema_name_template: printf-style template mapping a topic to its key
            schema name; keys have no schema when unset
        value_schema_name_template: printf-style template mapping a topic to its
            value schema name; the topic name itself by default
        topic_keys_schemas: Ordered schema name -> topic regex rules for keys
        topic_values_schemas: Ordered schema name -> topic regex rules for values
        check_schema_existence_for_deserialize: Whether can_deserialize should
            require the schema to exist in the registry
        aws_access_key_id: Static access key
        aws_secret_access_key: Static secret key
        aws_session_token: Session token paired with the static keys
        aws_profile_name: Named profile to load credentials from
        aws_profile_file: Credentials file to load the profile from
        timeout: HTTP request timeout in seconds
    """
    region: str
    registry: str
    endpoint: Optional[str] = None
    role_arn: Optional[str] = None
    key_schema_name_template: Optional[str] = None
    value_schema_name_template: str = "%s"
    topic_keys_schemas: dict[str, str] = field(default_factory=dict)
    topic_values_schemas: dict[str, str] = field(default_factory=dict)
    check_schema_existence_for_deserialize: bool = False
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    aws_session_token: Optional[str] = None
    aws_profile_name: Optional[str] = None
    aws_profile_file: Optional[str] = None
    timeout: float = 30.0

    @property
    def endpoint_url(self) -> str:
        """Glue API endpoint, honouring the override when present."""
        return self.endpoint or f"https://glue.{self.region}.amazonaws.com"

    @classmethod
    def from_properties(cls, properties: Mapping[str, Any]) -> "GlueSerdeConfig":
        """Build a configuration from host serde properties.

        Property names follow the camelCase keys used by the host plugin
        configuration (``region``, ``registry``, ``topicKeysSchemas`` ...).

        Raises:
            ConfigurationError: If a required property is missing or a value
                has the wrong type
        """
        region = properties.get("region")
        if not region:
            raise ConfigurationError("region not provided for GlueSerde")
        registry = properties.get("registry")
        if not registry:
            raise ConfigurationError("registry not provided for GlueSerde")

        return cls(
            region=region,
            registry=registry,
            endpoint=properties.get("endpoint"),
            role_arn=properties.get("roleArn"),
            key_schema_name_template=properties.get("keySchemaNameTemplate"),
            value_schema_name_template=properties.get("valueSchemaNameTemplate") or "%s",
            topic_keys_schemas=_get_map(properties, "topicKeysSchemas"),
            topic_values_schemas=_get_map(properties, "topicValuesSchemas"),
            check_schema_existence_for_deserialize=_get_bool(
                properties, "checkSchemaExistenceForDeserialize"
            ),
            aws_access_key_id=properties.get("awsAccessKeyId"),
            aws_secret_access_key=properties.get("awsSecretAccessKey"),
            aws_session_token=properties.get("awsSessionToken"),
            aws_profile_name=properties.get("awsProfileName"),
            aws_profile_file=properties.get("awsProfileFile"),
            timeout=float(properties.get("timeout", 30.0)),
        )


def _get_map(properties: Mapping[str, Any], key: str) -> dict[str, str]:
    value = properties.get(key)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"{key} must be a mapping of schema name to topic pattern")
    # insertion order is the rule order
    return {str(name): str(pattern) for name, pattern in value.items()}


def _get_bool(properties: Mapping[str, Any], key: str) -> bool:
    value = properties.get(key, False)
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise ConfigurationError(f"{key} must be a boolean, got {value!r}")
