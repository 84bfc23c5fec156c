"""Custom exceptions for glueserde."""


class GlueSerdeError(Exception):
    """Base exception for all glueserde errors."""
    pass


class ConfigurationError(GlueSerdeError):
    """Raised when serde properties are missing or invalid, or a topic has no schema."""
    pass


class SchemaNotFoundError(GlueSerdeError):
    """Raised when a schema or schema version cannot be found in the registry."""
    pass


class RegistryRequestError(GlueSerdeError):
    """Raised when a registry call fails for any reason other than "not found"."""
    pass


class SchemaLookupError(GlueSerdeError):
    """Raised when checking whether a schema exists fails."""
    pass


class UnsupportedDataFormatError(GlueSerdeError):
    """Raised when the registry reports a data format this serde cannot handle."""
    pass


class InvalidWireFormatError(GlueSerdeError):
    """Raised when the message does not follow the Glue Schema Registry wire format."""
    pass


class SchemaParseError(GlueSerdeError):
    """Raised when a schema definition cannot be parsed."""
    pass


class SerializationError(GlueSerdeError):
    """Raised when serialization fails."""
    pass


class DeserializationError(GlueSerdeError):
    """Raised when deserialization fails."""
    pass


class UnexpectedDeserializationResultError(DeserializationError):
    """Raised when the deserialization facade returns a value of an unknown shape."""
    pass
