"""Tests for custom exceptions."""

import pytest

from glueserde.exceptions import (
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

SPECIFIC_EXCEPTIONS = [
    ConfigurationError,
    SchemaNotFoundError,
    RegistryRequestError,
    SchemaLookupError,
    UnsupportedDataFormatError,
    InvalidWireFormatError,
    SchemaParseError,
    SerializationError,
    DeserializationError,
    UnexpectedDeserializationResultError,
]


class TestExceptionHierarchy:
    """Test custom exception hierarchy."""

    def test_base_exception(self):
        """Test base GlueSerdeError exception."""
        exc = GlueSerdeError("Base error")
        assert str(exc) == "Base error"
        assert isinstance(exc, Exception)

    @pytest.mark.parametrize("exception_class", SPECIFIC_EXCEPTIONS)
    def test_caught_as_base_class(self, exception_class):
        with pytest.raises(GlueSerdeError, match="test"):
            raise exception_class("test")

    def test_unexpected_result_is_a_deserialization_error(self):
        assert issubclass(UnexpectedDeserializationResultError, DeserializationError)

    def test_exception_with_cause(self):
        """Test exception chaining."""
        original_error = ValueError("Original error")

        try:
            raise original_error
        except ValueError as e:
            try:
                raise SerializationError("Serialization failed") from e
            except SerializationError as chained_error:
                assert chained_error.__cause__ is original_error
