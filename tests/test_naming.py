"""Tests for topic to schema name resolution."""

import re

import pytest

from glueserde.config import GlueSerdeConfig
from glueserde.exceptions import ConfigurationError
from glueserde.models import Role
from glueserde.naming import NameMatcher, PatternRule, compile_rules, format_schema_name


def rules(**mapping):
    return compile_rules(mapping)


class TestFormatSchemaName:
    """Test cases for template application."""

    def test_identity_template(self):
        assert format_schema_name("%s", "orders") == "orders"

    def test_prefix_and_suffix(self):
        assert format_schema_name("prod.%s-value", "orders") == "prod.orders-value"

    def test_fixed_name(self):
        """A template without placeholder names the same schema for every topic."""
        assert format_schema_name("common-key", "orders") == "common-key"
        assert format_schema_name("common-key", "payments") == "common-key"

    def test_escaped_percent(self):
        assert format_schema_name("100%%-%s", "orders") == "100%-orders"

    def test_escaped_percent_before_placeholder(self):
        assert format_schema_name("%%%s", "orders") == "%orders"

    def test_escaped_placeholder_is_fixed_name(self):
        assert format_schema_name("%%s", "orders") == "%s"


class TestNameMatcher:
    """Test cases for NameMatcher."""

    def test_first_matching_rule_wins(self):
        """Rules are tried in declaration order, not by specificity."""
        matcher = NameMatcher(value_rules=rules(
            generic="orders-.*",
            specific="orders-eu",
        ))

        assert matcher.resolve("orders-eu", Role.VALUE) == "generic"

    def test_declaration_order_is_kept(self):
        matcher = NameMatcher(value_rules=[
            PatternRule("b", re.compile(".*")),
            PatternRule("a", re.compile(".*")),
        ])

        assert matcher.resolve("anything", Role.VALUE) == "b"

    def test_pattern_must_match_whole_topic(self):
        matcher = NameMatcher(value_rules=rules(orders="orders"))

        assert matcher.resolve("orders", Role.VALUE) == "orders"
        # falls back to the default value template
        assert matcher.resolve("orders-eu", Role.VALUE) == "orders-eu"
        assert matcher.resolve("eu-orders", Role.VALUE) == "eu-orders"

    def test_value_defaults_to_topic_name(self):
        matcher = NameMatcher()

        assert matcher.resolve("payments", Role.VALUE) == "payments"

    def test_value_template(self):
        matcher = NameMatcher(value_template="%s-value")

        assert matcher.resolve("payments", Role.VALUE) == "payments-value"

    def test_key_unresolved_without_template(self):
        matcher = NameMatcher()

        assert matcher.resolve("payments", Role.KEY) is None

    def test_key_template(self):
        matcher = NameMatcher(key_template="%s-key")

        assert matcher.resolve("payments", Role.KEY) == "payments-key"

    def test_key_rule_wins_over_key_template(self):
        with_template = NameMatcher(key_template="%s-key", key_rules=rules(k1="^orders-.*$"))
        without_template = NameMatcher(key_rules=rules(k1="^orders-.*$"))

        assert with_template.resolve("orders-eu", Role.KEY) == "k1"
        assert without_template.resolve("orders-eu", Role.KEY) == "k1"

    def test_rules_are_per_role(self):
        matcher = NameMatcher(key_rules=rules(k1="orders"), value_rules=rules(v1="orders"))

        assert matcher.resolve("orders", Role.KEY) == "k1"
        assert matcher.resolve("orders", Role.VALUE) == "v1"

    def test_from_config(self):
        config = GlueSerdeConfig(
            region="eu-west-1",
            registry="main",
            key_schema_name_template="%s-key",
            value_schema_name_template="%s-value",
            topic_keys_schemas={"k1": "^orders-.*$"},
            topic_values_schemas={"v1": "pay.*", "v2": "payments"},
        )
        matcher = NameMatcher.from_config(config)

        assert matcher.resolve("orders-eu", Role.KEY) == "k1"
        assert matcher.resolve("users", Role.KEY) == "users-key"
        assert matcher.resolve("payments", Role.VALUE) == "v1"
        assert matcher.resolve("users", Role.VALUE) == "users-value"

    def test_invalid_pattern(self):
        with pytest.raises(ConfigurationError, match="Invalid topic pattern"):
            compile_rules({"broken": "orders-("})
