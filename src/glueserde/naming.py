"""Topic to schema name resolution."""

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Optional

from .config import GlueSerdeConfig
from .exceptions import ConfigurationError
from .models import Role

@dataclass(frozen=True)
class PatternRule:
    """Maps every topic fully matching ``pattern`` to ``schema_name``."""

    schema_name: str
    pattern: re.Pattern

    def matches(self, topic: str) -> bool:
        return self.pattern.fullmatch(topic) is not None


def format_schema_name(template: str, topic: str) -> str:
    """Apply a printf-style schema name template to a topic.

    A template without a ``%s`` placeholder names one fixed schema for
    every topic.
    """
    if "%s" not in template.replace("%%", ""):
        return template.replace("%%", "%")
    return template % topic


def compile_rules(rules: Mapping[str, str]) -> tuple[PatternRule, ...]:
    """Compile an ordered schema name -> topic regex mapping.

    Raises:
        ConfigurationError: If a pattern is not a valid regular expression
    """
    compiled = []
    for schema_name, pattern in rules.items():
        try:
            compiled.append(PatternRule(schema_name, re.compile(pattern)))
        except re.error as e:
            raise ConfigurationError(
                f"Invalid topic pattern {pattern!r} for schema {schema_name!r}: {e}"
            ) from e
    return tuple(compiled)


class NameMatcher:
    """Resolves the schema name governing a topic key or value.

    Pattern rules are tried in declaration order and the first one whose
    pattern matches the whole topic name wins. When no rule matches, the
    role's template is applied to the topic. Keys have no default template,
    values default to ``"%s"`` (schema name == topic name).
    """

    def __init__(
        self,
        key_template: Optional[str] = None,
        value_template: str = "%s",
        key_rules: Iterable[PatternRule] = (),
        value_rules: Iterable[PatternRule] = (),
    ):
        self._key_template = key_template
        self._value_template = value_template
        self._key_rules = tuple(key_rules)
        self._value_rules = tuple(value_rules)

    @classmethod
    def from_config(cls, config: GlueSerdeConfig) -> "NameMatcher":
        return cls(
            key_template=config.key_schema_name_template,
            value_template=config.value_schema_name_template,
            key_rules=compile_rules(config.topic_keys_schemas),
            value_rules=compile_rules(config.topic_values_schemas),
        )

    def resolve(self, topic: str, role: Role) -> Optional[str]:
        if role is Role.KEY:
            rules, template = self._key_rules, self._key_template
        elif role is Role.VALUE:
            rules, template = self._value_rules, self._value_template
        else:
            return None

        for rule in rules:
            if rule.matches(topic):
                return rule.schema_name
        if template is None:
            return None
        return format_schema_name(template, topic)
