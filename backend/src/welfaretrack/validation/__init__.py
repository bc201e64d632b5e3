"""welfaretrack validation system.

Three registries feed the rule builder:
- patterns: named regular expressions
- messages: locale-keyed message templates (YAML)
- attributes: per-entity display names and choice labels (YAML)

Usage:
    from welfaretrack.validation import AttributeRegistry, MessageCatalog, RuleBuilder

    attributes = AttributeRegistry(config_dir)
    messages = MessageCatalog(config_dir, default_locale="en")
    rules = (
        RuleBuilder("department", attributes, messages)
        .require_presence("name")
        .require_unique("name")
        .build()
    )
"""

from welfaretrack.validation.attributes import (
    AttributeNotManagedError,
    AttributeRegistry,
    find_similar_attribute,
)
from welfaretrack.validation.builder import EntityRules, RuleBuilder
from welfaretrack.validation.messages import MessageCatalog, compose_message
from welfaretrack.validation.patterns import PATTERNS, get_pattern
from welfaretrack.validation.services import ValidationService
from welfaretrack.validation.types import (
    Operation,
    QueryService,
    ValidationContext,
    ValidationError,
    ValidationResult,
    humanize,
)

__all__ = [
    # Types
    "Operation",
    "QueryService",
    "ValidationContext",
    "ValidationError",
    "ValidationResult",
    "humanize",
    # Registries
    "AttributeNotManagedError",
    "AttributeRegistry",
    "find_similar_attribute",
    "MessageCatalog",
    "compose_message",
    "PATTERNS",
    "get_pattern",
    # Rules
    "EntityRules",
    "RuleBuilder",
    "ValidationService",
]
