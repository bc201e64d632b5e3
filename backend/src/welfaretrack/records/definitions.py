"""Per-entity rule sets, enum values and create-time defaults.

Rule sets are built once, when the application starts. Any rule that names an
attribute missing from the entity's attribute configuration fails here with a
ConfigurationError, before a request is served.
"""

from types import MappingProxyType
from typing import Any, Mapping

from welfaretrack.auth.roles import Role
from welfaretrack.validation.attributes import AttributeRegistry
from welfaretrack.validation.builder import EntityRules, RuleBuilder
from welfaretrack.validation.messages import MessageCatalog
from welfaretrack.validation.types import Operation

ENTITY_TYPES = ("user", "department", "customer", "work_record")

ENUM_VALUES: Mapping[str, Mapping[str, tuple[str, ...]]] = MappingProxyType({
    "user": {
        "role": Role.values(),
    },
    "department": {
        "status": ("active", "inactive", "archived"),
        "department_type": ("sales", "engineering", "administration", "support", "other"),
    },
    "customer": {
        "customer_type": ("regular", "premium", "corporate"),
        "status": ("active", "inactive", "pending"),
    },
    "work_record": {
        "status": ("in_progress", "completed", "on_hold", "cancelled"),
        "work_type": ("consultation", "support", "maintenance", "emergency"),
    },
})

DEFAULTS: Mapping[str, Mapping[str, str]] = MappingProxyType({
    "user": {"role": Role.STAFF.value_name},
    "department": {"status": "active"},
    "customer": {"status": "pending"},
    "work_record": {"status": "in_progress"},
})

PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 128


def apply_defaults(entity_type: str, data: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of `data` with create-time defaults filled in for unset attributes."""
    record = dict(data)
    for attribute, default in DEFAULTS.get(entity_type, {}).items():
        if record.get(attribute) is None:
            record[attribute] = default
    return record


def _builder(
    entity_type: str,
    attributes: AttributeRegistry,
    messages: MessageCatalog,
    locale: str | None,
) -> RuleBuilder:
    return RuleBuilder(
        entity_type,
        attributes,
        messages,
        enum_values=ENUM_VALUES.get(entity_type),
        locale=locale,
    )


def user_rules(attributes: AttributeRegistry, messages: MessageCatalog, locale: str | None = None) -> EntityRules:
    on_create = (Operation.CREATE,)
    return (
        _builder("user", attributes, messages, locale)
        .require_presence("email")
        .require_unique("email")
        .require_format("email", pattern="email", allow_blank=True)
        .require_presence("password", on=on_create)
        .require_length("password", minimum=PASSWORD_MIN_LENGTH, maximum=PASSWORD_MAX_LENGTH, on=on_create)
        .require_confirmation("password", on=on_create)
        .require_presence("role")
        .require_enum_inclusion("role", allow_blank=True)
        .build()
    )


def department_rules(attributes: AttributeRegistry, messages: MessageCatalog, locale: str | None = None) -> EntityRules:
    return (
        _builder("department", attributes, messages, locale)
        .require_presence("name")
        .require_length("name", maximum=100)
        .require_unique("name")
        .require_format("name", pattern="japanese_name", allow_blank=True)
        .require_length("address", maximum=500)
        .require_format("address", pattern="japanese_address", allow_blank=True)
        .require_enum_inclusion("status")
        .require_enum_inclusion("department_type", allow_blank=True)
        .build()
    )


def customer_rules(attributes: AttributeRegistry, messages: MessageCatalog, locale: str | None = None) -> EntityRules:
    return (
        _builder("customer", attributes, messages, locale)
        .require_presence("name")
        .require_length("name", maximum=100)
        .require_format("name", pattern="japanese_name", allow_blank=True)
        .require_presence("customer_type")
        .require_enum_inclusion("customer_type", allow_blank=True)
        .require_presence("status")
        .require_enum_inclusion("status", allow_blank=True)
        .require_presence("department_id")
        .require_reference("department_id", "department")
        .build()
    )


def work_record_rules(attributes: AttributeRegistry, messages: MessageCatalog, locale: str | None = None) -> EntityRules:
    return (
        _builder("work_record", attributes, messages, locale)
        .require_presence("content")
        .require_length("content", maximum=1000)
        .require_presence("work_date")
        .require_enum_inclusion("status")
        .require_enum_inclusion("work_type", allow_blank=True)
        .require_presence("customer_id", "staff_user_id", "department_id")
        .require_reference("customer_id", "customer")
        .require_reference("staff_user_id", "user")
        .require_reference("department_id", "department")
        .build()
    )


def build_entity_rules(
    attributes: AttributeRegistry,
    messages: MessageCatalog,
    locale: str | None = None,
) -> dict[str, EntityRules]:
    """Build the rule set of every entity type.

    Raises:
        ConfigurationError: If any rule references an unmanaged attribute
    """
    return {
        "user": user_rules(attributes, messages, locale),
        "department": department_rules(attributes, messages, locale),
        "customer": customer_rules(attributes, messages, locale),
        "work_record": work_record_rules(attributes, messages, locale),
    }
