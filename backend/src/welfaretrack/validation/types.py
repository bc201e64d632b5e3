"""Core types for the welfaretrack validation system."""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol


class Operation(Enum):
    """The type of write being validated."""

    CREATE = "create"
    UPDATE = "update"


ALL_OPERATIONS = (Operation.CREATE, Operation.UPDATE)


@dataclass(frozen=True)
class ValidationError:
    """A single field-level validation failure.

    Attributes:
        message: Human-readable message (display name + catalog message)
        code: Machine-readable error code (e.g., "PRESENCE", "TOO_LONG")
        field: Attribute name this error relates to
    """

    message: str
    code: str
    field: str | None = None


@dataclass
class ValidationContext:
    """Context passed to rules during validation.

    Attributes:
        entity_type: Entity type being validated (e.g., "customer")
        record: The data being validated (with defaults already applied)
        operation: CREATE or UPDATE
        record_id: For UPDATE, the id of the record being changed
    """

    entity_type: str
    record: dict[str, Any]
    operation: Operation
    record_id: int | None = None


class QueryService(Protocol):
    """Data access needed by rules that look at other records."""

    async def exists(
        self,
        entity_type: str,
        conditions: dict[str, Any],
        exclude_id: int | None = None,
    ) -> bool:
        """Check if any record of entity_type matches all conditions.

        Args:
            entity_type: Entity type to query
            conditions: Attribute name -> required value
            exclude_id: Record id to leave out (the record being updated)

        Returns:
            True if at least one record matches
        """
        ...


@dataclass
class ValidationResult:
    """Result of validating one write attempt."""

    valid: bool
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def messages(self) -> list[str]:
        return [e.message for e in self.errors]


def is_blank(value: Any) -> bool:
    """Check if a value is considered empty."""
    if value is None:
        return True
    if isinstance(value, str) and value.strip() == "":
        return True
    if isinstance(value, (list, dict)) and len(value) == 0:
        return True
    return False


def humanize(name: str) -> str:
    """Turn an attribute or message key into a label.

    "customer_type" -> "Customer type", "department_id" -> "Department".
    """
    text = re.sub(r"_id$", "", str(name))
    text = text.replace("_", " ").strip().lower()
    return text[:1].upper() + text[1:]
