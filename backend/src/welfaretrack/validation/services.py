"""Runs entity rule sets against write attempts."""

from typing import Any

from welfaretrack.validation.builder import EntityRules
from welfaretrack.validation.types import (
    Operation,
    QueryService,
    ValidationContext,
    ValidationError,
    ValidationResult,
)


class ValidationService:
    """Validates records against the rules built for their entity type.

    Every rule runs; errors accumulate into a single ValidationResult.
    """

    def __init__(self, query: QueryService):
        self.query = query

    async def validate(
        self,
        rules: EntityRules,
        record: dict[str, Any],
        operation: Operation,
        record_id: int | None = None,
    ) -> ValidationResult:
        """Validate a record.

        Args:
            rules: The entity's rule set
            record: The full record as it would be saved (defaults applied,
                    for updates merged with the stored values)
            operation: CREATE or UPDATE
            record_id: Id of the record being updated

        Returns:
            ValidationResult with every error found
        """
        ctx = ValidationContext(
            entity_type=rules.entity_type,
            record=record,
            operation=operation,
            record_id=record_id,
        )

        errors: list[ValidationError] = []
        for rule in rules.rules:
            errors.extend(await rule.validate(ctx, self.query))

        return ValidationResult(valid=not errors, errors=errors)
