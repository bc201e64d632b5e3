"""Validated writes for the record types."""

import logging
from typing import Any, Callable, Mapping

from sqlalchemy.exc import IntegrityError

from welfaretrack.errors import ConfigurationError, RecordInvalidError, RecordNotFoundError
from welfaretrack.records.definitions import apply_defaults
from welfaretrack.records.store import RecordStore
from welfaretrack.validation.builder import EntityRules
from welfaretrack.validation.services import ValidationService
from welfaretrack.validation.types import Operation, humanize

logger = logging.getLogger(__name__)


class RecordService:
    """Applies defaults, runs the entity's rules and persists the result.

    Writes that fail validation raise RecordInvalidError with every
    accumulated error; nothing is stored.
    """

    def __init__(
        self,
        store: RecordStore,
        validator: ValidationService,
        rules: Mapping[str, EntityRules],
    ):
        self.store = store
        self.validator = validator
        self.rules = rules

    def rules_for(self, entity_type: str) -> EntityRules:
        try:
            return self.rules[entity_type]
        except KeyError:
            raise ConfigurationError(f"No rule set built for entity type '{entity_type}'") from None

    async def validate(
        self,
        entity_type: str,
        record: dict[str, Any],
        operation: Operation,
        record_id: int | None = None,
    ) -> None:
        """Validate a record, raising RecordInvalidError on any failure."""
        result = await self.validator.validate(
            self.rules_for(entity_type),
            record,
            operation,
            record_id=record_id,
        )
        if not result.valid:
            logger.debug("Rejected %s %s: %s", operation.value, entity_type, result.messages)
            raise RecordInvalidError(result.errors)

    async def _revalidate_conflict(
        self,
        entity_type: str,
        record: dict[str, Any],
        operation: Operation,
        record_id: int | None = None,
    ) -> None:
        # A concurrent write committed between validation and the statement
        logger.warning("Constraint violation writing %s; validating again", entity_type)
        await self.validate(entity_type, record, operation, record_id=record_id)

    def get(self, entity_type: str, record_id: int) -> dict[str, Any]:
        record = self.store.get(entity_type, record_id)
        if record is None:
            raise RecordNotFoundError(f"{humanize(entity_type)} not found")
        return record

    async def create(
        self,
        entity_type: str,
        data: Mapping[str, Any],
        before_save: Callable[[dict[str, Any]], dict[str, Any]] | None = None,
    ) -> dict[str, Any]:
        """Create a record.

        Args:
            entity_type: Entity type to create
            data: Incoming attributes
            before_save: Called with the validated record; its result is
                         merged in before insert (e.g. a password digest)

        Returns:
            The stored record
        """
        record = apply_defaults(entity_type, data)
        await self.validate(entity_type, record, Operation.CREATE)

        values = dict(record)
        if before_save:
            values.update(before_save(record))

        try:
            created = self.store.insert(entity_type, values)
        except IntegrityError:
            await self._revalidate_conflict(entity_type, record, Operation.CREATE)
            raise
        logger.info("Created %s %s", entity_type, created["id"])
        return created

    async def update(
        self,
        entity_type: str,
        record_id: int,
        changes: Mapping[str, Any],
    ) -> dict[str, Any]:
        """Update a record; the merged record is what gets validated."""
        existing = self.get(entity_type, record_id)
        merged = {**existing, **changes}
        await self.validate(entity_type, merged, Operation.UPDATE, record_id=record_id)

        try:
            updated = self.store.update(entity_type, record_id, dict(changes))
        except IntegrityError:
            await self._revalidate_conflict(entity_type, merged, Operation.UPDATE, record_id)
            raise
        if updated is None:
            raise RecordNotFoundError(f"{humanize(entity_type)} not found")
        logger.info("Updated %s %s", entity_type, record_id)
        return updated

    def delete(self, entity_type: str, record_id: int) -> None:
        if not self.store.delete(entity_type, record_id):
            raise RecordNotFoundError(f"{humanize(entity_type)} not found")
        logger.info("Deleted %s %s", entity_type, record_id)
