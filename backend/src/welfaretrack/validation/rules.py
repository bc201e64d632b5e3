"""Rule classes produced by the RuleBuilder.

Each rule checks one attribute and carries a fully composed message. Rules are
stateless apart from their configuration and never raise for bad input; a
violation is reported as a ValidationError.

Available rules:
- PresenceRule: attribute must not be blank
- UniquenessRule: no other record of the entity has the same value
- FormatRule: value must match a named regex pattern
- InclusionRule: value must be one of a fixed set
- LengthRule: string length within optional bounds
- ConfirmationRule: <attribute>_confirmation must equal the attribute
- ReferenceRule: value must be the id of an existing record
"""

import re
from typing import Any, Iterable

from welfaretrack.validation.types import (
    ALL_OPERATIONS,
    Operation,
    QueryService,
    ValidationContext,
    ValidationError,
    is_blank,
)


class BaseRule:
    """Base class for rules with common functionality.

    Subclasses should override the `check` method.
    """

    code = "INVALID"

    def __init__(
        self,
        attribute: str,
        message: str,
        on: Iterable[Operation] = ALL_OPERATIONS,
    ):
        self.attribute = attribute
        self.message = message
        self.on = tuple(on)

    async def validate(
        self,
        ctx: ValidationContext,
        query: QueryService,
    ) -> list[ValidationError]:
        """Run the rule if it applies to the context's operation."""
        if ctx.operation not in self.on:
            return []
        return await self.check(ctx, query)

    async def check(
        self,
        ctx: ValidationContext,
        query: QueryService,
    ) -> list[ValidationError]:
        raise NotImplementedError("Subclasses must implement check()")

    def _error(self, message: str | None = None, field: str | None = None) -> ValidationError:
        return ValidationError(
            message=message or self.message,
            code=self.code,
            field=field or self.attribute,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.attribute!r})"


class PresenceRule(BaseRule):
    code = "PRESENCE"

    async def check(self, ctx, query):
        if is_blank(ctx.record.get(self.attribute)):
            return [self._error()]
        return []


class UniquenessRule(BaseRule):
    """No other record of the same entity type may hold the same value."""

    code = "TAKEN"

    async def check(self, ctx, query):
        value = ctx.record.get(self.attribute)

        # Can't check uniqueness on null values
        if value is None:
            return []

        exists = await query.exists(
            ctx.entity_type,
            {self.attribute: value},
            exclude_id=ctx.record_id,
        )
        if exists:
            return [self._error()]
        return []


class FormatRule(BaseRule):
    """Value must match a regex pattern. Blank values fail unless allow_blank."""

    code = "FORMAT"

    def __init__(
        self,
        attribute: str,
        pattern: re.Pattern[str],
        message: str,
        allow_blank: bool = False,
        on: Iterable[Operation] = ALL_OPERATIONS,
    ):
        super().__init__(attribute, message, on)
        self.pattern = pattern
        self.allow_blank = allow_blank

    async def check(self, ctx, query):
        value = ctx.record.get(self.attribute)
        if self.allow_blank and is_blank(value):
            return []
        if value is None or not self.pattern.match(str(value)):
            return [self._error()]
        return []


class InclusionRule(BaseRule):
    """Value must be one of a fixed set of choices."""

    code = "INCLUSION"

    def __init__(
        self,
        attribute: str,
        choices: Iterable[Any],
        message: str,
        allow_blank: bool = False,
        on: Iterable[Operation] = ALL_OPERATIONS,
    ):
        super().__init__(attribute, message, on)
        self.choices = tuple(choices)
        self.allow_blank = allow_blank

    async def check(self, ctx, query):
        value = ctx.record.get(self.attribute)
        if self.allow_blank and is_blank(value):
            return []
        if value not in self.choices:
            return [self._error()]
        return []


class LengthRule(BaseRule):
    """String length must stay within optional minimum and maximum bounds.

    A missing value only violates a minimum bound.
    """

    def __init__(
        self,
        attribute: str,
        minimum: int | None = None,
        maximum: int | None = None,
        too_short: str = "",
        too_long: str = "",
        on: Iterable[Operation] = ALL_OPERATIONS,
    ):
        super().__init__(attribute, too_long or too_short, on)
        self.minimum = minimum
        self.maximum = maximum
        self.too_short = too_short
        self.too_long = too_long

    async def check(self, ctx, query):
        value = ctx.record.get(self.attribute)
        if value is None:
            if self.minimum is not None:
                return [self._length_error("TOO_SHORT", self.too_short)]
            return []

        length = len(value) if isinstance(value, str) else len(str(value))

        if self.minimum is not None and length < self.minimum:
            return [self._length_error("TOO_SHORT", self.too_short)]
        if self.maximum is not None and length > self.maximum:
            return [self._length_error("TOO_LONG", self.too_long)]
        return []

    def _length_error(self, code: str, message: str) -> ValidationError:
        return ValidationError(message=message, code=code, field=self.attribute)


class ConfirmationRule(BaseRule):
    """<attribute>_confirmation, when supplied, must equal <attribute>."""

    code = "CONFIRMATION"

    @property
    def confirmation_attribute(self) -> str:
        return f"{self.attribute}_confirmation"

    async def check(self, ctx, query):
        confirmation = ctx.record.get(self.confirmation_attribute)
        if confirmation is None:
            return []
        if confirmation != ctx.record.get(self.attribute):
            return [self._error(field=self.confirmation_attribute)]
        return []


class ReferenceRule(BaseRule):
    """A non-blank value must be the id of an existing record of another entity."""

    code = "REFERENCE"

    def __init__(
        self,
        attribute: str,
        entity_type: str,
        message: str,
        on: Iterable[Operation] = ALL_OPERATIONS,
    ):
        super().__init__(attribute, message, on)
        self.entity_type = entity_type

    async def check(self, ctx, query):
        value = ctx.record.get(self.attribute)

        # Skip if blank (use presence for that)
        if is_blank(value):
            return []

        if not await query.exists(self.entity_type, {"id": value}):
            return [self._error()]
        return []
