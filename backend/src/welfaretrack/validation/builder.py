"""Builds entity rule sets from the attribute registry and message catalog.

Every construction method checks that each attribute it is given is managed
in the entity's attribute configuration before anything else happens, so a
typo in a rule definition fails at startup instead of at request time.

Example:
    builder = RuleBuilder("customer", attributes, messages,
                          enum_values={"status": ["active", "inactive"]})
    builder.require_presence("name", "status")
    builder.require_length("name", maximum=100)
    builder.require_enum_inclusion("status")
    rules = builder.build()
"""

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Sequence

from welfaretrack.errors import ConfigurationError
from welfaretrack.validation.attributes import AttributeRegistry
from welfaretrack.validation.messages import MessageCatalog, compose_message
from welfaretrack.validation.patterns import get_pattern
from welfaretrack.validation.rules import (
    BaseRule,
    ConfirmationRule,
    FormatRule,
    InclusionRule,
    LengthRule,
    PresenceRule,
    ReferenceRule,
    UniquenessRule,
)
from welfaretrack.validation.types import ALL_OPERATIONS, Operation

CHOICE_SEPARATOR = ", "


@dataclass(frozen=True)
class EntityRules:
    """The complete, immutable rule set for one entity type."""

    entity_type: str
    rules: tuple[BaseRule, ...]

    def __len__(self) -> int:
        return len(self.rules)


class RuleBuilder:
    """Accumulates validation rules for an entity type."""

    def __init__(
        self,
        entity_type: str,
        attributes: AttributeRegistry,
        messages: MessageCatalog,
        enum_values: Mapping[str, Sequence[str]] | None = None,
        locale: str | None = None,
    ):
        """Initialize the builder.

        Args:
            entity_type: Entity type name used for attribute lookups
            attributes: Registry of display names (shared, loaded once)
            messages: Message catalog (shared, loaded once)
            enum_values: Legal values of the entity's enumerated attributes
            locale: Locale for messages (catalog default if None)
        """
        self.entity_type = entity_type
        self.attributes = attributes
        self.messages = messages
        self.enum_values = dict(enum_values or {})
        self.locale = locale
        self._rules: list[BaseRule] = []

    # ------------------------------------------------------------------
    # Rule construction
    # ------------------------------------------------------------------

    def require_presence(self, *attributes: str, on: Iterable[Operation] = ALL_OPERATIONS) -> "RuleBuilder":
        for attribute in self._managed(attributes):
            self._rules.append(PresenceRule(attribute, self.message_for(attribute, "presence"), on))
        return self

    def require_unique(self, *attributes: str, on: Iterable[Operation] = ALL_OPERATIONS) -> "RuleBuilder":
        for attribute in self._managed(attributes):
            self._rules.append(UniquenessRule(attribute, self.message_for(attribute, "taken"), on))
        return self

    def require_format(
        self,
        *attributes: str,
        pattern: str,
        allow_blank: bool = False,
        on: Iterable[Operation] = ALL_OPERATIONS,
    ) -> "RuleBuilder":
        """Require attributes to match a named pattern.

        The pattern name doubles as the message kind.
        """
        managed = self._managed(attributes)
        compiled = get_pattern(pattern)
        for attribute in managed:
            self._rules.append(FormatRule(
                attribute,
                compiled,
                self.message_for(attribute, pattern),
                allow_blank=allow_blank,
                on=on,
            ))
        return self

    def require_enum_inclusion(
        self,
        *attributes: str,
        allow_blank: bool = False,
        on: Iterable[Operation] = ALL_OPERATIONS,
    ) -> "RuleBuilder":
        """Restrict attributes to the entity's statically known enum values."""
        for attribute in self._managed(attributes):
            values = self.enum_values.get(attribute)
            if not values:
                raise ConfigurationError(
                    f"'{attribute}' is not defined as an enum for the {self.entity_type} entity"
                )
            self._add_inclusion(attribute, values, allow_blank, on)
        return self

    def require_inclusion_in(
        self,
        *attributes: str,
        choices: Iterable[Any],
        allow_blank: bool = False,
        on: Iterable[Operation] = ALL_OPERATIONS,
    ) -> "RuleBuilder":
        managed = self._managed(attributes)
        choices = list(choices)
        for attribute in managed:
            self._add_inclusion(attribute, choices, allow_blank, on)
        return self

    def require_length(
        self,
        attribute: str,
        minimum: int | None = None,
        maximum: int | None = None,
        on: Iterable[Operation] = ALL_OPERATIONS,
    ) -> "RuleBuilder":
        """Bound an attribute's length; each bound has its own message."""
        self._managed([attribute])
        if minimum is None and maximum is None:
            raise ConfigurationError(
                f"require_length for {self.entity_type}.{attribute} needs a minimum or a maximum"
            )

        too_short = too_long = ""
        if minimum is not None:
            too_short = self.message_for(attribute, "too_short", {"count": minimum})
        if maximum is not None:
            too_long = self.message_for(attribute, "too_long", {"count": maximum})

        self._rules.append(LengthRule(
            attribute,
            minimum=minimum,
            maximum=maximum,
            too_short=too_short,
            too_long=too_long,
            on=on,
        ))
        return self

    def require_confirmation(self, attribute: str, on: Iterable[Operation] = ALL_OPERATIONS) -> "RuleBuilder":
        """Require <attribute>_confirmation, when given, to match the attribute."""
        confirmation = f"{attribute}_confirmation"
        self._managed([attribute, confirmation])
        message = self.message_for(
            confirmation,
            "confirmation",
            {"attribute": self.attributes.get_display_name(self.entity_type, attribute)},
        )
        self._rules.append(ConfirmationRule(attribute, message, on))
        return self

    def require_reference(
        self,
        attribute: str,
        entity_type: str,
        on: Iterable[Operation] = ALL_OPERATIONS,
    ) -> "RuleBuilder":
        """Require a non-blank value to be the id of an existing entity_type record."""
        self._managed([attribute])
        self._rules.append(ReferenceRule(
            attribute,
            entity_type,
            self.message_for(attribute, "required"),
            on,
        ))
        return self

    def build(self) -> EntityRules:
        return EntityRules(entity_type=self.entity_type, rules=tuple(self._rules))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def message_for(
        self,
        attribute: str,
        kind: str,
        interpolations: Mapping[str, Any] | None = None,
    ) -> str:
        """Compose display name + catalog message for an attribute."""
        return compose_message(
            self.attributes.get_display_name(self.entity_type, attribute),
            self.messages.get_formatted_message(kind, interpolations, self.locale),
        )

    def _managed(self, attributes: Iterable[str]) -> list[str]:
        attributes = list(attributes)
        for attribute in attributes:
            self.attributes.assert_managed(self.entity_type, attribute)
        return attributes

    def _add_inclusion(
        self,
        attribute: str,
        choices: Sequence[Any],
        allow_blank: bool,
        on: Iterable[Operation],
    ) -> None:
        choices_text = CHOICE_SEPARATOR.join(str(c) for c in choices)
        self._rules.append(InclusionRule(
            attribute,
            choices,
            self.message_for(attribute, "inclusion", {"choices": choices_text}),
            allow_blank=allow_blank,
            on=on,
        ))
