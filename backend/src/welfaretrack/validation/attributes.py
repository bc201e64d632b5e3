"""Registry of attribute display names and choice labels per entity type.

Each entity type has one YAML document under ``config/validations``:

    # config/validations/customer.yml
    customer:
      name:
        display_name: Name
      customer_type:
        display_name: Customer type
        choices_display:
          regular: Regular
          premium: Premium

Only attributes listed here may be used in validation rules. Referencing any
other attribute while building rules raises AttributeNotManagedError.
"""

import logging
import threading
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

import yaml

from welfaretrack.errors import ConfigurationError
from welfaretrack.validation.types import humanize

logger = logging.getLogger(__name__)

_EMPTY: Mapping[str, Any] = MappingProxyType({})


class AttributeNotManagedError(ConfigurationError):
    """Raised when a rule references an attribute missing from the entity's config."""

    def __init__(
        self,
        entity_type: str,
        attribute: str,
        managed: list[str],
        config_file: Path | None = None,
    ):
        self.entity_type = entity_type
        self.attribute = attribute
        self.managed = managed
        self.config_file = config_file
        self.suggestion = find_similar_attribute(attribute, managed)
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        config_file = self.config_file or Path("config/validations") / f"{self.entity_type}.yml"
        lines = [
            f"Attribute ':{self.attribute}' is not managed for the {self.entity_type} entity.",
            "",
            "To fix:",
            f"1. Add the attribute to {config_file}",
            "2. Use one of the managed attributes",
            "",
        ]
        if self.managed:
            lines.append(f"Managed attributes: {', '.join(self.managed)}")
            if self.suggestion:
                lines.append("")
                lines.append(f"Did you mean ':{self.suggestion}'?")
        else:
            lines.append(f"The {self.entity_type} entity has no managed attributes.")
        return "\n".join(lines)


def levenshtein_distance(a: str, b: str) -> int:
    """Edit distance between two strings (insert, delete, substitute)."""
    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            cost = 0 if char_a == char_b else 1
            current.append(min(
                previous[j] + 1,
                current[j - 1] + 1,
                previous[j - 1] + cost,
            ))
        previous = current
    return previous[-1]


def find_similar_attribute(attribute: str, candidates: list[str]) -> str | None:
    """Pick the managed attribute closest to a misspelled one.

    Preference order: case-insensitive exact match, substring containment in
    either direction, then smallest edit distance. Earlier candidates win ties.
    """
    if not candidates:
        return None

    target = str(attribute).lower()

    for candidate in candidates:
        if candidate.lower() == target:
            return candidate

    for candidate in candidates:
        lowered = candidate.lower()
        if target in lowered or lowered in target:
            return candidate

    return min(candidates, key=lambda c: levenshtein_distance(target, c.lower()))


class AttributeRegistry:
    """Loads and caches per-entity attribute configuration.

    The YAML file for an entity type is read the first time any lookup for that
    entity type happens; later lookups hit the cache. A missing or malformed
    file is cached as an empty configuration.
    """

    def __init__(self, config_dir: Path):
        """Initialize the registry.

        Args:
            config_dir: Directory containing the validations/ subdirectory
        """
        self.config_dir = Path(config_dir)
        self._configs: dict[str, Mapping[str, Any]] = {}
        self._lock = threading.Lock()

    @property
    def validations_dir(self) -> Path:
        return self.config_dir / "validations"

    def config_file(self, entity_type: str) -> Path:
        return self.validations_dir / f"{entity_type}.yml"

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_entity_config(self, entity_type: str) -> Mapping[str, Any]:
        """Return the loaded attribute configuration for an entity type."""
        config = self._configs.get(entity_type)
        if config is not None:
            return config

        with self._lock:
            config = self._configs.get(entity_type)
            if config is None:
                config = _freeze(self._read_config_file(entity_type))
                self._configs[entity_type] = config
        return config

    def get_display_name(self, entity_type: str, attribute: str) -> str:
        """Get the display name for an attribute, humanizing the name if unset."""
        attribute_config = self._attribute_config(entity_type, attribute)
        display_name = attribute_config.get("display_name") if attribute_config else None
        if display_name:
            return str(display_name)
        return humanize(attribute)

    def is_managed(self, entity_type: str, attribute: str) -> bool:
        return bool(self._attribute_config(entity_type, attribute))

    def assert_managed(self, entity_type: str, attribute: str) -> None:
        """Fail unless the attribute is configured for the entity type.

        Raises:
            AttributeNotManagedError: With the managed attributes and a suggestion
        """
        if self.is_managed(entity_type, attribute):
            return
        raise AttributeNotManagedError(
            entity_type,
            str(attribute),
            self.managed_attributes(entity_type),
            self.config_file(entity_type),
        )

    def managed_attributes(self, entity_type: str) -> list[str]:
        """List configured attributes in file order."""
        return [
            name
            for name, value in self.get_entity_config(entity_type).items()
            if isinstance(value, Mapping) and value
        ]

    def get_choice_display_names(self, entity_type: str, attribute: str) -> Mapping[str, str]:
        """Get the value -> label mapping for an enumerated attribute.

        Returns an empty mapping (and logs a warning) when none is configured.
        """
        attribute_config = self._attribute_config(entity_type, attribute)
        choices = attribute_config.get("choices_display") if attribute_config else None
        if not choices:
            logger.warning("No choices_display configured for %s#%s", entity_type, attribute)
            return _EMPTY
        return choices

    def available_entities(self) -> list[str]:
        """List entity types that have a configuration file."""
        if not self.validations_dir.is_dir():
            return []
        return sorted(p.stem for p in self.validations_dir.glob("*.yml"))

    def reload(self, entity_type: str | None = None) -> None:
        """Forget cached configuration for one entity type, or all of them."""
        with self._lock:
            if entity_type is None:
                self._configs.clear()
            else:
                self._configs.pop(entity_type, None)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _attribute_config(self, entity_type: str, attribute: str) -> Mapping[str, Any] | None:
        value = self.get_entity_config(entity_type).get(str(attribute))
        return value if isinstance(value, Mapping) and value else None

    def _read_config_file(self, entity_type: str) -> dict[str, Any]:
        path = self.config_file(entity_type)
        if not path.exists():
            logger.warning("Validation config file not found: %s", path)
            return {}

        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error("Failed to load validation config %s: %s", path, e)
            return {}

        if not isinstance(data, dict):
            logger.error("Validation config %s must be a mapping, got %s", path, type(data).__name__)
            return {}

        section = data.get(entity_type) or {}
        if not isinstance(section, dict):
            logger.error("Section '%s' in %s must be a mapping", entity_type, path)
            return {}

        logger.debug("Loaded %d attributes for %s from %s", len(section), entity_type, path)
        return section


def _freeze(value: Any) -> Any:
    """Recursively turn dicts into read-only mappings with string keys."""
    if isinstance(value, dict):
        return MappingProxyType({str(k): _freeze(v) for k, v in value.items()})
    return value
