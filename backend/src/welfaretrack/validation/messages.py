"""Locale-aware catalog of validation message templates.

Templates live in YAML under the config directory:

    config/validation_messages.yml          default catalog
    config/validation_messages/<locale>.yml locale-specific catalog (preferred)

Both files have a single top-level ``validation_messages`` mapping from message
kind to template. Templates are written to read naturally directly after an
attribute's display name, e.g. ``" is required"``.
"""

import logging
import re
import threading
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

import yaml

from welfaretrack.validation.types import humanize

logger = logging.getLogger(__name__)


def compose_message(display_name: str, message: str) -> str:
    """Join a display name and a catalog message into a user-facing message."""
    return f"{display_name}{message}"


class MessageCatalog:
    """Loads and caches validation message templates per locale.

    Each locale is read from disk at most once per process; concurrent first
    access is serialized by a lock.
    """

    # Pattern: {name}
    PLACEHOLDER = re.compile(r"\{(?P<name>\w+)\}")

    def __init__(self, config_dir: Path, default_locale: str = "en"):
        """Initialize the catalog.

        Args:
            config_dir: Directory containing validation_messages.yml
            default_locale: Locale used when none is passed to a lookup
        """
        self.config_dir = Path(config_dir)
        self.default_locale = default_locale
        self._messages: dict[str, Mapping[str, str]] = {}
        self._lock = threading.Lock()

    def load_messages(self, locale: str | None = None) -> Mapping[str, str]:
        """Return the (cached) catalog for a locale."""
        locale = locale or self.default_locale
        messages = self._messages.get(locale)
        if messages is not None:
            return messages

        with self._lock:
            messages = self._messages.get(locale)
            if messages is None:
                messages = MappingProxyType(self._load_messages_from_file(locale))
                self._messages[locale] = messages
        return messages

    def get_message(self, kind: str, locale: str | None = None) -> str:
        """Get the template for a message kind.

        Unknown kinds fall back to a humanized form of the kind name.
        """
        message = self.load_messages(locale).get(str(kind))
        return message if message is not None else humanize(kind)

    def get_formatted_message(
        self,
        kind: str,
        interpolations: Mapping[str, Any] | None = None,
        locale: str | None = None,
    ) -> str:
        """Get a message with {name} placeholders filled in.

        Placeholders that have no interpolation value are left as they are.

        Example:
            catalog.get_formatted_message("too_long", {"count": 100})
            # => " is too long (maximum is 100 characters)"
        """
        template = self.get_message(kind, locale)
        if not interpolations:
            return template

        def replace(match: re.Match) -> str:
            name = match.group("name")
            if name in interpolations:
                return str(interpolations[name])
            return match.group(0)

        return self.PLACEHOLDER.sub(replace, template)

    def available_locales(self) -> list[str]:
        """List locales that have their own catalog file."""
        locale_dir = self.config_dir / "validation_messages"
        if not locale_dir.is_dir():
            return []
        return sorted(p.stem for p in locale_dir.glob("*.yml"))

    def reload(self) -> None:
        """Forget every cached catalog."""
        with self._lock:
            self._messages.clear()

    def _resolve_file(self, locale: str) -> Path:
        locale_file = self.config_dir / "validation_messages" / f"{locale}.yml"
        if locale_file.exists():
            return locale_file
        return self.config_dir / "validation_messages.yml"

    def _load_messages_from_file(self, locale: str) -> dict[str, str]:
        path = self._resolve_file(locale)
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Could not load validation messages from %s: %s", path, e)
            return {}

        messages = data.get("validation_messages") if isinstance(data, dict) else None
        if not isinstance(messages, dict):
            logger.warning("No validation_messages mapping in %s", path)
            return {}

        logger.debug("Loaded %d validation messages for locale %s from %s", len(messages), locale, path)
        return {str(k): str(v) for k, v in messages.items()}
