"""Role hierarchy and the minimum-role comparison.

Roles form a total order: staff < manager < admin. A caller satisfies a
required role when their own role is at least as high.
"""

from enum import IntEnum


class Role(IntEnum):
    """User roles, ordered by privilege."""

    STAFF = 0
    MANAGER = 1
    ADMIN = 2

    @property
    def value_name(self) -> str:
        """Stored / serialized form, e.g. "manager"."""
        return self.name.lower()

    @classmethod
    def values(cls) -> tuple[str, ...]:
        return tuple(role.value_name for role in cls)

    @classmethod
    def parse(cls, value: "str | Role") -> "Role":
        """Convert a stored role string to a Role.

        Raises:
            ValueError: If the string is not a known role
        """
        if isinstance(value, Role):
            return value
        try:
            return cls[str(value).strip().upper()]
        except KeyError:
            raise ValueError(
                f"Unknown role '{value}'. Expected one of: {', '.join(cls.values())}"
            ) from None

    def __str__(self) -> str:
        return self.value_name


def has_minimum_role(current: Role, required: Role) -> bool:
    """True when `current` is `required` or above."""
    return Role.parse(current) >= Role.parse(required)
