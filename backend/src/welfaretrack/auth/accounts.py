"""User accounts: registration, credential checks and identity lookup."""

import logging
from typing import Any

from welfaretrack.auth.password import PasswordService
from welfaretrack.auth.roles import Role
from welfaretrack.auth.types import Identity
from welfaretrack.records.schema import MAX_RECORD_ID
from welfaretrack.records.service import RecordService

logger = logging.getLogger(__name__)


def normalize_email(email: Any) -> Any:
    """Lowercase and strip an email address; non-strings pass through."""
    if isinstance(email, str):
        return email.strip().lower()
    return email


class AccountService:
    """Creates users and turns credentials or token subjects into identities."""

    def __init__(self, records: RecordService, passwords: PasswordService):
        self.records = records
        self.passwords = passwords

    @property
    def store(self):
        return self.records.store

    async def register(
        self,
        email: str | None,
        password: str | None,
        password_confirmation: str | None = None,
        role: "Role | str | None" = None,
    ) -> dict[str, Any]:
        """Validate and create a user.

        Raises:
            RecordInvalidError: If the user's rules fail
        """
        data = {
            "email": normalize_email(email),
            "password": password,
            "password_confirmation": password_confirmation,
            "role": str(role) if role is not None else None,
        }
        user = await self.records.create(
            "user",
            data,
            before_save=lambda record: {"password_digest": self.passwords.hash(record["password"])},
        )
        logger.info("Registered user %s (%s)", user["id"], user["role"])
        return user

    def authenticate(self, email: str | None, password: str | None) -> dict[str, Any] | None:
        """Return the user for valid credentials, else None."""
        if not email or not password:
            return None
        user = self.store.find_by("user", email=normalize_email(email))
        if user is None or not self.passwords.verify(password, user["password_digest"]):
            return None
        return user

    def resolve_identity(self, user_id: Any) -> Identity | None:
        """Look up the user behind a token subject."""
        try:
            record_id = int(user_id)
        except (TypeError, ValueError):
            return None
        if not 1 <= record_id <= MAX_RECORD_ID:
            return None

        user = self.store.get("user", record_id)
        if user is None:
            return None
        return identity_for(user)


def identity_for(user: dict[str, Any]) -> Identity:
    return Identity(user_id=user["id"], email=user["email"], role=Role.parse(user["role"]))
