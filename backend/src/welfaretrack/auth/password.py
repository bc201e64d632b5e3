"""Password digests for user accounts (bcrypt)."""

import logging

from passlib.context import CryptContext

logger = logging.getLogger(__name__)


class PasswordService:
    """Hashes new passwords and checks login attempts against stored digests.

    Uses passlib's CryptContext for salted hashes with a configurable
    work factor.
    """

    def __init__(self, rounds: int = 12):
        """Set up the bcrypt context.

        Args:
            rounds: bcrypt work factor (default 12; tests use 4)
        """
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, password: str, digest: str | None) -> bool:
        """Check a password against a stored digest.

        A missing or unrecognised digest never verifies.
        """
        if not digest:
            return False
        try:
            return self._context.verify(password, digest)
        except (ValueError, TypeError) as e:
            logger.warning("Could not verify password digest: %s", e)
            return False
