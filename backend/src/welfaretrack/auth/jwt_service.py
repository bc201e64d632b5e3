"""Identity token generation and validation service."""

from datetime import UTC, datetime, timedelta
from typing import Any, Mapping

import jwt


class DecodeError(Exception):
    """Raised for any token that cannot be trusted.

    Bad signature, malformed token, malformed payload and expiry all raise
    this one error.
    """

    pass


class TokenService:
    """Service for signing and verifying identity tokens.

    Uses HS256 with the process-wide secret key. Tokens carry the caller's
    claims plus an ``exp`` claim; nothing is stored server side.
    """

    def __init__(
        self,
        secret_key: str,
        ttl: timedelta = timedelta(hours=24),
        algorithm: str = "HS256",
    ):
        """Initialize the token service.

        Args:
            secret_key: Secret key for signing tokens (should be at least 32 chars)
            ttl: Default token lifetime
            algorithm: JWT algorithm (default HS256)
        """
        self._secret_key = secret_key
        self._algorithm = algorithm
        self.ttl = ttl

    def expiry_from_now(self) -> datetime:
        """The expiry a token issued now gets by default."""
        return datetime.now(UTC) + self.ttl

    def encode(self, claims: Mapping[str, Any], expires_at: datetime | None = None) -> str:
        """Sign a token.

        Args:
            claims: Claims to embed (copied, never mutated)
            expires_at: Expiry instant (default: now + ttl)

        Returns:
            The encoded token
        """
        expires_at = expires_at or self.expiry_from_now()
        payload = dict(claims)
        payload["exp"] = int(expires_at.timestamp())
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def decode(self, token: str) -> dict[str, Any]:
        """Verify a token and return its claims.

        Raises:
            DecodeError: If the token is invalid, malformed or expired
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"require": ["exp"]},
            )
        except jwt.PyJWTError as e:
            raise DecodeError(str(e)) from e

        if not isinstance(payload, dict):
            raise DecodeError("Token payload is not an object")
        return payload
