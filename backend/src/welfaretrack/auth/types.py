"""Type definitions for authentication."""

from dataclasses import dataclass
from enum import Enum

from welfaretrack.auth.roles import Role


@dataclass(frozen=True)
class Identity:
    """The authenticated caller.

    Attributes:
        user_id: The user's id
        email: User's email address
        role: User's role
    """

    user_id: int
    email: str
    role: Role


class AuthState(Enum):
    """Where a request is in token authentication."""

    UNAUTHENTICATED = "unauthenticated"
    RESOLVING = "resolving"
    AUTHENTICATED = "authenticated"
    REJECTED = "rejected"


@dataclass(frozen=True)
class AuthResult:
    """Outcome of authenticating one request.

    Attributes:
        state: AUTHENTICATED or REJECTED once authentication has run
        identity: The caller, only when AUTHENTICATED
        reason: Why the request was rejected (for logs, never sent to clients)
    """

    state: AuthState
    identity: Identity | None = None
    reason: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.state is AuthState.AUTHENTICATED and self.identity is not None


UNAUTHENTICATED = AuthResult(state=AuthState.UNAUTHENTICATED)
