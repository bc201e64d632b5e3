"""FastAPI dependencies for authentication and authorization."""

from typing import Annotated, Callable

from fastapi import Path, Request

from welfaretrack.auth.middleware import get_auth_result
from welfaretrack.auth.roles import Role, has_minimum_role
from welfaretrack.auth.types import Identity
from welfaretrack.errors import AuthenticationError, AuthorizationError
from welfaretrack.records.schema import MAX_RECORD_ID


def require_authenticated(request: Request) -> Identity:
    """Dependency that requires an authenticated caller.

    Raises:
        AuthenticationError: Unless the request was AUTHENTICATED
    """
    result = get_auth_result(request)
    if not result.is_authenticated:
        raise AuthenticationError()
    return result.identity  # type: ignore[return-value]


def authorise_minimum_role(identity: Identity, role: Role) -> None:
    """Raise AuthorizationError unless the identity holds `role` or above."""
    if not has_minimum_role(identity.role, role):
        raise AuthorizationError()


def require_minimum_role(role: Role) -> Callable[[Request], Identity]:
    """Create a dependency that requires `role` or a higher one.

    Example:
        @router.delete("/{id}")
        def destroy(identity: Identity = Depends(require_minimum_role(Role.MANAGER))):
            ...
    """

    def dependency(request: Request) -> Identity:
        identity = require_authenticated(request)
        authorise_minimum_role(identity, role)
        return identity

    return dependency


def require_self_or_minimum_role(role: Role) -> Callable[[Request, int], Identity]:
    """Allow the caller to act on their own user record, or on any with `role`."""

    def dependency(request: Request, user_id: Annotated[int, Path(ge=1, le=MAX_RECORD_ID)]) -> Identity:
        identity = require_authenticated(request)
        if identity.user_id != user_id:
            authorise_minimum_role(identity, role)
        return identity

    return dependency
