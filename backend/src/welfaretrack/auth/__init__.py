"""Authentication and authorization for welfaretrack."""

from welfaretrack.auth.roles import Role, has_minimum_role
from welfaretrack.auth.types import AuthResult, AuthState, Identity
from welfaretrack.auth.password import PasswordService
from welfaretrack.auth.jwt_service import DecodeError, TokenService
from welfaretrack.auth.middleware import AuthMiddleware, Authenticator, get_auth_result
from welfaretrack.auth.dependencies import (
    authorise_minimum_role,
    require_authenticated,
    require_minimum_role,
)

__all__ = [
    "Role",
    "has_minimum_role",
    "AuthResult",
    "AuthState",
    "Identity",
    "PasswordService",
    "DecodeError",
    "TokenService",
    "AuthMiddleware",
    "Authenticator",
    "get_auth_result",
    "authorise_minimum_role",
    "require_authenticated",
    "require_minimum_role",
]
