"""Bearer token authentication for FastAPI."""

import logging
from typing import Any, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from welfaretrack.auth.jwt_service import DecodeError, TokenService
from welfaretrack.auth.types import UNAUTHENTICATED, AuthResult, AuthState, Identity

logger = logging.getLogger(__name__)

# Claim holding the token subject
SUBJECT_CLAIM = "user_id"

PUBLIC_PATHS = (
    "/api/v1/auth/login",
    "/api/v1/auth/signup",
    "/up",
    "/docs",
    "/openapi.json",
    "/redoc",
)


class Authenticator:
    """Turns an Authorization header into an AuthResult.

    UNAUTHENTICATED -> RESOLVING -> AUTHENTICATED | REJECTED.
    A request without a usable bearer token is REJECTED without decoding.
    """

    def __init__(self, token_service: TokenService, resolve_identity: Callable[[Any], Identity | None]):
        """Initialize the authenticator.

        Args:
            token_service: Verifies tokens
            resolve_identity: Maps a token subject to an Identity (None if unknown)
        """
        self.token_service = token_service
        self.resolve_identity = resolve_identity

    def authenticate(self, header: str | None) -> AuthResult:
        token = extract_bearer_token(header)
        if token is None:
            return _rejected("missing bearer token")

        logger.debug("Auth state: %s", AuthState.RESOLVING.value)

        try:
            claims = self.token_service.decode(token)
        except DecodeError as e:
            return _rejected(f"invalid token: {e}")

        subject = claims.get(SUBJECT_CLAIM)
        if subject is None:
            return _rejected("token has no subject")

        identity = self.resolve_identity(subject)
        if identity is None:
            return _rejected(f"unknown subject {subject!r}")

        return AuthResult(state=AuthState.AUTHENTICATED, identity=identity)


class AuthMiddleware(BaseHTTPMiddleware):
    """Middleware that authenticates the bearer token on every request.

    The result is stored on ``request.state.auth``. The middleware does NOT
    reject unauthenticated requests; that is handled by the endpoint
    dependencies.
    """

    def __init__(self, app, authenticator: Authenticator, public_paths: tuple[str, ...] = PUBLIC_PATHS):
        """Initialize middleware.

        Args:
            app: The ASGI application
            authenticator: Resolves the caller from the Authorization header
            public_paths: Path prefixes that skip authentication
        """
        super().__init__(app)
        self._authenticator = authenticator
        self._public_paths = public_paths

    async def dispatch(self, request: Request, call_next) -> Response:
        request.state.auth = UNAUTHENTICATED

        if not self._is_public(request.url.path):
            result = self._authenticator.authenticate(request.headers.get("Authorization"))
            if result.state is AuthState.REJECTED:
                logger.debug("Rejected %s %s: %s", request.method, request.url.path, result.reason)
            request.state.auth = result

        return await call_next(request)

    def _is_public(self, path: str) -> bool:
        return any(path == p or path.startswith(p + "/") for p in self._public_paths)


def extract_bearer_token(header: str | None) -> str | None:
    """Return the token of a ``Bearer <token>`` header, else None.

    The scheme is matched case-insensitively.
    """
    if not header:
        return None
    parts = header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1]


def get_auth_result(request: Request) -> AuthResult:
    """Get the authentication result from the request state."""
    return getattr(request.state, "auth", UNAUTHENTICATED)


def _rejected(reason: str) -> AuthResult:
    return AuthResult(state=AuthState.REJECTED, reason=reason)
