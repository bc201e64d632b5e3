"""Authentication API endpoints."""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel

from welfaretrack.auth.accounts import AccountService
from welfaretrack.auth.dependencies import require_authenticated
from welfaretrack.auth.jwt_service import TokenService
from welfaretrack.auth.roles import Role
from welfaretrack.auth.types import Identity
from welfaretrack.errors import AuthenticationError, MalformedRequestError
from welfaretrack.records.serializers import user_profile, user_summary

logger = logging.getLogger(__name__)


class LoginRequest(BaseModel):
    """Request body for login. Missing fields are treated as bad credentials."""

    email: str | None = None
    password: str | None = None


class SignupUser(BaseModel):
    email: str | None = None
    password: str | None = None
    password_confirmation: str | None = None
    # Accepted for compatibility; self-registered users are always staff
    role: str | None = None


class SignupRequest(BaseModel):
    """Request body for signup."""

    user: SignupUser | None = None


def create_auth_router(accounts: AccountService, token_service: TokenService) -> APIRouter:
    """Create the auth router with injected dependencies.

    Args:
        accounts: Registers users and checks credentials
        token_service: Issues identity tokens

    Returns:
        Configured APIRouter
    """
    router = APIRouter(prefix="/auth", tags=["auth"])

    def issue_token(user: dict[str, Any]) -> tuple[str, str]:
        expires_at = token_service.expiry_from_now()
        token = token_service.encode({"user_id": user["id"]}, expires_at=expires_at)
        return token, expires_at.isoformat()

    @router.post("/login")
    async def login(body: LoginRequest | None = None) -> dict[str, Any]:
        """Exchange email and password for a token.

        Raises:
            AuthenticationError: For unknown email, wrong password or missing fields
        """
        body = body or LoginRequest()
        user = accounts.authenticate(body.email, body.password)
        if user is None:
            logger.info("Failed login for %s", body.email)
            raise AuthenticationError("invalid credentials")

        token, expire_at = issue_token(user)
        logger.info("User %s logged in", user["id"])
        return {
            "token": token,
            "user": user_summary(user),
            "expire_at": expire_at,
        }

    @router.post("/signup", status_code=201)
    async def signup(body: SignupRequest) -> dict[str, Any]:
        """Register a staff user and return a token.

        Raises:
            MalformedRequestError: If the `user` object is missing
            RecordInvalidError: If the user's rules fail
        """
        if body.user is None:
            raise MalformedRequestError("param is missing or the value is empty: user")

        params = body.user
        user = await accounts.register(
            email=params.email,
            password=params.password,
            password_confirmation=params.password_confirmation,
            role=Role.STAFF,
        )

        token, expires_at = issue_token(user)
        return {
            "token": token,
            "user": user_summary(user),
            "expires_at": expires_at,
        }

    def current_profile(identity: Identity) -> dict[str, Any]:
        user = accounts.store.get("user", identity.user_id)
        if user is None:
            raise AuthenticationError()
        return {"user": user_profile(user)}

    @router.get("/me")
    async def me(identity: Identity = Depends(require_authenticated)) -> dict[str, Any]:
        return current_profile(identity)

    @router.get("/profile")
    async def profile(identity: Identity = Depends(require_authenticated)) -> dict[str, Any]:
        return current_profile(identity)

    @router.post("/refresh")
    async def refresh(identity: Identity = Depends(require_authenticated)) -> dict[str, Any]:
        """Issue a fresh token for the current caller."""
        user = accounts.store.get("user", identity.user_id)
        if user is None:
            raise AuthenticationError()

        token, expire_at = issue_token(user)
        return {
            "token": token,
            "user": user_summary(user),
            "expire_at": expire_at,
        }

    @router.post("/logout", status_code=204)
    async def logout(identity: Identity = Depends(require_authenticated)) -> Response:
        """Acknowledge logout. Tokens stay valid until they expire."""
        logger.info("User %s logged out", identity.user_id)
        return Response(status_code=204)

    return router
