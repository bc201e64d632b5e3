"""Tests for bearer token parsing, the authenticator and password hashing."""

from datetime import UTC, datetime, timedelta

import pytest

from welfaretrack.auth.jwt_service import TokenService
from welfaretrack.auth.middleware import Authenticator, extract_bearer_token
from welfaretrack.auth.password import PasswordService
from welfaretrack.auth.roles import Role
from welfaretrack.auth.types import AuthState, Identity

from conftest import TEST_SECRET

ALICE = Identity(user_id=1, email="alice@example.com", role=Role.MANAGER)


@pytest.fixture
def tokens():
    return TokenService(secret_key=TEST_SECRET)


@pytest.fixture
def authenticator(tokens):
    return Authenticator(tokens, lambda subject: ALICE if subject == 1 else None)


class TestExtractBearerToken:
    @pytest.mark.parametrize("header, token", [
        ("Bearer abc", "abc"),
        ("bearer abc", "abc"),
        ("BEARER abc", "abc"),
    ])
    def test_valid(self, header, token):
        assert extract_bearer_token(header) == token

    @pytest.mark.parametrize("header", [None, "", "Bearer", "Basic abc", "Bearer a b", "abc"])
    def test_invalid(self, header):
        assert extract_bearer_token(header) is None


class TestAuthenticator:
    def test_valid_token(self, authenticator, tokens):
        result = authenticator.authenticate(f"Bearer {tokens.encode({'user_id': 1})}")
        assert result.state is AuthState.AUTHENTICATED
        assert result.identity == ALICE
        assert result.is_authenticated

    def test_missing_header(self, authenticator):
        result = authenticator.authenticate(None)
        assert result.state is AuthState.REJECTED
        assert not result.is_authenticated
        assert result.reason == "missing bearer token"

    def test_expired_token(self, authenticator, tokens):
        token = tokens.encode({"user_id": 1}, datetime.now(UTC) - timedelta(seconds=10))
        result = authenticator.authenticate(f"Bearer {token}")
        assert result.state is AuthState.REJECTED
        assert result.identity is None

    def test_token_without_subject(self, authenticator, tokens):
        result = authenticator.authenticate(f"Bearer {tokens.encode({'sub': 'x'})}")
        assert result.state is AuthState.REJECTED
        assert result.reason == "token has no subject"

    def test_unknown_subject(self, authenticator, tokens):
        result = authenticator.authenticate(f"Bearer {tokens.encode({'user_id': 99})}")
        assert result.state is AuthState.REJECTED
        assert "99" in result.reason


class TestPasswordService:
    @pytest.fixture
    def passwords(self):
        return PasswordService(rounds=4)

    def test_hash_and_verify(self, passwords):
        digest = passwords.hash("password123")
        assert digest != "password123"
        assert passwords.verify("password123", digest)
        assert not passwords.verify("password124", digest)

    def test_empty_digest_never_verifies(self, passwords):
        assert not passwords.verify("password123", "")

    def test_malformed_digest_never_verifies(self, passwords):
        assert not passwords.verify("password123", "not-a-bcrypt-digest")
