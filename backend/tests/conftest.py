"""Shared fixtures for welfaretrack tests."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from welfaretrack.api.app import create_app
from welfaretrack.settings import Settings

BACKEND_DIR = Path(__file__).resolve().parent.parent
CONFIG_DIR = BACKEND_DIR / "config"

TEST_SECRET = "test-secret-key-that-is-at-least-32-bytes-long"
PASSWORD = "password123"


@pytest.fixture
def config_dir() -> Path:
    """The shipped configuration directory."""
    return CONFIG_DIR


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings with a per-test SQLite database and fast bcrypt."""
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'test.db'}",
        secret_key=TEST_SECRET,
        config_dir=CONFIG_DIR,
        bcrypt_rounds=4,
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client


@pytest.fixture
def services(client):
    """Service objects of the running test application (tables created)."""
    return client.app.state.services


def make_user(services, email: str = "staff@example.com", role: str = "staff", password: str = PASSWORD) -> dict:
    """Insert a user directly, bypassing validation."""
    return services.store.insert("user", {
        "email": email,
        "password_digest": services.accounts.passwords.hash(password),
        "role": role,
    })


def make_department(services, name: str = "保護課", **values) -> dict:
    return services.store.insert("department", {"name": name, "status": "active", **values})


def make_customer(services, department: dict, name: str = "山田太郎", **values) -> dict:
    data = {
        "name": name,
        "customer_type": "regular",
        "status": "active",
        "department_id": department["id"],
        **values,
    }
    return services.store.insert("customer", data)


def auth_headers(services, user: dict) -> dict[str, str]:
    token = services.token_service.encode({"user_id": user["id"]})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def staff(services) -> dict:
    return make_user(services, "staff@example.com", "staff")


@pytest.fixture
def manager(services) -> dict:
    return make_user(services, "manager@example.com", "manager")


@pytest.fixture
def admin(services) -> dict:
    return make_user(services, "admin@example.com", "admin")


@pytest.fixture
def department(services) -> dict:
    return make_department(services)
