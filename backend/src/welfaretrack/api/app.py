"""FastAPI application."""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from welfaretrack.api.errors import register_exception_handlers
from welfaretrack.auth.accounts import AccountService
from welfaretrack.auth.endpoints import create_auth_router
from welfaretrack.auth.jwt_service import TokenService
from welfaretrack.auth.middleware import Authenticator, AuthMiddleware
from welfaretrack.auth.password import PasswordService
from welfaretrack.records.definitions import build_entity_rules
from welfaretrack.records.endpoints import create_record_routers
from welfaretrack.records.serializers import RecordSerializer
from welfaretrack.records.service import RecordService
from welfaretrack.records.store import RecordStore, StoreQueryService
from welfaretrack.settings import Settings
from welfaretrack.validation import AttributeRegistry, MessageCatalog, ValidationService

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


@dataclass
class Services:
    """Process-wide service objects, built once per application."""

    settings: Settings
    attributes: AttributeRegistry
    messages: MessageCatalog
    store: RecordStore
    records: RecordService
    accounts: AccountService
    token_service: TokenService
    serializer: RecordSerializer


def build_services(settings: Settings) -> Services:
    """Construct the registries, rule sets and stores.

    Raises:
        ConfigurationError: If any entity rule set references an unmanaged attribute
    """
    attributes = AttributeRegistry(settings.config_dir)
    messages = MessageCatalog(settings.config_dir, default_locale=settings.locale)
    rules = build_entity_rules(attributes, messages, settings.locale)

    store = RecordStore(settings.database_url)
    records = RecordService(store, ValidationService(StoreQueryService(store)), rules)

    return Services(
        settings=settings,
        attributes=attributes,
        messages=messages,
        store=store,
        records=records,
        accounts=AccountService(records, PasswordService(rounds=settings.bcrypt_rounds)),
        token_service=TokenService(settings.secret_key, ttl=settings.token_ttl),
        serializer=RecordSerializer(attributes),
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create the API application.

    Args:
        settings: Runtime settings (default: resolved from the environment)

    Returns:
        Configured FastAPI application
    """
    settings = settings or Settings.from_env()
    services = build_services(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Create tables on startup, release connections on shutdown."""
        services.store.create_all()
        logger.info("welfaretrack API started (%s, locale=%s)", settings.environment, settings.locale)
        yield
        services.store.dispose()

    app = FastAPI(title="welfaretrack API", lifespan=lifespan)
    app.state.services = services

    app.add_middleware(
        AuthMiddleware,
        authenticator=Authenticator(services.token_service, services.accounts.resolve_identity),
    )
    # CORS for frontend dev server
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app, settings)

    app.include_router(create_auth_router(services.accounts, services.token_service), prefix=API_PREFIX)
    for router in create_record_routers(services.records, services.serializer):
        app.include_router(router, prefix=API_PREFIX)

    @app.get("/up")
    async def health() -> dict[str, Any]:
        return {"status": "ok"}

    return app
