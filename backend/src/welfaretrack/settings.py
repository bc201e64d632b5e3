"""Application settings resolved from environment variables."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path

logger = logging.getLogger(__name__)

DEV_SECRET_KEY = "dev-secret-key-change-in-production"

# backend/ directory of a source checkout
BACKEND_DIR = Path(__file__).resolve().parent.parent.parent


@dataclass
class Settings:
    """Runtime configuration for the API, the CLI and the registries.

    Attributes:
        database_url: SQLAlchemy database URL
        secret_key: Process-wide signing secret for identity tokens
        environment: "development" or "production"
        config_dir: Directory holding validations/ and validation_messages*
        locale: Locale used to resolve validation messages
        token_ttl: Lifetime of issued identity tokens
        bcrypt_rounds: bcrypt work factor for password hashing
        cors_origins: Origins allowed by the CORS middleware
    """

    database_url: str
    secret_key: str = DEV_SECRET_KEY
    environment: str = "development"
    config_dir: Path = BACKEND_DIR / "config"
    locale: str = "en"
    token_ttl: timedelta = timedelta(hours=24)
    bcrypt_rounds: int = 12
    cors_origins: list[str] = field(default_factory=lambda: ["http://localhost:5173"])

    @classmethod
    def from_env(cls, base_path: Path | None = None) -> Settings:
        """Create settings from environment variables.

        Resolution order for the database:
        1. DATABASE_URL env var
        2. Default: sqlite:///{base_path}/data/welfaretrack.db
        """
        base_path = base_path or BACKEND_DIR

        database_url = os.environ.get("DATABASE_URL")
        if not database_url:
            database_url = f"sqlite:///{base_path / 'data' / 'welfaretrack.db'}"

        secret_key = os.environ.get("WELFARETRACK_SECRET_KEY")
        if not secret_key:
            logger.warning("WELFARETRACK_SECRET_KEY is not set; using the development key")
            secret_key = DEV_SECRET_KEY

        config_dir = os.environ.get("WELFARETRACK_CONFIG_DIR")
        origins = os.environ.get("WELFARETRACK_CORS_ORIGINS", "http://localhost:5173")

        return cls(
            database_url=database_url,
            secret_key=secret_key,
            environment=os.environ.get("WELFARETRACK_ENV", "development"),
            config_dir=Path(config_dir) if config_dir else base_path / "config",
            locale=os.environ.get("WELFARETRACK_LOCALE", "en"),
            token_ttl=timedelta(hours=int(os.environ.get("WELFARETRACK_TOKEN_TTL_HOURS", "24"))),
            bcrypt_rounds=int(os.environ.get("WELFARETRACK_BCRYPT_ROUNDS", "12")),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
        )

    @property
    def is_production(self) -> bool:
        return self.environment == "production"
