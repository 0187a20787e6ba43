"""
Process-wide configuration.

Values come from environment variables (a `.env` file in the project root is
loaded first). Build one `Config` at startup and hand it to every component.
"""

import os
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from dotenv import load_dotenv
from psycopg2.extensions import make_dsn

DEFAULT_JWT_SECRET = "your-secret-key"  # development only


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}")


@dataclass(frozen=True)
class Config:
    db_host: str = "localhost"
    db_port: int = 5432
    db_user: str = "postgres"
    db_password: str = ""
    db_name: str = "event_system"
    database_url: Optional[str] = None
    db_pool_min: int = 1
    db_pool_max: int = 10

    jwt_secret: str = DEFAULT_JWT_SECRET
    token_expiration_minutes: int = 1440  # 24 hours
    max_active_events: int = 5

    port: int = 8080
    cors_origins: Tuple[str, ...] = ("*",)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Config":
        """
        Build a Config from the environment.

        Returns:
            Config: The loaded configuration.

        Raises:
            RuntimeError: If a numeric variable cannot be parsed.
        """
        load_dotenv()

        origins = os.getenv("CORS_ORIGINS", "*")

        return cls(
            db_host=os.getenv("DB_HOST") or "localhost",
            db_port=_env_int("DB_PORT", 5432),
            db_user=os.getenv("DB_USER") or "postgres",
            db_password=os.getenv("DB_PASSWORD", ""),
            db_name=os.getenv("DB_NAME") or "event_system",
            database_url=os.getenv("DATABASE_URL") or None,
            db_pool_min=_env_int("DB_POOL_MIN", 1),
            db_pool_max=_env_int("DB_POOL_MAX", 10),
            jwt_secret=os.getenv("JWT_SECRET") or DEFAULT_JWT_SECRET,
            token_expiration_minutes=_env_int("TOKEN_EXPIRATION_MINUTES", 1440),
            max_active_events=_env_int("MAX_ACTIVE_EVENTS", 5),
            port=_env_int("PORT", 8080),
            cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()),
            log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        )

    @property
    def dsn(self) -> str:
        """libpq connection string, `DATABASE_URL` wins when set."""
        if self.database_url:
            return self.database_url
        # make_dsn quotes empty values and values with spaces or quotes
        return make_dsn(
            host=self.db_host,
            port=self.db_port,
            user=self.db_user,
            password=self.db_password,
            dbname=self.db_name,
        )

    @property
    def uses_default_secret(self) -> bool:
        return self.jwt_secret == DEFAULT_JWT_SECRET

    def warn_if_insecure(self) -> None:
        if self.uses_default_secret:
            logging.warning(
                "JWT_SECRET is not set; using the built-in development secret. "
                "Do not run like this in production."
            )
