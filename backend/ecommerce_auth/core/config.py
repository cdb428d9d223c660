"""Environment-driven settings for the auth service.

One class per deployment environment; ``APP_ENV`` selects which one
:func:`get_config` returns. Values come from the process environment, with a
``.env`` file loaded first when present.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Final

from dotenv import load_dotenv

ENV_VAR: Final[str] = "APP_ENV"
TRUTHY: Final[frozenset[str]] = frozenset({"1", "true", "yes", "y", "on"})

# Placeholders that must never reach production
PLACEHOLDER_SECRETS: Final[frozenset[str]] = frozenset(
    {"CHANGE_ME", "CHANGE_ME_ACCESS", "CHANGE_ME_REFRESH"}
)


load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """``True`` for 1/true/yes/y/on (any case); ``default`` when unset."""
    raw = os.getenv(name)
    return default if raw is None else raw.strip().lower() in TRUTHY


def env_int(name: str, default: int) -> int:
    """Parse an integer from an environment variable, falling back to ``default``."""
    raw = (os.getenv(name) or "").strip()
    return int(raw) if raw else default


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    SECRET_KEY: str
        Flask secret. Defaults to a development-safe placeholder.
    JWT_ACCESS_SECRET: str
        HMAC key for access tokens.
    JWT_REFRESH_SECRET: str
        HMAC key for refresh tokens. Must differ from ``JWT_ACCESS_SECRET`` so
        holding one token type never allows forging the other.
    JWT_ACCESS_EXPIRES: int
        Access token lifetime in seconds (15 minutes).
    JWT_REFRESH_EXPIRES: int
        Refresh token lifetime in seconds (7 days). Also the TTL of the refresh
        record kept in Redis.
    JWT_ISSUER / JWT_AUDIENCE: str
        Fixed ``iss``/``aud`` claims identifying this system.
    PASSWORD_HASH_METHOD: str
        Werkzeug hashing method including its work factor, e.g.
        ``"pbkdf2:sha256:600000"`` or ``"scrypt:32768:8:1"``.
    PASSWORD_RESET_EXPIRES: int
        Lifetime of password-reset tokens in seconds (1 hour).
    SQLALCHEMY_DATABASE_URI: str
        Credential store connection string consumed by SQLAlchemy.
    REDIS_URL: str | None
        Session registry backend. ``None`` requires an injected client.
    REDIS_SOCKET_TIMEOUT: float
        Upper bound (seconds) for every Redis socket operation.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    LOG_FORMAT: str
        ``"json"`` (default) or ``"text"`` for readable development output.
    SERVICE_NAME: str
        Tag carried by every log record and the health payload.
    CORS_ORIGINS: str
        Comma-separated list of allowed origins for CORS.
    FRONTEND_URL: str
        Base URL used to build verification and reset links in emails.
    EXPOSE_RESET_TOKEN: bool
        Echo the reset token from ``forgot-password``. Development only.
    EXPOSE_ERROR_DETAILS: bool
        Surface unexpected exception messages to clients. Development only.

    """

    APP_ENV = "development"
    API_BASE_PREFIX = "/api"

    # Secrets / security
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")
    JWT_ACCESS_SECRET = os.getenv("JWT_ACCESS_SECRET", "CHANGE_ME_ACCESS")
    JWT_REFRESH_SECRET = os.getenv("JWT_REFRESH_SECRET", "CHANGE_ME_REFRESH")
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_ACCESS_EXPIRES = env_int("JWT_ACCESS_EXPIRES", 15 * 60)
    JWT_REFRESH_EXPIRES = env_int("JWT_REFRESH_EXPIRES", 7 * 24 * 60 * 60)
    JWT_ISSUER = os.getenv("JWT_ISSUER", "ecommerce-auth")
    JWT_AUDIENCE = os.getenv("JWT_AUDIENCE", "ecommerce-platform")

    PASSWORD_HASH_METHOD = os.getenv("PASSWORD_HASH_METHOD", "pbkdf2:sha256:600000")
    PASSWORD_RESET_EXPIRES = env_int("PASSWORD_RESET_EXPIRES", 60 * 60)

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    # Cache
    REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    REDIS_SOCKET_TIMEOUT = float(os.getenv("REDIS_SOCKET_TIMEOUT", "2.0"))

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Logging & CORS
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT = os.getenv("LOG_FORMAT", "json")
    SERVICE_NAME = os.getenv("SERVICE_NAME", "auth-service")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:4200")

    # Email
    FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:4200")
    EMAIL_FROM = os.getenv("EMAIL_FROM", "noreply@ecommerce.com")
    SMTP_HOST = os.getenv("SMTP_HOST") or None
    SMTP_PORT = env_int("SMTP_PORT", 587)
    SMTP_USER = os.getenv("SMTP_USER") or None
    SMTP_PASSWORD = os.getenv("SMTP_PASSWORD") or None
    SMTP_USE_TLS = env_bool("SMTP_USE_TLS", True)

    # Development conveniences (off unless a subclass turns them on)
    EXPOSE_RESET_TOKEN = False
    EXPOSE_ERROR_DETAILS = False

    # Flask built-ins
    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development.

    Notes
    -----
    Enables debug mode, echoes reset tokens from ``forgot-password`` and
    exposes unexpected error messages to ease manual testing.
    """

    APP_ENV = "development"
    DEBUG = env_bool("FLASK_DEBUG", True)
    CORS_MAX_AGE = 600  # 10 minutes
    LOG_FORMAT = os.getenv("LOG_FORMAT", "text")
    EXPOSE_RESET_TOKEN = env_bool("EXPOSE_RESET_TOKEN", True)
    EXPOSE_ERROR_DETAILS = True


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Forces ``TESTING`` mode and disables debug logs.
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Leaves ``REDIS_URL`` unset; tests inject a fakeredis client.
    - Uses a cheap hashing work factor to keep the suite fast.
    """

    APP_ENV = "testing"
    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    REDIS_URL = None
    JWT_ACCESS_SECRET = "testing-access-secret"
    JWT_REFRESH_SECRET = "testing-refresh-secret"
    PASSWORD_HASH_METHOD = "pbkdf2:sha256:1000"
    USE_PROXYFIX = False


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments.

    Notes
    -----
    Keeps debug disabled and never echoes reset tokens or error details.
    :func:`validate_config` refuses placeholder secrets.
    """

    APP_ENV = "production"
    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False


CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Config class named by ``APP_ENV``; unknown or unset means development."""
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)


def validate_config(config: Mapping[str, object]) -> None:
    """Fail fast on settings that would weaken token security in production.

    :param config: Loaded Flask configuration.
    :raises RuntimeError: When production runs with placeholder or shared secrets.
    """
    if str(config.get("APP_ENV", "")).lower() != "production":
        return
    access = str(config.get("JWT_ACCESS_SECRET") or "")
    refresh = str(config.get("JWT_REFRESH_SECRET") or "")
    if access in PLACEHOLDER_SECRETS or refresh in PLACEHOLDER_SECRETS:
        raise RuntimeError("JWT secrets must be configured in production.")
    if access == refresh:
        raise RuntimeError("JWT_ACCESS_SECRET and JWT_REFRESH_SECRET must differ.")
