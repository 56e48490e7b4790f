# backend/tooladmin/config.py
from __future__ import annotations
import os


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    return int(raw)


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored in backend/instance/tooladmin.sqlite3
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///tooladmin.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Per-statement safety net; applied per connection in create_app()
    STATEMENT_TIMEOUT_MS = _env_int("STATEMENT_TIMEOUT_MS", 5000)

    # "memory": fall back to an in-memory database when the configured one is unreachable
    # "none": refuse to start
    STORAGE_FALLBACK = os.environ.get("STORAGE_FALLBACK", "memory")
    AUTO_CREATE_SCHEMA = os.environ.get("AUTO_CREATE_SCHEMA", "true").lower() == "true"

    # Bearer tokens
    JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY", SECRET_KEY)
    JWT_ALGORITHM = "HS256"
    TOKEN_TTL_HOURS = _env_int("TOKEN_TTL_HOURS", 24)

    BCRYPT_ROUNDS = _env_int("BCRYPT_ROUNDS", 12)

    # Dashboard / derived reads
    LOW_STOCK_THRESHOLD = _env_int("LOW_STOCK_THRESHOLD", 10)
    WARRANTY_EXPIRING_DAYS = _env_int("WARRANTY_EXPIRING_DAYS", 30)
    RECENT_ORDERS_LIMIT = _env_int("RECENT_ORDERS_LIMIT", 10)

    # Bootstrap account created by `flask system init` and in degraded mode
    DEFAULT_ADMIN_USERNAME = os.environ.get("DEFAULT_ADMIN_USERNAME", "admin")
    DEFAULT_ADMIN_EMAIL = os.environ.get("DEFAULT_ADMIN_EMAIL", "admin@toolstech.local")
    DEFAULT_ADMIN_PASSWORD = os.environ.get("DEFAULT_ADMIN_PASSWORD", "Password123!")


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    JWT_SECRET_KEY = "test-jwt-secret"
    BCRYPT_ROUNDS = 4
    STORAGE_FALLBACK = "none"
    # conftest creates and drops the schema per test
    AUTO_CREATE_SCHEMA = False
