"""Shared builders for API tests: settings, an in-memory database and a wired app."""

from typing import Any

from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.core.cache import Cache
from app.core.config import Settings
from app.core.database import Database
from app.main import create_app

ACCESS_SECRET = "test-access-secret-0123456789abcdef"
REFRESH_SECRET = "test-refresh-secret-0123456789abcdef"

VALID_REGISTRATION = {
    "name": "Maria Silva",
    "email": "maria@example.com",
    "phone": "(11) 98765-4321",
    "password": "Secret123",
}


def make_settings(**overrides: Any) -> Settings:
    values: dict[str, Any] = {
        "APP_ENV": "dev",
        "LOG_LEVEL": "WARNING",
        "DATABASE_URL": "sqlite://",
        "REDIS_URL": None,
        "JWT_SECRET": ACCESS_SECRET,
        "JWT_REFRESH_SECRET": REFRESH_SECRET,
        "BCRYPT_ROUNDS": 4,
        "DEMO_LOGIN_ENABLED": True,
    }
    values.update(overrides)
    return Settings(**values)


def make_database() -> Database:
    database = Database("sqlite://")
    database.create_all()
    return database


def make_app(cache: Cache | None = None, **overrides: Any) -> tuple[FastAPI, Database]:
    database = make_database()
    app = create_app(settings=make_settings(**overrides), database=database, cache=cache)
    return app, database


def make_client(app: FastAPI) -> TestClient:
    return TestClient(app, raise_server_exceptions=False)


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
