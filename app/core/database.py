"""Relational store connection pool and session management."""

import logging
from collections.abc import Generator
from typing import Any

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.models.base import Base

logger = logging.getLogger(__name__)

# Pool sizing and connect timeout for Postgres.
POOL_SIZE = 10
POOL_MAX_OVERFLOW = 10
POOL_RECYCLE_SEC = 1800
CONNECT_TIMEOUT_SEC = 2


def _engine_options(url: str) -> dict[str, Any]:
    if url.startswith("sqlite"):
        options: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        # In-memory databases live inside a single connection; share it.
        if url in ("sqlite://", "sqlite:///:memory:"):
            options["poolclass"] = StaticPool
        return options
    return {
        "pool_size": POOL_SIZE,
        "max_overflow": POOL_MAX_OVERFLOW,
        "pool_recycle": POOL_RECYCLE_SEC,
        "connect_args": {"connect_timeout": CONNECT_TIMEOUT_SEC},
    }


class Database:
    """
    Owns the engine (connection pool) and the session factory.

    Built once at startup and disposed at shutdown; handlers get sessions
    through the get_db dependency.
    """

    def __init__(self, url: str, echo: bool = False) -> None:
        self.url = url
        self.engine = create_engine(url, pool_pre_ping=True, echo=echo, **_engine_options(url))
        self.session_factory = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def session(self) -> Session:
        return self.session_factory()

    def create_all(self) -> None:
        """Create missing tables from the ORM metadata (dev and tests; use Alembic otherwise)."""
        Base.metadata.create_all(self.engine)

    def check_connected(self) -> bool:
        """Run a trivial query to verify the database is reachable."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.warning("Database connectivity check failed: %s", type(e).__name__)
            return False

    def dispose(self) -> None:
        """Close every pooled connection."""
        self.engine.dispose()
        logger.info("Database connection pool disposed")


def get_db(request: Request) -> Generator[Session, None, None]:
    """Dependency that yields a DB session and closes it when done."""
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()
