"""SQLAlchemy declarative Base shared by the ORM models and Alembic."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Declarative base; Base.metadata drives create_all and autogenerate."""
