"""ORM model for application users (auth and RBAC)."""

import uuid

from sqlalchemy import Column, DateTime, String, func

from app.models.base import Base

ROLE_USER = "user"
ROLE_ADMIN = "admin"


def _new_user_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    """
    User account for JWT authentication.

    email is stored in canonical form (trimmed, lower-cased); the unique index
    on it is the authoritative duplicate guard. role: 'admin' or 'user'
    """

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_new_user_id)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    phone = Column(String(32), nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default=ROLE_USER, server_default=ROLE_USER)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
