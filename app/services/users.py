"""User store gateway: lookup and insert of user rows by email."""

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.user import ROLE_USER, User
from app.services.validation import normalize_email

logger = logging.getLogger(__name__)


class UserStoreError(Exception):
    """Base for user store failures."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class DuplicateEmailError(UserStoreError):
    """The unique index on users.email rejected an insert."""


class StoreUnavailableError(UserStoreError):
    """The database could not be reached or failed the statement."""


class UserStore:
    """
    Reads and writes users through a session.

    find_by_email is only an advisory pre-check; the unique index decides
    duplicates, and insert turns its violation into DuplicateEmailError.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def find_by_email(self, email: str) -> User | None:
        canonical = normalize_email(email)
        try:
            return self.session.query(User).filter(User.email == canonical).first()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error("User lookup failed: %s", type(e).__name__)
            raise StoreUnavailableError("User store unavailable") from e

    def find_by_id(self, user_id: str) -> User | None:
        try:
            return self.session.get(User, user_id)
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error("User lookup failed: %s", type(e).__name__)
            raise StoreUnavailableError("User store unavailable") from e

    def insert(
        self,
        name: str,
        email: str,
        phone: str,
        password_hash: str,
        role: str = ROLE_USER,
    ) -> User:
        user = User(
            name=name.strip(),
            email=normalize_email(email),
            phone=phone.strip(),
            password_hash=password_hash,
            role=role,
        )
        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            raise DuplicateEmailError("User with this email already exists") from e
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error("User insert failed: %s", type(e).__name__)
            raise StoreUnavailableError("User store unavailable") from e
        self.session.refresh(user)
        return user
