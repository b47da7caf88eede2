"""SQLAlchemy-backed user store."""

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from auth_service.exceptions import DuplicateEmail, EmailInUse, NotFound
from auth_service.models.user import User
from auth_service.repositories.base import UserStore

logger = logging.getLogger(__name__)


class SqlUserStore(UserStore):
    """Durable store over a request-scoped session.

    Email uniqueness is enforced by the ``uq_users_email_active`` index; a
    violation surfaces as ``IntegrityError`` at commit and is translated
    here, so concurrent writers cannot race past an application-level check.
    """

    def __init__(self, db: Session):
        self.db = db

    def _active(self):
        return self.db.query(User).filter(User.deleted_at.is_(None))

    def create(self, user: User) -> User:
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise DuplicateEmail() from None
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self.db.refresh(user)
        return user

    def find_by_email(self, email: str) -> User:
        user = self._active().filter(User.email == email).first()
        if user is None:
            raise NotFound()
        return user

    def find_by_id(self, user_id: int) -> User:
        user = self._active().filter(User.id == user_id).first()
        if user is None:
            raise NotFound()
        return user

    def update(self, user: User) -> User:
        exists = (
            self.db.query(User.id)
            .filter(User.id == user.id, User.deleted_at.is_(None))
            .first()
        )
        if exists is None:
            raise NotFound()

        user_id = user.id
        user = self.db.merge(user)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.info(f"Email conflict updating user {user_id}")
            raise EmailInUse() from None
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self.db.refresh(user)
        return user
