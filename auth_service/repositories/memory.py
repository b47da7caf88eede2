"""In-memory user store for tests and local experiments."""

import itertools
import logging
import threading

from auth_service.exceptions import DuplicateEmail, EmailInUse, NotFound
from auth_service.models.user import User
from auth_service.repositories.base import UserStore

logger = logging.getLogger(__name__)


def _copy(user: User) -> User:
    """Detached copy so callers cannot mutate stored state without ``update``."""
    return User(
        id=user.id,
        name=user.name,
        email=user.email,
        password_hash=user.password_hash,
        created_at=user.created_at,
        updated_at=user.updated_at,
        deleted_at=user.deleted_at,
    )


class InMemoryUserStore(UserStore):
    """Map-backed store.

    Uniqueness is a check-then-write under a process-local lock, so it only
    holds within a single process. Use ``SqlUserStore`` for anything shared.
    """

    def __init__(self):
        self._users: dict[int, User] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def _active_by_email(self, email: str) -> User | None:
        for user in self._users.values():
            if not user.is_deleted and user.email == email:
                return user
        return None

    def _active_by_id(self, user_id: int) -> User | None:
        user = self._users.get(user_id)
        if user is None or user.is_deleted:
            return None
        return user

    def create(self, user: User) -> User:
        with self._lock:
            if self._active_by_email(user.email) is not None:
                raise DuplicateEmail()
            stored = _copy(user)
            stored.id = next(self._ids)
            stored.deleted_at = None
            stored.touch()
            self._users[stored.id] = stored
        logger.debug(f"Stored user {stored.id} in memory")
        user.id = stored.id
        user.created_at = stored.created_at
        user.updated_at = stored.updated_at
        return _copy(stored)

    def find_by_email(self, email: str) -> User:
        with self._lock:
            user = self._active_by_email(email)
            if user is None:
                raise NotFound()
            return _copy(user)

    def find_by_id(self, user_id: int) -> User:
        with self._lock:
            user = self._active_by_id(user_id)
            if user is None:
                raise NotFound()
            return _copy(user)

    def update(self, user: User) -> User:
        with self._lock:
            stored = self._active_by_id(user.id)
            if stored is None:
                raise NotFound()
            if user.email != stored.email:
                holder = self._active_by_email(user.email)
                if holder is not None and holder.id != user.id:
                    raise EmailInUse()
            stored.name = user.name
            stored.email = user.email
            stored.touch()
            user.updated_at = stored.updated_at
            return _copy(stored)

    def soft_delete(self, user_id: int) -> None:
        """Mark a user deleted. Test helper; not part of ``UserStore``."""
        with self._lock:
            user = self._active_by_id(user_id)
            if user is None:
                raise NotFound()
            user.soft_delete()
