"""User store interface."""

from abc import ABC, abstractmethod

from auth_service.models.user import User


class UserStore(ABC):
    """Persistence contract for user records.

    Only active (not soft-deleted) users are visible through this interface.
    Email matching is exact and case-sensitive.
    """

    @abstractmethod
    def create(self, user: User) -> User:
        """
        Persist a new user and assign its id.

        Raises:
            DuplicateEmail: an active user already holds ``user.email``.
        """

    @abstractmethod
    def find_by_email(self, email: str) -> User:
        """
        Return the active user with this email.

        Raises:
            NotFound: no active user holds the email.
        """

    @abstractmethod
    def find_by_id(self, user_id: int) -> User:
        """
        Return the active user with this id.

        Raises:
            NotFound: no active user has the id.
        """

    @abstractmethod
    def update(self, user: User) -> User:
        """
        Persist the mutable fields (name, email) of an existing user.

        Raises:
            NotFound: no active user has ``user.id``.
            EmailInUse: the email changed and another active user holds it.
        """
