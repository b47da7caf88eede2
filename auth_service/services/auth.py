"""Authentication service: registration, login, logout and profile updates."""

import logging

from auth_service.exceptions import (
    AuthError,
    DuplicateEmail,
    EmailInUse,
    Internal,
    InvalidCredentials,
    NotFound,
    PasswordTooLong,
    UpdateFailed,
)
from auth_service.models.user import User
from auth_service.repositories.base import UserStore
from auth_service.services.passwords import PasswordHasher, password_too_long
from auth_service.services.tokens import TokenIssuer

logger = logging.getLogger(__name__)


class AuthService:
    """Coordinates the user store, password hasher and token issuer.

    Each method is a one-shot use case; the service holds no per-user state.
    """

    def __init__(self, store: UserStore, hasher: PasswordHasher, tokens: TokenIssuer):
        self.store = store
        self.hasher = hasher
        self.tokens = tokens

    def register(self, name: str, email: str, password: str) -> User:
        """
        Create a new user account.

        Raises:
            DuplicateEmail: an active user already has this email.
            PasswordTooLong: the password exceeds 72 UTF-8 bytes.
            Internal: the password could not be hashed.
        """
        if password_too_long(password):
            raise PasswordTooLong()

        try:
            password_hash = self.hasher.hash(password)
        except Exception as e:
            logger.exception("Password hashing failed during registration")
            raise Internal() from e

        user = User(name=name, email=email, password_hash=password_hash)
        try:
            user = self.store.create(user)
        except DuplicateEmail:
            logger.info(f"Registration rejected, email already exists: {email}")
            raise

        logger.info(f"Registered user {user.id}")
        return user

    def login(self, email: str, password: str) -> tuple[User, str]:
        """
        Verify credentials and issue a session token.

        Unknown emails and wrong passwords fail identically so callers cannot
        tell which accounts exist.

        Raises:
            InvalidCredentials: no such user or wrong password.
        """
        try:
            user = self.store.find_by_email(email)
        except NotFound:
            # Keep timing close to the wrong-password path
            self.hasher.dummy_verify()
            logger.info("Login failed: invalid credentials")
            raise InvalidCredentials() from None

        if not self.hasher.verify(user.password_hash, password):
            logger.info("Login failed: invalid credentials")
            raise InvalidCredentials()

        token = self.tokens.issue(user.id)
        logger.info(f"User {user.id} logged in")
        return user, token

    def logout(self, user_id: int) -> None:
        """End a session.

        Tokens are stateless and are not revoked: a token presented after
        logout keeps working until it expires. Clients are expected to
        discard it.
        """
        logger.info(f"User {user_id} logged out")

    def get_profile(self, user_id: int) -> User:
        """Return the active user with ``user_id`` (raises NotFound)."""
        return self.store.find_by_id(user_id)

    def update_profile(self, user_id: int, name: str, email: str) -> User:
        """
        Change a user's display name and email.

        Raises:
            NotFound: the user does not exist (or was deleted).
            EmailInUse: another active user holds the new email.
            UpdateFailed: the store rejected the update for any other reason.
        """
        user = self.store.find_by_id(user_id)

        if email != user.email:
            try:
                holder = self.store.find_by_email(email)
            except NotFound:
                holder = None
            if holder is not None and holder.id != user.id:
                raise EmailInUse()

        user.name = name
        user.email = email
        try:
            user = self.store.update(user)
        except EmailInUse:
            raise
        except AuthError as e:
            logger.warning(f"Profile update for user {user_id} failed: {e.detail}")
            raise UpdateFailed() from e
        except Exception as e:
            logger.exception(f"Profile update for user {user_id} failed")
            raise UpdateFailed() from e

        logger.info(f"Updated profile of user {user_id}")
        return user
