"""Password hashing."""

import logging

from passlib.context import CryptContext

logger = logging.getLogger(__name__)

# bcrypt only reads this many bytes of the secret; longer input would be truncated
MAX_PASSWORD_BYTES = 72


def password_too_long(plaintext: str) -> bool:
    return len(plaintext.encode("utf-8")) > MAX_PASSWORD_BYTES


class PasswordHasher:
    """Salted, deliberately slow one-way password hashing (bcrypt).

    The salt is generated per call and embedded in the returned hash, so the
    same password hashes differently every time. Passwords longer than
    ``MAX_PASSWORD_BYTES`` (UTF-8) are refused rather than truncated.
    """

    def __init__(self, rounds: int = 12):
        self.context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)

    def hash(self, plaintext: str) -> str:
        """Hash a password.

        Raises:
            ValueError: the password exceeds ``MAX_PASSWORD_BYTES``.
        """
        if password_too_long(plaintext):
            raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
        return self.context.hash(plaintext)

    def verify(self, password_hash: str, plaintext: str) -> bool:
        """Verify a password against its hash.

        Mismatches, over-long passwords and malformed hashes all return False.
        """
        if plaintext is not None and password_too_long(plaintext):
            self.context.dummy_verify()
            return False
        try:
            return self.context.verify(plaintext, password_hash)
        except (ValueError, TypeError):
            logger.warning("Stored password hash is malformed or uses an unknown scheme")
            return False

    def dummy_verify(self) -> None:
        """Spend one verification's worth of time against no real hash."""
        self.context.dummy_verify()
