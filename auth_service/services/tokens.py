"""Session token issuing and verification (signed JWT)."""

import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from jose import ExpiredSignatureError, JWTError, jwt

from auth_service.exceptions import Internal, InvalidToken, TokenExpired

logger = logging.getLogger(__name__)

# Fixed session lifetime; not configurable per token
TOKEN_LIFETIME = timedelta(days=7)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class TokenIssuer:
    """Issues and verifies HMAC-signed session tokens carrying a user id.

    Tokens are stateless: nothing is stored server side, so a token stays
    valid until it expires or the signing secret changes.
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.clock = clock

    def issue(self, user_id: int) -> str:
        """Create a token for ``user_id`` expiring ``TOKEN_LIFETIME`` from now."""
        issued_at = self.clock()
        to_encode = {
            "sub": str(user_id),
            "iat": issued_at,
            "exp": issued_at + TOKEN_LIFETIME,
        }
        try:
            return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)
        except JWTError as e:
            logger.exception(f"Failed to sign token for user {user_id}")
            raise Internal() from e

    def verify(self, token: str) -> int:
        """Validate a token and return its subject user id.

        Raises:
            TokenExpired: signature is valid but ``exp`` has passed.
            InvalidToken: bad signature, wrong key or algorithm, malformed
                token, or a subject that is not a user id.
        """
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"require_exp": True, "require_sub": True},
            )
        except ExpiredSignatureError:
            raise TokenExpired() from None
        except JWTError:
            raise InvalidToken() from None

        subject = payload.get("sub")
        if subject is None:
            raise InvalidToken()
        try:
            return int(subject)
        except (TypeError, ValueError):
            raise InvalidToken() from None
