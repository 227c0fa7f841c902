import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional, Sequence

import bcrypt
import jwt

from shopfront.core.exceptions import UnauthorizedError
from shopfront.utils.date_utils import DateUtils

logger = logging.getLogger(__name__)


class PasswordHasher:
    """One-way salted password hashing with a fixed bcrypt cost factor"""

    def __init__(self, rounds: int = 10):
        self.rounds = rounds

    def hash(self, password: str) -> str:
        salt = bcrypt.gensalt(self.rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def verify(self, password: str, hashed: Optional[str]) -> bool:
        if not password or not hashed:
            return False
        try:
            return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
        except ValueError:
            # Malformed stored hash or over-long password
            return False


@dataclass(frozen=True)
class TokenClaims:
    """Identity carried by a verified bearer token"""
    user_id: str
    username: str


class TokenService:
    """
    Issues and verifies time-limited bearer tokens (HS256 JWTs).

    Tokens are always signed with the current secret. Verification also
    accepts previous secrets so a secret can be rotated without
    invalidating tokens already handed out.
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        expiration_hours: int = 24,
        previous_secret_keys: Sequence[str] = (),
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expiration = timedelta(hours=expiration_hours)
        self.previous_secret_keys = tuple(previous_secret_keys)

    def issue(self, user_id: str, username: str, now: Optional[datetime] = None) -> str:
        issued_at = now or DateUtils.now_utc()
        payload = {
            "userId": user_id,
            "username": username,
            "iat": issued_at,
            "exp": issued_at + self.expiration,
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenClaims:
        """
        Verify signature and expiry, returning the embedded identity.

        Raises:
            UnauthorizedError: token is malformed, expired, or signed with an unknown secret
        """
        for key in (self.secret_key,) + self.previous_secret_keys:
            try:
                payload = jwt.decode(
                    token,
                    key,
                    algorithms=[self.algorithm],
                    options={"require": ["exp", "userId", "username"]},
                )
            except jwt.InvalidSignatureError:
                continue
            except jwt.InvalidTokenError as e:
                logger.info(f"Token rejected: {e.__class__.__name__}")
                raise UnauthorizedError("Invalid Token")
            return TokenClaims(user_id=str(payload["userId"]), username=str(payload["username"]))

        logger.info("Token rejected: signature does not match any known secret")
        raise UnauthorizedError("Invalid Token")
