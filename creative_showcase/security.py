"""
Password hashing and bearer token handling.
"""

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

import bcrypt
import jwt

from .config import Settings
from .errors import ValidationError
from .primitives import utc_now

DEFAULT_BCRYPT_ROUNDS = 12
# bcrypt only reads this many bytes of input
MAX_PASSWORD_BYTES = 72


# ---------------- PASSWORD HASHING ----------------


def check_password_length(password: str) -> None:
    """Reject passwords bcrypt cannot hash whole (counted in UTF-8 bytes)."""
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(
            f"Password must be at most {MAX_PASSWORD_BYTES} bytes"
        )


def hash_password(password: str, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> str:
    """Hash a password using bcrypt."""
    check_password_length(password)
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its bcrypt hash."""
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"), hashed_password.encode("utf-8")
        )
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


# ---------------- BEARER TOKENS ----------------


@dataclass(frozen=True)
class TokenIssuer:
    """Issues and verifies signed access tokens carrying a user id in `sub`."""

    secret: str
    algorithm: str = "HS256"
    expire_minutes: int = 60 * 24 * 7

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenIssuer":
        return cls(
            secret=settings.secret_key,
            algorithm=settings.jwt_algorithm,
            expire_minutes=settings.access_token_expire_minutes,
        )

    def create_access_token(
        self, user_id: str, expires_delta: Optional[timedelta] = None
    ) -> str:
        """Generate a JWT for a user."""
        now = utc_now()
        expire = now + (expires_delta or timedelta(minutes=self.expire_minutes))
        payload = {"sub": str(user_id), "iat": now, "exp": expire}
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode_access_token(self, token: str) -> Optional[str]:
        """Return the user id carried by a valid token, or None.

        Malformed, expired and wrongly signed tokens all yield None.
        """
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["sub", "exp"]},
            )
        except jwt.PyJWTError:
            return None
        sub = payload.get("sub")
        return sub if isinstance(sub, str) and sub else None
