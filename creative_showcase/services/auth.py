"""
Registration, login and bearer-token resolution.
"""

from typing import Any, Dict

import structlog
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..db.models import UserModel
from ..errors import Conflict, Unauthenticated
from ..primitives import generate_ulid, utc_now
from ..schemas.auth import LoginRequest, RegisterRequest
from ..security import (
    DEFAULT_BCRYPT_ROUNDS,
    TokenIssuer,
    check_password_length,
    hash_password,
    verify_password,
)
from .users import normalize_email

logger = structlog.get_logger()

INVALID_CREDENTIALS = "Invalid email or password"


class AuthService:
    """Issues tokens for users and resolves tokens back to users."""

    def __init__(
        self,
        db: Session,
        tokens: TokenIssuer,
        password_rounds: int = DEFAULT_BCRYPT_ROUNDS,
    ):
        self.db = db
        self.tokens = tokens
        self.password_rounds = password_rounds

    def _session_for(self, user: UserModel) -> Dict[str, Any]:
        return {
            "token": self.tokens.create_access_token(user.id),
            "user": user.to_dict(include_email=True),
        }

    def register(self, request: RegisterRequest) -> Dict[str, Any]:
        """Create an account and return a token for it."""
        check_password_length(request.password)
        email = normalize_email(request.email)
        existing = (
            self.db.query(UserModel)
            .filter(or_(UserModel.username == request.username, UserModel.email == email))
            .first()
        )
        if existing:
            field = "Username" if existing.username == request.username else "Email"
            raise Conflict(f"{field} is already in use")

        now = utc_now()
        user = UserModel(
            id=generate_ulid(),
            username=request.username,
            email=email,
            password_hash=hash_password(request.password, self.password_rounds),
            # Display name falls back to the username
            display_name=request.display_name or request.username,
            skills=[],
            social_links={},
            created_at=now,
            updated_at=now,
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise Conflict("Username or email is already in use")
        self.db.refresh(user)

        logger.info("User registered", user_id=user.id, username=user.username)
        return self._session_for(user)

    def login(self, request: LoginRequest) -> Dict[str, Any]:
        user = (
            self.db.query(UserModel)
            .filter(UserModel.email == normalize_email(request.email))
            .first()
        )
        if not user or not verify_password(request.password, user.password_hash):
            raise Unauthenticated(INVALID_CREDENTIALS)
        return self._session_for(user)

    def authenticate(self, token: str) -> UserModel:
        """Resolve a bearer token to its user.

        Raises:
            Unauthenticated: token invalid, expired or naming an unknown user
        """
        user_id = self.tokens.decode_access_token(token)
        if not user_id:
            raise Unauthenticated("Invalid or expired token")
        user = self.db.query(UserModel).filter(UserModel.id == user_id).first()
        if not user:
            raise Unauthenticated("Invalid or expired token")
        return user
