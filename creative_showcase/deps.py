"""
FastAPI dependencies: settings-derived collaborators, the auth gate and
per-request services.
"""

from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from .config import Settings, get_settings
from .db.base import get_db
from .db.models import UserModel
from .errors import Unauthenticated
from .media import MediaStore, create_media_store
from .security import TokenIssuer
from .services import ArtworkService, AuthService, UserService


@lru_cache
def media_store_for(uri: str, public_url: str) -> MediaStore:
    return create_media_store(uri, public_url)


def get_media_store(settings: Settings = Depends(get_settings)) -> MediaStore:
    """The configured media store, built once per (uri, public url)."""
    return media_store_for(settings.media_store_uri, settings.media_public_url)


def get_token_issuer(settings: Settings = Depends(get_settings)) -> TokenIssuer:
    return TokenIssuer.from_settings(settings)


def get_auth_service(
    db: Session = Depends(get_db),
    tokens: TokenIssuer = Depends(get_token_issuer),
    settings: Settings = Depends(get_settings),
) -> AuthService:
    return AuthService(db, tokens, password_rounds=settings.bcrypt_rounds)


def get_artwork_service(
    db: Session = Depends(get_db),
    media: MediaStore = Depends(get_media_store),
    settings: Settings = Depends(get_settings),
) -> ArtworkService:
    return ArtworkService(db, media, max_image_bytes=settings.max_artwork_bytes)


def get_user_service(
    db: Session = Depends(get_db),
    media: MediaStore = Depends(get_media_store),
    settings: Settings = Depends(get_settings),
) -> UserService:
    return UserService(
        db,
        media,
        password_rounds=settings.bcrypt_rounds,
        max_avatar_bytes=settings.max_avatar_bytes,
        max_cover_bytes=settings.max_cover_bytes,
    )


def bearer_token(authorization: Optional[str]) -> str:
    """Extract the token from an `Authorization: Bearer <token>` header."""
    if not authorization:
        raise Unauthenticated("Missing authorization header")
    scheme, _, token = authorization.partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise Unauthenticated("Authorization header must be 'Bearer <token>'")
    return token


def get_current_user(
    authorization: Optional[str] = Header(None),
    auth: AuthService = Depends(get_auth_service),
) -> UserModel:
    """Auth gate for protected routes."""
    return auth.authenticate(bearer_token(authorization))
