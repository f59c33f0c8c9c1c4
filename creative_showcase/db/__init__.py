"""
Database package for Creative Showcase.
"""

from .base import Base, get_db, get_engine, get_session_local
from .models import (
    ArtworkLikeModel,
    ArtworkModel,
    ArtworkTagModel,
    CommentLikeModel,
    CommentModel,
    UserModel,
)

__all__ = [
    "Base",
    "get_db",
    "get_engine",
    "get_session_local",
    "UserModel",
    "ArtworkModel",
    "ArtworkTagModel",
    "ArtworkLikeModel",
    "CommentModel",
    "CommentLikeModel",
]
