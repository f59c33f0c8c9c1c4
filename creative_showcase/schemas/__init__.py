"""
Pydantic request schemas for the Creative Showcase API.
"""

from .artworks import ArtworkUpdate, CommentCreate
from .auth import LoginRequest, RegisterRequest
from .users import AccountUpdate, ProfileUpdate, SocialLinks

__all__ = [
    "AccountUpdate",
    "ArtworkUpdate",
    "CommentCreate",
    "LoginRequest",
    "ProfileUpdate",
    "RegisterRequest",
    "SocialLinks",
]
