"""
Services for Creative Showcase.
"""

from .artworks import ArtworkPage, ArtworkService, parse_category, parse_sort_key
from .auth import AuthService
from .users import UserService

__all__ = [
    "ArtworkPage",
    "ArtworkService",
    "AuthService",
    "UserService",
    "parse_category",
    "parse_sort_key",
]
