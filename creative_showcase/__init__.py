"""
Creative Showcase

A backend for sharing, browsing, liking and commenting on artwork.
"""

import importlib.metadata

__version__ = importlib.metadata.version("creative-showcase")

from .errors import (
    Conflict,
    Forbidden,
    NotFound,
    ServerError,
    ShowcaseError,
    Unauthenticated,
    Unauthorized,
    ValidationError,
)
from .services import ArtworkService, AuthService, UserService

__all__ = [
    "ArtworkService",
    "AuthService",
    "Conflict",
    "Forbidden",
    "NotFound",
    "ServerError",
    "ShowcaseError",
    "Unauthenticated",
    "Unauthorized",
    "UserService",
    "ValidationError",
]
