"""
API routers for Creative Showcase.
"""

from .artworks import router as artworks_router
from .auth import router as auth_router
from .users import router as users_router

__all__ = ["artworks_router", "auth_router", "users_router"]
