"""
Canonical enums for Creative Showcase.
"""

from enum import Enum


class Category(str, Enum):
    """Artwork categories."""

    DIGITAL = "digital"
    TRADITIONAL = "traditional"
    PHOTOGRAPHY = "photography"
    THREE_D = "3d"
    ILLUSTRATION = "illustration"
    CONCEPT = "concept"
    OTHER = "other"


class SortKey(str, Enum):
    """Orderings for artwork listings."""

    NEWEST = "newest"
    OLDEST = "oldest"
    POPULAR = "popular"
    MOST_LIKED = "most-liked"


class ImageSlot(str, Enum):
    """Profile image slots a user can fill."""

    PICTURE = "picture"
    COVER = "cover"
