"""
SQLAlchemy models for Creative Showcase.

Likes and tags are stored as rows keyed by their owner, not as JSON arrays,
so that membership changes are single-row statements.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from ..primitives import generate_ulid, isoformat, utc_now
from .base import Base


class UserModel(Base):
    """SQLAlchemy model for users."""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_ulid)
    username = Column(String(30), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(128), nullable=False)

    # Profile
    display_name = Column(String(100), nullable=False)
    bio = Column(String(500), nullable=False, default="")
    profile_picture = Column(String(2000), nullable=False, default="")
    profile_picture_key = Column(String(512), nullable=False, default="")
    cover_image = Column(String(2000), nullable=False, default="")
    cover_image_key = Column(String(512), nullable=False, default="")
    location = Column(String(200), nullable=False, default="")
    website = Column(String(2000), nullable=False, default="")
    occupation = Column(String(200), nullable=False, default="")
    education = Column(String(200), nullable=False, default="")
    skills = Column(JSON, nullable=False, default=list)
    social_links = Column(JSON, nullable=False, default=dict)

    is_public = Column(Boolean, nullable=False, default=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    artworks = relationship("ArtworkModel", back_populates="artist")

    def to_summary(self) -> Dict[str, Any]:
        """Minimal public fields used when embedding the user in other records."""
        return {
            "id": self.id,
            "username": self.username,
            "displayName": self.display_name,
            "profilePicture": self.profile_picture,
        }

    def to_search_result(self) -> Dict[str, Any]:
        return {
            **self.to_summary(),
            "bio": self.bio,
            "createdAt": isoformat(self.created_at),
        }

    def to_dict(self, include_email: bool = False) -> Dict[str, Any]:
        """Convert model to dictionary.

        The password hash and storage keys are never included; the email only
        when the caller is the user themself.
        """
        data = {
            "id": self.id,
            "username": self.username,
            "displayName": self.display_name,
            "bio": self.bio,
            "profilePicture": self.profile_picture,
            "coverImage": self.cover_image,
            "location": self.location,
            "website": self.website,
            "occupation": self.occupation,
            "education": self.education,
            "skills": list(self.skills or []),
            "socialLinks": dict(self.social_links or {}),
            "isPublic": self.is_public,
            "createdAt": isoformat(self.created_at),
        }
        if include_email:
            data["email"] = self.email
        return data


class ArtworkModel(Base):
    """SQLAlchemy model for artworks."""

    __tablename__ = "artworks"

    id = Column(String(36), primary_key=True, default=generate_ulid)
    title = Column(String(100), nullable=False)
    description = Column(Text, nullable=False, default="")
    image_url = Column(String(2000), nullable=False)
    image_key = Column(String(512), nullable=False)
    artist_id = Column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    category = Column(String(20), nullable=False, default="digital")

    # Engagement
    views = Column(Integer, nullable=False, default=0)

    # Visibility
    is_public = Column(Boolean, nullable=False, default=True, index=True)
    allow_comments = Column(Boolean, nullable=False, default=True)

    # Stored image dimensions
    width = Column(Integer, nullable=False, default=0)
    height = Column(Integer, nullable=False, default=0)

    # Timestamps
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    artist = relationship("UserModel", back_populates="artworks")
    tag_rows = relationship(
        "ArtworkTagModel",
        order_by="ArtworkTagModel.position",
        cascade="all, delete-orphan",
    )
    likes = relationship(
        "ArtworkLikeModel",
        order_by="ArtworkLikeModel.created_at",
        cascade="all, delete-orphan",
    )
    comments = relationship(
        "CommentModel",
        back_populates="artwork",
        order_by="CommentModel.created_at",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("ix_artworks_artist_created", "artist_id", "created_at"),
        Index("ix_artworks_created_at", "created_at"),
        Index("ix_artworks_views", "views"),
    )

    @property
    def tags(self) -> List[str]:
        return [row.tag for row in self.tag_rows]

    @property
    def like_user_ids(self) -> List[str]:
        return [like.user_id for like in self.likes]

    def to_dict(
        self, artist_detail: bool = False, include_comments: bool = False
    ) -> Dict[str, Any]:
        """Convert model to dictionary."""
        artist: Optional[Dict[str, Any]] = None
        if self.artist is not None:
            artist = self.artist.to_summary()
            if artist_detail:
                artist.update(
                    bio=self.artist.bio,
                    location=self.artist.location,
                    website=self.artist.website,
                )
        data = {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "imageUrl": self.image_url,
            "artist": artist,
            "tags": self.tags,
            "category": self.category,
            "views": self.views,
            "likes": self.like_user_ids,
            "likeCount": len(self.likes),
            "commentCount": len(self.comments),
            "isPublic": self.is_public,
            "allowComments": self.allow_comments,
            "dimensions": {"width": self.width, "height": self.height},
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }
        if include_comments:
            data["comments"] = [c.to_dict() for c in self.comments]
        return data


class ArtworkTagModel(Base):
    """One tag of an artwork, kept in upload order."""

    __tablename__ = "artwork_tags"

    artwork_id = Column(
        String(36), ForeignKey("artworks.id", ondelete="CASCADE"), primary_key=True
    )
    position = Column(Integer, primary_key=True)
    tag = Column(String(100), nullable=False, index=True)


class ArtworkLikeModel(Base):
    """Membership of a user in an artwork's like set."""

    __tablename__ = "artwork_likes"

    artwork_id = Column(
        String(36), ForeignKey("artworks.id", ondelete="CASCADE"), primary_key=True
    )
    user_id = Column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)


class CommentModel(Base):
    """SQLAlchemy model for artwork comments."""

    __tablename__ = "comments"

    id = Column(String(36), primary_key=True, default=generate_ulid)
    artwork_id = Column(
        String(36),
        ForeignKey("artworks.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    author_id = Column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    text = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    artwork = relationship("ArtworkModel", back_populates="comments")
    author = relationship("UserModel")
    likes = relationship(
        "CommentLikeModel",
        order_by="CommentLikeModel.created_at",
        cascade="all, delete-orphan",
    )

    def to_dict(self) -> Dict[str, Any]:
        """Convert model to dictionary."""
        return {
            "id": self.id,
            "artworkId": self.artwork_id,
            "user": self.author.to_summary() if self.author is not None else None,
            "text": self.text,
            "likes": [like.user_id for like in self.likes],
            "likeCount": len(self.likes),
            "createdAt": isoformat(self.created_at),
        }


class CommentLikeModel(Base):
    """Membership of a user in a comment's like set."""

    __tablename__ = "comment_likes"

    comment_id = Column(
        String(36), ForeignKey("comments.id", ondelete="CASCADE"), primary_key=True
    )
    user_id = Column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
