"""
User service layer: public profiles, profile and account edits, avatar/cover
images, user search and account deletion.
"""

from typing import Any, Dict, List, Optional

import structlog
from sqlalchemy import delete, desc, func, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from ..db.models import (
    ArtworkLikeModel,
    ArtworkModel,
    CommentLikeModel,
    CommentModel,
    UserModel,
)
from ..enums import ImageSlot
from ..errors import Conflict, NotFound, Unauthorized, ValidationError
from ..media import AVATAR_TRANSFORM, COVER_TRANSFORM, MediaStore
from ..primitives import escape_like, split_list, utc_now
from ..schemas.users import AccountUpdate, ProfileUpdate
from ..security import (
    DEFAULT_BCRYPT_ROUNDS,
    check_password_length,
    hash_password,
    verify_password,
)

logger = structlog.get_logger()

MAX_BIO_LENGTH = 500
MIN_PASSWORD_LENGTH = 6
MIN_USER_QUERY_LENGTH = 2
USER_SEARCH_LIMIT = 10

# slot -> (folder, transform, url column, key column)
_SLOTS = {
    ImageSlot.PICTURE: ("profiles", AVATAR_TRANSFORM, "profile_picture", "profile_picture_key"),
    ImageSlot.COVER: ("covers", COVER_TRANSFORM, "cover_image", "cover_image_key"),
}

_PROFILE_TEXT_FIELDS = ("bio", "location", "website", "occupation", "education")


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserService:
    """Service for managing users in the database."""

    def __init__(
        self,
        db: Session,
        media: MediaStore,
        password_rounds: int = DEFAULT_BCRYPT_ROUNDS,
        max_avatar_bytes: Optional[int] = None,
        max_cover_bytes: Optional[int] = None,
    ):
        self.db = db
        self.media = media
        self.password_rounds = password_rounds
        self.max_bytes = {
            ImageSlot.PICTURE: max_avatar_bytes,
            ImageSlot.COVER: max_cover_bytes,
        }

    def get(self, user_id: str) -> UserModel:
        user = self.db.query(UserModel).filter(UserModel.id == user_id).first()
        if not user:
            raise NotFound("User not found")
        return user

    def get_by_username(self, username: str) -> Optional[UserModel]:
        return self.db.query(UserModel).filter(UserModel.username == username).first()

    def get_by_email(self, email: str) -> Optional[UserModel]:
        return (
            self.db.query(UserModel)
            .filter(UserModel.email == normalize_email(email))
            .first()
        )

    def get_public_profile(self, username: str) -> Dict[str, Any]:
        """Profile page: the user, their public artworks (newest first) and stats.

        Stats only count public artworks; the endpoint is unauthenticated.
        """
        user = self.get_by_username(username)
        if not user:
            raise NotFound("User not found")

        artworks = (
            self.db.query(ArtworkModel)
            .options(
                selectinload(ArtworkModel.artist),
                selectinload(ArtworkModel.tag_rows),
                selectinload(ArtworkModel.likes),
                selectinload(ArtworkModel.comments),
            )
            .filter(ArtworkModel.artist_id == user.id, ArtworkModel.is_public.is_(True))
            .order_by(desc(ArtworkModel.created_at), desc(ArtworkModel.id))
            .all()
        )

        count, total_views = self.db.execute(
            select(func.count(ArtworkModel.id), func.coalesce(func.sum(ArtworkModel.views), 0))
            .where(ArtworkModel.artist_id == user.id, ArtworkModel.is_public.is_(True))
        ).one()
        total_likes = self.db.execute(
            select(func.count())
            .select_from(ArtworkLikeModel)
            .join(ArtworkModel, ArtworkModel.id == ArtworkLikeModel.artwork_id)
            .where(ArtworkModel.artist_id == user.id, ArtworkModel.is_public.is_(True))
        ).scalar_one()

        return {
            "user": user.to_dict(),
            "artworks": [a.to_dict() for a in artworks],
            "stats": {
                "artworks": count,
                "totalViews": int(total_views),
                "totalLikes": total_likes,
                # No follower graph
                "followers": 0,
                "following": 0,
            },
        }

    def update_profile(self, user_id: str, changes: ProfileUpdate) -> UserModel:
        """Apply the fields present in changes. Absent fields are left alone."""
        user = self.get(user_id)
        fields = changes.model_dump(exclude_unset=True, exclude_none=True)

        if "bio" in fields and len(fields["bio"]) > MAX_BIO_LENGTH:
            raise ValidationError(f"Bio must be at most {MAX_BIO_LENGTH} characters")

        if "display_name" in fields:
            user.display_name = fields["display_name"] or user.username
        for name in _PROFILE_TEXT_FIELDS:
            if name in fields:
                setattr(user, name, fields[name])
        if "skills" in fields:
            user.skills = split_list(fields["skills"])
        if "social_links" in fields:
            # New dict so the JSON column is seen as changed
            merged = dict(user.social_links or {})
            merged.update(fields["social_links"])
            user.social_links = merged

        user.updated_at = utc_now()
        self.db.commit()
        self.db.refresh(user)
        return user

    def update_image(
        self, user_id: str, slot: ImageSlot, image: Optional[bytes]
    ) -> UserModel:
        """Replace (or with no image, clear) the avatar or cover image.

        The previous stored image is deleted best-effort once the new state
        is committed.
        """
        user = self.get(user_id)
        folder, transform, url_attr, key_attr = _SLOTS[slot]
        previous_key = getattr(user, key_attr)

        if image:
            stored = self.media.store(image, folder, transform, self.max_bytes[slot])
            setattr(user, url_attr, stored.url)
            setattr(user, key_attr, stored.key)
        else:
            stored = None
            setattr(user, url_attr, "")
            setattr(user, key_attr, "")

        user.updated_at = utc_now()
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            if stored:
                self.media.discard(stored.key)
            raise

        if previous_key:
            self.media.discard(previous_key)
        self.db.refresh(user)
        return user

    def update_account(self, user_id: str, changes: AccountUpdate) -> UserModel:
        """Change email and/or password.

        A password change requires the current password; a wrong one raises
        Unauthorized and leaves the stored hash untouched.
        """
        user = self.get(user_id)
        new_hash: Optional[str] = None

        if changes.new_password:
            if not changes.current_password:
                raise ValidationError("Current password is required to set a new password")
            if (
                changes.confirm_password is not None
                and changes.confirm_password != changes.new_password
            ):
                raise ValidationError("Passwords do not match")
            if len(changes.new_password) < MIN_PASSWORD_LENGTH:
                raise ValidationError(
                    f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
                )
            check_password_length(changes.new_password)
            if not verify_password(changes.current_password, user.password_hash):
                raise Unauthorized("Current password is incorrect")
            new_hash = hash_password(changes.new_password, self.password_rounds)

        new_email: Optional[str] = None
        if changes.email:
            candidate = normalize_email(changes.email)
            if candidate != user.email:
                taken = (
                    self.db.query(UserModel.id)
                    .filter(UserModel.email == candidate, UserModel.id != user.id)
                    .first()
                )
                if taken:
                    raise Conflict("Email is already in use")
                new_email = candidate

        if new_email:
            user.email = new_email
        if new_hash:
            user.password_hash = new_hash
        user.updated_at = utc_now()
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise Conflict("Email is already in use")

        self.db.refresh(user)
        logger.info(
            "Account updated",
            user_id=user.id,
            email_changed=bool(new_email),
            password_changed=bool(new_hash),
        )
        return user

    def delete_account(self, user_id: str) -> None:
        """Delete the user, everything they own and every trace of their activity."""
        user = self.get(user_id)

        owned = (
            self.db.query(ArtworkModel.id, ArtworkModel.image_key)
            .filter(ArtworkModel.artist_id == user.id)
            .all()
        )
        media_keys = [row.image_key for row in owned]
        media_keys.extend(k for k in (user.profile_picture_key, user.cover_image_key) if k)

        owned_ids = [row.id for row in owned]
        own_comment_ids = select(CommentModel.id).where(CommentModel.author_id == user.id)
        owned_comment_ids = select(CommentModel.id).where(
            CommentModel.artwork_id.in_(owned_ids)
        )

        self.db.execute(
            delete(CommentLikeModel)
            .where(
                or_(
                    CommentLikeModel.user_id == user.id,
                    CommentLikeModel.comment_id.in_(own_comment_ids),
                    CommentLikeModel.comment_id.in_(owned_comment_ids),
                )
            )
            .execution_options(synchronize_session=False)
        )
        self.db.execute(
            delete(CommentModel)
            .where(
                or_(CommentModel.author_id == user.id, CommentModel.artwork_id.in_(owned_ids))
            )
            .execution_options(synchronize_session=False)
        )
        self.db.execute(
            delete(ArtworkLikeModel)
            .where(
                or_(
                    ArtworkLikeModel.user_id == user.id,
                    ArtworkLikeModel.artwork_id.in_(owned_ids),
                )
            )
            .execution_options(synchronize_session=False)
        )

        # ORM delete so tag rows cascade
        for artwork in (
            self.db.query(ArtworkModel).filter(ArtworkModel.id.in_(owned_ids)).all()
        ):
            self.db.delete(artwork)
        self.db.flush()
        self.db.delete(user)
        self.db.commit()

        for key in media_keys:
            self.media.discard(key)
        logger.info("Account deleted", user_id=user_id, artworks=len(owned_ids))

    def search(self, query: Optional[str]) -> List[UserModel]:
        """Up to ten users whose username or display name contains query."""
        text = (query or "").strip()
        if len(text) < MIN_USER_QUERY_LENGTH:
            raise ValidationError(
                f"Search query must be at least {MIN_USER_QUERY_LENGTH} characters"
            )
        pattern = f"%{escape_like(text)}%"
        return (
            self.db.query(UserModel)
            .filter(
                or_(
                    UserModel.username.ilike(pattern, escape="\\"),
                    UserModel.display_name.ilike(pattern, escape="\\"),
                )
            )
            .order_by(UserModel.username)
            .limit(USER_SEARCH_LIMIT)
            .all()
        )
