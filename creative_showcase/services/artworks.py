"""
Artwork service layer.

Owns create/read/update/delete, engagement (views, likes, comments) and the
public listings (search, featured, per-artist pages) over artwork records.

Views and like-set membership are changed with single SQL statements so that
concurrent requests cannot lose updates or duplicate members.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Union

import structlog
from sqlalchemy import asc, delete, desc, exists, func, insert, or_, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Query, Session, selectinload

from ..db.models import (
    ArtworkLikeModel,
    ArtworkModel,
    ArtworkTagModel,
    CommentLikeModel,
    CommentModel,
    UserModel,
)
from ..enums import Category, SortKey
from ..errors import Forbidden, NotFound, ValidationError
from ..media import ARTWORK_TRANSFORM, MediaStore
from ..primitives import escape_like, generate_ulid, split_list, utc_now
from ..schemas.artworks import ArtworkUpdate

logger = structlog.get_logger()

ARTWORK_FOLDER = "artworks"

MAX_TITLE_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 1000
MAX_TAG_LENGTH = 100
MAX_COMMENT_LENGTH = 1000

DEFAULT_SEARCH_LIMIT = 12
DEFAULT_FEATURED_SIZE = 8
MAX_PAGE_SIZE = 100

# Sort spellings accepted in addition to the SortKey values
SORT_ALIASES = {
    "-createdAt": SortKey.NEWEST,
    "createdAt": SortKey.OLDEST,
    "-views": SortKey.POPULAR,
    "-likes": SortKey.MOST_LIKED,
}


def parse_category(raw: Optional[str]) -> Optional[Category]:
    """Case-insensitive category lookup. Empty or "All" means no category."""
    if raw is None or not raw.strip() or raw.strip().lower() == "all":
        return None
    try:
        return Category(raw.strip().lower())
    except ValueError:
        allowed = ", ".join(c.value for c in Category)
        raise ValidationError(f"Unknown category '{raw}'. Allowed: {allowed}")


def parse_sort_key(raw: Optional[str]) -> SortKey:
    if raw is None or not raw.strip():
        return SortKey.NEWEST
    raw = raw.strip()
    if raw in SORT_ALIASES:
        return SORT_ALIASES[raw]
    try:
        return SortKey(raw.lower())
    except ValueError:
        allowed = ", ".join(s.value for s in SortKey)
        raise ValidationError(f"Unknown sort '{raw}'. Allowed: {allowed}")


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


def _normalize_tags(raw: Union[str, Iterable[str], None]) -> List[str]:
    tags: List[str] = []
    for tag in split_list(raw):
        if len(tag) > MAX_TAG_LENGTH:
            raise ValidationError(f"Tags must be at most {MAX_TAG_LENGTH} characters")
        if tag not in tags:
            tags.append(tag)
    return tags


def _validate_title(raw: Optional[str]) -> str:
    title = (raw or "").strip()
    if not title:
        raise ValidationError("Title is required")
    if len(title) > MAX_TITLE_LENGTH:
        raise ValidationError(f"Title must be at most {MAX_TITLE_LENGTH} characters")
    return title


def _validate_description(raw: Optional[str]) -> str:
    description = raw or ""
    if len(description) > MAX_DESCRIPTION_LENGTH:
        raise ValidationError(
            f"Description must be at most {MAX_DESCRIPTION_LENGTH} characters"
        )
    return description


@dataclass
class ArtworkPage:
    """One page of an artist's public artworks."""

    artworks: List[ArtworkModel]
    total: int
    pages: int
    current_page: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "artworks": [a.to_dict() for a in self.artworks],
            "total": self.total,
            "pages": self.pages,
            "currentPage": self.current_page,
        }


class ArtworkService:
    """Service for managing artworks in the database."""

    def __init__(
        self,
        db: Session,
        media: MediaStore,
        max_image_bytes: Optional[int] = None,
    ):
        self.db = db
        self.media = media
        self.max_image_bytes = max_image_bytes

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _listing(self) -> Query:
        return self.db.query(ArtworkModel).options(
            selectinload(ArtworkModel.artist),
            selectinload(ArtworkModel.tag_rows),
            selectinload(ArtworkModel.likes),
            selectinload(ArtworkModel.comments),
        )

    def _load_detail(self, artwork_id: str) -> Optional[ArtworkModel]:
        return (
            self.db.query(ArtworkModel)
            .options(
                selectinload(ArtworkModel.artist),
                selectinload(ArtworkModel.tag_rows),
                selectinload(ArtworkModel.likes),
                selectinload(ArtworkModel.comments).selectinload(CommentModel.author),
                selectinload(ArtworkModel.comments).selectinload(CommentModel.likes),
            )
            .filter(ArtworkModel.id == artwork_id)
            .first()
        )

    def _get(self, artwork_id: str) -> ArtworkModel:
        artwork = (
            self.db.query(ArtworkModel).filter(ArtworkModel.id == artwork_id).first()
        )
        if not artwork:
            raise NotFound("Artwork not found")
        return artwork

    def _ensure_exists(self, artwork_id: str) -> None:
        found = (
            self.db.query(ArtworkModel.id).filter(ArtworkModel.id == artwork_id).first()
        )
        if not found:
            raise NotFound("Artwork not found")

    def _get_comment(self, artwork_id: str, comment_id: str) -> CommentModel:
        comment = (
            self.db.query(CommentModel)
            .filter(CommentModel.id == comment_id, CommentModel.artwork_id == artwork_id)
            .first()
        )
        if not comment:
            raise NotFound("Comment not found")
        return comment

    @staticmethod
    def _apply_sort(query: Query, sort_key: SortKey) -> Query:
        if sort_key == SortKey.OLDEST:
            return query.order_by(asc(ArtworkModel.created_at), asc(ArtworkModel.id))
        if sort_key == SortKey.POPULAR:
            return query.order_by(desc(ArtworkModel.views), desc(ArtworkModel.created_at))
        if sort_key == SortKey.MOST_LIKED:
            like_count = (
                select(func.count())
                .where(ArtworkLikeModel.artwork_id == ArtworkModel.id)
                .correlate(ArtworkModel)
                .scalar_subquery()
            )
            return query.order_by(desc(like_count), desc(ArtworkModel.created_at))
        return query.order_by(desc(ArtworkModel.created_at), desc(ArtworkModel.id))

    # ------------------------------------------------------------------
    # Create / read / update / delete
    # ------------------------------------------------------------------

    def create(
        self,
        owner_id: str,
        title: Optional[str],
        image: Optional[bytes],
        description: Optional[str] = None,
        tags: Union[str, Iterable[str], None] = None,
        category: Optional[str] = None,
    ) -> ArtworkModel:
        """Store the image and persist a new artwork owned by owner_id."""
        title = _validate_title(title)
        description = _validate_description(description)
        tag_list = _normalize_tags(tags)
        category_value = parse_category(category) or Category.DIGITAL
        if not image:
            raise ValidationError("Image is required")

        owner = self.db.query(UserModel).filter(UserModel.id == owner_id).first()
        if not owner:
            raise NotFound("Artist not found")

        stored = self.media.store(
            image, ARTWORK_FOLDER, ARTWORK_TRANSFORM, self.max_image_bytes
        )

        now = utc_now()
        artwork = ArtworkModel(
            id=generate_ulid(),
            title=title,
            description=description,
            image_url=stored.url,
            image_key=stored.key,
            artist_id=owner.id,
            category=category_value.value,
            views=0,
            is_public=True,
            allow_comments=True,
            width=stored.width,
            height=stored.height,
            created_at=now,
            updated_at=now,
            tag_rows=[
                ArtworkTagModel(position=i, tag=tag) for i, tag in enumerate(tag_list)
            ],
        )
        try:
            self.db.add(artwork)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            self.media.discard(stored.key)
            raise

        logger.info(
            "Artwork created",
            artwork_id=artwork.id,
            artist_id=owner.id,
            category=artwork.category,
        )
        return self._load_detail(artwork.id)

    def get_by_id(self, artwork_id: str) -> ArtworkModel:
        """Fetch an artwork for display, counting the view.

        The counter is bumped with a single UPDATE before loading, so the
        returned record already includes this view.
        """
        result = self.db.execute(
            update(ArtworkModel)
            .where(ArtworkModel.id == artwork_id)
            .values(views=ArtworkModel.views + 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            self.db.rollback()
            raise NotFound("Artwork not found")
        self.db.commit()

        artwork = self._load_detail(artwork_id)
        if not artwork:
            raise NotFound("Artwork not found")
        return artwork

    def update(
        self, artwork_id: str, caller_id: str, changes: ArtworkUpdate
    ) -> ArtworkModel:
        """Apply a partial edit. Only the artist may edit."""
        artwork = self._get(artwork_id)
        if artwork.artist_id != caller_id:
            raise Forbidden("User not authorized")

        fields = changes.model_dump(exclude_unset=True, exclude_none=True)
        if "title" in fields:
            artwork.title = _validate_title(fields["title"])
        if "description" in fields:
            artwork.description = _validate_description(fields["description"])
        if "category" in fields:
            artwork.category = (parse_category(fields["category"]) or Category.DIGITAL).value
        if "is_public" in fields:
            artwork.is_public = fields["is_public"]
        if "allow_comments" in fields:
            artwork.allow_comments = fields["allow_comments"]
        if "tags" in fields:
            tag_list = _normalize_tags(fields["tags"])
            artwork.tag_rows.clear()
            self.db.flush()
            artwork.tag_rows.extend(
                ArtworkTagModel(position=i, tag=tag) for i, tag in enumerate(tag_list)
            )

        artwork.updated_at = utc_now()
        self.db.commit()
        return self._load_detail(artwork.id)

    def delete(self, artwork_id: str, caller_id: str) -> None:
        """Delete an artwork and its stored image. Only the artist may delete."""
        artwork = self._get(artwork_id)
        if artwork.artist_id != caller_id:
            raise Forbidden("User not authorized")

        image_key = artwork.image_key
        self.db.delete(artwork)
        self.db.commit()
        self.media.discard(image_key)
        logger.info("Artwork deleted", artwork_id=artwork_id, artist_id=caller_id)

    # ------------------------------------------------------------------
    # Likes and comments
    # ------------------------------------------------------------------

    def _toggle_membership(self, model: Any, owner_column: Any, owner_id: str, user_id: str) -> bool:
        """Flip user_id's membership in a like set. Returns True if now a member."""
        removed = self.db.execute(
            delete(model)
            .where(owner_column == owner_id, model.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        if removed.rowcount:
            self.db.commit()
            return False

        try:
            self.db.execute(
                insert(model).values(
                    {owner_column.key: owner_id, "user_id": user_id, "created_at": utc_now()}
                )
            )
            self.db.commit()
        except IntegrityError:
            # A concurrent toggle added the same member first
            self.db.rollback()
        return True

    def _members(self, model: Any, owner_column: Any, owner_id: str) -> List[str]:
        rows = (
            self.db.query(model.user_id)
            .filter(owner_column == owner_id)
            .order_by(model.created_at)
            .all()
        )
        return [row.user_id for row in rows]

    def toggle_like(self, artwork_id: str, user_id: str) -> Dict[str, Any]:
        """Like the artwork, or unlike it if the user already does."""
        self._ensure_exists(artwork_id)
        liked = self._toggle_membership(
            ArtworkLikeModel, ArtworkLikeModel.artwork_id, artwork_id, user_id
        )
        likes = self._members(ArtworkLikeModel, ArtworkLikeModel.artwork_id, artwork_id)
        return {"liked": liked, "likes": likes}

    def post_comment(self, artwork_id: str, user_id: str, text: Optional[str]) -> CommentModel:
        artwork = self._get(artwork_id)
        if not artwork.allow_comments:
            raise Forbidden("Comments are disabled for this artwork")
        text = (text or "").strip()
        if not text:
            raise ValidationError("Comment text is required")
        if len(text) > MAX_COMMENT_LENGTH:
            raise ValidationError(
                f"Comments must be at most {MAX_COMMENT_LENGTH} characters"
            )

        comment = CommentModel(
            id=generate_ulid(),
            artwork_id=artwork.id,
            author_id=user_id,
            text=text,
            created_at=utc_now(),
        )
        self.db.add(comment)
        self.db.commit()
        self.db.refresh(comment)
        logger.info("Comment posted", artwork_id=artwork.id, comment_id=comment.id)
        return comment

    def delete_comment(self, artwork_id: str, comment_id: str, caller_id: str) -> None:
        """Remove a comment. Allowed for its author and for the artwork's artist."""
        comment = self._get_comment(artwork_id, comment_id)
        if caller_id not in (comment.author_id, comment.artwork.artist_id):
            raise Forbidden("User not authorized")
        self.db.delete(comment)
        self.db.commit()

    def toggle_comment_like(
        self, artwork_id: str, comment_id: str, user_id: str
    ) -> Dict[str, Any]:
        self._get_comment(artwork_id, comment_id)
        liked = self._toggle_membership(
            CommentLikeModel, CommentLikeModel.comment_id, comment_id, user_id
        )
        likes = self._members(CommentLikeModel, CommentLikeModel.comment_id, comment_id)
        return {"liked": liked, "likes": likes}

    # ------------------------------------------------------------------
    # Listings
    # ------------------------------------------------------------------

    def search(
        self,
        query: Optional[str] = None,
        category: Optional[str] = None,
        sort_by: Optional[str] = None,
        limit: int = DEFAULT_SEARCH_LIMIT,
    ) -> List[ArtworkModel]:
        """Public artworks whose title, description or a tag contains query."""
        category_value = parse_category(category)
        sort_key = parse_sort_key(sort_by)

        q = self._listing().filter(ArtworkModel.is_public.is_(True))

        text = (query or "").strip()
        if text:
            pattern = f"%{escape_like(text)}%"
            tag_match = exists().where(
                ArtworkTagModel.artwork_id == ArtworkModel.id,
                ArtworkTagModel.tag.ilike(pattern, escape="\\"),
            )
            q = q.filter(
                or_(
                    ArtworkModel.title.ilike(pattern, escape="\\"),
                    ArtworkModel.description.ilike(pattern, escape="\\"),
                    tag_match,
                )
            )

        if category_value:
            q = q.filter(ArtworkModel.category == category_value.value)

        return self._apply_sort(q, sort_key).limit(_clamp(limit, 1, MAX_PAGE_SIZE)).all()

    def featured(self, sample_size: int = DEFAULT_FEATURED_SIZE) -> List[ArtworkModel]:
        """A fresh uniform random sample of public artworks."""
        return (
            self._listing()
            .filter(ArtworkModel.is_public.is_(True))
            .order_by(func.random())
            .limit(_clamp(sample_size, 1, MAX_PAGE_SIZE))
            .all()
        )

    def list_by_owner(self, owner_id: str) -> List[ArtworkModel]:
        """Every artwork of the owner, public or not, newest first."""
        return (
            self._listing()
            .filter(ArtworkModel.artist_id == owner_id)
            .order_by(desc(ArtworkModel.created_at), desc(ArtworkModel.id))
            .all()
        )

    def list_by_owner_paged(
        self,
        owner_id: str,
        page: int = 1,
        limit: int = DEFAULT_SEARCH_LIMIT,
        sort: Optional[str] = None,
    ) -> ArtworkPage:
        """One page of the owner's public artworks."""
        owner = self.db.query(UserModel.id).filter(UserModel.id == owner_id).first()
        if not owner:
            raise NotFound("User not found")

        sort_key = parse_sort_key(sort)
        page = max(page, 1)
        limit = _clamp(limit, 1, MAX_PAGE_SIZE)

        base = self._listing().filter(
            ArtworkModel.artist_id == owner_id, ArtworkModel.is_public.is_(True)
        )
        total = base.order_by(None).count()
        artworks = (
            self._apply_sort(base, sort_key).offset((page - 1) * limit).limit(limit).all()
        )
        return ArtworkPage(
            artworks=artworks,
            total=total,
            pages=math.ceil(total / limit),
            current_page=page,
        )
