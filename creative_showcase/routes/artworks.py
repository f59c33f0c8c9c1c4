"""
Artwork endpoints, prefixed with /artwork.

Fixed paths (upload, featured, dashboard, search) are declared before
/{artwork_id} so they are not captured as ids.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile

from ..db.models import UserModel
from ..deps import get_artwork_service, get_current_user
from ..schemas.artworks import ArtworkUpdate, CommentCreate
from ..services import ArtworkService
from ..services.artworks import DEFAULT_FEATURED_SIZE, DEFAULT_SEARCH_LIMIT

router = APIRouter(prefix="/artwork", tags=["Artwork"])


# =============================================================================
# Collection Endpoints
# =============================================================================


@router.post("/upload", status_code=201)
def upload_artwork(
    image: Optional[UploadFile] = File(None),
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    tags: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    user: UserModel = Depends(get_current_user),
    service: ArtworkService = Depends(get_artwork_service),
) -> Dict[str, Any]:
    """Upload an image and create an artwork owned by the caller."""
    content = image.file.read() if image is not None else None
    artwork = service.create(
        owner_id=user.id,
        title=title,
        image=content,
        description=description,
        tags=tags,
        category=category,
    )
    return artwork.to_dict(include_comments=True)


@router.get("/featured")
def featured_artworks(
    size: int = Query(DEFAULT_FEATURED_SIZE, ge=1, le=100),
    service: ArtworkService = Depends(get_artwork_service),
) -> List[Dict[str, Any]]:
    """A random sample of public artworks."""
    return [a.to_dict() for a in service.featured(size)]


@router.get("/dashboard")
def dashboard(
    user: UserModel = Depends(get_current_user),
    service: ArtworkService = Depends(get_artwork_service),
) -> List[Dict[str, Any]]:
    """All of the caller's artworks, including private ones."""
    return [a.to_dict() for a in service.list_by_owner(user.id)]


@router.get("/search")
def search_artworks(
    q: Optional[str] = None,
    category: Optional[str] = None,
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    limit: int = DEFAULT_SEARCH_LIMIT,
    service: ArtworkService = Depends(get_artwork_service),
) -> List[Dict[str, Any]]:
    artworks = service.search(query=q, category=category, sort_by=sort_by, limit=limit)
    return [a.to_dict() for a in artworks]


# =============================================================================
# Single Artwork Endpoints
# =============================================================================


@router.get("/{artwork_id}")
def get_artwork(
    artwork_id: str,
    service: ArtworkService = Depends(get_artwork_service),
) -> Dict[str, Any]:
    """Get an artwork with artist details and comments. Counts one view."""
    artwork = service.get_by_id(artwork_id)
    return artwork.to_dict(artist_detail=True, include_comments=True)


@router.put("/{artwork_id}")
def update_artwork(
    artwork_id: str,
    changes: ArtworkUpdate,
    user: UserModel = Depends(get_current_user),
    service: ArtworkService = Depends(get_artwork_service),
) -> Dict[str, Any]:
    artwork = service.update(artwork_id, user.id, changes)
    return artwork.to_dict(include_comments=True)


@router.delete("/{artwork_id}")
def delete_artwork(
    artwork_id: str,
    user: UserModel = Depends(get_current_user),
    service: ArtworkService = Depends(get_artwork_service),
) -> Dict[str, Any]:
    service.delete(artwork_id, user.id)
    return {"message": "Artwork deleted"}


@router.post("/{artwork_id}/like")
def like_artwork(
    artwork_id: str,
    user: UserModel = Depends(get_current_user),
    service: ArtworkService = Depends(get_artwork_service),
) -> Dict[str, Any]:
    """Toggle the caller's like."""
    return service.toggle_like(artwork_id, user.id)


# =============================================================================
# Comment Endpoints
# =============================================================================


@router.post("/{artwork_id}/comments", status_code=201)
def post_comment(
    artwork_id: str,
    comment: CommentCreate,
    user: UserModel = Depends(get_current_user),
    service: ArtworkService = Depends(get_artwork_service),
) -> Dict[str, Any]:
    return service.post_comment(artwork_id, user.id, comment.text).to_dict()


@router.delete("/{artwork_id}/comments/{comment_id}")
def delete_comment(
    artwork_id: str,
    comment_id: str,
    user: UserModel = Depends(get_current_user),
    service: ArtworkService = Depends(get_artwork_service),
) -> Dict[str, Any]:
    service.delete_comment(artwork_id, comment_id, user.id)
    return {"message": "Comment deleted"}


@router.post("/{artwork_id}/comments/{comment_id}/like")
def like_comment(
    artwork_id: str,
    comment_id: str,
    user: UserModel = Depends(get_current_user),
    service: ArtworkService = Depends(get_artwork_service),
) -> Dict[str, Any]:
    return service.toggle_comment_like(artwork_id, comment_id, user.id)
