"""
User endpoints, prefixed with /users.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile

from ..db.models import UserModel
from ..deps import get_artwork_service, get_current_user, get_user_service
from ..enums import ImageSlot
from ..errors import ValidationError
from ..schemas.users import AccountUpdate, ProfileUpdate
from ..services import ArtworkService, UserService
from ..services.artworks import DEFAULT_SEARCH_LIMIT

router = APIRouter(prefix="/users", tags=["Users"])


def _read(upload: Optional[UploadFile]) -> bytes:
    content = upload.file.read() if upload is not None else b""
    if not content:
        raise ValidationError("No image uploaded")
    return content


# =============================================================================
# Profile Endpoints
# =============================================================================


@router.get("/profile/{username}")
def get_profile(
    username: str,
    service: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    """Public profile with the user's public artworks and stats."""
    return service.get_public_profile(username)


@router.put("/profile")
def update_profile(
    changes: ProfileUpdate,
    user: UserModel = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    return {"user": service.update_profile(user.id, changes).to_dict(include_email=True)}


@router.put("/profile/picture")
def update_profile_picture(
    profile_picture: Optional[UploadFile] = File(None, alias="profilePicture"),
    user: UserModel = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    """Replace the profile picture. DELETE clears it."""
    updated = service.update_image(user.id, ImageSlot.PICTURE, _read(profile_picture))
    return {"user": updated.to_dict(include_email=True)}


@router.delete("/profile/picture")
def clear_profile_picture(
    user: UserModel = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    updated = service.update_image(user.id, ImageSlot.PICTURE, None)
    return {"user": updated.to_dict(include_email=True)}


@router.put("/profile/cover")
def update_cover_image(
    cover_image: Optional[UploadFile] = File(None, alias="coverImage"),
    user: UserModel = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    """Replace the cover image. DELETE clears it."""
    updated = service.update_image(user.id, ImageSlot.COVER, _read(cover_image))
    return {"user": updated.to_dict(include_email=True)}


@router.delete("/profile/cover")
def clear_cover_image(
    user: UserModel = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    updated = service.update_image(user.id, ImageSlot.COVER, None)
    return {"user": updated.to_dict(include_email=True)}


# =============================================================================
# Account Endpoints
# =============================================================================


@router.get("/me")
def get_me(user: UserModel = Depends(get_current_user)) -> Dict[str, Any]:
    return {"user": user.to_dict(include_email=True)}


@router.put("/account")
def update_account(
    changes: AccountUpdate,
    user: UserModel = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    """Change email and/or password."""
    return {"user": service.update_account(user.id, changes).to_dict(include_email=True)}


@router.delete("/account")
def delete_account(
    user: UserModel = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    """Delete the caller's account and everything they own. Irreversible."""
    service.delete_account(user.id)
    return {"message": "Account deleted"}


# =============================================================================
# Discovery Endpoints
# =============================================================================


@router.get("/search")
def search_users(
    q: Optional[str] = None,
    service: UserService = Depends(get_user_service),
) -> List[Dict[str, Any]]:
    return [u.to_search_result() for u in service.search(q)]


@router.get("/{user_id}/artworks")
def list_user_artworks(
    user_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_SEARCH_LIMIT, ge=1, le=100),
    sort: Optional[str] = None,
    service: ArtworkService = Depends(get_artwork_service),
) -> Dict[str, Any]:
    """One page of a user's public artworks."""
    return service.list_by_owner_paged(user_id, page=page, limit=limit, sort=sort).to_dict()
