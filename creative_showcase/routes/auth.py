"""
Authentication endpoints, prefixed with /auth.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from ..db.models import UserModel
from ..deps import get_auth_service, get_current_user
from ..schemas.auth import LoginRequest, RegisterRequest
from ..services import AuthService

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/register", status_code=201)
def register(
    request: RegisterRequest,
    service: AuthService = Depends(get_auth_service),
) -> Dict[str, Any]:
    """Create an account. Returns a bearer token and the new user."""
    return service.register(request)


@router.post("/login")
def login(
    request: LoginRequest,
    service: AuthService = Depends(get_auth_service),
) -> Dict[str, Any]:
    return service.login(request)


@router.get("/me")
def me(user: UserModel = Depends(get_current_user)) -> Dict[str, Any]:
    return {"user": user.to_dict(include_email=True)}
