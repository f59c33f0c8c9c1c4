"""
Request schemas for registration and login.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, constr


class RegisterRequest(BaseModel):
    """Schema for creating a new account."""

    model_config = ConfigDict(populate_by_name=True)

    username: constr(strip_whitespace=True, min_length=3, max_length=30)
    email: EmailStr
    password: constr(min_length=6, max_length=128)
    display_name: Optional[constr(strip_whitespace=True, max_length=100)] = Field(
        None, alias="displayName"
    )


class LoginRequest(BaseModel):
    email: EmailStr
    password: constr(min_length=1, max_length=128)
