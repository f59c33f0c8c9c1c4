"""
Request schemas for profile and account updates.
"""

from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, EmailStr, Field, constr


class SocialLinks(BaseModel):
    model_config = ConfigDict(extra="forbid")

    twitter: Optional[constr(max_length=2000)] = None
    instagram: Optional[constr(max_length=2000)] = None
    artstation: Optional[constr(max_length=2000)] = None


class ProfileUpdate(BaseModel):
    """Partial profile update. Absent fields are not changed, never cleared."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    display_name: Optional[constr(strip_whitespace=True, max_length=100)] = Field(
        None, alias="displayName"
    )
    bio: Optional[str] = None
    location: Optional[constr(max_length=200)] = None
    website: Optional[constr(max_length=2000)] = None
    occupation: Optional[constr(max_length=200)] = None
    education: Optional[constr(max_length=200)] = None
    skills: Optional[Union[str, List[str]]] = Field(
        None, description="Comma-separated text or a list of skills"
    )
    social_links: Optional[SocialLinks] = Field(None, alias="socialLinks")


class AccountUpdate(BaseModel):
    """Email and password change."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    email: Optional[EmailStr] = None
    current_password: Optional[str] = Field(None, alias="currentPassword")
    new_password: Optional[str] = Field(None, alias="newPassword")
    confirm_password: Optional[str] = Field(None, alias="confirmPassword")
