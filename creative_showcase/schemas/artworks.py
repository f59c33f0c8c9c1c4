"""
Request schemas for artwork edits and comments.

Uploads arrive as multipart forms and are validated by the service, not here.
"""

from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class ArtworkUpdate(BaseModel):
    """Partial edit of an artwork by its owner. Unset fields are left unchanged."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    title: Optional[str] = None
    description: Optional[str] = None
    tags: Optional[Union[str, List[str]]] = Field(
        None, description="List of tags or comma-separated text"
    )
    category: Optional[str] = None
    is_public: Optional[bool] = Field(None, alias="isPublic")
    allow_comments: Optional[bool] = Field(None, alias="allowComments")


class CommentCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    text: str
