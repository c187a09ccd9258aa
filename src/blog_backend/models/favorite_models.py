"""Models for the favorites ledger (`blog_favorites`)."""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field


class SaveFavoriteRequest(BaseModel):
    saved: bool = Field(True, description="True to save the post, False to unsave it")
    email: Optional[str] = Field(None, description="Email of the post's author")


class RemoveFavoriteRequest(BaseModel):
    postId: str = Field(..., min_length=1)
    email: Optional[str] = Field(None, description="Email of the post's author")


class FavoriteDocument(BaseModel):
    """One (user, post) pair. Unique over (`userEmail`, `postId`)."""

    userEmail: str
    postEmail: Optional[str] = None
    postId: str
    date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
