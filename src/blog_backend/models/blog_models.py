"""
# Blog Content Models

Data structures for posts and their comments ("reviews").

## Domain Model Overview

- **Post** (`blog_posts`): a content item identified by a generated 7-character
  `postId`. It keeps an ordered list of the `_id`s of its comments.
- **Comment** (`blog_reviews`): belongs to exactly one post through `postId`.

Comments are resolved into their post when listing all posts; a single post is
returned together with the comments that reference it.

## Response Envelope

Most endpoints answer with `ApiResponse`, `{success, message?, data?}`. The single
post endpoint answers with `BlogDetailResponse`, `{blog, comments}`.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# Request models

class CreatePostRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=300, examples=["Hi"])
    content: str = Field(..., examples=["Body"])
    email: Optional[str] = Field(
        None, description="Author email. Defaults to the authenticated user's email.", examples=["ada@blogmail.com"]
    )


class RemovePostRequest(BaseModel):
    postId: str = Field(..., min_length=1)


class CreateCommentRequest(BaseModel):
    postId: str = Field(..., min_length=1)
    email: Optional[str] = Field(None, description="Comment author. Defaults to the authenticated user's email.")
    text: str = Field(..., min_length=1, max_length=5000, examples=["Nice"])


# Document models

class PostDocument(BaseModel):
    """Shape of a `blog_posts` document at creation time."""

    postId: str
    title: str
    content: str
    email: str
    saved: bool = False
    date: datetime = Field(default_factory=_utcnow)
    comments: List[Any] = Field(default_factory=list, description="Ordered comment _ids")


class CommentDocument(BaseModel):
    """Shape of a `blog_reviews` document at creation time."""

    postId: str
    email: str
    text: str
    date: datetime = Field(default_factory=_utcnow)


# Response models

class ApiResponse(BaseModel):
    success: bool
    message: Optional[str] = None
    data: Optional[Any] = None


class BlogDetailResponse(BaseModel):
    blog: Dict[str, Any]
    comments: List[Dict[str, Any]]


class LogoutResponse(BaseModel):
    status: str = "successful"
