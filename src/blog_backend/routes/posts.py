"""
# Post & Comment Routes

## API Endpoints

- `GET /allposts` - Every post with its comments resolved (bearer required)
- `GET /blog/{postId}` - One post and its comments (public)
- `POST /addpost` - Publish a post (bearer required)
- `POST /removepost` - Delete a post and its comments (bearer required)
- `POST /addreviews` - Comment on a post (bearer required)

Responses use the `{success, message?, data?}` envelope, except `/blog/{postId}`
which answers `{blog, comments}`.

## Usage Examples

```python
headers = {"Authorization": f"Bearer {token}"}
response = await client.post("/addpost", json={"title": "Hi", "content": "Body"}, headers=headers)
post_id = response.json()["data"]["postId"]

await client.post("/addreviews", json={"postId": post_id, "text": "Nice"}, headers=headers)
blog = (await client.get(f"/blog/{post_id}")).json()
```

When `email` is omitted from a post or comment body, the author is the authenticated
user.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from blog_backend.errors import BlogError
from blog_backend.managers.logging_manager import get_logger
from blog_backend.models.auth_models import TokenData
from blog_backend.models.blog_models import (
    ApiResponse,
    BlogDetailResponse,
    CreateCommentRequest,
    CreatePostRequest,
    RemovePostRequest,
)
from blog_backend.routes.auth.dependencies import get_current_user
from blog_backend.routes.dependencies import get_content_store
from blog_backend.services.content_store import ContentStore
from blog_backend.utils.serialization import serialize_document, serialize_documents

logger = get_logger(prefix="[Post Routes]")

router = APIRouter(tags=["Posts"])


@router.get("/allposts", response_model=ApiResponse)
async def all_posts(
    current_user: TokenData = Depends(get_current_user),
    content: ContentStore = Depends(get_content_store),
):
    try:
        posts = await content.list_all()
        return ApiResponse(success=True, data=serialize_documents(posts))
    except Exception as e:
        logger.error("Error fetching posts: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch posts")


@router.get("/blog/{postId}", response_model=BlogDetailResponse)
async def get_blog(postId: str, content: ContentStore = Depends(get_content_store)):
    """
    Fetch a post together with the comments that reference it.

    Raises:
        HTTPException(404): If the post does not exist.
    """
    try:
        post, comments = await content.get(postId)
        return BlogDetailResponse(blog=serialize_document(post), comments=serialize_documents(comments))

    except BlogError:
        raise
    except Exception as e:
        logger.error("Error fetching blog or comments for %s: %s", postId, e, exc_info=True)
        raise HTTPException(status_code=500, detail="Error fetching blog or comments")


@router.post("/addpost", response_model=ApiResponse, status_code=status.HTTP_201_CREATED)
async def add_post(
    request: CreatePostRequest,
    current_user: TokenData = Depends(get_current_user),
    content: ContentStore = Depends(get_content_store),
):
    """
    Publish a new post under a generated 7-character `postId`.

    The created post is returned in `data`.
    """
    try:
        post = await content.create(request.title, request.content, request.email or current_user.email)
        return ApiResponse(success=True, message="Post added successfully", data=serialize_document(post))
    except Exception as e:
        logger.error("Error adding post: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to add post")


@router.post("/removepost", response_model=ApiResponse)
async def remove_post(
    request: RemovePostRequest,
    current_user: TokenData = Depends(get_current_user),
    content: ContentStore = Depends(get_content_store),
):
    """
    Delete a post and every comment on it.

    Removing a post that does not exist still succeeds, so a retried request can
    finish an interrupted cascade.
    """
    try:
        await content.delete(request.postId)
        return ApiResponse(success=True, message="Post removed successfully")
    except Exception as e:
        logger.error("Error removing post %s: %s", request.postId, e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to remove post")


@router.post("/addreviews", response_model=ApiResponse, status_code=status.HTTP_201_CREATED)
async def add_review(
    request: CreateCommentRequest,
    current_user: TokenData = Depends(get_current_user),
    content: ContentStore = Depends(get_content_store),
):
    """
    Add a comment to an existing post.

    Raises:
        HTTPException(404): If the post does not exist.
        HTTPException(500): If the comment could not be stored.
    """
    try:
        comment = await content.add_comment(request.postId, request.email or current_user.email, request.text)
        return ApiResponse(success=True, message="Comment added successfully", data=serialize_document(comment))

    except BlogError:
        raise
    except Exception as e:
        logger.error("Error adding comment to %s: %s", request.postId, e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to add Comment")
