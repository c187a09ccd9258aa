"""
# Favorites Routes

## API Endpoints

- `POST /posts/{id}/save` - Save a post, or unsave it with `{"saved": false}`
- `GET /favorites` - Every post the user has saved
- `POST /removefav` - Remove a saved post, 404 if it was not saved

All three require a bearer token; the user is the token's email. Saving twice keeps
a single favorite.
"""

from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException

from blog_backend.errors import BlogError
from blog_backend.managers.logging_manager import get_logger
from blog_backend.models.auth_models import TokenData
from blog_backend.models.blog_models import ApiResponse
from blog_backend.models.favorite_models import RemoveFavoriteRequest, SaveFavoriteRequest
from blog_backend.routes.auth.dependencies import get_current_user
from blog_backend.routes.dependencies import get_favorites_ledger
from blog_backend.services.favorites_ledger import FavoritesLedger
from blog_backend.utils.serialization import serialize_documents

logger = get_logger(prefix="[Favorites Routes]")

router = APIRouter(tags=["Favorites"])


@router.post("/posts/{id}/save", response_model=ApiResponse)
async def save_post(
    id: str,
    request: Optional[SaveFavoriteRequest] = Body(None),
    current_user: TokenData = Depends(get_current_user),
    favorites: FavoritesLedger = Depends(get_favorites_ledger),
):
    """
    Save or unsave a post for the current user.

    `email` in the body is the post author's email, stored alongside the favorite.
    Without a body the post is saved. Both directions are idempotent.

    Raises:
        HTTPException(404): If saving a post that does not exist.
    """
    request = request or SaveFavoriteRequest()
    try:
        if request.saved:
            await favorites.save(current_user.email, request.email, id)
            message = "Post saved"
        else:
            await favorites.unsave(current_user.email, id)
            message = "Post unsaved"
        return ApiResponse(success=True, message=message, data={"postId": id, "saved": request.saved})

    except BlogError:
        raise
    except Exception as e:
        logger.error("Error saving or unsaving post %s: %s", id, e, exc_info=True)
        raise HTTPException(status_code=500, detail="Error saving or unsaving post")


@router.get("/favorites", response_model=ApiResponse)
async def list_favorites(
    current_user: TokenData = Depends(get_current_user),
    favorites: FavoritesLedger = Depends(get_favorites_ledger),
):
    try:
        posts = await favorites.list(current_user.email)
        return ApiResponse(success=True, data=serialize_documents(posts))
    except Exception as e:
        logger.error("Error fetching favorite posts: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Error fetching favorite posts")


@router.post("/removefav", response_model=ApiResponse)
async def remove_favorite(
    request: RemoveFavoriteRequest,
    current_user: TokenData = Depends(get_current_user),
    favorites: FavoritesLedger = Depends(get_favorites_ledger),
):
    """
    Remove a post from the current user's favorites.

    Raises:
        HTTPException(404): If the post is not among the user's favorites.
    """
    try:
        await favorites.remove(current_user.email, request.postId)
        return ApiResponse(success=True, message="Post removed from favorites")

    except BlogError:
        raise
    except Exception as e:
        logger.error("Error removing post %s from favorites: %s", request.postId, e, exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")
