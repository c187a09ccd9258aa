"""
# Favorites Ledger

Records which posts each user has saved, in `blog_favorites`.

A favorite is one (`userEmail`, `postId`) pair, kept unique by the compound index
`user_post_unique` and by saving through an upsert. Saving the same post again is a
no-op and listing returns every saved post. Only existing posts can be saved, and
deleting a post drops its favorites (see `ContentStore.delete`).
"""

from typing import Any, Dict, List, Optional

from pymongo.errors import DuplicateKeyError

from blog_backend.config import Settings
from blog_backend.database import DatabaseManager
from blog_backend.errors import NotFound
from blog_backend.managers.logging_manager import get_logger
from blog_backend.models.favorite_models import FavoriteDocument

logger = get_logger(prefix="[Favorites]")


class FavoritesLedger:
    """Add, remove and list saved posts per user."""

    def __init__(self, db_manager: DatabaseManager, settings: Settings):
        self._db = db_manager
        self.collection_name = settings.FAVORITES_COLLECTION
        self.posts_collection = settings.POSTS_COLLECTION

    def _favorites(self):
        return self._db.get_collection(self.collection_name)

    def _posts(self):
        return self._db.get_collection(self.posts_collection)

    async def save(self, user_email: str, post_author_email: Optional[str], post_id: str) -> bool:
        """
        Record that the user saved the post.

        Returns:
            bool: `True` if a new favorite was created, `False` if it already existed.

        Raises:
            NotFound: If no post carries `post_id`.
        """
        post = await self._posts().find_one({"postId": post_id}, {"_id": 1})
        if post is None:
            raise NotFound("Post not found")

        favorite = FavoriteDocument(userEmail=user_email, postEmail=post_author_email, postId=post_id)
        try:
            result = await self._favorites().update_one(
                {"userEmail": user_email, "postId": post_id},
                {"$setOnInsert": favorite.model_dump()},
                upsert=True,
            )
        except DuplicateKeyError:
            # A concurrent save of the same pair won the upsert
            logger.debug("Concurrent save of %s by %s", post_id, user_email)
            return False

        created = result.upserted_id is not None
        logger.info("%s favorite %s for %s", "Saved" if created else "Kept", post_id, user_email)
        return created

    async def unsave(self, user_email: str, post_id: str) -> bool:
        """Drop the favorite if present. Returns whether one was removed."""
        result = await self._favorites().delete_one({"userEmail": user_email, "postId": post_id})
        return result.deleted_count > 0

    async def list(self, user_email: str) -> List[Dict[str, Any]]:
        """Every post the user has saved. Favorites of deleted posts are skipped."""
        favorites = await self._favorites().find({"userEmail": user_email}).to_list(length=None)
        post_ids = [favorite["postId"] for favorite in favorites]
        if not post_ids:
            return []

        posts = self._posts()
        return await posts.find({"postId": {"$in": post_ids}}).to_list(length=None)

    async def remove(self, user_email: str, post_id: str) -> None:
        """
        Remove a saved post.

        Raises:
            NotFound: If the user has no favorite for this post.
        """
        if not await self.unsave(user_email, post_id):
            raise NotFound("Post not found in favorites")
        logger.info("Removed favorite %s for %s", post_id, user_email)
