"""
# Content Store

Persists posts (`blog_posts`) and their comments (`blog_reviews`). Deleting a post
also clears its entries in `blog_favorites`.

## Relationship Model

A post keeps the ordered `_id`s of its comments in `comments`; each comment carries the
`postId` of its parent. `list_all()` resolves the `_id` list into comment documents,
`get()` finds comments by `postId`.

## Multi-step Operations

Deleting a post cascades to its comments and favorites, and adding a comment also appends its `_id`
to the parent. Both run inside `DatabaseManager.transaction()`, which is a real
multi-document transaction on a replica set and plain sequential writes on a standalone
server. In the standalone case:

- `delete()` removes the post first, then its comments and favorites. It is idempotent, so
  repeating a failed call finishes the cascade.
- `add_comment()` deletes the freshly inserted comment again if the parent update fails.

## Post Identifiers

`postId` is 7 characters drawn independently and uniformly from the 62 ASCII letters and
digits. The unique index on `postId` rejects a collision, in which case creation retries
with a fresh identifier.
"""

import secrets
import string
from typing import Any, Dict, List, Tuple

from pymongo.errors import DuplicateKeyError, PyMongoError

from blog_backend.config import Settings
from blog_backend.database import DatabaseManager
from blog_backend.errors import NotFound
from blog_backend.managers.logging_manager import get_logger
from blog_backend.models.blog_models import CommentDocument, PostDocument

logger = get_logger(prefix="[ContentStore]")

POST_ID_ALPHABET = string.digits + string.ascii_uppercase + string.ascii_lowercase
POST_ID_LENGTH = 7
POST_ID_ATTEMPTS = 3


def generate_post_id(length: int = POST_ID_LENGTH) -> str:
    return "".join(secrets.choice(POST_ID_ALPHABET) for _ in range(length))


class ContentStore:
    """Posts and comments with a one-to-many relation."""

    def __init__(self, db_manager: DatabaseManager, settings: Settings):
        self._db = db_manager
        self.posts_collection = settings.POSTS_COLLECTION
        self.reviews_collection = settings.REVIEWS_COLLECTION
        self.favorites_collection = settings.FAVORITES_COLLECTION

    def _posts(self):
        return self._db.get_collection(self.posts_collection)

    def _reviews(self):
        return self._db.get_collection(self.reviews_collection)

    def _favorites(self):
        return self._db.get_collection(self.favorites_collection)

    async def list_all(self) -> List[Dict[str, Any]]:
        """Every post, each with its `comments` resolved in stored order."""
        posts = await self._posts().find({}).to_list(length=None)

        comment_ids = [comment_id for post in posts for comment_id in post.get("comments") or []]
        comments_by_id: Dict[Any, Dict[str, Any]] = {}
        if comment_ids:
            comments = await self._reviews().find({"_id": {"$in": comment_ids}}).to_list(length=None)
            comments_by_id = {comment["_id"]: comment for comment in comments}

        for post in posts:
            # References to comments that no longer exist are skipped
            post["comments"] = [
                comments_by_id[comment_id]
                for comment_id in post.get("comments") or []
                if comment_id in comments_by_id
            ]
        return posts

    async def get(self, post_id: str) -> Tuple[Dict[str, Any], List[Dict[str, Any]]]:
        """
        Fetch one post and the comments that reference it.

        Raises:
            NotFound: If no post has this `postId`.
        """
        post = await self._posts().find_one({"postId": post_id})
        if post is None:
            raise NotFound("Blog not found")

        comments = await self._reviews().find({"postId": post_id}).to_list(length=None)
        return post, comments

    async def create(self, title: str, content: str, author_email: str) -> Dict[str, Any]:
        """Insert a new post under a freshly generated `postId`."""
        posts = self._posts()
        for attempt in range(POST_ID_ATTEMPTS):
            post = PostDocument(postId=generate_post_id(), title=title, content=content, email=author_email)
            doc = post.model_dump()
            try:
                result = await posts.insert_one(doc)
            except DuplicateKeyError:
                logger.warning("postId collision on %s (attempt %d/%d)", post.postId, attempt + 1, POST_ID_ATTEMPTS)
                if attempt == POST_ID_ATTEMPTS - 1:
                    raise
                continue

            doc["_id"] = result.inserted_id
            logger.info("Created post %s by %s", post.postId, author_email)
            return doc

    async def delete(self, post_id: str) -> None:
        """Remove the post with every comment and favorite whose `postId` matches. Idempotent."""
        posts = self._posts()
        reviews = self._reviews()
        favorites = self._favorites()

        async with self._db.transaction() as session:
            post_result = await posts.delete_one({"postId": post_id}, session=session)
            review_result = await reviews.delete_many({"postId": post_id}, session=session)
            favorite_result = await favorites.delete_many({"postId": post_id}, session=session)

        logger.info(
            "Deleted post %s (%d post, %d comments, %d favorites)",
            post_id,
            post_result.deleted_count,
            review_result.deleted_count,
            favorite_result.deleted_count,
        )

    async def add_comment(self, post_id: str, author_email: str, text: str) -> Dict[str, Any]:
        """
        Create a comment and append its `_id` to the parent post.

        Raises:
            NotFound: If the parent post does not exist.
        """
        posts = self._posts()
        reviews = self._reviews()

        if await posts.find_one({"postId": post_id}, {"_id": 1}) is None:
            raise NotFound("Post not found")

        doc = CommentDocument(postId=post_id, email=author_email, text=text).model_dump()

        async with self._db.transaction() as session:
            result = await reviews.insert_one(doc, session=session)
            try:
                await posts.update_one(
                    {"postId": post_id},
                    {"$push": {"comments": result.inserted_id}},
                    session=session,
                )
            except PyMongoError:
                if session is None:
                    logger.warning("Rolling back comment %s after failed parent update", result.inserted_id)
                    await reviews.delete_one({"_id": result.inserted_id})
                raise

        doc["_id"] = result.inserted_id
        logger.info("Added comment %s to post %s", result.inserted_id, post_id)
        return doc
