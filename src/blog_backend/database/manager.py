"""
# MongoDB Database Manager

This module provides the `DatabaseManager`, which owns the **Motor** client used by every
store in the Blog Backend. It handles the connection lifecycle, index creation, health
checks and multi-document transactions.

## Lifecycle

1. **Instantiation**: `DatabaseManager(settings)` performs no I/O.
2. **Connection**: `connect()` builds the client, pings the server and detects
   transaction support. It retries with exponential backoff (1s, 2s).
3. **Indexes**: `create_indexes()` ensures the unique and lookup indexes.
4. **Operations**: stores call `get_collection()` per operation.
5. **Shutdown**: `disconnect()` closes the pool.

The application factory drives steps 2, 3 and 5 from the FastAPI lifespan.

## Transactions

`transaction()` is an async context manager yielding a client session inside a started
transaction when the deployment supports one (replica set or mongos), and `None` on a
standalone server. Callers pass the yielded value as `session=` to each operation, so the
same code path works in both cases:

```python
async with db_manager.transaction() as session:
    await posts.delete_one({"postId": post_id}, session=session)
    await reviews.delete_many({"postId": post_id}, session=session)
```
"""

import asyncio
from contextlib import asynccontextmanager
import time
from typing import Any, AsyncIterator, Optional, Sequence, Tuple, Union

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorClientSession, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import ASCENDING
from pymongo.errors import ConnectionFailure, OperationFailure, ServerSelectionTimeoutError

from blog_backend.config import Settings
from blog_backend.managers.logging_manager import get_logger

db_logger = get_logger(prefix="[DATABASE]")
perf_logger = get_logger(prefix="[DB_PERFORMANCE]")
health_logger = get_logger(prefix="[DB_HEALTH]")

IndexKeys = Union[str, Sequence[Tuple[str, int]]]

# Server error codes for an index that already exists with different options/keys
INDEX_CONFLICT_CODES = (85, 86)


class DatabaseManager:
    """
    Manages the MongoDB connection, collections and transactions.

    Attributes:
        settings (`Settings`): Configuration the manager was built with.
        client (`Optional[AsyncIOMotorClient]`): The Motor client, `None` until `connect()`.
        database (`Optional[AsyncIOMotorDatabase]`): The selected database, `None` until `connect()`.
        transactions_supported (`Optional[bool]`): Detected during `connect()`.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self.client: Optional[AsyncIOMotorClient] = None
        self.database: Optional[AsyncIOMotorDatabase] = None
        self._connection_retries = 3
        # True when connected to a replica set or mongos
        self.transactions_supported: Optional[bool] = None

    @property
    def is_connected(self) -> bool:
        return self.client is not None and self.database is not None

    async def connect(self):
        """
        Establish the connection to MongoDB with exponential backoff.

        Calling it while already connected is a no-op.

        Raises:
            `ServerSelectionTimeoutError`: If MongoDB is unreachable after all attempts.
            `ConnectionFailure`: If the connection is refused on the last attempt.
        """
        if self.is_connected:
            db_logger.debug("connect() called on an already connected manager")
            return

        settings = self.settings
        start_time = time.time()
        db_logger.info("Starting MongoDB connection process")

        for attempt in range(self._connection_retries):
            attempt_start = time.time()
            try:
                db_logger.info("Connection attempt %d/%d to MongoDB", attempt + 1, self._connection_retries)
                db_logger.info(
                    "MongoDB connection config - Database: %s, MaxPool: %d, MinPool: %d, ServerTimeout: %dms, ConnTimeout: %dms",
                    settings.MONGODB_DATABASE,
                    settings.MONGODB_MAX_POOL_SIZE,
                    settings.MONGODB_MIN_POOL_SIZE,
                    settings.MONGODB_SERVER_SELECTION_TIMEOUT,
                    settings.MONGODB_CONNECTION_TIMEOUT,
                )

                self.client = AsyncIOMotorClient(
                    settings.MONGODB_URL,
                    serverSelectionTimeoutMS=settings.MONGODB_SERVER_SELECTION_TIMEOUT,
                    connectTimeoutMS=settings.MONGODB_CONNECTION_TIMEOUT,
                    maxPoolSize=settings.MONGODB_MAX_POOL_SIZE,
                    minPoolSize=settings.MONGODB_MIN_POOL_SIZE,
                )
                self.database = self.client[settings.MONGODB_DATABASE]

                ping_start = time.time()
                await self.client.admin.command("ping")
                ping_duration = time.time() - ping_start

                self.transactions_supported = await self._detect_transaction_support()

                total_duration = time.time() - start_time
                perf_logger.info(
                    "MongoDB connection established successfully in %.3fs (ping: %.3fs)", total_duration, ping_duration
                )
                db_logger.info(
                    "Successfully connected to MongoDB database: %s (transactions supported: %s)",
                    settings.MONGODB_DATABASE,
                    self.transactions_supported,
                )
                return

            except (ServerSelectionTimeoutError, ConnectionFailure) as e:
                attempt_duration = time.time() - attempt_start
                perf_logger.warning("Connection attempt %d failed after %.3fs", attempt + 1, attempt_duration)
                db_logger.warning(
                    "Failed to connect to MongoDB (attempt %d/%d): %s", attempt + 1, self._connection_retries, e
                )
                self._reset_client()
                if attempt == self._connection_retries - 1:
                    db_logger.error("All connection attempts failed after %.3fs", time.time() - start_time)
                    raise

                backoff_time = 2**attempt
                db_logger.info("Waiting %.1fs before retry (exponential backoff)", backoff_time)
                await asyncio.sleep(backoff_time)

    async def _detect_transaction_support(self) -> bool:
        try:
            hello = await self.client.admin.command({"hello": 1})
        except OperationFailure:
            # Servers older than 4.4.2 only know isMaster
            hello = await self.client.admin.command({"isMaster": 1})
        except ConnectionFailure as e:
            db_logger.warning("Transaction support detection failed, assuming standalone: %s", e)
            return False
        return bool(hello.get("setName") or hello.get("msg") == "isdbgrid")

    def _reset_client(self):
        if self.client is not None:
            self.client.close()
        self.client = None
        self.database = None

    async def disconnect(self):
        """Close the Motor client and release every pooled connection."""
        start_time = time.time()
        if self.client is None:
            db_logger.warning("Disconnect called but no active MongoDB connection found")
            return

        self.client.close()
        self.client = None
        self.database = None
        perf_logger.info("MongoDB disconnection completed in %.3fs", time.time() - start_time)
        db_logger.info("Successfully disconnected from MongoDB")

    async def health_check(self) -> bool:
        """
        Ping the server.

        Returns:
            `bool`: `True` if the database answered, `False` otherwise. Never raises.
        """
        if self.client is None:
            health_logger.warning("Health check failed: No database client available")
            return False

        start_time = time.time()
        try:
            await self.client.admin.command("ping")
        except (ServerSelectionTimeoutError, ConnectionFailure) as e:
            health_logger.error("Database health check failed: %s", e)
            return False
        except Exception as e:
            health_logger.error("Unexpected error during health check: %s", e)
            return False

        perf_logger.debug("Database health check completed in %.3fs", time.time() - start_time)
        return True

    def get_collection(self, collection_name: str) -> AsyncIOMotorCollection:
        """
        Retrieve a collection from the connected database.

        Raises:
            `ConnectionError`: If `connect()` has not been called.
        """
        if self.database is None:
            db_logger.error("Attempted to get collection '%s' without database connection", collection_name)
            raise ConnectionError("Database not connected. Call connect() first.")
        return self.database[collection_name]

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[Optional[AsyncIOMotorClientSession]]:
        """
        Run a block inside a multi-document transaction when the server supports it.

        Yields the session to pass as `session=`, or `None` on a standalone server.
        The transaction commits when the block exits normally and aborts on error.
        """
        if not self.transactions_supported:
            yield None
            return

        async with await self.client.start_session() as session:
            async with session.start_transaction():
                yield session

    async def create_indexes(self):
        """
        Ensure the indexes every store relies on.

        * `blog_users.email` unique: one account per email.
        * `blog_posts.postId` unique: generated ids never silently collide.
        * `blog_reviews.postId`: comment lookup and cascade delete.
        * `blog_favorites (userEmail, postId)` unique: one favorite per pair.
        """
        settings = self.settings
        start_time = time.time()
        db_logger.info("Creating/verifying database indexes")

        await self._create_index(settings.USERS_COLLECTION, "email", unique=True, name="email_unique")
        await self._create_index(settings.POSTS_COLLECTION, "postId", unique=True, name="postId_unique")
        await self._create_index(settings.REVIEWS_COLLECTION, "postId", name="postId_lookup")
        await self._create_index(
            settings.FAVORITES_COLLECTION,
            [("userEmail", ASCENDING), ("postId", ASCENDING)],
            unique=True,
            name="user_post_unique",
        )
        await self._create_index(settings.FAVORITES_COLLECTION, "userEmail", name="userEmail_lookup")

        perf_logger.info("Database indexes ready in %.3fs", time.time() - start_time)

    async def _create_index(self, collection_name: str, keys: IndexKeys, **kwargs: Any):
        collection = self.get_collection(collection_name)
        try:
            await collection.create_index(keys, **kwargs)
            db_logger.debug("Index %s ensured on %s", kwargs.get("name", keys), collection_name)
        except OperationFailure as e:
            if e.code in INDEX_CONFLICT_CODES:
                db_logger.warning(
                    "Index %s on %s exists with different options, keeping existing: %s",
                    kwargs.get("name", keys),
                    collection_name,
                    e,
                )
                return
            raise
