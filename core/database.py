"""
MongoDB connection using Motor (async driver).
Includes detailed logging and comprehensive error handling.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from motor.motor_asyncio import (
    AsyncIOMotorClient,
    AsyncIOMotorClientSession,
    AsyncIOMotorCollection,
    AsyncIOMotorDatabase,
)
from pymongo import ASCENDING

from core.config import Settings, get_settings
from core.logger import logger

TASKS_COLLECTION = "tasks"
USERS_COLLECTION = "users"


@asynccontextmanager
async def no_transaction() -> AsyncIterator[None]:
    """Transaction stand-in for stores without multi-document transactions."""
    yield None


def mask_url(url: str) -> str:
    """Hide the password part of a MongoDB URL for logging."""
    if "@" not in url:
        return url
    credentials, host = url.rsplit("@", 1)
    if "://" in credentials:
        protocol, user_pass = credentials.split("://", 1)
        user = user_pass.split(":")[0]
        return f"{protocol}://{user}:****@{host}"
    return url


class MongoDB:
    """MongoDB connection manager with async support."""

    def __init__(self, settings: Optional[Settings] = None):
        """Initialize MongoDB connection manager."""
        self.settings = settings or get_settings()
        self.client: Optional[AsyncIOMotorClient] = None
        self.db: Optional[AsyncIOMotorDatabase] = None
        logger.debug("MongoDB connection manager initialized")

    async def connect(self) -> None:
        """
        Establish connection to MongoDB.

        Raises:
            Exception: If connection fails
        """
        url = self.settings.mongodb_connection_url
        try:
            logger.info(f"Connecting to MongoDB: {mask_url(url)}")
            logger.debug(f"Database name: {self.settings.mongodb_database}")

            self.client = AsyncIOMotorClient(
                url,
                maxPoolSize=self.settings.mongodb_max_pool_size,
                minPoolSize=self.settings.mongodb_min_pool_size,
                serverSelectionTimeoutMS=5000,
                connectTimeoutMS=10000,
                socketTimeoutMS=10000,
                tz_aware=True,
            )

            # Test connection with ping
            await self.client.admin.command("ping")

            self.db = self.client[self.settings.mongodb_database]

            logger.info(
                f"Connected to MongoDB database: {self.settings.mongodb_database}"
            )
            logger.debug(
                f"Connection pool: min={self.settings.mongodb_min_pool_size}, "
                f"max={self.settings.mongodb_max_pool_size}"
            )

        except Exception as e:
            logger.error(f"Failed to connect to MongoDB: {e}")
            logger.exception("MongoDB connection error details:")
            raise

    async def disconnect(self) -> None:
        """
        Close MongoDB connection.

        Safe to call even if not connected.
        """
        if self.client is None:
            logger.debug("MongoDB client not initialized, nothing to disconnect")
            return

        logger.info("Disconnecting from MongoDB...")
        self.client.close()
        self.client = None
        self.db = None
        logger.info("Disconnected from MongoDB")

    def get_collection(self, collection_name: str) -> AsyncIOMotorCollection:
        """
        Get a MongoDB collection.

        Raises:
            RuntimeError: If database is not connected
        """
        if self.db is None:
            error_msg = "Database not connected. Call connect() first."
            logger.error(error_msg)
            raise RuntimeError(error_msg)

        return self.db[collection_name]

    async def health_check(self) -> bool:
        """
        Check if MongoDB connection is healthy.

        Returns:
            True if connection is healthy, False otherwise
        """
        if self.client is None:
            logger.warning("MongoDB client not initialized")
            return False

        try:
            await self.client.admin.command("ping")
            logger.debug("MongoDB health check passed")
            return True
        except Exception as e:
            logger.error(f"MongoDB health check failed: {e}")
            return False

    async def create_indexes(self) -> None:
        """
        Create database indexes.

        The unique index on users.email is what turns duplicate emails into
        DuplicateKeyError, so a failure here is logged loudly.
        """
        try:
            logger.info("Creating MongoDB indexes...")

            users = self.get_collection(USERS_COLLECTION)
            await users.create_index([("email", ASCENDING)], unique=True)
            logger.debug("Created unique index on users.email")

            tasks = self.get_collection(TASKS_COLLECTION)
            await tasks.create_index("assignedUser")
            await tasks.create_index([("assignedUser", ASCENDING), ("completed", ASCENDING)])
            logger.debug("Created indexes on tasks.assignedUser, tasks.completed")

            logger.info("MongoDB indexes created successfully")

        except Exception as e:
            logger.error(f"Failed to create indexes: {e}")
            logger.exception("Index creation error details:")

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[Optional[AsyncIOMotorClientSession]]:
        """
        Run a block of writes in a multi-document transaction.

        Yields the session to pass to every collection call, or None when
        transactions are disabled (writes then run one after another).
        """
        if not self.settings.mongodb_use_transactions or self.client is None:
            yield None
            return

        async with await self.client.start_session() as session:
            async with session.start_transaction():
                logger.debug("Started MongoDB transaction")
                yield session
