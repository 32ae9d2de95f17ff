"""Document store connectivity layer."""

from __future__ import annotations

import logging

from fastapi import Request
from motor.motor_asyncio import (
    AsyncIOMotorClient,
    AsyncIOMotorCollection,
    AsyncIOMotorDatabase,
)
from pymongo import ASCENDING, DESCENDING

from hundred_days.config import Settings

logger = logging.getLogger(__name__)

BLOG_POSTS = "blogposts"
CHALLENGES = "challenges"

INDEXES: dict[str, list[tuple[list[tuple[str, int]], dict]]] = {
    BLOG_POSTS: [
        ([("id", ASCENDING)], {"unique": True, "name": "id_unique"}),
        ([("createdAt", DESCENDING)], {"name": "createdAt_desc"}),
        ([("author", ASCENDING)], {"name": "author_asc"}),
    ],
    CHALLENGES: [
        ([("id", ASCENDING)], {"unique": True, "name": "id_unique"}),
        ([("author", ASCENDING)], {"name": "author_asc"}),
        ([("isActive", ASCENDING)], {"name": "isActive_asc"}),
        ([("createdAt", DESCENDING)], {"name": "createdAt_desc"}),
        ([("currentDay", ASCENDING)], {"name": "currentDay_asc"}),
    ],
}


class DocumentStore:
    """Owns the client handle and exposes the two collections."""

    def __init__(self, client: AsyncIOMotorClient, database: str) -> None:
        self.client = client
        self.database_name = database
        self.db: AsyncIOMotorDatabase = client[database]

    @classmethod
    def from_settings(cls, config: Settings) -> DocumentStore:
        if not config.mongodb_uri:
            raise RuntimeError("MONGODB_URI is not defined in environment variables")
        client = AsyncIOMotorClient(
            config.mongodb_uri,
            serverSelectionTimeoutMS=config.mongodb_timeout_ms,
            tz_aware=True,
        )
        return cls(client, config.mongodb_database)

    @property
    def blog_posts(self) -> AsyncIOMotorCollection:
        return self.db[BLOG_POSTS]

    @property
    def challenges(self) -> AsyncIOMotorCollection:
        return self.db[CHALLENGES]

    async def connect(self) -> None:
        """Round-trip to the server by declaring indexes; raises if unreachable."""
        logger.info("Connecting to document store database=%s", self.database_name)
        await self.ensure_indexes()
        logger.info("Document store ready")

    async def ensure_indexes(self) -> None:
        for collection_name, indexes in INDEXES.items():
            collection = self.db[collection_name]
            for keys, options in indexes:
                await collection.create_index(keys, **options)

    def close(self) -> None:
        logger.info("Closing document store connection")
        self.client.close()


def get_store(request: Request) -> DocumentStore:
    """Dependency returning the store created during application startup."""
    return request.app.state.store
