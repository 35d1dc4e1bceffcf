"""MongoDB database connection using Motor (async driver)."""

import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

from surveydesk.core.config import settings

logger = logging.getLogger(__name__)

SURVEYS_COLLECTION = "surveys"
STAFF_COLLECTION = "staff_accounts"

# Global MongoDB client and database instances
mongodb_client: AsyncIOMotorClient | None = None
mongodb_db: AsyncIOMotorDatabase | None = None


async def connect_mongodb() -> None:
    """Connect to MongoDB."""
    global mongodb_client, mongodb_db

    mongodb_client = AsyncIOMotorClient(
        settings.mongodb_url,
        tz_aware=True,  # timestamps come back as UTC-aware datetimes
        maxPoolSize=20,
        minPoolSize=2,
        maxIdleTimeMS=30000,  # Close idle connections after 30s
        connectTimeoutMS=5000,
        serverSelectionTimeoutMS=5000,
    )
    mongodb_db = mongodb_client[settings.mongodb_database]

    # Test connection
    try:
        await mongodb_client.admin.command("ping")
        logger.info(f"Connected to MongoDB: {settings.mongodb_database}")
    except Exception as e:
        logger.error(f"Failed to connect to MongoDB: {e}")
        raise


async def close_mongodb() -> None:
    """Close MongoDB connection."""
    global mongodb_client

    if mongodb_client:
        mongodb_client.close()
        logger.info("MongoDB connection closed")


def get_mongodb() -> AsyncIOMotorDatabase:
    """
    Get MongoDB database instance.

    Usage:
        @app.get("/")
        async def endpoint(db: AsyncIOMotorDatabase = Depends(get_mongodb)):
            collection = db["surveys"]
            ...
    """
    if mongodb_db is None:
        raise RuntimeError("MongoDB is not connected")
    return mongodb_db


async def ensure_indexes() -> None:
    """
    Create indexes for the survey and staff collections.

    The dashboard always reads surveys newest-first, optionally scoped to one store.
    """
    db = get_mongodb()

    surveys_col = db[SURVEYS_COLLECTION]
    await surveys_col.create_index([("timestamp", DESCENDING)])
    await surveys_col.create_index([("store", ASCENDING), ("timestamp", DESCENDING)])

    staff_col = db[STAFF_COLLECTION]
    await staff_col.create_index("email", unique=True)

    logger.info("Created survey and staff indexes")
