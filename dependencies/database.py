from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from fastapi import Depends
from typing import Annotated, Optional
from core.config import MONGODB_URI, DATABASE_NAME
import logging

logger = logging.getLogger(__name__)

# Initialize the client
client: Optional[AsyncIOMotorClient] = None

async def get_mongo_client() -> AsyncIOMotorClient:
    """Get MongoDB client instance."""
    global client
    if client is None:
        try:
            if not MONGODB_URI:
                raise ValueError("MONGODB_URI is not set in environment variables")

            # Create a new async client
            client = AsyncIOMotorClient(MONGODB_URI)
            logger.info("Successfully created async MongoDB client")
            return client

        except Exception as e:
            logger.error(f"Failed to create MongoDB client: {e}")
            raise

    return client

async def close_mongo_connection() -> None:
    global client
    if client is not None:
        client.close()
        client = None
        logger.info("Closed MongoDB client")

async def get_database() -> AsyncIOMotorDatabase:
    """Get database instance with connection test."""
    try:
        client = await get_mongo_client()
        # Test the connection
        await client.admin.command('ping')
        db = client[DATABASE_NAME]
        return db
    except Exception as e:
        logger.error(f"Failed to connect to MongoDB: {e}")
        raise

DatabaseDependency = Annotated[AsyncIOMotorDatabase, Depends(get_database)]
