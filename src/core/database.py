"""
Database utility abstractions for MongoDB operations
"""

import logging
from typing import Optional, Dict, Any, List
from functools import lru_cache

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase, AsyncIOMotorCollection

from .config import get_database_config, DatabaseConfig

logger = logging.getLogger(__name__)


class DatabaseManager:
    """
    Centralized database connection manager.
    Owns the Mongo client and the patient/trial collection handles.
    """

    def __init__(self, config: Optional[DatabaseConfig] = None):
        self.config = config or get_database_config()
        self._client: Optional[AsyncIOMotorClient] = None
        self._database: Optional[AsyncIOMotorDatabase] = None
        self._collections: Dict[str, AsyncIOMotorCollection] = {}
        self._initialized = False

    async def initialize(self) -> None:
        """Initialize database connection and collections"""
        if self._initialized:
            return

        logger.info(f"Initializing database connection to {self.config.uri}")

        try:
            self._client = AsyncIOMotorClient(
                self.config.uri,
                maxPoolSize=self.config.max_pool_size,
                minPoolSize=self.config.min_pool_size,
                maxIdleTimeMS=self.config.max_idle_time_ms,
                serverSelectionTimeoutMS=self.config.server_selection_timeout_ms
            )

            # Test connection
            await self._client.admin.command('ping')
            logger.info("Database connection established successfully")

            self._database = self._client[self.config.name]

            await self._setup_collections()

            self._initialized = True
            logger.info("Database manager initialized successfully")

        except Exception as e:
            logger.error(f"Failed to initialize database: {e}")
            raise

    async def _setup_collections(self) -> None:
        """Setup database collections with proper indexes"""
        self._collections = {
            "patients": self._database[self.config.patients_collection],
            "trials": self._database[self.config.trials_collection],
        }

        await self._create_indexes()

    async def _create_indexes(self) -> None:
        """Create the lookup indexes used by the repositories"""
        try:
            patients = self._collections["patients"]
            await patients.create_index([("id", 1)], unique=True)

            trials = self._collections["trials"]
            await trials.create_index([("id", 1)], unique=True)
            await trials.create_index([("status", 1), ("created_at", 1)])

            logger.info("Database indexes created successfully")

        except Exception as e:
            logger.error(f"Failed to create database indexes: {e}")
            raise

    async def cleanup(self) -> None:
        """Cleanup database connections"""
        if self._client:
            self._client.close()
            self._initialized = False
            logger.info("Database connections closed")

    def get_collection(self, name: str) -> AsyncIOMotorCollection:
        """Get a collection by name"""
        if not self._initialized:
            raise RuntimeError("Database manager not initialized. Call initialize() first.")

        return self._collections[name]

    async def health_check(self) -> Dict[str, Any]:
        """Perform database health check"""
        try:
            if not self._initialized:
                return {"status": "error", "message": "Database not initialized"}

            await self._client.admin.command('ping')

            return {
                "status": "healthy",
                "database": self.config.name,
            }

        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return {
                "status": "unhealthy",
                "error": str(e)
            }


class BaseRepository:
    """
    Base repository class providing common read operations.
    All repository classes should inherit from this.
    """

    def __init__(self, db_manager: DatabaseManager, collection_name: str):
        self.db_manager = db_manager
        self.collection_name = collection_name

    @property
    def collection(self) -> AsyncIOMotorCollection:
        """Get the collection for this repository"""
        return self.db_manager.get_collection(self.collection_name)

    async def find_one(
        self,
        filter_dict: Dict[str, Any],
        projection: Optional[Dict[str, Any]] = None
    ) -> Optional[Dict[str, Any]]:
        """Find a single document"""
        try:
            return await self.collection.find_one(filter_dict, projection)
        except Exception as e:
            logger.error(f"Error in find_one for {self.collection_name}: {e}")
            raise

    async def find_many(
        self,
        filter_dict: Dict[str, Any],
        projection: Optional[Dict[str, Any]] = None,
        sort: Optional[List[tuple]] = None
    ) -> List[Dict[str, Any]]:
        """Find multiple documents"""
        try:
            cursor = self.collection.find(filter_dict, projection)

            if sort:
                cursor = cursor.sort(sort)

            return await cursor.to_list(length=None)
        except Exception as e:
            logger.error(f"Error in find_many for {self.collection_name}: {e}")
            raise


@lru_cache(maxsize=1)
def get_database_manager() -> DatabaseManager:
    """
    Get the singleton database manager instance.
    Uses LRU cache to ensure the same instance is returned.
    """
    return DatabaseManager()
