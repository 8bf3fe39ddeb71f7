from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo.errors import ConfigurationError as PyMongoConfigurationError
from pymongo.errors import PyMongoError
from pydantic_settings import BaseSettings, SettingsConfigDict

from docrepo.platform.logging import get_logger

from .base import StorageAdapter
from .exceptions import ConfigurationError, StoreConnectivityError

logger = get_logger(__name__)


class MongoConfig(BaseSettings):
    """Configuration for the MongoDB store."""
    MONGO_CONNECTION_STRING: str = "mongodb://localhost:27017"
    MONGO_DATABASE: str = "docrepo"
    MONGO_SERVER_SELECTION_TIMEOUT_MS: int = 5000
    MONGO_MAX_POOL_SIZE: int = 100

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


class MongoAdapter(StorageAdapter):
    """
    Motor-based MongoDB adapter.

    Owns the client; repositories only ever see collection handles.
    """

    def __init__(self, config: MongoConfig):
        self.config = config
        self._client: Optional[AsyncIOMotorClient] = None

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    def connect(self) -> None:
        if self._client:
            return

        if not self.config.MONGO_DATABASE:
            raise ConfigurationError("MONGO_DATABASE must not be empty", operation="connect")

        logger.info("connecting_to_mongo", database=self.config.MONGO_DATABASE)
        try:
            # No I/O happens here; the driver connects on first operation.
            self._client = AsyncIOMotorClient(
                self.config.MONGO_CONNECTION_STRING,
                serverSelectionTimeoutMS=self.config.MONGO_SERVER_SELECTION_TIMEOUT_MS,
                maxPoolSize=self.config.MONGO_MAX_POOL_SIZE,
            )
        except PyMongoConfigurationError as e:
            logger.error("mongo_configuration_invalid", error=str(e))
            raise ConfigurationError(f"Invalid Mongo configuration: {e}", operation="connect") from e

    def close(self) -> None:
        if self._client:
            self._client.close()
            self._client = None
            logger.info("mongo_connection_closed")

    async def health_check(self) -> bool:
        if not self._client:
            return False
        try:
            await self._client.admin.command("ping")
            return True
        except PyMongoError as e:
            logger.error("mongo_health_check_failed", error=str(e))
            return False

    def get_database(self) -> AsyncIOMotorDatabase:
        if not self._client:
            raise StoreConnectivityError("Mongo is not connected. Call connect() first.", operation="get_database")
        return self._client[self.config.MONGO_DATABASE]

    def get_collection(self, name: str) -> AsyncIOMotorCollection:
        if not self._client:
            self.connect()
        return self.get_database()[name]
