from motor.motor_asyncio import AsyncIOMotorClient
from dotenv import load_dotenv
import asyncio
import os
import logging
from pathlib import Path

ROOT_DIR = Path(__file__).parent
load_dotenv(ROOT_DIR / '.env')

logger = logging.getLogger(__name__)

# Development fallback only. Deployments must set MONGODB_URI.
DEFAULT_MONGODB_URI = "mongodb://localhost:27017/invitations"
DEFAULT_DB_NAME = "invitations"
DEFAULT_COLLECTION = "invitationLetter"


def get_mongodb_uri() -> str:
    uri = os.environ.get("MONGODB_URI", "").strip()
    if not uri:
        logger.warning("MONGODB_URI is not set, falling back to %s", DEFAULT_MONGODB_URI)
        return DEFAULT_MONGODB_URI
    return uri


def get_collection_name() -> str:
    return os.environ.get("INVITATION_COLLECTION", "").strip() or DEFAULT_COLLECTION


class Database:
    """Lazily connected, process-wide MongoDB handle.

    connect() is single-flight: concurrent first callers await the same
    in-flight task, so at most one client is opened. A failed attempt is
    forgotten and the next call starts over.
    """

    def __init__(self):
        self.client: AsyncIOMotorClient = None
        self.db = None
        self._connecting = None

    async def connect(self):
        if self.db is not None:
            return self.db

        task = self._connecting
        if task is None:
            task = asyncio.ensure_future(self._open())
            self._connecting = task

        try:
            db = await asyncio.shield(task)
        except Exception:
            if self._connecting is task:
                self._connecting = None
            raise
        return db

    async def _open(self):
        mongo_url = get_mongodb_uri()
        client = AsyncIOMotorClient(mongo_url)
        try:
            db_name = os.environ.get("DB_NAME", "").strip()
            if db_name:
                db = client[db_name]
            else:
                db = client.get_default_database(default=DEFAULT_DB_NAME)
            # Verify connection
            await db.command("ping")
            logger.info(f"Connected to MongoDB: {db.name}")
        except Exception as e:
            logger.error(f"Failed to connect to MongoDB: {e}")
            client.close()
            raise
        except asyncio.CancelledError:
            client.close()
            raise

        self.client = client
        self.db = db
        await self._create_indexes()
        return db

    async def close(self):
        # A connect still in flight must not publish its client after shutdown
        task = self._connecting
        self._connecting = None
        if task is not None and not task.done():
            task.cancel()
            await asyncio.wait({task})
        if self.client:
            self.client.close()
            logger.info("MongoDB connection closed")
        self.client = None
        self.db = None

    def get_db(self):
        return self.db

    def get_collection(self):
        if self.db is None:
            raise RuntimeError("Database is not connected")
        return self.db[get_collection_name()]

    async def ping(self) -> bool:
        try:
            db = await self.connect()
            await db.command("ping")
            return True
        except Exception as e:
            logger.warning(f"MongoDB ping failed: {e}")
            return False

    async def _create_indexes(self):
        """Lookups filter on phoneNumber; the index is deliberately not unique."""
        try:
            await self.db[get_collection_name()].create_index("phoneNumber")
            logger.info("MongoDB indexes created/verified")
        except Exception as e:
            # Read-only deployments may lack createIndex rights, log but don't fail
            logger.warning(f"Index creation note: {e}")


# Global database instance
database = Database()
