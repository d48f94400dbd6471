from motor.motor_asyncio import AsyncIOMotorClient
from pymongo.errors import DuplicateKeyError, PyMongoError
from dotenv import load_dotenv
import os
import logging
from pathlib import Path
from contextlib import asynccontextmanager, contextmanager

from utils.errors import ValidationError, UpstreamError

ROOT_DIR = Path(__file__).parent
load_dotenv(ROOT_DIR / '.env')

logger = logging.getLogger(__name__)

class Database:
    client: AsyncIOMotorClient = None
    db = None

    async def connect(self):
        try:
            mongo_url = os.environ['MONGO_URL']
            self.client = AsyncIOMotorClient(mongo_url)
            self.db = self.client[os.environ['DB_NAME']]
            # Verify connection
            await self.db.command("ping")
            logger.info(f"Connected to MongoDB: {os.environ['DB_NAME']}")

            await self._create_indexes()
        except Exception as e:
            logger.error(f"Failed to connect to MongoDB: {e}")
            raise

    async def close(self):
        if self.client:
            self.client.close()
            logger.info("MongoDB connection closed")

    def get_db(self):
        return self.db

    async def _create_indexes(self):
        """Create MongoDB indexes backing the list filters and unique handles."""
        try:
            # Admin identities - login looks up by username or email
            await self.db.admins.create_index("username", unique=True)
            await self.db.admins.create_index("email", unique=True)

            # News - slug lookups and the public published listing
            try:
                await self.db.news.create_index("slug", unique=True, sparse=True)
            except Exception:
                pass  # Index may already exist with different options
            await self.db.news.create_index([("status", 1), ("publishDate", -1)])
            await self.db.news.create_index([("category", 1), ("createdAt", -1)])

            await self.db.gallery.create_index([("category", 1), ("displayOrder", 1)])
            await self.db.gallery.create_index("tags")

            await self.db.faculty.create_index([("department", 1), ("status", 1)])
            await self.db.faculty.create_index("displayOrder")

            await self.db.admissions.create_index([("isPublished", 1), ("isFeatured", -1), ("createdAt", -1)])
            await self.db.admissions.create_index([("program", 1), ("academicYear", 1)])

            await self.db.examinations.create_index([("isPublished", 1), ("isFeatured", -1), ("examDate", 1)])
            await self.db.examinations.create_index([("type", 1), ("class", 1)])

            await self.db.activities.create_index([("isPublished", 1), ("isFeatured", -1), ("createdAt", -1)])
            await self.db.activities.create_index([("type", 1), ("category", 1)])

            await self.db.videos.create_index([("category", 1), ("isPublished", 1)])
            await self.db.videos.create_index([("isFeatured", -1), ("isPublished", 1)])
            await self.db.videos.create_index([("uploadDate", -1)])

            await self.db.roll_numbers.create_index([("program", 1), ("isActive", 1)])
            await self.db.roll_numbers.create_index([("academicYear", 1), ("isActive", 1)])

            await self.db.contacts.create_index([("status", 1), ("createdAt", -1)])
            await self.db.contacts.create_index("category")
            await self.db.contacts.create_index("priority")

            await self.db.pages.create_index("pageId", unique=True)
            logger.info("MongoDB indexes created/verified")
        except Exception as e:
            # Indexes may already exist, log but don't fail
            logger.warning(f"Index creation note: {e}")

# Global database instance
database = Database()


@contextmanager
def db_errors(action: str = "Database operation"):
    """Translate driver exceptions raised inside the block into the error taxonomy."""
    try:
        yield
    except DuplicateKeyError as e:
        key = ", ".join((getattr(e, "details", None) or {}).get("keyValue", {}).keys())
        raise ValidationError(
            "Duplicate value",
            errors=[{"field": key or None, "message": "A record with this value already exists"}],
        )
    except PyMongoError as e:
        logger.error(f"{action} failed: {e}")
        raise UpstreamError(detail=str(e))


@asynccontextmanager
async def get_db_context():
    """Context manager for standalone scripts to access the database.

    Usage in scripts:
        async with get_db_context() as db:
            await db.admins.find_one(...)
    """
    client = None
    try:
        mongo_url = os.environ['MONGO_URL']
        db_name = os.environ['DB_NAME']
        client = AsyncIOMotorClient(mongo_url)
        db = client[db_name]
        # Verify connection
        await db.command("ping")
        logger.info(f"Script connected to MongoDB: {db_name}")
        yield db
    finally:
        if client:
            client.close()
            logger.info("Script MongoDB connection closed")
