from pymongo import MongoClient
from pymongo.database import Database
import logging

from rajaoil_admin.config import MONGO_URI, MONGO_DB, MEDIA_BUCKET, MEDIA_BASE_URL, MEDIA_PREFIX

logger = logging.getLogger(__name__)

_client = None
_storage = None


def get_client() -> MongoClient:
    """Returns the shared MongoClient, created on first use."""
    global _client
    if _client is None:
        uri = MONGO_URI
        if not uri:
            logger.warning("⚠️ MONGO_URI environment variable not set, falling back to localhost")
            uri = "mongodb://localhost:27017/"
        _client = MongoClient(uri, serverSelectionTimeoutMS=5000)
        logger.info(f"✅ MongoDB client created for database '{MONGO_DB}'")
    return _client


def get_database() -> Database:
    """Returns the MongoDB database instance"""
    return get_client()[MONGO_DB]


def get_storage():
    """Returns the GridFS-backed media storage bound to the database."""
    global _storage
    if _storage is None:
        from rajaoil_admin.storage import GridFSMediaStorage

        _storage = GridFSMediaStorage(
            get_database(),
            bucket_name=MEDIA_BUCKET,
            base_url=MEDIA_BASE_URL,
            prefix=MEDIA_PREFIX,
        )
    return _storage


def close_client():
    global _client, _storage
    if _client is not None:
        _client.close()
        logger.info("MongoDB client closed")
    _client = None
    _storage = None
