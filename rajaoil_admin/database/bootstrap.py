from pymongo import ASCENDING, DESCENDING
import logging

from rajaoil_admin.config import (
    CONFIG_DOCUMENT_ID,
    CONTACT_FORMS_COLLECTION,
    ORDERS_COLLECTION,
    ROOT_COLLECTION,
)

logger = logging.getLogger(__name__)

CONFIG_LISTS = ("brands", "category", "images", "homepageSlider")


def ensure_store(db) -> dict:
    """
    Prepares an empty or existing database:
    - the configuration document with its four lists (existing values are kept)
    - the indexes used by the order and contact form listings

    Returns:
        A summary of what was created
    """
    root = db[ROOT_COLLECTION]
    defaults = {field: [] for field in CONFIG_LISTS}
    result = root.update_one({"_id": CONFIG_DOCUMENT_ID}, {"$setOnInsert": defaults}, upsert=True)
    created_config = result.upserted_id is not None

    # lists missing from an older configuration document
    config = root.find_one({"_id": CONFIG_DOCUMENT_ID}) or {}
    missing = {field: [] for field in CONFIG_LISTS if field not in config}
    if missing:
        root.update_one({"_id": CONFIG_DOCUMENT_ID}, {"$set": missing})

    indexes = [
        root.create_index([("docType", ASCENDING)]),
        db[ORDERS_COLLECTION].create_index([("createdAt", DESCENDING)]),
        db[ORDERS_COLLECTION].create_index([("status", ASCENDING), ("createdAt", DESCENDING)]),
        db[CONTACT_FORMS_COLLECTION].create_index([("status", ASCENDING)]),
    ]
    logger.info(f"✅ Store ready (config created: {created_config}, indexes: {len(indexes)})")
    return {"config_created": created_config, "lists_added": sorted(missing), "indexes": indexes}
