import logging

from bson import ObjectId
from bson.errors import InvalidId
from fastapi import HTTPException
from pymongo import ASCENDING, MongoClient

from fitmentor.config import DB_NAME, MONGODB_URI

logger = logging.getLogger(__name__)

# Initialize database connection with error handling
try:
    if not MONGODB_URI:
        raise ValueError("MONGODB_URI environment variable not set")

    client = MongoClient(MONGODB_URI, serverSelectionTimeoutMS=5000)
    db = client[DB_NAME]

    # Test connection
    client.admin.command('ping')
    logger.info(f"Database connection successful: {DB_NAME}")
except Exception as e:
    logger.warning(f"Database connection failed: {e}")
    client = None
    db = None


def get_db():
    """Return the live database handle or fail the request with 500"""
    if db is None:
        raise HTTPException(status_code=500, detail="Database connection not available")
    return db


INDEXES = [
    ("users", [("email", ASCENDING)], {"unique": True, "name": "ux_user_email"}),
    ("workouts", [("category", ASCENDING), ("week", ASCENDING)], {"name": "idx_category_week"}),
    ("meals", [("category", ASCENDING), ("week", ASCENDING)], {"name": "idx_category_week"}),
    ("daily_workouts", [("category", ASCENDING), ("week_number", ASCENDING), ("day_number", ASCENDING)],
     {"name": "idx_category_week_day"}),
    ("daily_meals", [("category", ASCENDING), ("week_number", ASCENDING), ("day_number", ASCENDING)],
     {"name": "idx_category_week_day"}),
    ("progress", [("user_id", ASCENDING), ("week", ASCENDING)], {"unique": True, "name": "ux_user_week"}),
    ("workout_logs", [("user_id", ASCENDING), ("week", ASCENDING)], {"unique": True, "name": "ux_user_week"}),
    ("measurements", [("user_id", ASCENDING), ("created_at", ASCENDING)], {"name": "idx_user_created"}),
]


def ensure_indexes(database=None):
    """Create collection indexes (idempotent); individual failures are logged and skipped"""
    database = database if database is not None else db
    if database is None:
        logger.warning("Skipping index creation: no database connection")
        return
    for collection, keys, options in INDEXES:
        try:
            database[collection].create_index(keys, **options)
        except Exception as e:
            logger.warning(f"Could not create index {options.get('name')} on {collection}: {e}")


def parse_object_id(value: str, what: str = "ID") -> ObjectId:
    """Convert a path/string id to ObjectId, raising 400 on malformed input"""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise HTTPException(status_code=400, detail=f"Invalid {what} format: {value}")


def document_out(doc: dict) -> dict:
    """Expose a stored document with a string `id` in place of `_id`"""
    out = {key: value for key, value in doc.items() if key != "_id"}
    out["id"] = str(doc["_id"])
    for key, value in out.items():
        if isinstance(value, ObjectId):
            out[key] = str(value)
    return out
