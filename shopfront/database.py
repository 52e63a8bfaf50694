"""
Database helpers

Thin layer over pymongo. Collections are named after the lowercase schema
class (User -> "user", Product -> "product", ...). The database handle is
always passed in; there is no module-level connection.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from bson import ObjectId
from bson.errors import InvalidId
from pydantic import BaseModel
from pymongo import ASCENDING, MongoClient
from pymongo.database import Database

logger = logging.getLogger(__name__)

USERS = "user"
PRODUCTS = "product"
CARTS = "cart"
WISHLISTS = "wishlist"
ORDERS = "order"


def connect(mongo_uri: str, database_name: str) -> Database:
    client = MongoClient(mongo_uri)
    logger.info("Connecting to MongoDB database %r", database_name)
    return client[database_name]


def ensure_indexes(db: Database) -> None:
    db[USERS].create_index([("email", ASCENDING)], unique=True)
    db[CARTS].create_index([("user_id", ASCENDING)], unique=True)
    db[WISHLISTS].create_index([("user_id", ASCENDING)], unique=True)
    db[ORDERS].create_index([("user_id", ASCENDING)])
    logger.debug("Indexes ensured")


def create_document(db: Database, collection_name: str, data: Union[BaseModel, dict]) -> ObjectId:
    """Insert a document and return its id. Pydantic models are dumped first."""
    if isinstance(data, BaseModel):
        data_dict = data.model_dump()
    else:
        data_dict = dict(data)
    result = db[collection_name].insert_one(data_dict)
    return result.inserted_id


def get_documents(db: Database, collection_name: str, filter_dict: Optional[dict] = None) -> List[dict]:
    return list(db[collection_name].find(filter_dict or {}))


def to_object_id(value: Any) -> Optional[ObjectId]:
    """Parse a hex id, returning None when it is not a valid ObjectId."""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        return None


def serialize_value(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.isoformat()
    if isinstance(value, dict):
        return serialize_document(value)
    if isinstance(value, list):
        return [serialize_value(v) for v in value]
    return value


def serialize_document(doc: Optional[dict]) -> Optional[Dict[str, Any]]:
    if not doc:
        return doc
    doc = {**doc}
    if doc.get("_id") is not None:
        doc["id"] = doc.pop("_id")
    return {k: serialize_value(v) for k, v in doc.items()}
