"""
Read-only product catalog.
"""
import re
from typing import Any, Dict, List, Optional

from pymongo.database import Database

from .database import PRODUCTS, get_documents, serialize_document, to_object_id
from .errors import NotFound


class CatalogService:
    def __init__(self, db: Database):
        self.db = db

    def list(self) -> List[Dict[str, Any]]:
        return [serialize_document(d) for d in get_documents(self.db, PRODUCTS)]

    def get(self, product_id: str) -> Dict[str, Any]:
        _id = to_object_id(product_id)
        doc = self.db[PRODUCTS].find_one({"_id": _id}) if _id is not None else None
        if not doc:
            raise NotFound("Product not found")
        return serialize_document(doc)

    def search(self, query: Optional[str]) -> List[Dict[str, Any]]:
        if not query:
            return []
        pattern = {"$regex": re.escape(query), "$options": "i"}
        return [serialize_document(d) for d in get_documents(self.db, PRODUCTS, {"name": pattern})]

    def find_many(self, ids) -> Dict[Any, dict]:
        """Map product id -> raw product document for the ids that still exist."""
        ids = list(ids)
        if not ids:
            return {}
        return {d["_id"]: d for d in self.db[PRODUCTS].find({"_id": {"$in": ids}})}

    def require(self, product_id) -> dict:
        doc = self.db[PRODUCTS].find_one({"_id": product_id})
        if not doc:
            raise NotFound("Product not found")
        return doc
