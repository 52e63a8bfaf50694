"""
Per-user wishlist with set semantics.
"""
from typing import Any, Dict, List, Optional

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.database import Database

from .catalog import CatalogService
from .database import WISHLISTS, serialize_value, to_object_id
from .errors import NotFound, ValidationFailed


class WishlistService:
    def __init__(self, db: Database, catalog: CatalogService):
        self.db = db
        self.catalog = catalog

    @property
    def wishlists(self):
        return self.db[WISHLISTS]

    def get(self, user_id: ObjectId) -> List[Dict[str, Any]]:
        wishlist = self.wishlists.find_one({"user_id": user_id})
        if not wishlist:
            return []
        products = self.catalog.find_many(wishlist.get("items", []))
        # Deleted products drop out of the resolved view
        return [serialize_value(products[pid]) for pid in wishlist.get("items", []) if pid in products]

    def add(self, user_id: ObjectId, product_id: Optional[str]) -> List[str]:
        if not product_id:
            raise ValidationFailed("Product required")
        pid = to_object_id(product_id)
        if pid is None:
            raise ValidationFailed("Invalid product id")
        self.catalog.require(pid)

        wishlist = self.wishlists.find_one_and_update(
            {"user_id": user_id},
            {"$addToSet": {"items": pid}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return [str(i) for i in wishlist["items"]]

    def remove(self, user_id: ObjectId, product_id: str) -> List[str]:
        pid = to_object_id(product_id)
        if pid is None:
            wishlist = self.wishlists.find_one({"user_id": user_id})
        else:
            wishlist = self.wishlists.find_one_and_update(
                {"user_id": user_id},
                {"$pull": {"items": pid}},
                return_document=ReturnDocument.AFTER,
            )
        if not wishlist:
            raise NotFound("Wishlist not found", payload=[])
        return [str(i) for i in wishlist.get("items", [])]
