"""
Per-user cart.

The cart document is created on first add by an upsert, so concurrent first
writes for the same user converge on one document (user_id is unique).
"""
from typing import Any, Dict, List, Optional

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.collection import Collection
from pymongo.database import Database

from .catalog import CatalogService
from .database import CARTS, serialize_value, to_object_id
from .errors import NotFound, ValidationFailed
from .schemas import CartItem


def serialize_lines(items) -> List[Dict[str, Any]]:
    return [{"product_id": str(i["product_id"]), "quantity": i["quantity"]} for i in items]


def resolve_lines(catalog: CatalogService, items) -> List[Dict[str, Any]]:
    """Attach the current product document to each {product_id, quantity} line."""
    products = catalog.find_many({i["product_id"] for i in items})
    lines = []
    for it in items:
        product = products.get(it["product_id"])
        lines.append({
            "product_id": str(it["product_id"]),
            "quantity": it["quantity"],
            "product": serialize_value(product) if product else None,
        })
    return lines


def merge_line(carts: Collection, user_id: ObjectId, product_id: ObjectId, quantity: int) -> dict:
    """
    Add `quantity` of a product to the user's cart, creating the cart if needed.

    Keeps at most one line per product: an existing line is incremented,
    otherwise a new line is appended. Returns the updated cart document.
    """
    carts.update_one({"user_id": user_id}, {"$setOnInsert": {"items": []}}, upsert=True)
    while True:
        cart = carts.find_one_and_update(
            {"user_id": user_id, "items.product_id": product_id},
            {"$inc": {"items.$.quantity": quantity}},
            return_document=ReturnDocument.AFTER,
        )
        if cart:
            return cart
        cart = carts.find_one_and_update(
            {"user_id": user_id, "items.product_id": {"$ne": product_id}},
            {"$push": {"items": CartItem(product_id=product_id, quantity=quantity).model_dump()}},
            return_document=ReturnDocument.AFTER,
        )
        if cart:
            return cart
        # Another request appended the same product in between; increment instead.


class CartService:
    def __init__(self, db: Database, catalog: CatalogService):
        self.db = db
        self.catalog = catalog

    @property
    def carts(self):
        return self.db[CARTS]

    def get(self, user_id: ObjectId) -> List[Dict[str, Any]]:
        cart = self.carts.find_one({"user_id": user_id})
        if not cart:
            return []
        return resolve_lines(self.catalog, cart.get("items", []))

    def add(self, user_id: ObjectId, product_id: Optional[str], quantity: Optional[int]) -> List[Dict[str, Any]]:
        if not product_id or not quantity:
            raise ValidationFailed("Product and quantity required")
        pid = to_object_id(product_id)
        if pid is None:
            raise ValidationFailed("Invalid product id")
        self.catalog.require(pid)

        cart = merge_line(self.carts, user_id, pid, quantity)
        return serialize_lines(cart["items"])

    def remove(self, user_id: ObjectId, product_id: str) -> List[Dict[str, Any]]:
        pid = to_object_id(product_id)
        if pid is None:
            cart = self.carts.find_one({"user_id": user_id})
        else:
            cart = self.carts.find_one_and_update(
                {"user_id": user_id},
                {"$pull": {"items": {"product_id": pid}}},
                return_document=ReturnDocument.AFTER,
            )
        if not cart:
            raise NotFound("Cart not found", payload=[])
        return serialize_lines(cart.get("items", []))
