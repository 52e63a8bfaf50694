"""
Checkout and order history.

Checkout claims the cart before writing the order: a single
find_one_and_update empties a non-empty cart and hands back the lines it
held, so of two concurrent checkouts only one sees any lines. If pricing or
the order insert fails afterwards, the claimed lines are merged
back into the cart, one line per product.

Totals use the catalog price at checkout time. Stock counts are not touched.
"""
import logging
from typing import Any, Dict, List

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.database import Database

from .cart import merge_line, resolve_lines
from .catalog import CatalogService
from .database import CARTS, ORDERS, create_document, serialize_document
from .errors import EmptyCart
from .schemas import Order, OrderItem

logger = logging.getLogger(__name__)


def order_total(lines, products) -> float:
    """Sum price * quantity over the lines whose product is in `products`."""
    return sum(products[it["product_id"]]["price"] * it["quantity"]
               for it in lines if it["product_id"] in products)


class OrderService:
    def __init__(self, db: Database, catalog: CatalogService):
        self.db = db
        self.catalog = catalog

    def render(self, order: dict) -> Dict[str, Any]:
        data = serialize_document(order)
        data["products"] = resolve_lines(self.catalog, order.get("products", []))
        return data

    def list_for_user(self, user_id: ObjectId) -> List[Dict[str, Any]]:
        return [self.render(o) for o in self.db[ORDERS].find({"user_id": user_id})]

    def list_all(self) -> List[Dict[str, Any]]:
        return [self.render(o) for o in self.db[ORDERS].find()]

    def checkout(self, user_id: ObjectId) -> Dict[str, Any]:
        claimed = self.db[CARTS].find_one_and_update(
            {"user_id": user_id, "items": {"$exists": True, "$ne": []}},
            {"$set": {"items": []}},
            return_document=ReturnDocument.BEFORE,
        )
        if not claimed:
            raise EmptyCart()
        lines = claimed["items"]

        try:
            products = self.catalog.find_many({it["product_id"] for it in lines})
            priced = [it for it in lines if it["product_id"] in products]
            if not priced:
                raise EmptyCart()
            order = Order(
                user_id=user_id,
                products=[OrderItem(product_id=it["product_id"], quantity=it["quantity"]) for it in priced],
                total=order_total(priced, products),
            )
            order_id = create_document(self.db, ORDERS, order)
        except Exception:
            try:
                self._restore(user_id, lines)
            except Exception:
                logger.exception("Could not restore cart for user %s, lost lines: %r", user_id, lines)
            raise

        logger.info("Order %s created for user %s, total %s", order_id, user_id, order.total)
        return self.render(self.db[ORDERS].find_one({"_id": order_id}))

    def _restore(self, user_id: ObjectId, lines) -> None:
        logger.error("Checkout failed for user %s, restoring %d cart lines", user_id, len(lines))
        for it in lines:
            merge_line(self.db[CARTS], user_id, it["product_id"], it["quantity"])
