"""
Database Schemas for Shop With Singh

Each Pydantic model represents a MongoDB collection. The collection name is the lowercase of the class name.
Cart and wishlist documents are only ever written through upserts, so they have no model of their own.

- User -> "user"
- Product -> "product"
- Cart -> "cart" (user_id plus a list of CartItem lines)
- Wishlist -> "wishlist" (user_id plus a list of product ids)
- Order -> "order"

References to other documents are stored as ObjectId.
"""
from datetime import datetime, timezone
from typing import List, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Document(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)


class User(Document):
    name: str = Field(..., description="Full name")
    email: str = Field(..., description="Email address")
    password_hash: str = Field(..., description="Hashed password")
    is_admin: bool = Field(False, description="Grants access to admin listings")


class Product(Document):
    name: str = Field(..., description="Product name")
    description: Optional[str] = Field(None, description="Product description")
    price: float = Field(..., description="Price in minor currency units")
    count_in_stock: int = Field(0, description="Units in stock")
    image: Optional[str] = Field(None, description="Image URL")


class CartItem(Document):
    product_id: ObjectId
    quantity: int = 1


class OrderItem(Document):
    product_id: ObjectId
    quantity: int


class Order(Document):
    user_id: ObjectId
    products: List[OrderItem]
    total: float
    status: str = Field("Processing", description="Order status")
    created_at: datetime = Field(default_factory=_now)
