"""
Admin-only listings.
"""
import logging
from typing import Any, Dict, List

from bson import ObjectId

from .catalog import CatalogService
from .database import USERS, get_documents
from .errors import Forbidden
from .identity import IdentityService, public_user
from .orders import OrderService

logger = logging.getLogger(__name__)


class AdminService:
    def __init__(self, identity: IdentityService, catalog: CatalogService, orders: OrderService):
        self.identity = identity
        self.catalog = catalog
        self.orders = orders

    def require_admin(self, user_id: ObjectId) -> None:
        me = self.identity.get_user(user_id)
        if not me or not me.get("is_admin"):
            logger.warning("Non-admin user %s denied admin access", user_id)
            raise Forbidden()

    def users(self, user_id: ObjectId) -> List[Dict[str, Any]]:
        self.require_admin(user_id)
        return [public_user(u) for u in get_documents(self.identity.db, USERS)]

    def products(self, user_id: ObjectId) -> List[Dict[str, Any]]:
        self.require_admin(user_id)
        return self.catalog.list()

    def all_orders(self, user_id: ObjectId) -> List[Dict[str, Any]]:
        self.require_admin(user_id)
        return self.orders.list_all()
