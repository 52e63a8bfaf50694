"""
Sample data for an empty store.
"""
import logging

from pymongo.database import Database

from .database import PRODUCTS, USERS, create_document
from .identity import IdentityService
from .schemas import Product
from .settings import Settings

logger = logging.getLogger(__name__)

SAMPLE_PRODUCTS = [
    Product(
        name="Wireless Headphones",
        description="High-quality sound with noise cancellation",
        price=2999,
        count_in_stock=20,
        image="/logo.svg",
    ),
    Product(
        name="Smartphone",
        description="Latest model with amazing features",
        price=19999,
        count_in_stock=15,
        image="/logo.svg",
    ),
    Product(
        name="Laptop",
        description="Powerful laptop for professionals and students",
        price=55999,
        count_in_stock=10,
        image="/logo.svg",
    ),
]


def seed_if_needed(db: Database, settings: Settings, identity: IdentityService) -> bool:
    """Seed the admin account and sample catalog when there are no users and no products."""
    if db[USERS].count_documents({}) or db[PRODUCTS].count_documents({}):
        return False

    if settings.admin_email and settings.admin_password:
        identity.register("Admin User", settings.admin_email, settings.admin_password, is_admin=True)
    else:
        logger.warning("ADMIN_EMAIL/ADMIN_PASSWORD not set, skipping admin account")

    if settings.seed_catalog:
        for product in SAMPLE_PRODUCTS:
            create_document(db, PRODUCTS, product)

    logger.info("Database seeded")
    return True
