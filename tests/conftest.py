"""
Shared fixtures: an app wired to an in-memory MongoDB and helpers to create
users and products through it.
"""
import uuid

import mongomock
import pytest
from fastapi.testclient import TestClient

from shopfront.database import PRODUCTS, USERS, create_document
from shopfront.main import create_app
from shopfront.schemas import Product
from shopfront.settings import Settings

TEST_SECRET = "test-secret"
PASSWORD = "Str0ngP@ss!"


@pytest.fixture
def settings():
    return Settings(jwt_secret=TEST_SECRET, bcrypt_rounds=4, seed_catalog=False)


@pytest.fixture
def db():
    return mongomock.MongoClient()["shop_test"]


@pytest.fixture
def app(settings, db):
    return create_app(settings, database=db)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


def unique_email(tag: str = "") -> str:
    return f"user-{tag}-{uuid.uuid4().hex[:8]}@test.com"


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_user(client):
    """Register a user through the API and return (user, headers)."""
    def _make(tag: str = "", name: str = "Tester"):
        resp = client.post("/api/auth/register", json={
            "name": name, "email": unique_email(tag), "password": PASSWORD,
        })
        assert resp.status_code == 201, resp.text
        body = resp.json()
        return body["user"], auth_header(body["token"])
    return _make


@pytest.fixture
def make_admin(make_user, db):
    def _make():
        user, headers = make_user("admin", name="Admin")
        db[USERS].update_one({"email": user["email"]}, {"$set": {"is_admin": True}})
        return user, headers
    return _make


@pytest.fixture
def make_product(db):
    """Insert a product directly and return its id as a string."""
    def _make(name: str = "Widget", price: float = 100, stock: int = 5):
        product_id = create_document(db, PRODUCTS, Product(name=name, price=price, count_in_stock=stock))
        return str(product_id)
    return _make
