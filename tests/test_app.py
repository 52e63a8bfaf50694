"""
App wiring: seeding, health routes and error rendering.
"""
import mongomock
from fastapi.testclient import TestClient

from shopfront.main import create_app
from shopfront.settings import Settings


def fresh_db():
    return mongomock.MongoClient()["shop_seed"]


class TestSeeding:

    def test_seeds_catalog_and_admin(self):
        db = fresh_db()
        settings = Settings(jwt_secret="x", bcrypt_rounds=4,
                            admin_email="admin@shop.test", admin_password="adm1n")
        client = TestClient(create_app(settings, database=db))

        names = sorted(p["name"] for p in client.get("/api/products").json())
        assert names == ["Laptop", "Smartphone", "Wireless Headphones"]

        login = client.post("/api/auth/login", json={"email": "admin@shop.test", "password": "adm1n"})
        assert login.status_code == 200
        assert login.json()["user"]["is_admin"] is True
        headers = {"Authorization": f"Bearer {login.json()['token']}"}
        assert client.get("/api/admin/users", headers=headers).status_code == 200

    def test_no_admin_without_credentials(self):
        db = fresh_db()
        create_app(Settings(jwt_secret="x", bcrypt_rounds=4), database=db)
        assert db["user"].count_documents({}) == 0
        assert db["product"].count_documents({}) == 3

    def test_non_empty_store_left_alone(self):
        db = fresh_db()
        db["product"].insert_one({"name": "Existing", "price": 1})
        create_app(Settings(jwt_secret="x", bcrypt_rounds=4), database=db)
        assert db["product"].count_documents({}) == 1

    def test_seed_catalog_disabled(self):
        db = fresh_db()
        create_app(Settings(jwt_secret="x", bcrypt_rounds=4, seed_catalog=False), database=db)
        assert db["product"].count_documents({}) == 0


class TestHealth:

    def test_root(self, client):
        assert client.get("/").json() == {"message": "Shop With Singh backend running"}

    def test_database_check(self, client):
        body = client.get("/test").json()
        assert body["db"] == "ok"
        assert isinstance(body["collections"], list)


class TestErrorRendering:

    def test_unknown_route(self, client):
        resp = client.get("/api/nope")
        assert resp.status_code == 404
        assert resp.json() == {"error": "Not Found"}

    def test_malformed_json_is_400(self, client, make_user):
        _, headers = make_user("json")
        resp = client.post("/api/cart/add", content=b"{not json",
                           headers={**headers, "Content-Type": "application/json"})
        assert resp.status_code == 400
        assert "error" in resp.json()
