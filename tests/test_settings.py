"""
Environment-driven settings.
"""
import pytest

from shopfront.errors import ConfigError
from shopfront.settings import Settings


class TestSettings:

    def test_secret_required(self):
        with pytest.raises(ConfigError):
            Settings.from_env({})

    def test_defaults(self):
        s = Settings.from_env({"JWT_SECRET": "x"})
        assert s.jwt_secret == "x"
        assert s.mongo_uri == "mongodb://localhost:27017"
        assert s.database_name == "shopwithsingh"
        assert s.port == 8000
        assert s.admin_email is None
        assert s.seed_catalog is True

    def test_overrides(self):
        s = Settings.from_env({
            "JWT_SECRET": "x",
            "DATABASE_URL": "mongodb://db:27017",
            "PORT": "5000",
            "BCRYPT_ROUNDS": "4",
            "ADMIN_EMAIL": "admin@example.com",
            "ADMIN_PASSWORD": "pw",
            "SEED_CATALOG": "no",
            "LOG_LEVEL": "debug",
        })
        assert s.mongo_uri == "mongodb://db:27017"
        assert s.port == 5000
        assert s.bcrypt_rounds == 4
        assert s.admin_email == "admin@example.com"
        assert s.seed_catalog is False
        assert s.log_level == "DEBUG"

    def test_mongo_uri_preferred_over_database_url(self):
        s = Settings.from_env({"JWT_SECRET": "x", "MONGO_URI": "mongodb://a", "DATABASE_URL": "mongodb://b"})
        assert s.mongo_uri == "mongodb://a"

    def test_bad_port(self):
        with pytest.raises(ConfigError):
            Settings.from_env({"JWT_SECRET": "x", "PORT": "eighty"})
