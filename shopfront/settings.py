"""
Runtime configuration

Values come from the environment (a local .env file is loaded first) and are
collected into one Settings object that the app factory hands to every
component. Nothing else in the package reads os.environ.
"""
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from .errors import ConfigError


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    jwt_secret: str
    mongo_uri: str = "mongodb://localhost:27017"
    database_name: str = "shopwithsingh"
    port: int = 8000
    bcrypt_rounds: int = 12
    admin_email: Optional[str] = None
    admin_password: Optional[str] = None
    seed_catalog: bool = True
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        if environ is None:
            load_dotenv()
            environ = os.environ

        secret = environ.get("JWT_SECRET")
        if not secret:
            raise ConfigError("JWT_SECRET must be set")

        try:
            port = int(environ.get("PORT", 8000))
            rounds = int(environ.get("BCRYPT_ROUNDS", 12))
        except ValueError as e:
            raise ConfigError(f"Invalid numeric setting: {e}")

        return cls(
            jwt_secret=secret,
            mongo_uri=environ.get("MONGO_URI") or environ.get("DATABASE_URL") or cls.mongo_uri,
            database_name=environ.get("DATABASE_NAME", cls.database_name),
            port=port,
            bcrypt_rounds=rounds,
            admin_email=environ.get("ADMIN_EMAIL") or None,
            admin_password=environ.get("ADMIN_PASSWORD") or None,
            seed_catalog=_as_bool(environ.get("SEED_CATALOG", "true")),
            log_level=environ.get("LOG_LEVEL", "INFO").upper(),
        )
