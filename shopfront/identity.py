"""
Registration, login and bearer-token verification.
"""
import logging
from typing import Any, Dict, Optional

from bson import ObjectId
from passlib.context import CryptContext
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from .database import USERS, create_document, serialize_document, to_object_id
from .errors import AuthenticationFailed, ValidationFailed
from .schemas import User
from .security import InvalidToken, TokenSigner

logger = logging.getLogger(__name__)


def public_user(doc: dict) -> Dict[str, Any]:
    """Serialize a user document without its password hash."""
    data = serialize_document(doc)
    data.pop("password_hash", None)
    return data


class IdentityService:
    def __init__(self, db: Database, pwd_context: CryptContext, signer: TokenSigner):
        self.db = db
        self.pwd_context = pwd_context
        self.signer = signer

    def register(self, name: Optional[str], email: Optional[str], password: Optional[str],
                 is_admin: bool = False) -> Dict[str, Any]:
        if not name or not email or not password:
            raise ValidationFailed("All fields required")
        if self.db[USERS].find_one({"email": email}):
            raise ValidationFailed("Email already registered")

        user = User(name=name, email=email,
                    password_hash=self.pwd_context.hash(password), is_admin=is_admin)
        try:
            user_id = create_document(self.db, USERS, user)
        except DuplicateKeyError:
            raise ValidationFailed("Email already registered")

        logger.info("Registered user %s", user_id)
        doc = self.db[USERS].find_one({"_id": user_id})
        return {"user": public_user(doc), "token": self.signer.sign(str(user_id))}

    def login(self, email: Optional[str], password: Optional[str]) -> Dict[str, Any]:
        if not email or not password:
            raise AuthenticationFailed("All fields required")
        doc = self.db[USERS].find_one({"email": email})
        # Same message for unknown email and wrong password
        if not doc or not self.pwd_context.verify(password, doc.get("password_hash", "")):
            logger.warning("Failed login attempt")
            raise AuthenticationFailed("Invalid credentials")
        return {"user": public_user(doc), "token": self.signer.sign(str(doc["_id"]))}

    def verify(self, token: Optional[str]) -> ObjectId:
        """Return the user id embedded in a bearer token."""
        if not token:
            raise AuthenticationFailed("No token")
        try:
            payload = self.signer.verify(token)
        except InvalidToken:
            raise AuthenticationFailed("Invalid token")
        user_id = to_object_id(payload["user_id"])
        if user_id is None:
            raise AuthenticationFailed("Invalid token")
        return user_id

    def get_user(self, user_id: ObjectId) -> Optional[dict]:
        return self.db[USERS].find_one({"_id": user_id})
