"""
Password hashing and bearer tokens.

Tokens are compact JWS strings (header.payload.signature) signed with
HMAC-SHA256. They carry the user id and an issue time, and never expire.
"""
import base64
import json
import time
from typing import Any, Dict

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, hmac
from passlib.context import CryptContext


def make_password_context(rounds: int = 12) -> CryptContext:
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


class InvalidToken(ValueError):
    pass


class TokenSigner:
    algorithm = "HS256"

    def __init__(self, secret: str):
        if not secret:
            raise ValueError("Token secret must not be empty")
        self._key = secret.encode()

    def sign(self, user_id: str) -> str:
        header = {"alg": self.algorithm, "typ": "JWT"}
        payload = {"user_id": user_id, "iat": int(time.time())}

        header_b64 = self._base64_encode_json(header)
        payload_b64 = self._base64_encode_json(payload)

        message = f"{header_b64}.{payload_b64}".encode()
        signature_b64 = self._base64_encode(self._create_signature(message))

        return f"{header_b64}.{payload_b64}.{signature_b64}"

    def verify(self, token: str) -> Dict[str, Any]:
        """
        Check the signature and return the payload.

        Raises:
            InvalidToken: malformed token, wrong algorithm or bad signature
        """
        try:
            header_b64, payload_b64, signature_b64 = token.split(".")
        except ValueError:
            raise InvalidToken("Malformed token: expected 3 parts")

        header = self._base64_decode_json(header_b64)
        if header.get("alg") != self.algorithm:
            raise InvalidToken("Unsupported algorithm")

        message = f"{header_b64}.{payload_b64}".encode()
        h = hmac.HMAC(self._key, hashes.SHA256())
        h.update(message)
        try:
            h.verify(self._base64_decode(signature_b64))
        except InvalidSignature:
            raise InvalidToken("Invalid signature")

        payload = self._base64_decode_json(payload_b64)
        if not isinstance(payload.get("user_id"), str):
            raise InvalidToken("Missing user_id")
        return payload

    def _create_signature(self, message: bytes) -> bytes:
        h = hmac.HMAC(self._key, hashes.SHA256())
        h.update(message)
        return h.finalize()

    @staticmethod
    def _base64_encode(data: bytes) -> str:
        return base64.urlsafe_b64encode(data).rstrip(b"=").decode()

    @staticmethod
    def _base64_decode(data: str) -> bytes:
        padding = "=" * (-len(data) % 4)
        try:
            return base64.urlsafe_b64decode(data + padding)
        except (ValueError, TypeError):
            raise InvalidToken("Invalid base64 segment")

    def _base64_encode_json(self, obj: Dict[str, Any]) -> str:
        return self._base64_encode(json.dumps(obj, separators=(",", ":")).encode())

    def _base64_decode_json(self, data: str) -> Dict[str, Any]:
        try:
            value = json.loads(self._base64_decode(data))
        except ValueError:
            raise InvalidToken("Invalid JSON segment")
        if not isinstance(value, dict):
            raise InvalidToken("Invalid JSON segment")
        return value
