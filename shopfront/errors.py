"""
Error taxonomy shared by the services.

Services raise these; the HTTP layer maps each class to a status code and
renders {"error": message}.
"""
from typing import Any, Optional


class ConfigError(RuntimeError):
    """Raised when the environment cannot produce usable settings."""


class ShopError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, payload: Any = None):
        self.message = message or self.default_message
        # Rendered instead of {"error": ...} when set
        self.payload = payload
        super().__init__(self.message)


class ValidationFailed(ShopError):
    status_code = 400
    default_message = "Invalid request"


class EmptyCart(ValidationFailed):
    default_message = "Cart empty"


class AuthenticationFailed(ShopError):
    status_code = 401
    default_message = "Invalid token"


class Forbidden(ShopError):
    status_code = 403
    default_message = "Forbidden"


class NotFound(ShopError):
    status_code = 404
    default_message = "Not found"
