import logging
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from pymongo.database import Database
from starlette.exceptions import HTTPException

from .admin import AdminService
from .cart import CartService
from .catalog import CatalogService
from .database import connect, ensure_indexes
from .errors import ShopError
from .identity import IdentityService
from .orders import OrderService
from .security import TokenSigner, make_password_context
from .seed import seed_if_needed
from .settings import Settings
from .wishlist import WishlistService

logger = logging.getLogger(__name__)


# Request bodies. Every field is optional so that missing values surface as
# the service's own 400 message instead of a schema error.
class RegisterRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class AddToCart(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product_id: Optional[str] = Field(None, alias="productId")
    quantity: Optional[int] = None


class AddToWishlist(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product_id: Optional[str] = Field(None, alias="productId")


class Services:
    """Components wired against one database handle."""

    def __init__(self, db: Database, settings: Settings):
        self.db = db
        self.identity = IdentityService(db, make_password_context(settings.bcrypt_rounds),
                                        TokenSigner(settings.jwt_secret))
        self.catalog = CatalogService(db)
        self.cart = CartService(db, self.catalog)
        self.wishlist = WishlistService(db, self.catalog)
        self.orders = OrderService(db, self.catalog)
        self.admin = AdminService(self.identity, self.catalog, self.orders)


def get_services(request: Request) -> Services:
    return request.app.state.services


def current_user(request: Request, services: Services = Depends(get_services)):
    header = request.headers.get("authorization", "")
    token = header[len("Bearer "):] if header.startswith("Bearer ") else None
    return services.identity.verify(token)


def failure_message(message: str):
    """Route dependency naming the generic 500 message for that route."""
    def _set(request: Request):
        request.state.failure_message = message
    return Depends(_set)


router = APIRouter(prefix="/api")


# Auth
@router.post("/auth/register", status_code=201,
             dependencies=[failure_message("Registration failed")])
def register(body: RegisterRequest, services: Services = Depends(get_services)):
    return services.identity.register(body.name, body.email, body.password)


@router.post("/auth/login", dependencies=[failure_message("Login failed")])
def login(body: LoginRequest, services: Services = Depends(get_services)):
    return services.identity.login(body.email, body.password)


# Products
@router.get("/products", dependencies=[failure_message("Failed to fetch products")])
def list_products(services: Services = Depends(get_services)):
    return services.catalog.list()


@router.get("/products/search", dependencies=[failure_message("Search failed")])
def search_products(q: Optional[str] = None, services: Services = Depends(get_services)):
    return services.catalog.search(q)


@router.get("/products/{product_id}", dependencies=[failure_message("Failed to fetch product")])
def get_product(product_id: str, services: Services = Depends(get_services)):
    return services.catalog.get(product_id)


# Cart
@router.get("/cart", dependencies=[failure_message("Failed to fetch cart")])
def get_cart(user_id=Depends(current_user), services: Services = Depends(get_services)):
    return services.cart.get(user_id)


@router.post("/cart/add", dependencies=[failure_message("Add to cart failed")])
def add_to_cart(body: AddToCart, user_id=Depends(current_user),
                services: Services = Depends(get_services)):
    return services.cart.add(user_id, body.product_id, body.quantity)


@router.delete("/cart/remove/{product_id}", dependencies=[failure_message("Remove from cart failed")])
def remove_from_cart(product_id: str, user_id=Depends(current_user),
                     services: Services = Depends(get_services)):
    return services.cart.remove(user_id, product_id)


# Wishlist
@router.get("/wishlist", dependencies=[failure_message("Failed to fetch wishlist")])
def get_wishlist(user_id=Depends(current_user), services: Services = Depends(get_services)):
    return services.wishlist.get(user_id)


@router.post("/wishlist/add", dependencies=[failure_message("Add to wishlist failed")])
def add_to_wishlist(body: AddToWishlist, user_id=Depends(current_user),
                    services: Services = Depends(get_services)):
    return services.wishlist.add(user_id, body.product_id)


@router.delete("/wishlist/remove/{product_id}", dependencies=[failure_message("Remove from wishlist failed")])
def remove_from_wishlist(product_id: str, user_id=Depends(current_user),
                         services: Services = Depends(get_services)):
    return services.wishlist.remove(user_id, product_id)


# Orders
@router.get("/orders", dependencies=[failure_message("Failed to fetch orders")])
def list_orders(user_id=Depends(current_user), services: Services = Depends(get_services)):
    return services.orders.list_for_user(user_id)


@router.post("/orders/checkout", dependencies=[failure_message("Checkout failed")])
def checkout(user_id=Depends(current_user), services: Services = Depends(get_services)):
    return services.orders.checkout(user_id)


# Admin
@router.get("/admin/users", dependencies=[failure_message("Admin fetch failed")])
def admin_users(user_id=Depends(current_user), services: Services = Depends(get_services)):
    return services.admin.users(user_id)


@router.get("/admin/products", dependencies=[failure_message("Admin fetch failed")])
def admin_products(user_id=Depends(current_user), services: Services = Depends(get_services)):
    return services.admin.products(user_id)


@router.get("/admin/orders", dependencies=[failure_message("Admin fetch failed")])
def admin_orders(user_id=Depends(current_user), services: Services = Depends(get_services)):
    return services.admin.all_orders(user_id)


# Health
health = APIRouter()


@health.get("/")
def read_root():
    return {"message": "Shop With Singh backend running"}


@health.get("/test")
def test_database(services: Services = Depends(get_services)):
    try:
        collections = services.db.list_collection_names()
        return {"backend": "ok", "db": "ok", "collections": collections}
    except Exception as e:
        return {"backend": "ok", "db": f"error: {str(e)[:80]}"}


def install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ShopError)
    async def shop_error(request: Request, exc: ShopError):
        content = exc.payload if exc.payload is not None else {"error": exc.message}
        return JSONResponse(status_code=exc.status_code, content=content)

    @app.exception_handler(HTTPException)
    async def http_error(request: Request, exc: HTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": "Invalid request body"})

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        message = getattr(request.state, "failure_message", None) or "Internal server error"
        return JSONResponse(status_code=500, content={"error": message})


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    db = database if database is not None else connect(settings.mongo_uri, settings.database_name)

    ensure_indexes(db)
    services = Services(db, settings)
    seed_if_needed(db, settings, services.identity)

    app = FastAPI(title="Shop With Singh API")
    app.state.settings = settings
    app.state.services = services

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    install_error_handlers(app)
    app.include_router(health)
    app.include_router(router)
    return app


def main() -> None:
    import uvicorn

    settings = Settings.from_env()
    logging.basicConfig(level=settings.log_level,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
