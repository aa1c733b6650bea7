# ============================================================
# main.py — FastAPI Application
# ============================================================
# Endpoints:
#   /api/products             GET list, POST create
#   /api/products/{id}        GET, PUT (full overwrite), DELETE
#   /api/categories           GET list, POST create
#   /api/categories/{id}      GET, PUT (full overwrite), DELETE
#   /api/orders               GET list, POST create
#   /api/orders/{id}          GET
#   /api/packages             GET list, POST create
#   /api/packages/track/{trackingId}  GET
#   /api/packages/{id}        PUT (shipment fields only), DELETE
#   /api/auth/login           POST {email, password}
#   /api/settings             GET all, /api/settings/{key} GET one
#   /api/health               GET
#
# Every repository or validation error is turned into {"error": message}
# with the status code carried by the error class.
# ============================================================

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session as DBSession

import config
import repository
from database import Store, get_db
from errors import ShopError, StorageFailure
from schemas import ProductIn, CategoryIn, OrderIn, PackageIn, PackageUpdate, LoginIn


def create_app(store: Optional[Store] = None) -> FastAPI:
    """
    Build the application around a Store.

    The store is initialized before the first request is served and
    closed on shutdown. Pass one in to point the app at another database.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        active = store or Store(config.DATABASE_URL)
        active.initialize()
        app.state.store = active
        print(f"✅ Database initialized ({active.url})")
        yield
        active.close()
        print("👋 Database connection closed")

    app = FastAPI(title="Shop Backend", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ShopError)
    async def shop_error_handler(request: Request, exc: ShopError):
        if isinstance(exc, StorageFailure):
            print(f"❌ {request.method} {request.url.path}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        # "body.status: Input should be ..." for each invalid field
        message = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        return JSONResponse(status_code=422, content={"error": message})

    register_routes(app)
    return app


def register_routes(app: FastAPI):

    # ============================================================
    # PRODUCTS
    # ============================================================

    @app.get("/api/products")
    def get_products(db: DBSession = Depends(get_db)):
        return repository.list_products(db)

    @app.get("/api/products/{product_id}")
    def get_product(product_id: str, db: DBSession = Depends(get_db)):
        return repository.get_product(db, product_id)

    @app.post("/api/products", status_code=201)
    def create_product(payload: ProductIn, db: DBSession = Depends(get_db)):
        return repository.create_product(db, payload)

    @app.put("/api/products/{product_id}")
    def update_product(product_id: str, payload: ProductIn, db: DBSession = Depends(get_db)):
        return repository.update_product(db, product_id, payload)

    @app.delete("/api/products/{product_id}")
    def delete_product(product_id: str, db: DBSession = Depends(get_db)):
        return repository.delete_product(db, product_id)

    # ============================================================
    # CATEGORIES
    # ============================================================

    @app.get("/api/categories")
    def get_categories(db: DBSession = Depends(get_db)):
        return repository.list_categories(db)

    @app.get("/api/categories/{category_id}")
    def get_category(category_id: str, db: DBSession = Depends(get_db)):
        return repository.get_category(db, category_id)

    @app.post("/api/categories", status_code=201)
    def create_category(payload: CategoryIn, db: DBSession = Depends(get_db)):
        return repository.create_category(db, payload)

    @app.put("/api/categories/{category_id}")
    def update_category(category_id: str, payload: CategoryIn, db: DBSession = Depends(get_db)):
        return repository.update_category(db, category_id, payload)

    @app.delete("/api/categories/{category_id}")
    def delete_category(category_id: str, db: DBSession = Depends(get_db)):
        return repository.delete_category(db, category_id)

    # ============================================================
    # ORDERS
    # ============================================================

    @app.post("/api/orders", status_code=201)
    def create_order(payload: OrderIn, db: DBSession = Depends(get_db)):
        return repository.create_order(db, payload)

    @app.get("/api/orders")
    def get_orders(db: DBSession = Depends(get_db)):
        return repository.list_orders(db)

    @app.get("/api/orders/{order_id}")
    def get_order(order_id: str, db: DBSession = Depends(get_db)):
        return repository.get_order(db, order_id)

    # ============================================================
    # PACKAGES
    # ============================================================

    @app.get("/api/packages")
    def get_packages(db: DBSession = Depends(get_db)):
        return repository.list_packages(db)

    @app.get("/api/packages/track/{tracking_id}")
    def track_package(tracking_id: str, db: DBSession = Depends(get_db)):
        return repository.get_package_by_tracking_id(db, tracking_id)

    @app.post("/api/packages", status_code=201)
    def create_package(payload: PackageIn, db: DBSession = Depends(get_db)):
        return repository.create_package(db, payload)

    @app.put("/api/packages/{package_id}")
    def update_package(package_id: str, payload: PackageUpdate, db: DBSession = Depends(get_db)):
        return repository.update_package(db, package_id, payload)

    @app.delete("/api/packages/{package_id}")
    def delete_package(package_id: str, db: DBSession = Depends(get_db)):
        return repository.delete_package(db, package_id)

    # ============================================================
    # ADMIN AUTHENTICATION
    # ============================================================

    @app.post("/api/auth/login")
    def login(payload: LoginIn, db: DBSession = Depends(get_db)):
        return repository.authenticate(db, payload.email, payload.password)

    # ============================================================
    # SETTINGS
    # ============================================================

    @app.get("/api/settings")
    def get_settings(db: DBSession = Depends(get_db)):
        return repository.list_settings(db)

    @app.get("/api/settings/{key}")
    def get_setting(key: str, db: DBSession = Depends(get_db)):
        return repository.get_setting(db, key)

    # ============================================================
    # HEALTH CHECK
    # ============================================================

    @app.get("/api/health")
    def health():
        return {"status": "ok", "message": "Backend is running"}


app = create_app()


# ============================================================
# RUN THE APP
# ============================================================

if __name__ == "__main__" and not config.VERCEL:
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=config.PORT)
