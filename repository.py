# ============================================================
# repository.py — Record repository
# ============================================================
# One function per (entity, verb). Every function receives the
# SQLAlchemy session injected by get_db() and runs a single
# statement against it.
#
# Rows are returned as plain dicts with camelCase keys, the
# same shape the HTTP API sends and receives.
#
# Failures are raised as errors.ShopError subclasses:
#   NotFound           → by-id / by-key lookup found nothing
#   Conflict           → UNIQUE constraint violated
#   InvalidCredentials → login failed (never says why)
#   StorageFailure     → anything else from the database
# ============================================================

import json
import re
import uuid
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

from passlib.context import CryptContext
from sqlalchemy import update, delete
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session as DBSession

from errors import NotFound, Conflict, InvalidCredentials, StorageFailure
from models import Product, Category, Order, Package, Admin, Setting, utcnow
from schemas import (
    ProductIn, CategoryIn, OrderIn, PackageIn, PackageUpdate,
    ProductStatus, OrderStatus, PackageStatus, ShippingRoute
)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# SQLite reports "UNIQUE constraint failed: <table>.<column>"
UNIQUE_MARKER = "UNIQUE"


# ============================================================
# HELPERS
# ============================================================

def new_id() -> str:
    """128-bit random id, hex encoded."""
    return uuid.uuid4().hex


def slugify(name: str) -> str:
    return re.sub(r"\s+", "-", name.lower())


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    try:
        return pwd_context.verify(password, hashed)
    except ValueError:
        # stored value is not a hash passlib recognises
        return False


def _iso(value) -> Optional[str]:
    return value.isoformat() if value else None


@contextmanager
def _storage_errors(db: DBSession, conflict_message: Optional[str] = None):
    """Translate SQLAlchemy errors raised inside the block into ShopErrors."""
    try:
        yield
    except IntegrityError as exc:
        db.rollback()
        if conflict_message and UNIQUE_MARKER in str(exc.orig):
            raise Conflict(conflict_message) from exc
        raise StorageFailure(str(exc.orig)) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise StorageFailure(str(getattr(exc, "orig", None) or exc)) from exc


def apply_update(db: DBSession, model, row_id: str, fields: Dict[str, Any]):
    """
    Overwrite the given columns of one row and refresh updatedAt.

    Full-overwrite semantics: every key in `fields` is written,
    None included, so a field the caller left out becomes NULL.
    No existence check: zero matched rows is not an error.
    """
    values = {getattr(model, attr): value for attr, value in fields.items()}
    values[model.updated_at] = utcnow()
    stmt = (
        update(model)
        .where(model.id == row_id)
        .values(values)
        .execution_options(synchronize_session=False)
    )
    db.execute(stmt)


def _delete(db: DBSession, model, row_id: str) -> dict:
    with _storage_errors(db):
        db.execute(delete(model).where(model.id == row_id))
        db.commit()
    return {"success": True}


# ============================================================
# SERIALIZERS (row → JSON)
# ============================================================

def product_to_dict(p: Product) -> dict:
    return {
        "id": p.id,
        "name": p.name,
        "description": p.description,
        "price": p.price,
        "categoryId": p.category_id,
        "image": p.image,
        "stock": p.stock,
        "isFeatured": bool(p.is_featured),
        "status": p.status,
        "estimatedDelivery": p.estimated_delivery,
        "createdAt": _iso(p.created_at),
        "updatedAt": _iso(p.updated_at)
    }


def category_to_dict(c: Category) -> dict:
    return {
        "id": c.id,
        "name": c.name,
        "slug": c.slug,
        "description": c.description,
        "createdAt": _iso(c.created_at),
        "updatedAt": _iso(c.updated_at)
    }


def _parse_items(o: Order) -> list:
    if not o.items:
        return []
    try:
        return json.loads(o.items)
    except ValueError as exc:
        raise StorageFailure(f"Order {o.id} has unreadable items: {exc}") from exc


def order_to_dict(o: Order) -> dict:
    return {
        "id": o.id,
        "customerName": o.customer_name,
        "customerEmail": o.customer_email,
        "customerPhone": o.customer_phone,
        "items": _parse_items(o),
        "totalAmount": o.total_amount,
        "status": o.status,
        "shippingAddress": o.shipping_address,
        "createdAt": _iso(o.created_at),
        "updatedAt": _iso(o.updated_at)
    }


def package_to_dict(p: Package) -> dict:
    return {
        "id": p.id,
        "trackingId": p.tracking_id,
        "orderId": p.order_id,
        "status": p.status,
        "shippingRoute": p.shipping_route,
        "origin": p.origin,
        "destination": p.destination,
        "currentLocation": p.current_location,
        "estimatedDelivery": p.estimated_delivery,
        "weight": p.weight,
        "notes": p.notes,
        "createdAt": _iso(p.created_at),
        "updatedAt": _iso(p.updated_at)
    }


# ============================================================
# PRODUCTS
# ============================================================

def list_products(db: DBSession) -> List[dict]:
    with _storage_errors(db):
        rows = db.query(Product).order_by(Product.created_at.desc()).all()
    return [product_to_dict(p) for p in rows]


def get_product(db: DBSession, product_id: str) -> dict:
    with _storage_errors(db):
        product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise NotFound("Product not found")
    return product_to_dict(product)


def create_product(db: DBSession, data: ProductIn) -> dict:
    now = utcnow()
    product = Product(
        id=new_id(),
        name=data.name,
        description=data.description,
        price=data.price,
        category_id=data.category_id,
        image=data.image,
        stock=data.stock if data.stock is not None else 0,
        is_featured=bool(data.is_featured),
        status=data.status or ProductStatus.in_stock.value,
        estimated_delivery=data.estimated_delivery,
        created_at=now,
        updated_at=now
    )
    # Built before commit: the response echoes what was written
    result = product_to_dict(product)

    with _storage_errors(db):
        db.add(product)
        db.commit()
    return result


def update_product(db: DBSession, product_id: str, data: ProductIn) -> dict:
    fields = {
        "name": data.name,
        "description": data.description,
        "price": data.price,
        "category_id": data.category_id,
        "image": data.image,
        "stock": data.stock,                       # omitted → NULL
        "is_featured": bool(data.is_featured),     # omitted → false
        "status": data.status,
        "estimated_delivery": data.estimated_delivery
    }
    with _storage_errors(db):
        apply_update(db, Product, product_id, fields)
        db.commit()

    return {
        "id": product_id,
        "name": data.name,
        "description": data.description,
        "price": data.price,
        "categoryId": data.category_id,
        "image": data.image,
        "stock": data.stock,
        "isFeatured": bool(data.is_featured),
        "status": data.status,
        "estimatedDelivery": data.estimated_delivery
    }


def delete_product(db: DBSession, product_id: str) -> dict:
    return _delete(db, Product, product_id)


# ============================================================
# CATEGORIES
# ============================================================

def list_categories(db: DBSession) -> List[dict]:
    with _storage_errors(db):
        rows = db.query(Category).order_by(Category.created_at.desc()).all()
    return [category_to_dict(c) for c in rows]


def get_category(db: DBSession, category_id: str) -> dict:
    with _storage_errors(db):
        category = db.query(Category).filter(Category.id == category_id).first()
    if not category:
        raise NotFound("Category not found")
    return category_to_dict(category)


def create_category(db: DBSession, data: CategoryIn) -> dict:
    now = utcnow()
    category = Category(
        id=new_id(),
        name=data.name,
        slug=data.slug or slugify(data.name),
        description=data.description,
        created_at=now,
        updated_at=now
    )
    result = category_to_dict(category)

    with _storage_errors(db, conflict_message="Category name already exists"):
        db.add(category)
        db.commit()
    return result


def update_category(db: DBSession, category_id: str, data: CategoryIn) -> dict:
    slug = data.slug or slugify(data.name)
    fields = {
        "name": data.name,
        "slug": slug,
        "description": data.description
    }
    with _storage_errors(db, conflict_message="Category name already exists"):
        apply_update(db, Category, category_id, fields)
        db.commit()

    return {"id": category_id, "name": data.name, "slug": slug, "description": data.description}


def delete_category(db: DBSession, category_id: str) -> dict:
    return _delete(db, Category, category_id)


# ============================================================
# ORDERS
# ============================================================

def list_orders(db: DBSession) -> List[dict]:
    with _storage_errors(db):
        rows = db.query(Order).order_by(Order.created_at.desc()).all()
    return [order_to_dict(o) for o in rows]


def get_order(db: DBSession, order_id: str) -> dict:
    with _storage_errors(db):
        order = db.query(Order).filter(Order.id == order_id).first()
    if not order:
        raise NotFound("Order not found")
    return order_to_dict(order)


def create_order(db: DBSession, data: OrderIn) -> dict:
    now = utcnow()
    order = Order(
        id=new_id(),
        customer_name=data.customer_name,
        customer_email=data.customer_email,
        customer_phone=data.customer_phone,
        items=json.dumps(data.items if data.items is not None else []),
        total_amount=data.total_amount,
        status=OrderStatus.pending.value,
        shipping_address=data.shipping_address,
        created_at=now,
        updated_at=now
    )
    result = order_to_dict(order)

    with _storage_errors(db):
        db.add(order)
        db.commit()
    return result


# ============================================================
# PACKAGES
# ============================================================

def list_packages(db: DBSession) -> List[dict]:
    with _storage_errors(db):
        rows = db.query(Package).order_by(Package.created_at.desc()).all()
    return [package_to_dict(p) for p in rows]


def get_package_by_tracking_id(db: DBSession, tracking_id: str) -> dict:
    with _storage_errors(db):
        package = db.query(Package).filter(Package.tracking_id == tracking_id).first()
    if not package:
        raise NotFound("Package not found")
    return package_to_dict(package)


def create_package(db: DBSession, data: PackageIn) -> dict:
    now = utcnow()
    package = Package(
        id=new_id(),
        tracking_id=data.tracking_id,
        order_id=data.order_id,
        status=data.status or PackageStatus.pending.value,
        shipping_route=data.shipping_route or ShippingRoute.sea.value,
        origin=data.origin,
        destination=data.destination,
        current_location=data.current_location,
        estimated_delivery=data.estimated_delivery,
        weight=data.weight,
        notes=data.notes,
        created_at=now,
        updated_at=now
    )
    result = package_to_dict(package)

    with _storage_errors(db, conflict_message="Tracking ID already exists"):
        db.add(package)
        db.commit()
    return result


def update_package(db: DBSession, package_id: str, data: PackageUpdate) -> dict:
    # trackingId, orderId, origin, destination and weight are fixed at creation
    fields = {
        "status": data.status,
        "shipping_route": data.shipping_route,
        "current_location": data.current_location,
        "estimated_delivery": data.estimated_delivery,
        "notes": data.notes
    }
    with _storage_errors(db):
        apply_update(db, Package, package_id, fields)
        db.commit()

    return {
        "id": package_id,
        "status": data.status,
        "shippingRoute": data.shipping_route,
        "currentLocation": data.current_location,
        "estimatedDelivery": data.estimated_delivery,
        "notes": data.notes
    }


def delete_package(db: DBSession, package_id: str) -> dict:
    return _delete(db, Package, package_id)


# ============================================================
# ADMIN AUTH
# ============================================================

def authenticate(db: DBSession, email: str, password: str) -> dict:
    """
    Check an admin login. Unknown email and wrong password raise
    the same InvalidCredentials error.
    """
    with _storage_errors(db):
        admin = db.query(Admin).filter(Admin.email == email).first()

    if not admin:
        # keep response time in line with a real bcrypt check
        pwd_context.dummy_verify()
        raise InvalidCredentials("Invalid credentials")
    if not verify_password(password, admin.password):
        raise InvalidCredentials("Invalid credentials")

    return {"success": True, "email": admin.email, "name": admin.name}


def seed_admin(db: DBSession, email: str, password: str, name: Optional[str] = None):
    """Insert the bootstrap admin unless that email is already registered."""
    stmt = (
        sqlite_insert(Admin.__table__)
        .values(id=new_id(), email=email, password=hash_password(password), name=name)
        .on_conflict_do_nothing(index_elements=["email"])
    )
    with _storage_errors(db):
        db.execute(stmt)
        db.commit()


# ============================================================
# SETTINGS
# ============================================================

def seed_settings(db: DBSession, defaults: Dict[str, str]):
    """Insert-if-absent: a value an operator already set is never touched."""
    with _storage_errors(db):
        for key, value in defaults.items():
            stmt = (
                sqlite_insert(Setting.__table__)
                .values(key=key, value=value)
                .on_conflict_do_nothing(index_elements=["key"])
            )
            db.execute(stmt)
        db.commit()


def list_settings(db: DBSession) -> Dict[str, Optional[str]]:
    with _storage_errors(db):
        rows = db.query(Setting).order_by(Setting.key).all()
    return {s.key: s.value for s in rows}


def get_setting(db: DBSession, key: str) -> dict:
    with _storage_errors(db):
        setting = db.query(Setting).filter(Setting.key == key).first()
    if not setting:
        raise NotFound("Setting not found")
    return {"key": setting.key, "value": setting.value, "updatedAt": _iso(setting.updated_at)}
