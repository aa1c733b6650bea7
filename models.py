from datetime import datetime, timezone
from sqlalchemy import Column, String, Float, Integer, Text, DateTime, Boolean, text
from database import Base


def utcnow() -> datetime:
    # naive UTC, microsecond resolution (CURRENT_TIMESTAMP only has seconds)
    return datetime.now(timezone.utc).replace(tzinfo=None)


# Column names stay camelCase so databases written by earlier
# versions of the shop keep working as-is.


# ============================================================
# Product
# ============================================================
class Product(Base):
    __tablename__ = "products"

    id                 = Column(String, primary_key=True)
    name               = Column(String, nullable=False)
    description        = Column(Text)
    price              = Column(Float, nullable=False)
    category_id        = Column("categoryId", String)              # soft reference → categories.id
    image              = Column(String)
    stock              = Column(Integer, default=0, server_default=text("0"))
    is_featured        = Column("isFeatured", Boolean, default=False, server_default=text("0"))
    status             = Column(String, default="in_stock", server_default=text("'in_stock'"))
    estimated_delivery = Column("estimatedDelivery", String)
    created_at         = Column("createdAt", DateTime, default=utcnow, server_default=text("CURRENT_TIMESTAMP"))
    updated_at         = Column("updatedAt", DateTime, default=utcnow, server_default=text("CURRENT_TIMESTAMP"))


# ============================================================
# Category — name is unique, slug is derived from it when missing
# ============================================================
class Category(Base):
    __tablename__ = "categories"

    id          = Column(String, primary_key=True)
    name        = Column(String, nullable=False, unique=True)
    slug        = Column(String)
    description = Column(Text)
    created_at  = Column("createdAt", DateTime, default=utcnow, server_default=text("CURRENT_TIMESTAMP"))
    updated_at  = Column("updatedAt", DateTime, default=utcnow, server_default=text("CURRENT_TIMESTAMP"))


# ============================================================
# Order — items is a JSON-encoded list, parsed only when read
# ============================================================
class Order(Base):
    __tablename__ = "orders"

    id               = Column(String, primary_key=True)
    customer_name    = Column("customerName", String, nullable=False)
    customer_email   = Column("customerEmail", String, nullable=False)
    customer_phone   = Column("customerPhone", String)
    items            = Column(Text, nullable=False)                 # '[{"productId": ..., "qty": ...}]'
    total_amount     = Column("totalAmount", Float, nullable=False)
    status           = Column(String, default="pending", server_default=text("'pending'"))
    shipping_address = Column("shippingAddress", Text)
    created_at       = Column("createdAt", DateTime, default=utcnow, server_default=text("CURRENT_TIMESTAMP"))
    updated_at       = Column("updatedAt", DateTime, default=utcnow, server_default=text("CURRENT_TIMESTAMP"))


# ============================================================
# Package — shipment tracking, looked up by trackingId
# ============================================================
class Package(Base):
    __tablename__ = "packages"

    id                 = Column(String, primary_key=True)
    tracking_id        = Column("trackingId", String, nullable=False, unique=True)
    order_id           = Column("orderId", String)                  # soft reference → orders.id, no cascade
    status             = Column(String, default="pending", server_default=text("'pending'"))
    shipping_route     = Column("shippingRoute", String, default="sea", server_default=text("'sea'"))
    origin             = Column(String)
    destination        = Column(String)
    current_location   = Column("currentLocation", String)
    estimated_delivery = Column("estimatedDelivery", String)
    weight             = Column(Float)
    notes              = Column(Text)
    created_at         = Column("createdAt", DateTime, default=utcnow, server_default=text("CURRENT_TIMESTAMP"))
    updated_at         = Column("updatedAt", DateTime, default=utcnow, server_default=text("CURRENT_TIMESTAMP"))


# ============================================================
# Admin — single-tenant login, password is a bcrypt hash
# ============================================================
class Admin(Base):
    __tablename__ = "admins"

    id         = Column(String, primary_key=True)
    email      = Column(String, nullable=False, unique=True)
    password   = Column(String, nullable=False)
    name       = Column(String)
    created_at = Column("createdAt", DateTime, default=utcnow, server_default=text("CURRENT_TIMESTAMP"))


# ============================================================
# Setting — key/value pairs seeded from config on first boot
# ============================================================
class Setting(Base):
    __tablename__ = "settings"

    key        = Column(String, primary_key=True)
    value      = Column(Text)
    updated_at = Column("updatedAt", DateTime, default=utcnow, server_default=text("CURRENT_TIMESTAMP"))
