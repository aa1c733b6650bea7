from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


# ============================================================
# Status enums — closed on the way in, stored as plain strings
# ============================================================

class ProductStatus(str, Enum):
    in_stock = "in_stock"
    out_of_stock = "out_of_stock"
    low_stock = "low_stock"
    pre_order = "pre_order"
    discontinued = "discontinued"


class OrderStatus(str, Enum):
    pending = "pending"
    processing = "processing"
    shipped = "shipped"
    delivered = "delivered"
    cancelled = "cancelled"


class PackageStatus(str, Enum):
    pending = "pending"
    processing = "processing"
    in_transit = "in_transit"
    out_for_delivery = "out_for_delivery"
    delivered = "delivered"
    returned = "returned"
    cancelled = "cancelled"


class ShippingRoute(str, Enum):
    sea = "sea"
    air = "air"
    land = "land"


# ============================================================
# Request bodies
# ============================================================
# Wire format is camelCase (categoryId, isFeatured, ...).
# Every field except the ones noted is optional: a missing field
# arrives as None and PUT handlers write it through as NULL.
# ============================================================

class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, use_enum_values=True)


class ProductIn(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None
    category_id: Optional[str] = None
    image: Optional[str] = None
    stock: Optional[int] = None
    is_featured: Optional[bool] = None
    status: Optional[ProductStatus] = None
    estimated_delivery: Optional[str] = None


class CategoryIn(CamelModel):
    name: str  # slug is derived from it
    slug: Optional[str] = None
    description: Optional[str] = None


class OrderIn(CamelModel):
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    items: Optional[List[Dict[str, Any]]] = None  # [{"productId": "...", "qty": 2, "price": 9.5}, ...]
    total_amount: Optional[float] = None
    shipping_address: Optional[str] = None


class PackageIn(CamelModel):
    tracking_id: Optional[str] = None
    order_id: Optional[str] = None
    status: Optional[PackageStatus] = None
    shipping_route: Optional[ShippingRoute] = None
    origin: Optional[str] = None
    destination: Optional[str] = None
    current_location: Optional[str] = None
    estimated_delivery: Optional[str] = None
    weight: Optional[float] = None
    notes: Optional[str] = None


class PackageUpdate(CamelModel):
    """Only the fields a shipment update may touch."""
    status: Optional[PackageStatus] = None
    shipping_route: Optional[ShippingRoute] = None
    current_location: Optional[str] = None
    estimated_delivery: Optional[str] = None
    notes: Optional[str] = None


class LoginIn(BaseModel):
    email: str
    password: str
