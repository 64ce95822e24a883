# provide dataclass models

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple


class Role(str, Enum):
    ADMIN = "admin"
    CUSTOMER = "customer"


class OrderStatus(str, Enum):
    PENDING = "Pending"
    CANCELLED = "Cancelled"


@dataclass(frozen=True)
class User:
    uid: int
    email: str
    pwd: str  # sha256 hex digest
    role: Role
    created_at: datetime


@dataclass(frozen=True)
class Category:
    cat_id: int
    code: str  # "C001", "C002", ...
    name: str
    descr: Optional[str]
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class Product:
    pid: int
    name: str
    descr: Optional[str]
    price: Decimal  # unit price
    stock: int
    cat_id: Optional[int]
    image_urls: Tuple[str, ...]
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class CartItem:
    cart_id: int
    uid: int
    pid: int
    qty: int
    price: Decimal  # line total, not unit price
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class CartLine:
    """A cart row joined with the product fields shown next to it."""

    item: CartItem
    product_name: str
    product_price: Decimal
    product_stock: int
    product_image_urls: Tuple[str, ...]


@dataclass(frozen=True)
class ShippingDetails:
    address: str
    city: str
    zipcode: str
    delivery_date: date
    courier_name: str


@dataclass(frozen=True)
class Order:
    ono: int
    uid: int
    pid: int
    qty: int
    total_amount: Decimal  # unit price * qty, frozen at order time
    status: OrderStatus
    shipping: ShippingDetails
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class OrderView:
    """Flattened order row with the owner's email and the product name."""

    ono: int
    email: str
    product_name: str
    qty: int
    total_amount: Decimal
    status: OrderStatus
    shipping: ShippingDetails
    created_at: datetime
