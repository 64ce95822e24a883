"""Pydantic request/response schemas for the HTTP API.

Field names are snake_case in Python and camelCase on the wire.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from db import models
from utils.pure import SQLITE_MAX_INT


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MessageResponse(CamelModel):
    message: str


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------
class RegisterUserRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=6)


class UserSchema(CamelModel):
    id: int
    email: str
    role: str
    created_at: datetime

    @classmethod
    def from_record(cls, user: models.User) -> "UserSchema":
        return cls(id=user.uid, email=user.email, role=user.role.value, created_at=user.created_at)


class UserResponse(MessageResponse):
    user_data: UserSchema


class UserDetailResponse(MessageResponse):
    user: UserSchema


class UserListResponse(MessageResponse):
    users: List[UserSchema]


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------
class CategoryRequest(CamelModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None


class CategorySchema(CamelModel):
    id: int
    category_id: str
    name: str
    description: Optional[str]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_record(cls, category: models.Category) -> "CategorySchema":
        return cls(
            id=category.cat_id,
            category_id=category.code,
            name=category.name,
            description=category.descr,
            created_at=category.created_at,
            updated_at=category.updated_at,
        )


class CategoryResponse(MessageResponse):
    category: CategorySchema


class CategoryListResponse(MessageResponse):
    categories: List[CategorySchema]


class ProductCreateRequest(CamelModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    price: Decimal = Field(ge=0)
    stock: int = Field(ge=0, le=SQLITE_MAX_INT)
    category_id: Optional[int] = Field(default=None, le=SQLITE_MAX_INT)
    image_urls: List[str] = Field(default_factory=list)


class ProductUpdateRequest(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, ge=0)
    stock: Optional[int] = Field(default=None, ge=0, le=SQLITE_MAX_INT)
    category_id: Optional[int] = Field(default=None, le=SQLITE_MAX_INT)
    image_urls: Optional[List[str]] = None


class ProductSchema(CamelModel):
    id: int
    name: str
    description: Optional[str]
    price: Decimal
    stock: int
    category_id: Optional[int]
    image_urls: List[str]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_record(cls, product: models.Product) -> "ProductSchema":
        return cls(
            id=product.pid,
            name=product.name,
            description=product.descr,
            price=product.price,
            stock=product.stock,
            category_id=product.cat_id,
            image_urls=list(product.image_urls),
            created_at=product.created_at,
            updated_at=product.updated_at,
        )


class ProductResponse(MessageResponse):
    product: ProductSchema


class ProductListResponse(MessageResponse):
    products: List[ProductSchema]


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
class CartItemRequest(CamelModel):
    email: str = Field(min_length=1)
    product_id: int = Field(le=SQLITE_MAX_INT)
    quantity: int = Field(gt=0)


class CartItemSchema(CamelModel):
    id: int
    user_id: int
    product_id: int
    quantity: int
    price: Decimal
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_record(cls, item: models.CartItem) -> "CartItemSchema":
        return cls(
            id=item.cart_id,
            user_id=item.uid,
            product_id=item.pid,
            quantity=item.qty,
            price=item.price,
            created_at=item.created_at,
            updated_at=item.updated_at,
        )


class CartProductSchema(CamelModel):
    id: int
    name: str
    price: Decimal
    stock: int
    image_url: List[str]


class CartLineSchema(CartItemSchema):
    product: CartProductSchema

    @classmethod
    def from_line(cls, line: models.CartLine) -> "CartLineSchema":
        base = CartItemSchema.from_record(line.item)
        return cls(
            **base.model_dump(),
            product=CartProductSchema(
                id=line.item.pid,
                name=line.product_name,
                price=line.product_price,
                stock=line.product_stock,
                image_url=list(line.product_image_urls),
            ),
        )


class CartItemResponse(MessageResponse):
    cart_item: CartItemSchema


class CartListResponse(MessageResponse):
    cart_items: List[CartLineSchema]


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class PlaceOrderRequest(CamelModel):
    email: str = Field(min_length=1)
    product_id: int = Field(le=SQLITE_MAX_INT)
    quantity: int = Field(gt=0)
    address: str = Field(min_length=1)
    city: str = Field(min_length=1)
    zipcode: str = Field(min_length=1)
    delivery_date: date
    courier_name: str = Field(min_length=1)

    def shipping(self) -> models.ShippingDetails:
        return models.ShippingDetails(
            address=self.address,
            city=self.city,
            zipcode=self.zipcode,
            delivery_date=self.delivery_date,
            courier_name=self.courier_name,
        )


class OrderSchema(CamelModel):
    id: int
    user_id: int
    product_id: int
    quantity: int
    total_amount: Decimal
    status: str
    address: str
    city: str
    zipcode: str
    delivery_date: date
    courier_name: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_record(cls, order: models.Order) -> "OrderSchema":
        return cls(
            id=order.ono,
            user_id=order.uid,
            product_id=order.pid,
            quantity=order.qty,
            total_amount=order.total_amount,
            status=order.status.value,
            address=order.shipping.address,
            city=order.shipping.city,
            zipcode=order.shipping.zipcode,
            delivery_date=order.shipping.delivery_date,
            courier_name=order.shipping.courier_name,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


class OrderViewSchema(CamelModel):
    order_id: int
    user_email: str
    product_name: str
    quantity: int
    total_amount: Decimal
    status: str
    address: str
    city: str
    zipcode: str
    delivery_date: date
    courier_name: str
    order_date: datetime

    @classmethod
    def from_view(cls, view: models.OrderView) -> "OrderViewSchema":
        return cls(
            order_id=view.ono,
            user_email=view.email,
            product_name=view.product_name,
            quantity=view.qty,
            total_amount=view.total_amount,
            status=view.status.value,
            address=view.shipping.address,
            city=view.shipping.city,
            zipcode=view.shipping.zipcode,
            delivery_date=view.shipping.delivery_date,
            courier_name=view.shipping.courier_name,
            order_date=view.created_at,
        )


class OrderResponse(MessageResponse):
    order: OrderSchema


class OrderDetailResponse(MessageResponse):
    order: OrderViewSchema


class OrderHistoryResponse(MessageResponse):
    order_data: List[OrderViewSchema]


class AllOrdersResponse(MessageResponse):
    orders: List[OrderViewSchema]


class CancelOrderResponse(MessageResponse):
    order_id: int
    user_email: str
