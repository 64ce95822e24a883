"""FastAPI routes for the shopping cart."""

from fastapi import APIRouter, Path

from api.schemas import (
    CartItemRequest,
    CartItemResponse,
    CartItemSchema,
    CartLineSchema,
    CartListResponse,
    MessageResponse,
)
from services import carts
from utils.pure import SQLITE_MAX_INT

router = APIRouter(prefix="/cart", tags=["cart"])


@router.post("/addCart", response_model=CartItemResponse)
async def add_cart(body: CartItemRequest) -> CartItemResponse:
    item = await carts.add_item(body.email, body.product_id, body.quantity)
    return CartItemResponse(
        message="Product added to cart successfully",
        cart_item=CartItemSchema.from_record(item),
    )


@router.get("/getallCart", response_model=CartListResponse)
async def get_all_cart(email: str) -> CartListResponse:
    lines = await carts.list_items(email)
    message = "Cart items retrieved successfully" if lines else "Cart is empty"
    return CartListResponse(
        message=message, cart_items=[CartLineSchema.from_line(line) for line in lines]
    )


@router.put("/updateCartQuantity", response_model=CartItemResponse)
async def update_cart_quantity(body: CartItemRequest) -> CartItemResponse:
    item = await carts.update_quantity(body.email, body.product_id, body.quantity)
    return CartItemResponse(
        message="Cart item quantity updated successfully",
        cart_item=CartItemSchema.from_record(item),
    )


@router.delete("/removeCartItem/{email}/{cart_id}", response_model=MessageResponse)
async def remove_cart_item(
    email: str, cart_id: int = Path(le=SQLITE_MAX_INT)
) -> MessageResponse:
    await carts.remove_item(email, cart_id)
    return MessageResponse(message="Cart item removed successfully")
