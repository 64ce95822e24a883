"""FastAPI routes for orders."""

from fastapi import APIRouter, Depends, Path

from api.deps import require_admin
from api.schemas import (
    AllOrdersResponse,
    CancelOrderResponse,
    OrderDetailResponse,
    OrderHistoryResponse,
    OrderResponse,
    OrderSchema,
    OrderViewSchema,
    PlaceOrderRequest,
)
from services import orders
from utils.pure import SQLITE_MAX_INT

router = APIRouter(prefix="/order", tags=["order"])


@router.post("/placeOrder", status_code=201, response_model=OrderResponse)
async def place_order(body: PlaceOrderRequest) -> OrderResponse:
    order = await orders.place_order(
        body.email, body.product_id, body.quantity, body.shipping()
    )
    return OrderResponse(
        message="Order placed successfully", order=OrderSchema.from_record(order)
    )


@router.get("/getOrdersByEmail/{email}", response_model=OrderHistoryResponse)
async def get_orders_by_email(email: str) -> OrderHistoryResponse:
    views = await orders.list_orders(email)
    return OrderHistoryResponse(
        message="Order History retrieved successfully",
        order_data=[OrderViewSchema.from_view(v) for v in views],
    )


@router.get(
    "/getallOrders",
    response_model=AllOrdersResponse,
    dependencies=[Depends(require_admin)],
)
async def get_all_orders() -> AllOrdersResponse:
    views = await orders.list_all_orders()
    return AllOrdersResponse(
        message="All orders retrieved successfully",
        orders=[OrderViewSchema.from_view(v) for v in views],
    )


@router.get("/getOrderById/{email}/{order_id}", response_model=OrderDetailResponse)
async def get_order_by_id(
    email: str, order_id: int = Path(le=SQLITE_MAX_INT)
) -> OrderDetailResponse:
    view = await orders.get_order(email, order_id)
    return OrderDetailResponse(
        message="Order details retrieved successfully",
        order=OrderViewSchema.from_view(view),
    )


@router.put("/cancelOrder/{email}/{order_id}", response_model=CancelOrderResponse)
async def cancel_order(
    email: str, order_id: int = Path(le=SQLITE_MAX_INT)
) -> CancelOrderResponse:
    order = await orders.cancel_order(email, order_id)
    return CancelOrderResponse(
        message="Order cancelled successfully", order_id=order.ono, user_email=email
    )
