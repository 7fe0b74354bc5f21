"""
Order endpoints for API v1.
"""

from typing import List

from fastapi import APIRouter, Depends, status

from shop_services.api.errors import to_http_exception
from shop_services.core.errors import ServiceError
from shop_services.core.security import ROLE_ADMIN, ROLE_SERVICE, get_current_user, require_roles
from shop_services.schemas.order import OrderCreate, OrderRead, OrderStatusUpdate
from shop_services.services.order_service import OrderService


router = APIRouter()


@router.post("/", response_model=OrderRead, status_code=status.HTTP_201_CREATED)
async def create_order(order: OrderCreate, current_user: dict = Depends(get_current_user)) -> OrderRead:
    """Place an order.

    The user is looked up in the users service first; an unknown user
    id yields 404.  Stock is reserved in the products service; missing
    products yield 404 and insufficient stock 409.
    """
    try:
        return await OrderService.create_order(order, current_user)
    except (ServiceError, ValueError) as e:
        raise to_http_exception(e)


@router.get("/", response_model=List[OrderRead])
async def list_orders(current_user: dict = Depends(get_current_user)) -> List[OrderRead]:
    return await OrderService.list_orders(current_user)


@router.get("/{order_id}", response_model=OrderRead)
async def get_order(order_id: int, current_user: dict = Depends(get_current_user)) -> OrderRead:
    try:
        return await OrderService.get_order(order_id, current_user)
    except ServiceError as e:
        raise to_http_exception(e)


@router.patch("/{order_id}/status", response_model=OrderRead)
async def update_order_status(
    order_id: int,
    body: OrderStatusUpdate,
    current_user: dict = Depends(require_roles(ROLE_ADMIN, ROLE_SERVICE)),
) -> OrderRead:
    """Change the status of an order (payments service or administrators)."""
    try:
        return await OrderService.update_status(order_id, body.status)
    except ServiceError as e:
        raise to_http_exception(e)
