"""
Payment endpoints for API v1.
"""

from typing import List

from fastapi import APIRouter, Depends, status

from shop_services.api.errors import to_http_exception
from shop_services.core.errors import ServiceError
from shop_services.core.security import get_current_user
from shop_services.schemas.payment import PaymentCreate, PaymentRead
from shop_services.services.payment_service import PaymentService


router = APIRouter()


@router.post("/", response_model=PaymentRead, status_code=status.HTTP_201_CREATED)
async def create_payment(payment: PaymentCreate, current_user: dict = Depends(get_current_user)) -> PaymentRead:
    """Pay for a pending order.

    The amount is the order total as reported by the orders service.
    Paying for an order that is not pending yields 409.
    """
    try:
        return await PaymentService.create_payment(payment, current_user)
    except ServiceError as e:
        raise to_http_exception(e)


@router.get("/", response_model=List[PaymentRead])
async def list_payments(current_user: dict = Depends(get_current_user)) -> List[PaymentRead]:
    return await PaymentService.list_payments(current_user)


@router.get("/{payment_id}", response_model=PaymentRead)
async def get_payment(payment_id: int, current_user: dict = Depends(get_current_user)) -> PaymentRead:
    try:
        return await PaymentService.get_payment(payment_id, current_user)
    except ServiceError as e:
        raise to_http_exception(e)
