"""
Pydantic models for orders.

An order references a user and products that live in other services;
only their identifiers (and the unit price captured at ordering time)
are stored here.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class OrderStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    CANCELLED = "cancelled"


# Allowed status changes; anything else is rejected with 409.
ORDER_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PAID, OrderStatus.CANCELLED},
    OrderStatus.PAID: set(),
    OrderStatus.CANCELLED: set(),
}


class OrderItemCreate(BaseModel):
    product_id: int = Field(..., gt=0, examples=[1])
    quantity: int = Field(..., gt=0, examples=[2])


class OrderItemRead(OrderItemCreate):
    unit_price: float


class OrderCreate(BaseModel):
    """Schema for creating an order.

    ``user_id`` defaults to the authenticated caller.  Only admins and
    services may place orders on behalf of somebody else.
    """

    user_id: Optional[int] = Field(None, gt=0, examples=[1])
    items: List[OrderItemCreate] = Field(..., min_length=1)


class OrderRead(BaseModel):
    id: int
    user_id: int
    status: OrderStatus
    total: float
    currency: str = "USD"
    items: List[OrderItemRead] = []
    created_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True,
    }


class OrderStatusUpdate(BaseModel):
    status: OrderStatus
