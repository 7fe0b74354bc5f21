"""
Pydantic models for payment data.

A payment settles exactly one order; the amount is taken from the
order, never from the client.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class PaymentMethod(str, Enum):
    CARD = "card"
    CASH = "cash"
    WALLET = "wallet"


class PaymentStatus(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"


class PaymentCreate(BaseModel):
    """Schema for creating a payment."""

    order_id: int = Field(..., gt=0, examples=[1])
    method: PaymentMethod = Field(PaymentMethod.CARD, examples=["card"])


class PaymentRead(BaseModel):
    """Schema for reading a payment."""

    id: int
    order_id: int
    user_id: int
    amount: float
    currency: str = "USD"
    method: PaymentMethod
    status: PaymentStatus
    created_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True,
    }
