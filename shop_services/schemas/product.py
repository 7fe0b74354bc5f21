"""
Pydantic models for the product catalogue.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ProductBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200, examples=["Mechanical keyboard"])
    description: Optional[str] = Field(None, examples=["87 keys, brown switches"])
    price: float = Field(..., gt=0, examples=[59.9])
    stock: int = Field(0, ge=0, examples=[25])


class ProductCreate(ProductBase):
    """Schema for creating a product."""
    pass


class ProductRead(ProductBase):
    """Schema for reading a product."""

    id: int
    created_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True,
    }


class StockReservation(BaseModel):
    """Body of ``POST /products/{id}/reserve``."""

    quantity: int = Field(..., gt=0, examples=[2])
