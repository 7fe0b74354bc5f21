"""
Product endpoints for API v1.

Listing and reading the catalogue is public.  Creating products is
reserved for administrators; reserving and releasing stock is meant for
the orders service.
"""

from typing import List

from fastapi import APIRouter, Depends, Query, status

from shop_services.api.errors import to_http_exception
from shop_services.core.errors import ServiceError
from shop_services.core.security import ROLE_ADMIN, ROLE_SERVICE, require_roles
from shop_services.schemas.product import ProductCreate, ProductRead, StockReservation
from shop_services.services.product_service import ProductService


router = APIRouter()


@router.get("/", response_model=List[ProductRead])
async def list_products(
    limit: int = Query(default=50, ge=1, le=100, description="Max products to return"),
    offset: int = Query(default=0, ge=0, description="Number of products to skip"),
) -> List[ProductRead]:
    return await ProductService.list_products(limit=limit, offset=offset)


@router.post("/", response_model=ProductRead, status_code=status.HTTP_201_CREATED)
async def create_product(
    product: ProductCreate,
    current_user: dict = Depends(require_roles(ROLE_ADMIN)),
) -> ProductRead:
    return await ProductService.create_product(product)


@router.get("/{product_id}", response_model=ProductRead)
async def get_product(product_id: int) -> ProductRead:
    try:
        return await ProductService.get_product(product_id)
    except ServiceError as e:
        raise to_http_exception(e)


@router.post("/{product_id}/reserve", response_model=ProductRead)
async def reserve_stock(
    product_id: int,
    body: StockReservation,
    current_user: dict = Depends(require_roles(ROLE_ADMIN, ROLE_SERVICE)),
) -> ProductRead:
    """Take units out of stock; 409 if not enough are available."""
    try:
        return await ProductService.reserve(product_id, body.quantity)
    except ServiceError as e:
        raise to_http_exception(e)


@router.post("/{product_id}/release", response_model=ProductRead)
async def release_stock(
    product_id: int,
    body: StockReservation,
    current_user: dict = Depends(require_roles(ROLE_ADMIN, ROLE_SERVICE)),
) -> ProductRead:
    try:
        return await ProductService.release(product_id, body.quantity)
    except ServiceError as e:
        raise to_http_exception(e)
