"""
Business logic for the product catalogue.

Stock is only ever decremented through ``reserve``, which performs the
check and the update in a single statement so that concurrent orders
cannot oversell a product.
"""

import logging
import sqlite3
from typing import List

from shop_services.core.db import get_connection
from shop_services.core.errors import ConflictError, NotFoundError
from shop_services.schemas.product import ProductCreate, ProductRead


logger = logging.getLogger(__name__)

SERVICE = "products"

_COLUMNS = "id, name, description, price, stock, created_at"


def _to_product(row: sqlite3.Row) -> ProductRead:
    return ProductRead(
        id=row["id"],
        name=row["name"],
        description=row["description"],
        price=row["price"],
        stock=row["stock"],
        created_at=row["created_at"],
    )


class ProductService:
    """Catalogue operations."""

    @classmethod
    async def create_product(cls, data: ProductCreate) -> ProductRead:
        conn = get_connection(SERVICE)
        try:
            cursor = conn.execute(
                "INSERT INTO products (name, description, price, stock) VALUES (?, ?, ?, ?)",
                (data.name, data.description, data.price, data.stock),
            )
            product_id = cursor.lastrowid
            conn.commit()
            row = conn.execute(f"SELECT {_COLUMNS} FROM products WHERE id = ?", (product_id,)).fetchone()
        finally:
            conn.close()
        logger.info("Created product %s (%s)", product_id, data.name)
        return _to_product(row)

    @classmethod
    async def list_products(cls, limit: int = 50, offset: int = 0) -> List[ProductRead]:
        conn = get_connection(SERVICE)
        try:
            rows = conn.execute(
                f"SELECT {_COLUMNS} FROM products ORDER BY id LIMIT ? OFFSET ?",
                (limit, offset),
            ).fetchall()
        finally:
            conn.close()
        return [_to_product(row) for row in rows]

    @classmethod
    async def get_product(cls, product_id: int) -> ProductRead:
        conn = get_connection(SERVICE)
        try:
            row = conn.execute(f"SELECT {_COLUMNS} FROM products WHERE id = ?", (product_id,)).fetchone()
        finally:
            conn.close()
        if not row:
            raise NotFoundError(f"Product {product_id} not found")
        return _to_product(row)

    @classmethod
    async def reserve(cls, product_id: int, quantity: int) -> ProductRead:
        """Decrement the stock of a product by ``quantity``.

        Raises ``NotFoundError`` for an unknown product and
        ``ConflictError`` when less than ``quantity`` units are in stock;
        in both cases the stock is left untouched.
        """
        conn = get_connection(SERVICE)
        try:
            cursor = conn.execute(
                "UPDATE products SET stock = stock - ?, updated_at = CURRENT_TIMESTAMP "
                "WHERE id = ? AND stock >= ?",
                (quantity, product_id, quantity),
            )
            if cursor.rowcount == 0:
                exists = conn.execute("SELECT 1 FROM products WHERE id = ?", (product_id,)).fetchone()
                conn.rollback()
                if not exists:
                    raise NotFoundError(f"Product {product_id} not found")
                raise ConflictError("Insufficient stock")
            conn.commit()
            row = conn.execute(f"SELECT {_COLUMNS} FROM products WHERE id = ?", (product_id,)).fetchone()
        finally:
            conn.close()
        logger.info("Reserved %s unit(s) of product %s, %s left", quantity, product_id, row["stock"])
        return _to_product(row)

    @classmethod
    async def release(cls, product_id: int, quantity: int) -> ProductRead:
        """Put ``quantity`` previously reserved units back into stock."""
        conn = get_connection(SERVICE)
        try:
            cursor = conn.execute(
                "UPDATE products SET stock = stock + ?, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                (quantity, product_id),
            )
            if cursor.rowcount == 0:
                raise NotFoundError(f"Product {product_id} not found")
            conn.commit()
            row = conn.execute(f"SELECT {_COLUMNS} FROM products WHERE id = ?", (product_id,)).fetchone()
        finally:
            conn.close()
        logger.info("Released %s unit(s) of product %s", quantity, product_id)
        return _to_product(row)
