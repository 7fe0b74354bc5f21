"""
Business logic for orders.

Placing an order touches three services: the users service confirms
that the customer exists, the products service reserves stock and
reports the current price, and only then is the order stored locally.
If a reservation fails part-way, or the order cannot be stored, the
units already reserved for the order are released again before the
error is reported.  Cancelling an order releases its units as well.
"""

import logging
import sqlite3
from typing import Any, Dict, List, Optional, Tuple

from fastapi.concurrency import run_in_threadpool

from shop_services.clients import ProductsClient, UsersClient
from shop_services.core.config import settings
from shop_services.core.db import get_connection
from shop_services.core.errors import ConflictError, NotFoundError, PermissionDeniedError, RemoteServiceError
from shop_services.core.security import forwarding_token, is_privileged
from shop_services.schemas.order import (
    ORDER_TRANSITIONS,
    OrderCreate,
    OrderItemRead,
    OrderRead,
    OrderStatus,
)


logger = logging.getLogger(__name__)

SERVICE = "orders"
CURRENCY = "USD"


def _load_order(conn: sqlite3.Connection, order_id: int) -> Optional[OrderRead]:
    row = conn.execute(
        "SELECT id, user_id, status, total, currency, created_at FROM orders WHERE id = ?",
        (order_id,),
    ).fetchone()
    if not row:
        return None
    items = conn.execute(
        "SELECT product_id, quantity, unit_price FROM order_items WHERE order_id = ? ORDER BY id",
        (order_id,),
    ).fetchall()
    return OrderRead(
        id=row["id"],
        user_id=row["user_id"],
        status=row["status"],
        total=row["total"],
        currency=row["currency"],
        created_at=row["created_at"],
        items=[
            OrderItemRead(product_id=i["product_id"], quantity=i["quantity"], unit_price=i["unit_price"])
            for i in items
        ],
    )


class OrderService:
    """Order placement, lookup and status changes."""

    @classmethod
    async def _resolve_user(cls, user_id: int, current_user: Dict[str, Any]) -> Dict[str, Any]:
        with UsersClient(token=forwarding_token(current_user)) as client:
            user, error = await run_in_threadpool(client.get_user, user_id)
        if error:
            if error.get("status_code") == 404:
                raise NotFoundError(f"User {user_id} not found")
            raise RemoteServiceError("users", error.get("message", ""), error.get("status_code"))
        return user

    @classmethod
    async def _release(cls, client: ProductsClient, reserved: List[Tuple[int, int]]) -> None:
        for product_id, quantity in reserved:
            _, error = await run_in_threadpool(client.release, product_id, quantity)
            if error:
                logger.error(
                    "Could not release %s unit(s) of product %s: %s",
                    quantity, product_id, error.get("message"),
                )

    @classmethod
    async def _reserve_items(cls, client: ProductsClient, data: OrderCreate) -> List[OrderItemRead]:
        reserved: List[Tuple[int, int]] = []
        items: List[OrderItemRead] = []
        for item in data.items:
            product, error = await run_in_threadpool(client.reserve, item.product_id, item.quantity)
            if error:
                await cls._release(client, reserved)
                status_code = error.get("status_code")
                if status_code == 404:
                    raise NotFoundError(f"Product {item.product_id} not found")
                if status_code == 409:
                    raise ConflictError(f"Insufficient stock for product {item.product_id}")
                raise RemoteServiceError("products", error.get("message", ""), status_code)
            reserved.append((item.product_id, item.quantity))
            items.append(
                OrderItemRead(product_id=item.product_id, quantity=item.quantity, unit_price=product["price"])
            )
        return items

    @staticmethod
    def _insert_order(user_id: int, items: List[OrderItemRead], total: float) -> OrderRead:
        conn = get_connection(SERVICE)
        try:
            cursor = conn.execute(
                "INSERT INTO orders (user_id, status, total, currency) VALUES (?, ?, ?, ?)",
                (user_id, OrderStatus.PENDING.value, total, CURRENCY),
            )
            order_id = cursor.lastrowid
            conn.executemany(
                "INSERT INTO order_items (order_id, product_id, quantity, unit_price) VALUES (?, ?, ?, ?)",
                [(order_id, i.product_id, i.quantity, i.unit_price) for i in items],
            )
            conn.commit()
            return _load_order(conn, order_id)
        except sqlite3.Error:
            conn.rollback()
            raise
        finally:
            conn.close()

    @classmethod
    async def create_order(cls, data: OrderCreate, current_user: Dict[str, Any]) -> OrderRead:
        """Place an order.

        Raises
        ------
        PermissionDeniedError
            A regular user tried to order for somebody else.
        ValueError
            No user id was given and the caller is not a user.
        NotFoundError
            The user or one of the products does not exist.
        ConflictError
            A product does not have enough stock.
        RemoteServiceError
            The users or products service failed.
        sqlite3.Error
            The order could not be stored; its stock has been released.
        """
        user_id = data.user_id or current_user.get("user_id")
        if user_id is None:
            raise ValueError("user_id is required")
        if not is_privileged(current_user) and user_id != current_user.get("user_id"):
            raise PermissionDeniedError("Cannot place orders for another user")

        await cls._resolve_user(user_id, current_user)
        with ProductsClient(token=settings.outgoing_service_token()) as client:
            items = await cls._reserve_items(client, data)
            total = round(sum(item.quantity * item.unit_price for item in items), 2)
            try:
                order = cls._insert_order(user_id, items, total)
            except sqlite3.Error:
                logger.exception("Could not store order for user %s, releasing its stock", user_id)
                await cls._release(client, [(i.product_id, i.quantity) for i in items])
                raise
        logger.info("Created order %s for user %s, total %.2f %s", order.id, user_id, total, CURRENCY)
        return order

    @classmethod
    async def get_order(cls, order_id: int, current_user: Dict[str, Any]) -> OrderRead:
        conn = get_connection(SERVICE)
        try:
            order = _load_order(conn, order_id)
        finally:
            conn.close()
        if order is None:
            raise NotFoundError(f"Order {order_id} not found")
        if not is_privileged(current_user) and order.user_id != current_user.get("user_id"):
            raise PermissionDeniedError("Cannot access another user's order")
        return order

    @classmethod
    async def list_orders(cls, current_user: Dict[str, Any]) -> List[OrderRead]:
        """Admins and services see every order, users only their own."""
        conn = get_connection(SERVICE)
        try:
            if is_privileged(current_user):
                rows = conn.execute("SELECT id FROM orders ORDER BY id").fetchall()
            else:
                rows = conn.execute(
                    "SELECT id FROM orders WHERE user_id = ? ORDER BY id",
                    (current_user.get("user_id"),),
                ).fetchall()
            return [_load_order(conn, row["id"]) for row in rows]
        finally:
            conn.close()

    @classmethod
    async def update_status(cls, order_id: int, new_status: OrderStatus) -> OrderRead:
        """Move an order to ``new_status`` if the transition is allowed.

        Cancelling an order returns its reserved units to the products
        service.
        """
        conn = get_connection(SERVICE)
        try:
            row = conn.execute("SELECT status FROM orders WHERE id = ?", (order_id,)).fetchone()
            if not row:
                raise NotFoundError(f"Order {order_id} not found")
            current = OrderStatus(row["status"])
            if new_status not in ORDER_TRANSITIONS[current]:
                raise ConflictError(f"Cannot change order {order_id} from {current.value} to {new_status.value}")
            # Guard on the old status so two concurrent updates cannot both win.
            cursor = conn.execute(
                "UPDATE orders SET status = ?, updated_at = CURRENT_TIMESTAMP WHERE id = ? AND status = ?",
                (new_status.value, order_id, current.value),
            )
            if cursor.rowcount == 0:
                conn.rollback()
                raise ConflictError(f"Order {order_id} was modified concurrently")
            conn.commit()
            order = _load_order(conn, order_id)
        finally:
            conn.close()
        logger.info("Order %s: %s -> %s", order_id, current.value, new_status.value)
        if new_status == OrderStatus.CANCELLED:
            with ProductsClient(token=settings.outgoing_service_token()) as client:
                await cls._release(client, [(i.product_id, i.quantity) for i in order.items])
        return order
