"""
Business logic for payments.

No payment provider is involved: a payment is recorded as successful
immediately and the order is then marked as paid in the orders service.
When that last step fails the payment row is kept, flagged ``failed``,
so the attempt stays visible for reconciliation.
"""

import logging
import sqlite3
from typing import Any, Dict, List

from fastapi.concurrency import run_in_threadpool

from shop_services.clients import OrdersClient
from shop_services.core.config import settings
from shop_services.core.db import get_connection
from shop_services.core.errors import ConflictError, NotFoundError, PermissionDeniedError, RemoteServiceError
from shop_services.core.security import forwarding_token, is_privileged
from shop_services.schemas.order import OrderStatus
from shop_services.schemas.payment import PaymentCreate, PaymentRead, PaymentStatus


logger = logging.getLogger(__name__)

SERVICE = "payments"

_COLUMNS = "id, order_id, user_id, amount, currency, method, status, created_at"


def _to_payment(row: sqlite3.Row) -> PaymentRead:
    return PaymentRead(
        id=row["id"],
        order_id=row["order_id"],
        user_id=row["user_id"],
        amount=row["amount"],
        currency=row["currency"],
        method=row["method"],
        status=row["status"],
        created_at=row["created_at"],
    )


class PaymentService:
    """Payment recording and lookup."""

    @classmethod
    async def _fetch_order(cls, order_id: int, current_user: Dict[str, Any]) -> Dict[str, Any]:
        with OrdersClient(token=forwarding_token(current_user)) as client:
            order, error = await run_in_threadpool(client.get_order, order_id)
        if error:
            status_code = error.get("status_code")
            if status_code == 404:
                raise NotFoundError(f"Order {order_id} not found")
            if status_code == 403:
                raise PermissionDeniedError("Cannot pay for another user's order")
            raise RemoteServiceError("orders", error.get("message", ""), status_code)
        return order

    @classmethod
    async def create_payment(cls, data: PaymentCreate, current_user: Dict[str, Any]) -> PaymentRead:
        """Pay for a pending order.

        Raises ``NotFoundError``, ``PermissionDeniedError``,
        ``ConflictError`` (order not pending) or ``RemoteServiceError``.
        """
        order = await cls._fetch_order(data.order_id, current_user)
        if order.get("status") != OrderStatus.PENDING.value:
            raise ConflictError(f"Order {data.order_id} is not awaiting payment")

        conn = get_connection(SERVICE)
        try:
            cursor = conn.execute(
                "INSERT INTO payments (order_id, user_id, amount, currency, method, status) "
                "VALUES (?, ?, ?, ?, ?, ?)",
                (
                    data.order_id,
                    order["user_id"],
                    order["total"],
                    order.get("currency", "USD"),
                    data.method.value,
                    PaymentStatus.SUCCESS.value,
                ),
            )
            payment_id = cursor.lastrowid
            conn.commit()

            with OrdersClient(token=settings.outgoing_service_token()) as client:
                _, error = await run_in_threadpool(client.set_status, data.order_id, OrderStatus.PAID.value)
            if error:
                conn.execute(
                    "UPDATE payments SET status = ? WHERE id = ?",
                    (PaymentStatus.FAILED.value, payment_id),
                )
                conn.commit()
                logger.error("Payment %s recorded as failed: order %s not marked paid", payment_id, data.order_id)
                # Reported as 502 whatever the remote status was.
                raise RemoteServiceError("orders", error.get("message", ""), error.get("status_code") or 502)

            row = conn.execute(f"SELECT {_COLUMNS} FROM payments WHERE id = ?", (payment_id,)).fetchone()
        finally:
            conn.close()
        logger.info("Payment %s settled order %s (%.2f)", payment_id, data.order_id, order["total"])
        return _to_payment(row)

    @classmethod
    async def get_payment(cls, payment_id: int, current_user: Dict[str, Any]) -> PaymentRead:
        conn = get_connection(SERVICE)
        try:
            row = conn.execute(f"SELECT {_COLUMNS} FROM payments WHERE id = ?", (payment_id,)).fetchone()
        finally:
            conn.close()
        if not row:
            raise NotFoundError(f"Payment {payment_id} not found")
        if not is_privileged(current_user) and row["user_id"] != current_user.get("user_id"):
            raise PermissionDeniedError("Cannot access another user's payment")
        return _to_payment(row)

    @classmethod
    async def list_payments(cls, current_user: Dict[str, Any]) -> List[PaymentRead]:
        conn = get_connection(SERVICE)
        try:
            if is_privileged(current_user):
                rows = conn.execute(f"SELECT {_COLUMNS} FROM payments ORDER BY id").fetchall()
            else:
                rows = conn.execute(
                    f"SELECT {_COLUMNS} FROM payments WHERE user_id = ? ORDER BY id",
                    (current_user.get("user_id"),),
                ).fetchall()
        finally:
            conn.close()
        return [_to_payment(row) for row in rows]
