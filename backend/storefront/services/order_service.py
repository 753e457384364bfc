"""
Checkout and order management.

Order creation is a single-shot submission: validate, allocate the next order
number, insert with status=pending, build the WhatsApp hand-off link, then
hand notification emails to the background dispatcher. Email outcome never
affects the response.
"""

from __future__ import annotations

from flask import current_app
from sqlalchemy import or_

from ..extensions import db
from ..models import Order
from ..models.orders import ORDER_STATUSES, STATUS_CANCELLED, STATUS_PENDING
from ..validation import validate_order_payload, validate_order_update
from .concurrency import run_with_retry
from .notification_service import get_email_dispatcher
from .sequence_service import next_sequence_number
from .whatsapp_service import generate_whatsapp_link


class OrderError(Exception):
    """Raised for order operation errors."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


class OrderNotFound(OrderError):
    pass


def can_transition(current: str, new: str) -> bool:
    """
    Whether an order may move from `current` to `new`.

    Every pair of known statuses is currently allowed, including backwards
    moves such as delivered -> pending. This is the single place a real
    transition table would be enforced.
    """
    return current in ORDER_STATUSES and new in ORDER_STATUSES


def create_order(payload: dict) -> tuple[Order, str]:
    """
    Validate and persist a checkout submission.

    Returns (order, whatsapp_link). Raises ValidationError without touching
    the database when the payload is invalid.
    """
    data = validate_order_payload(payload)
    shipping_cost = int(current_app.config.get("SHIPPING_COST", 0))
    subtotal = int(round(data["total"]))

    def _op() -> Order:
        order_number = next_sequence_number()
        order = Order(
            order_number=order_number,
            customer_name=data["customer_name"],
            customer_phone=data["customer_phone"],
            customer_email=data["customer_email"],
            customer_department=data["customer_department"],
            customer_city=data["customer_city"],
            customer_address=data["customer_address"],
            notes=data["notes"],
            items=data["items"],
            subtotal=subtotal,
            shipping_cost=shipping_cost,
            total=subtotal + shipping_cost,
            status=STATUS_PENDING,
        )
        db.session.add(order)
        db.session.commit()
        return order

    order = run_with_retry(_op)
    order_dict = order.to_dict()

    whatsapp_link = generate_whatsapp_link(order_dict)
    try:
        get_email_dispatcher().dispatch_order_emails(order_dict)
    except Exception:
        current_app.logger.exception("Failed to queue emails for order %s", order.order_number)

    return order, whatsapp_link


def get_order(order_id: int) -> Order:
    order = db.session.get(Order, order_id)
    if not order:
        raise OrderNotFound("Order not found")
    return order


def update_order(order_id: int, payload: dict) -> Order:
    """Admin patch: status and/or notes. Items and pricing never change."""
    patch = validate_order_update(payload)
    order = get_order(order_id)

    new_status = patch.get("status")
    if new_status is not None and not can_transition(order.status, new_status):
        raise OrderError(
            f"Cannot move order from {order.status} to {new_status}",
            details={"from": order.status, "to": new_status},
        )

    for key, value in patch.items():
        setattr(order, key, value)

    db.session.commit()
    return order


def list_orders(status: str | None = None, q: str | None = None, limit: int | None = None) -> list[Order]:
    """Newest first. q matches customer name/phone, or an exact order number."""
    query = db.session.query(Order)

    if status:
        if status not in ORDER_STATUSES:
            raise OrderError(f"Unknown status: {status}")
        query = query.filter(Order.status == status)

    if q:
        term = q.strip()
        conditions = [
            Order.customer_name.ilike(f"%{term}%"),
            Order.customer_phone.ilike(f"%{term}%"),
        ]
        if term.isdigit():
            conditions.append(Order.order_number == int(term))
        query = query.filter(or_(*conditions))

    query = query.order_by(Order.created_at.desc(), Order.id.desc())
    if limit:
        query = query.limit(limit)
    return query.all()


def order_stats() -> dict:
    """Dashboard counters."""
    total_orders = db.session.query(Order).count()
    pending = db.session.query(Order).filter(Order.status == STATUS_PENDING).count()
    revenue = (
        db.session.query(db.func.coalesce(db.func.sum(Order.total), 0))
        .filter(Order.status != STATUS_CANCELLED)
        .scalar()
    )
    return {
        "total_orders": total_orders,
        "pending_orders": pending,
        "sales_total": int(revenue or 0),
    }
