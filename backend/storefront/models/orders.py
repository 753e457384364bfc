from __future__ import annotations

from ..extensions import db
from storefront.time_utils import to_utc_z

STATUS_PENDING = "pending"
STATUS_CONFIRMED = "confirmed"
STATUS_PROCESSING = "processing"
STATUS_SHIPPED = "shipped"
STATUS_DELIVERED = "delivered"
STATUS_CANCELLED = "cancelled"

ORDER_STATUSES = (
    STATUS_PENDING,
    STATUS_CONFIRMED,
    STATUS_PROCESSING,
    STATUS_SHIPPED,
    STATUS_DELIVERED,
    STATUS_CANCELLED,
)

# Admin table labels
STATUS_LABELS = {
    STATUS_PENDING: "Pendiente",
    STATUS_CONFIRMED: "Confirmado",
    STATUS_PROCESSING: "En proceso",
    STATUS_SHIPPED: "Enviado",
    STATUS_DELIVERED: "Entregado",
    STATUS_CANCELLED: "Cancelado",
}


class Order(db.Model):
    """
    Checkout order handed off over WhatsApp.

    Items, subtotal, shipping_cost and total are fixed at creation
    (total = subtotal + shipping_cost). Only status and notes change later.
    """
    __tablename__ = "orders"
    __table_args__ = (
        db.UniqueConstraint("order_number", name="uq_orders_order_number"),
        db.Index("ix_orders_status_created", "status", "created_at"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    order_number = db.Column(db.Integer, nullable=False)

    customer_name = db.Column(db.String(255), nullable=False)
    customer_phone = db.Column(db.String(10), nullable=False, index=True)
    customer_email = db.Column(db.String(255), nullable=True)
    customer_department = db.Column(db.String(120), nullable=False)
    customer_city = db.Column(db.String(120), nullable=False)
    customer_address = db.Column(db.String(512), nullable=False)

    # Snapshot of cart lines: [{productId, name, quantity, price, image?}]
    items = db.Column(db.JSON, nullable=False)

    subtotal = db.Column(db.Integer, nullable=False)
    shipping_cost = db.Column(db.Integer, nullable=False, default=0)
    total = db.Column(db.Integer, nullable=False)

    status = db.Column(db.String(16), nullable=False, default=STATUS_PENDING, index=True)
    notes = db.Column(db.Text, nullable=True)
    whatsapp_sent_at = db.Column(db.DateTime(timezone=True), nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), onupdate=db.func.now())

    def __repr__(self) -> str:
        return f"<Order id={self.id} number={self.order_number} status={self.status}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "order_number": self.order_number,
            "customer_name": self.customer_name,
            "customer_phone": self.customer_phone,
            "customer_email": self.customer_email,
            "customer_department": self.customer_department,
            "customer_city": self.customer_city,
            "customer_address": self.customer_address,
            "items": list(self.items or []),
            "subtotal": self.subtotal,
            "shipping_cost": self.shipping_cost,
            "total": self.total,
            "status": self.status,
            "notes": self.notes,
            "whatsapp_sent_at": to_utc_z(self.whatsapp_sent_at),
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }


class OrderSequence(db.Model):
    """
    Atomic counter for human-facing order numbers.

    One row per sequence name; next_number is bumped with a single UPDATE so
    concurrent checkouts never read the same value.
    """
    __tablename__ = "order_sequences"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(32), nullable=False, unique=True)
    next_number = db.Column(db.Integer, nullable=False, default=1)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), onupdate=db.func.now())

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "next_number": self.next_number,
            "updated_at": to_utc_z(self.updated_at),
        }
