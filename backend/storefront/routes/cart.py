# Overview: Flask API routes for the shopping cart; the cart lives in the session cookie.

from flask import Blueprint, current_app, jsonify, request

from ..extensions import db
from ..services import order_service
from ..services.cart_service import CartItem, session_cart
from ..services.products_service import get_product_for_cart
from ..validation import ValidationError, ORDER_CUSTOMER_FIELDS


cart_bp = Blueprint("cart", __name__, url_prefix="/api/cart")


def _product_key(raw: str):
    """Cart lines are keyed by the product id as stored (int when numeric)."""
    return int(raw) if raw.isdigit() else raw


def _parse_quantity(value, default: int | None = None) -> int:
    if value is None and default is not None:
        return default
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(
            "quantity must be an integer",
            errors=[{"field": "quantity", "message": "must be an integer"}],
        )
    return value


@cart_bp.get("")
def get_cart_route():
    return jsonify(session_cart().to_dict()), 200


@cart_bp.post("/items")
def add_item_route():
    """Add a catalog product. Name and prices come from the catalog, never the client."""
    data = request.get_json(silent=True) or {}

    try:
        quantity = _parse_quantity(data.get("quantity"), default=1)
        if quantity <= 0:
            raise ValidationError(
                "quantity must be >= 1",
                errors=[{"field": "quantity", "message": "must be at least 1"}],
            )
    except ValidationError as e:
        return jsonify({"error": str(e), "errors": e.errors}), 400

    product = get_product_for_cart(data.get("productId"))
    if not product:
        return jsonify({"error": "Product not found"}), 404

    cart = session_cart()
    cart.add_item(CartItem(
        product_id=product.id,
        name=product.name,
        slug=product.slug,
        price=product.price,
        final_price=product.final_price,
        image=product.image,
        quantity=quantity,
    ))
    return jsonify(cart.to_dict()), 200


@cart_bp.patch("/items/<product_id>")
def update_item_route(product_id: str):
    data = request.get_json(silent=True) or {}

    try:
        quantity = _parse_quantity(data.get("quantity"))
    except ValidationError as e:
        return jsonify({"error": str(e), "errors": e.errors}), 400

    cart = session_cart()
    cart.update_quantity(_product_key(product_id), quantity)
    return jsonify(cart.to_dict()), 200


@cart_bp.delete("/items/<product_id>")
def remove_item_route(product_id: str):
    cart = session_cart()
    cart.remove_item(_product_key(product_id))
    return jsonify(cart.to_dict()), 200


@cart_bp.delete("")
def clear_cart_route():
    cart = session_cart()
    cart.clear_cart()
    return jsonify(cart.to_dict()), 200


@cart_bp.post("/checkout")
def checkout_route():
    """
    Submit the session cart as an order.

    Body carries the customer fields only; items and total come from the
    cart. The cart is cleared only after the order is committed.
    """
    data = request.get_json(silent=True) or {}
    cart = session_cart()

    if not cart.items:
        return jsonify({
            "success": False,
            "message": "Invalid order data",
            "errors": [{"field": "items", "message": "must contain at least one product"}],
        }), 400

    payload = {k: data.get(k) for k in ORDER_CUSTOMER_FIELDS if k in data}
    payload["items"] = cart.snapshot_order_items()
    payload["total"] = cart.get_total()

    try:
        order, whatsapp_link = order_service.create_order(payload)
    except ValidationError as e:
        return jsonify({"success": False, "message": str(e), "errors": e.errors}), 400
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Failed to check out cart")
        return jsonify({"success": False, "message": "Error al crear el pedido"}), 500

    cart.clear_cart()
    return jsonify({
        "success": True,
        "orderId": order.id,
        "orderNumber": order.order_number,
        "whatsappLink": whatsapp_link,
    }), 200
