# Overview: Flask API routes for orders; checkout submission plus admin reads and status updates.

# backend/storefront/routes/orders.py
"""
Orders API routes

POST is public (storefront checkout). Everything else requires an admin
session.
"""

from flask import Blueprint, current_app, jsonify, request

from ..decorators import require_admin
from ..extensions import db
from ..services import order_service
from ..services.order_service import OrderError, OrderNotFound
from ..validation import ValidationError


orders_bp = Blueprint("orders", __name__, url_prefix="/api/orders")


@orders_bp.post("")
def create_order_route():
    """
    Create an order from a checkout submission.

    Body: {customer_name, customer_phone, customer_email?, customer_department,
    customer_city, customer_address, notes?, items[], total}

    Returns {success, orderId, orderNumber, whatsappLink}. Notification emails
    are sent in the background and never change this response.
    """
    try:
        order, whatsapp_link = order_service.create_order(request.get_json(silent=True))

        return jsonify({
            "success": True,
            "orderId": order.id,
            "orderNumber": order.order_number,
            "whatsappLink": whatsapp_link,
        }), 200

    except ValidationError as e:
        return jsonify({"success": False, "message": str(e), "errors": e.errors}), 400
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Failed to create order")
        return jsonify({"success": False, "message": "Error al crear el pedido"}), 500


@orders_bp.get("")
@require_admin
def list_orders_route():
    """
    List orders, newest first.

    Query params:
    - status: one of the order statuses (optional)
    - q: customer name/phone fragment, or an exact order number (optional)
    - limit: int (optional)
    """
    try:
        orders = order_service.list_orders(
            status=request.args.get("status") or None,
            q=request.args.get("q") or None,
            limit=request.args.get("limit", type=int),
        )
        return jsonify({"orders": [o.to_dict() for o in orders]}), 200
    except OrderError as e:
        return jsonify({"error": str(e), "details": e.details}), 400


@orders_bp.get("/<int:order_id>")
@require_admin
def get_order_route(order_id: int):
    try:
        order = order_service.get_order(order_id)
    except OrderNotFound:
        return jsonify({"error": "Order not found"}), 404
    return jsonify({"order": order.to_dict()}), 200


@orders_bp.patch("")
@require_admin
def update_order_route():
    """
    Update an order's status and/or notes.

    Query: ?id=<order id>. Body: {status?, notes?}
    """
    order_id = request.args.get("id", type=int)
    if not order_id:
        return jsonify({"success": False, "error": "id required"}), 400

    try:
        order = order_service.update_order(order_id, request.get_json(silent=True) or {})
        return jsonify({"success": True, "order": order.to_dict()}), 200

    except ValidationError as e:
        return jsonify({"success": False, "error": str(e), "errors": e.errors}), 400
    except OrderNotFound:
        return jsonify({"success": False, "error": "Order not found"}), 404
    except OrderError as e:
        return jsonify({"success": False, "error": str(e), "details": e.details}), 400
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Failed to update order")
        return jsonify({"success": False, "error": "Internal server error"}), 500
