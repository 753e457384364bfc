# Overview: Flask API routes for products operations; parses input and returns JSON responses.

# backend/storefront/routes/products.py
"""
Product catalog routes.

Reads are public and only ever show active products. Writes require an
admin session.
"""
from flask import Blueprint, current_app, request

from ..decorators import require_admin
from ..extensions import db
from ..models import Product
from ..services import products_service
from ..validation import (
    ModelValidationPolicy,
    validate_payload,
    enforce_rules_product,
    ValidationError,
    ConflictError,
)

# final_price is derived from discount_pct and is deliberately absent here
PRODUCT_POLICY = ModelValidationPolicy(
    writable_fields={
        "name", "slug", "description", "category_id", "price", "discount_pct",
        "image", "images", "featured", "active",
    },
    required_on_create={"name", "category_id", "price"},
)

products_bp = Blueprint("products", __name__, url_prefix="/api/products")


def _validation_response(e: ValidationError):
    return {"error": str(e), "errors": e.errors}, 400


@products_bp.get("")
def list_products():
    """
    List active products.

    Query params:
    - category: category slug (optional)
    - featured: 1 to return only featured products (optional)
    """
    featured = request.args.get("featured")
    products = products_service.list_products(
        category_slug=request.args.get("category") or None,
        featured=True if featured in {"1", "true"} else None,
    )
    return {"products": [p.to_dict() for p in products]}


@products_bp.get("/search")
def search_products():
    return {"products": products_service.search_products(request.args.get("q"))}


@products_bp.get("/<slug>")
def get_product(slug: str):
    product = products_service.get_product_by_slug(slug)
    if not product:
        return {"error": "Product not found"}, 404
    return {"product": product.to_dict()}


@products_bp.post("")
@require_admin
def create_product_route():
    """Create a new product. The slug is derived from the name when omitted."""
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY, partial=False)
        enforce_rules_product(patch)
        created = products_service.create_product(patch=patch)
    except ValidationError as e:
        return _validation_response(e)
    except ConflictError as e:
        return {"error": str(e)}, 409
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Failed to create product")
        return {"error": "Internal server error"}, 500

    return {"success": True, "product": created}, 201


@products_bp.patch("/<int:product_id>")
@require_admin
def update_product_route(product_id: int):
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY, partial=True)
        enforce_rules_product(patch)
        updated = products_service.update_product(product_id=product_id, patch=patch)
    except ValidationError as e:
        return _validation_response(e)
    except ConflictError as e:
        return {"error": str(e)}, 409
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Failed to update product")
        return {"error": "Internal server error"}, 500

    if updated is None:
        return {"error": "Product not found"}, 404

    return {"success": True, "product": updated}


@products_bp.delete("/<int:product_id>")
@require_admin
def delete_product_route(product_id: int):
    """Delete a product. Existing orders keep their own item snapshots."""
    try:
        deleted = products_service.delete_product(product_id=product_id)
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Failed to delete product")
        return {"error": "Internal server error"}, 500

    if not deleted:
        return {"error": "Product not found"}, 404

    return {"success": True}
