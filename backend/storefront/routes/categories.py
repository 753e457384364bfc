# Overview: Flask API routes for categories; parses input and returns JSON responses.

from flask import Blueprint, current_app, request

from ..decorators import require_admin
from ..extensions import db
from ..models import Category
from ..services import categories_service
from ..services.categories_service import CategoryInUseError
from ..validation import (
    ModelValidationPolicy,
    validate_payload,
    enforce_rules_category,
    ValidationError,
    ConflictError,
)

CATEGORY_POLICY = ModelValidationPolicy(
    writable_fields={"label", "slug", "order_position", "active"},
    required_on_create={"label"},
)

categories_bp = Blueprint("categories", __name__, url_prefix="/api/categories")


@categories_bp.get("")
def list_categories():
    """Active categories in display order."""
    return {"categories": [c.to_dict() for c in categories_service.list_categories()]}


@categories_bp.post("")
@require_admin
def create_category_route():
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=Category, payload=payload, policy=CATEGORY_POLICY, partial=False)
        enforce_rules_category(patch)
        created = categories_service.create_category(patch=patch)
    except ValidationError as e:
        return {"error": str(e), "errors": e.errors}, 400
    except ConflictError as e:
        return {"error": str(e)}, 409
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Failed to create category")
        return {"error": "Internal server error"}, 500

    return {"success": True, "category": created}, 201


@categories_bp.patch("/<int:category_id>")
@require_admin
def update_category_route(category_id: int):
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=Category, payload=payload, policy=CATEGORY_POLICY, partial=True)
        enforce_rules_category(patch)
        updated = categories_service.update_category(category_id=category_id, patch=patch)
    except ValidationError as e:
        return {"error": str(e), "errors": e.errors}, 400
    except ConflictError as e:
        return {"error": str(e)}, 409
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Failed to update category")
        return {"error": "Internal server error"}, 500

    if updated is None:
        return {"error": "Category not found"}, 404

    return {"success": True, "category": updated}


@categories_bp.delete("/<int:category_id>")
@require_admin
def delete_category_route(category_id: int):
    """Refused while any product still belongs to the category."""
    try:
        deleted = categories_service.delete_category(category_id=category_id)
    except CategoryInUseError as e:
        return {"error": str(e)}, 400
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Failed to delete category")
        return {"error": "Internal server error"}, 500

    if not deleted:
        return {"error": "Category not found"}, 404

    return {"success": True}
