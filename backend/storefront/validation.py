from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlparse

from sqlalchemy import Boolean, Integer, String, Text
from sqlalchemy.orm import DeclarativeMeta

from .models.orders import ORDER_STATUSES


# Upper bound for any single price in pesos (COP 9.999.999.999)
MAX_PRICE = 9_999_999_999

PHONE_RE = re.compile(r"^[0-9]{10}$")
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class ValidationError(ValueError):
    """400-level input problem."""

    def __init__(self, message: str, errors: list[dict] | None = None):
        super().__init__(message)
        self.errors = errors or []


class ConflictError(ValueError):
    """409-level business rule conflict (e.g., duplicate slug)."""


@dataclass(frozen=True)
class ModelValidationPolicy:
    """
    Central policy layer:
    - writable_fields: what clients are allowed to set (security boundary)
    - required_on_create: fields required for POST
    """
    writable_fields: set[str]
    required_on_create: set[str] = None  # type: ignore


def _columns_by_key(model: DeclarativeMeta) -> dict[str, Any]:
    mapper = model.__mapper__
    return {c.key: c for c in mapper.columns}


def _coerce_value(col, value: Any):
    coltype = col.type

    if value is None:
        return None

    # Integers - strict validation to reject floats and scientific notation
    if isinstance(coltype, Integer):
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        if isinstance(value, str):
            stripped = value.strip()
            if not stripped:
                raise ValidationError(f"{col.key} must be an integer")
            if 'e' in stripped.lower():
                raise ValidationError(f"{col.key} must be a plain integer (scientific notation not allowed)")
            if '.' in stripped:
                raise ValidationError(f"{col.key} must be an integer (no decimals)")
            try:
                return int(stripped)
            except ValueError:
                raise ValidationError(f"{col.key} must be an integer")
        if isinstance(value, float):
            raise ValidationError(f"{col.key} must be an integer, not a decimal")
        raise ValidationError(f"{col.key} must be an integer")

    if isinstance(coltype, Boolean):
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.strip().lower() in ("true", "false"):
            return value.strip().lower() == "true"
        raise ValidationError(f"{col.key} must be a boolean")

    if isinstance(coltype, (String, Text)):
        if isinstance(value, (dict, list)):
            raise ValidationError(f"{col.key} must be a string")
        return str(value).strip()

    # Default: leave as-is
    return value


def validate_payload(
    *,
    model: DeclarativeMeta,
    payload: dict,
    policy: ModelValidationPolicy,
    partial: bool,
) -> dict:
    """
    Validates + normalizes incoming JSON against:
    - SQLAlchemy column metadata (nullable, type, String length)
    - a policy allowlist (writable_fields)
    - required_on_create (if partial=False)
    Returns a cleaned patch dict with only writable fields.

    partial=False: create semantics (enforce required_on_create)
    partial=True: patch semantics (validate only provided keys)
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    required = policy.required_on_create or set()
    if not partial:
        missing = sorted(f for f in required if f not in payload)
        if missing:
            raise ValidationError(
                f"Missing required fields: {', '.join(missing)}",
                errors=[{"field": f, "message": "is required"} for f in missing],
            )

    cols = _columns_by_key(model)

    # Reject unknown / non-writable fields
    for k in payload.keys():
        if k not in policy.writable_fields:
            raise ValidationError(f"Field not allowed: {k}")
        if k not in cols:
            raise ValidationError(f"Unknown field: {k}")

    patch: dict = {}

    for k, raw in payload.items():
        col = cols[k]

        if raw is None:
            if not col.nullable:
                raise ValidationError(f"{k} cannot be null")
            patch[k] = None
            continue

        val = _coerce_value(col, raw)

        if isinstance(col.type, (String, Text)) and not col.nullable:
            if isinstance(val, str) and val == "":
                raise ValidationError(f"{k} cannot be blank")

        if isinstance(col.type, String) and col.type.length and isinstance(val, str):
            if len(val) > col.type.length:
                raise ValidationError(f"{k} exceeds max length {col.type.length}")

        patch[k] = val

    return patch


def is_http_url(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    parsed = urlparse(value)
    return parsed.scheme in {"http", "https"} and bool(parsed.netloc)


def enforce_rules_product(patch: dict) -> None:
    """
    Business rules that are not captured by SQLAlchemy metadata alone.
    Keep these small and centralized.
    """
    if "name" in patch and len(patch["name"]) < 3:
        raise ValidationError("name must be at least 3 characters")

    if "slug" in patch and patch["slug"] is not None and len(patch["slug"]) < 3:
        raise ValidationError("slug must be at least 3 characters")

    if "price" in patch:
        price = patch["price"]
        if price <= 0:
            raise ValidationError("price must be > 0")
        if price > MAX_PRICE:
            raise ValidationError(f"price cannot exceed {MAX_PRICE}")

    if patch.get("discount_pct") is not None:
        pct = patch["discount_pct"]
        if pct < 0 or pct > 100:
            raise ValidationError("discount_pct must be between 0 and 100")

    if patch.get("image") is not None and not is_http_url(patch["image"]):
        raise ValidationError("image must be an http(s) URL")

    if "images" in patch and patch["images"] is not None:
        images = patch["images"]
        if not isinstance(images, list) or not all(is_http_url(i) for i in images):
            raise ValidationError("images must be a list of http(s) URLs")


def enforce_rules_category(patch: dict) -> None:
    if "label" in patch and len(patch["label"]) < 2:
        raise ValidationError("label must be at least 2 characters")

    if "slug" in patch and len(patch["slug"]) < 2:
        raise ValidationError("slug must be at least 2 characters")

    if "order_position" in patch and patch["order_position"] < 0:
        raise ValidationError("order_position must be >= 0")


# =============================================================================
# Order payloads
# =============================================================================

ORDER_CUSTOMER_FIELDS = (
    "customer_name",
    "customer_phone",
    "customer_email",
    "customer_department",
    "customer_city",
    "customer_address",
    "notes",
)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _text(payload: dict, key: str) -> str | None:
    value = payload.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        return None
    return value.strip()


def _validate_customer_fields(payload: dict, errors: list[dict]) -> dict:
    def fail(field: str, message: str) -> None:
        errors.append({"field": field, "message": message})

    name = _text(payload, "customer_name")
    if not name or len(name) < 3:
        fail("customer_name", "must be at least 3 characters")

    phone = _text(payload, "customer_phone")
    if not phone or not PHONE_RE.match(phone):
        fail("customer_phone", "must be exactly 10 digits")

    email = payload.get("customer_email")
    if email is not None and not isinstance(email, str):
        fail("customer_email", "must be a valid email address")
        email = None
    email = (email or "").strip() or None
    if email and not EMAIL_RE.match(email):
        fail("customer_email", "must be a valid email address")

    department = _text(payload, "customer_department")
    if not department:
        fail("customer_department", "is required")

    city = _text(payload, "customer_city")
    if not city:
        fail("customer_city", "is required")

    address = _text(payload, "customer_address")
    if not address or len(address) < 10:
        fail("customer_address", "must be at least 10 characters")

    notes = payload.get("notes")
    if notes is not None and not isinstance(notes, str):
        fail("notes", "must be a string")
        notes = None

    return {
        "customer_name": name,
        "customer_phone": phone,
        "customer_email": email,
        "customer_department": department,
        "customer_city": city,
        "customer_address": address,
        "notes": (notes or "").strip() or None,
    }


def _validate_order_items(items: Any, errors: list[dict]) -> list[dict]:
    if not isinstance(items, list) or not items:
        errors.append({"field": "items", "message": "must contain at least one product"})
        return []

    cleaned = []
    for i, item in enumerate(items):
        prefix = f"items.{i}"
        if not isinstance(item, dict):
            errors.append({"field": prefix, "message": "must be an object"})
            continue

        product_id = item.get("productId")
        if isinstance(product_id, bool) or not isinstance(product_id, (int, str)) or str(product_id).strip() == "":
            errors.append({"field": f"{prefix}.productId", "message": "is required"})

        name = item.get("name")
        if not isinstance(name, str) or not name.strip():
            errors.append({"field": f"{prefix}.name", "message": "is required"})

        quantity = item.get("quantity")
        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity <= 0:
            errors.append({"field": f"{prefix}.quantity", "message": "must be a positive integer"})

        price = item.get("price")
        if not _is_number(price) or price <= 0:
            errors.append({"field": f"{prefix}.price", "message": "must be a positive number"})

        image = item.get("image")
        if image is not None and not isinstance(image, str):
            errors.append({"field": f"{prefix}.image", "message": "must be a string"})

        line = {
            "productId": product_id,
            "name": name.strip() if isinstance(name, str) else name,
            "quantity": quantity,
            "price": price,
        }
        if image:
            line["image"] = image
        cleaned.append(line)

    return cleaned


def validate_order_payload(payload: Any) -> dict:
    """
    Validate a checkout submission.

    Collects every field problem before raising so the client can show all of
    them at once. Returns the normalized order data.
    """
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload", errors=[{"field": "", "message": "expected an object"}])

    errors: list[dict] = []
    data = _validate_customer_fields(payload, errors)
    data["items"] = _validate_order_items(payload.get("items"), errors)

    total = payload.get("total")
    if not _is_number(total) or total <= 0:
        errors.append({"field": "total", "message": "must be a positive number"})
    data["total"] = total

    if errors:
        raise ValidationError("Invalid order data", errors=errors)

    return data


def validate_order_update(payload: Any) -> dict:
    """Admin patch for an order: only status and notes are writable."""
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    errors: list[dict] = []
    patch: dict = {}

    for key in payload.keys():
        if key not in {"status", "notes"}:
            errors.append({"field": key, "message": "field not allowed"})

    if "status" in payload:
        status = payload["status"]
        if status not in ORDER_STATUSES:
            errors.append({
                "field": "status",
                "message": f"must be one of: {', '.join(ORDER_STATUSES)}",
            })
        else:
            patch["status"] = status

    if "notes" in payload:
        notes = payload["notes"]
        if notes is not None and not isinstance(notes, str):
            errors.append({"field": "notes", "message": "must be a string"})
        else:
            patch["notes"] = (notes or "").strip() or None

    if errors:
        raise ValidationError("Invalid order update", errors=errors)

    return patch
