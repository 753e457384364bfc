# backend/storefront/services/products_service.py
"""
Products Service

- discount_pct is the stored source of truth; final_price is derived here on
  every write and is never accepted from clients.
- Slugs are derived from the name when omitted. Uniqueness is left to the
  database constraint and surfaced as ConflictError.
"""
from __future__ import annotations

from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..formatting import generate_slug
from ..models import Category, Product
from ..validation import ConflictError, ValidationError

PRODUCT_MUTABLE_FIELDS = {
    "name", "slug", "description", "category_id", "price", "discount_pct",
    "image", "images", "featured", "active",
}

SEARCH_MIN_LENGTH = 2
SEARCH_LIMIT = 10


def compute_final_price(price: int | None, discount_pct: int | None) -> int | None:
    """round(price * (1 - pct/100)) for 0 < pct <= 100, otherwise no discount."""
    if price is None or discount_pct is None:
        return None
    if discount_pct <= 0 or discount_pct > 100:
        return None
    return int(round(price * (1 - discount_pct / 100)))


def apply_product_patch(p: Product, patch: dict) -> None:
    for k, v in patch.items():
        if k not in PRODUCT_MUTABLE_FIELDS:
            continue
        setattr(p, k, v)
    p.final_price = compute_final_price(p.price, p.discount_pct)


def _require_category(category_id: int) -> Category:
    category = db.session.get(Category, category_id)
    if not category:
        raise ValidationError(
            "Category not found",
            errors=[{"field": "category_id", "message": "select a valid category"}],
        )
    return category


def _commit_or_conflict() -> None:
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("A product with this slug already exists.")


def list_products(
    *,
    category_slug: str | None = None,
    featured: bool | None = None,
    include_inactive: bool = False,
) -> list[Product]:
    query = db.session.query(Product)

    if not include_inactive:
        query = query.filter(Product.active.is_(True))
    if category_slug:
        query = query.join(Category).filter(Category.slug == category_slug)
    if featured is not None:
        query = query.filter(Product.featured.is_(featured))

    return query.order_by(Product.name.asc(), Product.id.asc()).all()


def get_product_by_slug(slug: str, *, include_inactive: bool = False) -> Product | None:
    query = db.session.query(Product).filter(Product.slug == slug)
    if not include_inactive:
        query = query.filter(Product.active.is_(True))
    return query.first()


def search_products(q: str | None) -> list[dict]:
    """
    Storefront search box: active products whose name contains q
    (case-insensitive), ordered by name, at most SEARCH_LIMIT.
    """
    term = (q or "").strip()
    if len(term) < SEARCH_MIN_LENGTH:
        return []

    products = (
        db.session.query(Product)
        .filter(Product.active.is_(True), Product.name.ilike(f"%{term}%"))
        .order_by(Product.name.asc())
        .limit(SEARCH_LIMIT)
        .all()
    )
    return [
        {
            "id": p.id,
            "name": p.name,
            "slug": p.slug,
            "price": p.price,
            "final_price": p.final_price,
            "image": p.image,
            "images": list(p.images or []),
            "categoryLabel": p.category.label if p.category else None,
        }
        for p in products
    ]


def create_product(*, patch: dict) -> dict:
    """Create product using a validated patch dict."""
    _require_category(patch["category_id"])

    if not patch.get("slug"):
        patch = {**patch, "slug": generate_slug(patch["name"])}
        if len(patch["slug"]) < 3:
            raise ValidationError("slug must be at least 3 characters")

    p = Product(images=[], featured=False, active=True)
    apply_product_patch(p, patch)

    db.session.add(p)
    _commit_or_conflict()
    return p.to_dict()


def update_product(*, product_id: int, patch: dict) -> dict | None:
    p = db.session.get(Product, product_id)
    if not p:
        return None

    if "category_id" in patch:
        _require_category(patch["category_id"])

    apply_product_patch(p, patch)
    _commit_or_conflict()
    return p.to_dict()


def delete_product(*, product_id: int) -> bool:
    """
    Hard delete. Orders keep their own item snapshots, so nothing references
    the product row afterwards.
    """
    p = db.session.get(Product, product_id)
    if not p:
        return False

    db.session.delete(p)
    db.session.commit()
    return True


def get_product_for_cart(product_id) -> Product | None:
    """Active product lookup used when adding to the cart."""
    try:
        pid = int(product_id)
    except (TypeError, ValueError):
        return None
    return (
        db.session.query(Product)
        .filter(Product.id == pid, Product.active.is_(True))
        .first()
    )
