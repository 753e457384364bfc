# Overview: Category CRUD and display ordering.

from __future__ import annotations

from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..formatting import generate_slug
from ..models import Category, Product
from ..validation import ConflictError, ValidationError

CATEGORY_MUTABLE_FIELDS = {"label", "slug", "order_position", "active"}


class CategoryInUseError(ValueError):
    """Category still has products attached."""


def _commit_or_conflict() -> None:
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("A category with this slug already exists.")


def list_categories(*, include_inactive: bool = False) -> list[Category]:
    query = db.session.query(Category)
    if not include_inactive:
        query = query.filter(Category.active.is_(True))
    return query.order_by(Category.order_position.asc(), Category.label.asc()).all()


def next_order_position() -> int:
    current_max = db.session.query(db.func.max(Category.order_position)).scalar()
    return 0 if current_max is None else current_max + 1


def create_category(*, patch: dict) -> dict:
    if not patch.get("slug"):
        patch = {**patch, "slug": generate_slug(patch["label"])}
    if len(patch["slug"]) < 2:
        raise ValidationError("slug must be at least 2 characters")

    category = Category(
        label=patch["label"],
        slug=patch["slug"],
        order_position=patch["order_position"] if patch.get("order_position") is not None else next_order_position(),
        active=patch["active"] if patch.get("active") is not None else True,
    )
    db.session.add(category)
    _commit_or_conflict()
    return category.to_dict()


def update_category(*, category_id: int, patch: dict) -> dict | None:
    category = db.session.get(Category, category_id)
    if not category:
        return None

    # A renamed category follows its label unless the caller pins a slug
    if patch.get("label") and not patch.get("slug"):
        patch = {**patch, "slug": generate_slug(patch["label"])}
        if len(patch["slug"]) < 2:
            raise ValidationError("slug must be at least 2 characters")

    for k, v in patch.items():
        if k in CATEGORY_MUTABLE_FIELDS:
            setattr(category, k, v)

    _commit_or_conflict()
    return category.to_dict()


def delete_category(*, category_id: int) -> bool:
    category = db.session.get(Category, category_id)
    if not category:
        return False

    product_count = db.session.query(Product).filter(Product.category_id == category_id).count()
    if product_count:
        raise CategoryInUseError(
            f"Cannot delete: {product_count} product(s) still belong to this category."
        )

    db.session.delete(category)
    db.session.commit()
    return True
