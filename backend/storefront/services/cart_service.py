# Overview: Shopping cart state container with a pluggable persistence port.

"""
Cart store.

The cart is owned by the browser: the Flask signed-cookie session is the
durable store, so a cart survives reloads and browser restarts but never
follows the shopper to another device. CartStore itself only knows the
CartStorage port; every mutation writes the full item list back through it.

Concurrent tabs share one cookie, so the last write wins.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Protocol

from flask import current_app, session


@dataclass
class CartItem:
    product_id: int | str
    name: str
    slug: str
    price: int
    final_price: int | None = None
    image: str | None = None
    quantity: int = 1

    @property
    def unit_price(self) -> int:
        return self.final_price if self.final_price is not None else self.price

    @property
    def line_total(self) -> int:
        return self.unit_price * self.quantity

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "CartItem":
        return cls(
            product_id=data["product_id"],
            name=data["name"],
            slug=data["slug"],
            price=data["price"],
            final_price=data.get("final_price"),
            image=data.get("image"),
            quantity=int(data.get("quantity", 1)),
        )


class CartStorage(Protocol):
    def load(self) -> list[dict]:
        ...

    def save(self, items: list[dict]) -> None:
        ...


class MemoryCartStorage:
    """Process-local storage, used by scripts and tests."""

    def __init__(self, items: list[dict] | None = None):
        self.items: list[dict] = list(items or [])
        self.writes = 0

    def load(self) -> list[dict]:
        return [dict(i) for i in self.items]

    def save(self, items: list[dict]) -> None:
        self.items = [dict(i) for i in items]
        self.writes += 1


class SessionCartStorage:
    """Cart persisted in the Flask session cookie under CART_SESSION_KEY."""

    def __init__(self, key: str | None = None):
        self.key = key or current_app.config["CART_SESSION_KEY"]

    def load(self) -> list[dict]:
        return list(session.get(self.key, []))

    def save(self, items: list[dict]) -> None:
        session[self.key] = items
        session.permanent = True


class CartStore:
    def __init__(self, storage: CartStorage):
        self._storage = storage
        self._items: list[CartItem] = self._rehydrate(storage.load())

    @staticmethod
    def _rehydrate(raw_items: list[dict]) -> list[CartItem]:
        items = []
        for raw in raw_items or []:
            try:
                item = CartItem.from_dict(raw)
            except (KeyError, TypeError, ValueError):
                continue
            if item.quantity >= 1:
                items.append(item)
        return items

    def _persist(self) -> None:
        self._storage.save([item.to_dict() for item in self._items])

    def _find(self, product_id) -> CartItem | None:
        for item in self._items:
            if item.product_id == product_id:
                return item
        return None

    @property
    def items(self) -> list[CartItem]:
        return list(self._items)

    def add_item(self, item: CartItem) -> None:
        """Add a product; an existing line for the same product is merged."""
        if item.quantity <= 0:
            raise ValueError("quantity must be >= 1")

        existing = self._find(item.product_id)
        if existing:
            existing.quantity += item.quantity
        else:
            self._items.append(item)
        self._persist()

    def remove_item(self, product_id) -> None:
        self._items = [i for i in self._items if i.product_id != product_id]
        self._persist()

    def update_quantity(self, product_id, quantity: int) -> None:
        if quantity <= 0:
            self.remove_item(product_id)
            return

        item = self._find(product_id)
        if item:
            item.quantity = quantity
        self._persist()

    def clear_cart(self) -> None:
        self._items = []
        self._persist()

    def get_total(self) -> int:
        return sum(item.line_total for item in self._items)

    def get_item_count(self) -> int:
        return sum(item.quantity for item in self._items)

    def snapshot_order_items(self) -> list[dict]:
        """Order lines for checkout, priced at the discounted price when present."""
        lines = []
        for item in self._items:
            line = {
                "productId": item.product_id,
                "name": item.name,
                "quantity": item.quantity,
                "price": item.unit_price,
            }
            if item.image:
                line["image"] = item.image
            lines.append(line)
        return lines

    def to_dict(self) -> dict:
        return {
            "items": [item.to_dict() for item in self._items],
            "total": self.get_total(),
            "item_count": self.get_item_count(),
        }


def session_cart() -> CartStore:
    """Cart bound to the current request's session cookie."""
    return CartStore(SessionCartStorage())
