"""
POS Orders Engine — Cart Model
================================
Line items of the order being rung up, and the subtotals derived
from them. Every operation is pure: it returns a new Cart and never
mutates the one passed in.

Reward lines (free items granted by a loyalty reward) live in the
same cart so they print on the ticket, but they are always priced
at zero and are never addressed by the product operations below.
They are added and removed by the reward resolver only.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Iterable, Mapping, Optional

from core.primitives.money import ZERO, to_money


# ══════════════════════════════════════════════════════════════
# CATALOG PRODUCT (read model)
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Product:
    product_id: str
    name: str
    price: Decimal
    stock: int = 0
    available: bool = True
    category_id: Optional[str] = None

    def __post_init__(self):
        if not self.product_id:
            raise ValueError("product_id must be non-empty.")
        object.__setattr__(self, "price", to_money(self.price))
        if self.price < 0:
            raise ValueError("price must be >= 0.")

    @classmethod
    def from_dict(cls, data: Mapping) -> Product:
        category_id = data.get("category_id")
        return cls(
            product_id=str(data["id"]),
            name=data["name"],
            price=data["price"],
            stock=int(data.get("stock", 0)),
            available=bool(data.get("available", True)),
            category_id=str(category_id) if category_id is not None else None,
        )


# ══════════════════════════════════════════════════════════════
# LINE ITEM
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class LineItem:
    """
    One product-and-quantity entry.

    Invariants:
        quantity > 0
        is_reward → unit_price == 0
    """
    product_id: str
    name: str
    unit_price: Decimal
    quantity: int
    is_reward: bool = False
    reward_id: Optional[str] = None

    def __post_init__(self):
        if not self.product_id:
            raise ValueError("product_id must be non-empty.")
        if not isinstance(self.quantity, int) or isinstance(self.quantity, bool):
            raise ValueError("quantity must be an integer.")
        if self.quantity <= 0:
            raise ValueError("quantity must be positive.")
        object.__setattr__(self, "unit_price", to_money(self.unit_price))
        if self.unit_price < 0:
            raise ValueError("unit_price must be >= 0.")
        if self.is_reward and self.unit_price != ZERO:
            raise ValueError("reward lines must have unit_price == 0.")
        if self.is_reward and not self.reward_id:
            raise ValueError("reward lines must reference a reward_id.")

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


# ══════════════════════════════════════════════════════════════
# CART
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Cart:
    items: tuple[LineItem, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "items", tuple(self.items))

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def line_count(self) -> int:
        """Number of distinct line entries, reward lines included."""
        return len(self.items)

    def paid_subtotal(self) -> Decimal:
        """Σ unit_price × quantity over non-reward lines."""
        return sum(
            (item.line_total for item in self.items if not item.is_reward),
            ZERO,
        )

    def raw_subtotal(self) -> Decimal:
        """Σ over every line. Reward lines contribute zero."""
        return sum((item.line_total for item in self.items), ZERO)

    def find(self, product_id: str) -> Optional[LineItem]:
        for item in self.items:
            if item.product_id == product_id and not item.is_reward:
                return item
        return None

    def reward_lines(self) -> tuple[LineItem, ...]:
        return tuple(item for item in self.items if item.is_reward)

    def paid_lines(self) -> tuple[LineItem, ...]:
        return tuple(item for item in self.items if not item.is_reward)


# ══════════════════════════════════════════════════════════════
# CART OPERATIONS
# ══════════════════════════════════════════════════════════════

def add_item(cart: Cart, product: Product, quantity: int) -> Cart:
    """
    Add ``quantity`` of ``product``. Merges into the existing paid line
    for the same product. ``quantity <= 0`` leaves the cart unchanged.
    """
    if quantity <= 0:
        return cart
    if not product.available:
        raise ValueError(f"Product '{product.name}' is not available.")

    existing = cart.find(product.product_id)
    if existing is None:
        line = LineItem(
            product_id=product.product_id,
            name=product.name,
            unit_price=product.price,
            quantity=quantity,
        )
        return Cart(items=cart.items + (line,))

    merged = replace(existing, quantity=existing.quantity + quantity)
    return Cart(items=tuple(
        merged if item is existing else item for item in cart.items
    ))


def remove_item(cart: Cart, product_id: str) -> Cart:
    return Cart(items=tuple(
        item for item in cart.items
        if item.is_reward or item.product_id != product_id
    ))


def update_quantity(cart: Cart, product_id: str, new_quantity: int) -> Cart:
    """Set a paid line's quantity. ``<= 0`` removes the line."""
    if new_quantity <= 0:
        return remove_item(cart, product_id)
    existing = cart.find(product_id)
    if existing is None:
        return cart
    updated = replace(existing, quantity=new_quantity)
    return Cart(items=tuple(
        updated if item is existing else item for item in cart.items
    ))


def repeat_order(
    order_items: Iterable[Mapping],
    products: Iterable[Product],
) -> Cart:
    """
    Rebuild a cart from a past order's item snapshot.

    Reward lines are dropped (a reward must be re-applied against the
    customer's current balance) and lines whose product left the
    catalog or is unavailable are skipped. Lines are re-priced at the
    current catalog price.
    """
    catalog = {p.product_id: p for p in products}
    cart = Cart()
    for entry in order_items:
        if entry.get("is_reward"):
            continue
        product = catalog.get(str(entry.get("product_id")))
        if product is None or not product.available:
            continue
        cart = add_item(cart, product, int(entry.get("quantity", 0)))
    return cart
