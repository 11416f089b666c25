"""
POS Orders Engine — Order Draft
=================================
The whole in-progress order session as one value: cart, the applied
reward (at most one), the selected loyalty customer and notes.

Drafts are frozen and passed by value through the pure cart and
reward functions. The only side-effecting step is settlement, which
consumes a draft and hands back an empty one.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING, Optional

from engines.orders.cart import Cart, Product, add_item, remove_item, update_quantity

if TYPE_CHECKING:
    from engines.loyalty.rewards import AppliedReward


WALK_IN_CUSTOMER = "Walk-in Customer"


class DraftState(Enum):
    BUILDING = "BUILDING"
    PENDING_CONFIRMATION = "PENDING_CONFIRMATION"
    SETTLED = "SETTLED"


@dataclass(frozen=True)
class OrderDraft:
    """
    Fields:
        cart:            Line items being rung up.
        applied_reward:  The single reward attached to this order, if any.
        customer_id:     Loyalty customer picked from the directory, if any.
        customer_name:   Name printed on the ticket. Free text; it is never
                         used to re-derive the loyalty customer.
        notes:           Kitchen / barista notes.
    """
    cart: Cart = Cart()
    applied_reward: Optional["AppliedReward"] = None
    customer_id: Optional[uuid.UUID] = None
    customer_name: str = ""
    notes: str = ""

    @classmethod
    def empty(cls) -> OrderDraft:
        return cls()

    @property
    def display_customer_name(self) -> str:
        return self.customer_name.strip() or WALK_IN_CUSTOMER

    def with_cart(self, cart: Cart) -> OrderDraft:
        return replace(self, cart=cart)

    def with_customer(
        self,
        customer_id: Optional[uuid.UUID],
        customer_name: str = "",
    ) -> OrderDraft:
        return replace(self, customer_id=customer_id, customer_name=customer_name)

    def with_notes(self, notes: str) -> OrderDraft:
        return replace(self, notes=notes)

    # ── Cart shortcuts ────────────────────────────────────────
    # A percentage discount is re-derived after every cart edit so it
    # never exceeds the current paid subtotal.

    def _edited(self, cart: Cart) -> OrderDraft:
        from engines.loyalty.rewards import refresh_discount

        return refresh_discount(self.with_cart(cart))

    def add_item(self, product: Product, quantity: int = 1) -> OrderDraft:
        return self._edited(add_item(self.cart, product, quantity))

    def update_quantity(self, product_id: str, new_quantity: int) -> OrderDraft:
        return self._edited(update_quantity(self.cart, product_id, new_quantity))

    def remove_item(self, product_id: str) -> OrderDraft:
        return self._edited(remove_item(self.cart, product_id))
