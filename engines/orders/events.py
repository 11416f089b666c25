"""
POS Orders Engine — Order Lifecycle & Snapshot Payloads
=========================================================
Status vocabulary, legal transitions, and the builders that turn a
draft into the order snapshot the receipt and report generators read
verbatim. Money is serialized as fixed two-place strings inside JSON
fields so the snapshot round-trips losslessly.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from core.primitives.actor import Actor
from core.primitives.money import ZERO, money_str

# ── Statuses ──────────────────────────────────────────────────

STATUS_PENDING = "pending"
STATUS_PAID = "paid"
STATUS_CANCELLED = "cancelled"
STATUS_COMPLETED = "completed"

ALLOWED_TRANSITIONS = {
    STATUS_PENDING: frozenset({STATUS_PAID, STATUS_CANCELLED}),
    STATUS_PAID: frozenset({STATUS_COMPLETED}),
    STATUS_CANCELLED: frozenset(),
    STATUS_COMPLETED: frozenset(),
}

# ── Payment Methods ───────────────────────────────────────────

PAYMENT_CASH = "cash"
PAYMENT_CARD = "card"
PAYMENT_MOBILE = "mobile"

VALID_PAYMENT_METHODS = frozenset({PAYMENT_CASH, PAYMENT_CARD, PAYMENT_MOBILE})


# ── Payload Builders ──────────────────────────────────────────

def build_line_snapshot(item) -> dict[str, Any]:
    """Reward lines are always written at price 0."""
    unit_price = ZERO if item.is_reward else item.unit_price
    return {
        "product_id": item.product_id,
        "name": item.name,
        "unit_price": money_str(unit_price),
        "quantity": item.quantity,
        "is_reward": item.is_reward,
        "reward_id": item.reward_id,
    }


def build_order_payload(
    *,
    order_id: uuid.UUID,
    draft,
    paid_subtotal: Decimal,
    discount_applied: Decimal,
    total: Decimal,
    customer_id: Optional[uuid.UUID],
    points_earned: int,
    points_deducted: int,
    actor: Actor,
    created_at: datetime,
) -> dict[str, Any]:
    reward_used = (
        draft.applied_reward.reward.name if draft.applied_reward else None
    )
    return {
        "id": order_id,
        "customer_name": draft.display_customer_name,
        "notes": draft.notes,
        "items": [build_line_snapshot(item) for item in draft.cart.items],
        "paid_subtotal": paid_subtotal,
        "discount_applied": discount_applied,
        "total": total,
        "customer_id": customer_id,
        "points_earned": points_earned,
        "points_deducted": points_deducted,
        "reward_used": reward_used,
        "loyalty_summary": {
            "points_earned": points_earned,
            "points_deducted": points_deducted,
            "discount_amount": money_str(discount_applied),
            "reward_used": reward_used,
        },
        "status": STATUS_PENDING,
        "payment": None,
        "created_at": created_at,
        "created_by_id": actor.actor_id,
        "created_by_name": actor.display_name,
    }


def build_payment_payload(
    *,
    amount: Decimal,
    method: str,
    actor: Actor,
    paid_at: datetime,
) -> dict[str, Any]:
    return {
        "amount": money_str(amount),
        "method": method,
        "date": paid_at.isoformat(),
        "processed_by": actor.actor_id,
        "processed_by_name": actor.display_name,
    }
