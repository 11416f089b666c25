"""
POS Orders Engine — Policies
===============================
Confirmation gate and money-handling guards.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from core.commands.rejection import ReasonCode, RejectionReason
from core.config.rules import PosRules
from engines.orders.events import ALLOWED_TRANSITIONS


def requires_confirmation(
    total: Decimal,
    item_count: int,
    rules: PosRules | None = None,
) -> bool:
    """
    Large orders need an explicit human confirmation before settlement:
    total above ``large_order_threshold`` or more line entries than
    ``large_item_count_threshold``.
    """
    rules = rules or PosRules()
    return (
        total > rules.large_order_threshold
        or item_count > rules.large_item_count_threshold
    )


def order_must_have_lines_policy(cart) -> Optional[RejectionReason]:
    if not cart.is_empty:
        return None
    return RejectionReason(
        code=ReasonCode.EMPTY_ORDER,
        message="Cannot submit an empty order.",
        policy_name="order_must_have_lines_policy",
    )


def payment_covers_total_policy(
    amount: Decimal,
    total: Decimal,
) -> Optional[RejectionReason]:
    """Tendered amount must be at least the order total."""
    if amount >= total:
        return None
    return RejectionReason(
        code=ReasonCode.PAYMENT_AMOUNT_TOO_LOW,
        message=f"Payment amount must be at least {total}, got {amount}.",
        policy_name="payment_covers_total_policy",
    )


def status_transition_policy(
    current: str,
    target: str,
) -> Optional[RejectionReason]:
    """pending → paid | cancelled; paid → completed. Nothing else."""
    if target in ALLOWED_TRANSITIONS.get(current, frozenset()):
        return None
    return RejectionReason(
        code=ReasonCode.INVALID_STATUS_TRANSITION,
        message=f"Order is {current}; it cannot become {target}.",
        policy_name="status_transition_policy",
    )
