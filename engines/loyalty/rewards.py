"""
POS Loyalty Engine — Reward Resolver
====================================
Decides whether a catalog reward can be attached to an order draft
and computes its effect.

Reward kinds are explicit variants:
    PercentageDiscount(percent)  — takes percent of the paid subtotal off
    FreeItem(description)        — adds a zero-price line to the cart

Catalog rows created before kinds were stored carry only a display
name; ``infer_reward_kind`` reads the kind from that name once, when
the definition is loaded, and nothing downstream looks at names.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from core.commands.rejection import RejectionReason
from core.primitives.money import ZERO, to_money
from engines.loyalty.events import (
    FREE_ITEM_PRODUCT_PREFIX,
    KIND_FREE_ITEM,
    KIND_PERCENTAGE_DISCOUNT,
    VALID_REWARD_KINDS,
)
from engines.loyalty.policies import (
    customer_enrolled_policy,
    reward_active_policy,
    reward_kind_supported_policy,
    reward_not_already_applied_policy,
    sufficient_points_policy,
)
from engines.loyalty.services import LoyaltyDirectory
from engines.orders.cart import Cart, LineItem
from engines.orders.draft import OrderDraft


logger = logging.getLogger("pos.loyalty")


# ══════════════════════════════════════════════════════════════
# REWARD KINDS
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class PercentageDiscount:
    percent: Decimal

    def __post_init__(self):
        object.__setattr__(self, "percent", Decimal(str(self.percent)))
        if not Decimal("0") < self.percent <= Decimal("100"):
            raise ValueError("percent must be in (0, 100].")

    @property
    def code(self) -> str:
        return KIND_PERCENTAGE_DISCOUNT

    def discount_for(self, paid_subtotal: Decimal) -> Decimal:
        """``paid_subtotal × percent/100``, clamped to [0, paid_subtotal]."""
        raw = to_money(paid_subtotal * self.percent / Decimal("100"))
        return min(max(raw, ZERO), to_money(paid_subtotal))


@dataclass(frozen=True)
class FreeItem:
    description: str

    def __post_init__(self):
        if not self.description:
            raise ValueError("description must be non-empty.")

    @property
    def code(self) -> str:
        return KIND_FREE_ITEM


RewardKind = Union[PercentageDiscount, FreeItem]

_PERCENT_TOKEN = re.compile(r"(\d+(?:\.\d+)?)\s*%")


def infer_reward_kind(name: str, description: str = "") -> Optional[RewardKind]:
    """
    Kind of a legacy catalog reward, read from its display name.

    "10% Off" → PercentageDiscount(10); "Free Cookie" → FreeItem
    named after the description (or the name). A '%' without a number
    in front of it, or a name matching neither, yields None.
    """
    if "%" in name:
        match = _PERCENT_TOKEN.search(name)
        if match is None:
            return None
        try:
            return PercentageDiscount(Decimal(match.group(1)))
        except (InvalidOperation, ValueError):
            return None
    if "Free" in name:
        return FreeItem(description or name)
    return None


def reward_kind_from_catalog(
    *,
    kind: Optional[str],
    percent: Optional[Decimal],
    name: str,
    description: str,
) -> Optional[RewardKind]:
    if kind and kind not in VALID_REWARD_KINDS:
        logger.warning("Unknown reward kind %r on catalog reward %r", kind, name)
        return None
    if kind == KIND_PERCENTAGE_DISCOUNT:
        if percent is None or not Decimal("0") < percent <= Decimal("100"):
            return None
        return PercentageDiscount(percent)
    if kind == KIND_FREE_ITEM:
        return FreeItem(description or name)
    return infer_reward_kind(name, description)


# ══════════════════════════════════════════════════════════════
# DEFINITIONS & APPLICATION
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class RewardDefinition:
    reward_id: str
    name: str
    points_required: int
    kind: Optional[RewardKind]
    description: str = ""
    active: bool = True

    def __post_init__(self):
        if not self.reward_id:
            raise ValueError("reward_id must be non-empty.")
        if not isinstance(self.points_required, int) or self.points_required < 0:
            raise ValueError("points_required must be a non-negative integer.")

    @classmethod
    def from_dict(cls, data: dict) -> RewardDefinition:
        """Catalog row → definition. A blank ``kind`` is inferred from the name."""
        name = data["name"]
        description = data.get("description") or ""
        percent = data.get("percent")
        return cls(
            reward_id=str(data["id"]),
            name=name,
            points_required=int(data["points_required"]),
            kind=reward_kind_from_catalog(
                kind=data.get("kind") or None,
                percent=Decimal(str(percent)) if percent is not None else None,
                name=name,
                description=description,
            ),
            description=description,
            active=bool(data.get("active", True)),
        )


@dataclass(frozen=True)
class AppliedReward:
    """At most one per order."""
    reward: RewardDefinition
    discount_amount: Decimal = ZERO
    free_line_product_id: Optional[str] = None


@dataclass(frozen=True)
class RewardApplication:
    """Result of ``try_apply_reward``: the new draft, or why it was refused."""
    accepted: bool
    draft: OrderDraft
    rejection: Optional[RejectionReason] = None

    @property
    def applied(self) -> Optional[AppliedReward]:
        return self.draft.applied_reward if self.accepted else None


def _reject(draft: OrderDraft, rejection: RejectionReason) -> RewardApplication:
    logger.info("Reward rejected: %s (%s)", rejection.code, rejection.message)
    return RewardApplication(accepted=False, draft=draft, rejection=rejection)


def try_apply_reward(
    draft: OrderDraft,
    reward: RewardDefinition,
    directory: LoyaltyDirectory,
) -> RewardApplication:
    """
    Attach ``reward`` to ``draft``.

    Checked in order, first failure wins:
        1. no reward already applied        → REWARD_ALREADY_APPLIED
        2. draft customer is enrolled       → CUSTOMER_NOT_ENROLLED
        3. balance covers the point cost    → INSUFFICIENT_POINTS
    then that the reward is offered and of a known kind.

    A rejected application returns the draft unchanged. The balance is
    checked again when the order settles.
    """
    rejection = reward_not_already_applied_policy(draft, reward)
    if rejection is not None:
        return _reject(draft, rejection)

    customer = directory.get(draft.customer_id)
    rejection = customer_enrolled_policy(customer)
    if rejection is not None:
        return _reject(draft, rejection)

    for rejection in (
        sufficient_points_policy(customer, reward),
        reward_active_policy(reward),
        reward_kind_supported_policy(reward),
    ):
        if rejection is not None:
            return _reject(draft, rejection)

    kind = reward.kind
    if isinstance(kind, PercentageDiscount):
        applied = AppliedReward(
            reward=reward,
            discount_amount=kind.discount_for(draft.cart.paid_subtotal()),
        )
        updated = replace(draft, applied_reward=applied)
    else:
        line = LineItem(
            product_id=f"{FREE_ITEM_PRODUCT_PREFIX}{reward.reward_id}",
            name=kind.description,
            unit_price=ZERO,
            quantity=1,
            is_reward=True,
            reward_id=reward.reward_id,
        )
        applied = AppliedReward(
            reward=reward,
            discount_amount=ZERO,
            free_line_product_id=line.product_id,
        )
        updated = replace(
            draft,
            cart=Cart(items=draft.cart.items + (line,)),
            applied_reward=applied,
        )

    logger.info(
        "Reward %r applied for customer %s (discount %s)",
        reward.name, customer.customer_id, applied.discount_amount,
    )
    return RewardApplication(accepted=True, draft=updated)


def remove_reward(draft: OrderDraft) -> OrderDraft:
    """Detach the applied reward and its free line. No-op without one."""
    applied = draft.applied_reward
    if applied is None:
        return draft
    reward_id = applied.reward.reward_id
    cart = Cart(items=tuple(
        item for item in draft.cart.items
        if not (item.is_reward and item.reward_id == reward_id)
    ))
    return replace(draft, cart=cart, applied_reward=None)


def refresh_discount(draft: OrderDraft) -> OrderDraft:
    """Re-derive a percentage discount against the draft's current cart."""
    applied = draft.applied_reward
    if applied is None or not isinstance(applied.reward.kind, PercentageDiscount):
        return draft
    discount = applied.reward.kind.discount_for(draft.cart.paid_subtotal())
    if discount == applied.discount_amount:
        return draft
    return replace(draft, applied_reward=replace(applied, discount_amount=discount))
