"""
POS Loyalty Engine — Service Layer
==================================
Loyalty directory lookups, points-ledger calculation and customer
enrolment. Points are earned on the paid total net of discount:
one point per ``PosRules.points_divisor`` currency units, floored.
"""

from __future__ import annotations

import logging
import math
import random
import uuid
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Iterable, Optional, Protocol

from core.config.rules import PosRules
from core.primitives.actor import Actor
from engines.loyalty.events import (
    LEDGER_EARNED,
    LEDGER_REDEEMED,
    VALID_LEDGER_TYPES,
)

if TYPE_CHECKING:
    from engines.loyalty.rewards import AppliedReward


logger = logging.getLogger("pos.loyalty")


# ══════════════════════════════════════════════════════════════
# LOYALTY CUSTOMER
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class LoyaltyCustomer:
    customer_id: uuid.UUID
    name: str
    card_number: str
    points: int = 0
    phone: str = ""
    email: str = ""

    def __post_init__(self):
        if not isinstance(self.customer_id, uuid.UUID):
            raise ValueError("customer_id must be UUID.")
        if not self.card_number:
            raise ValueError("card_number must be non-empty.")
        if not isinstance(self.points, int) or self.points < 0:
            raise ValueError("points must be a non-negative integer.")

    @classmethod
    def from_dict(cls, data: dict) -> LoyaltyCustomer:
        customer_id = data["id"]
        if not isinstance(customer_id, uuid.UUID):
            customer_id = uuid.UUID(str(customer_id))
        return cls(
            customer_id=customer_id,
            name=data["name"],
            card_number=data["card_number"],
            points=int(data.get("points", 0)),
            phone=data.get("phone") or "",
            email=data.get("email") or "",
        )


# ══════════════════════════════════════════════════════════════
# DIRECTORY
# ══════════════════════════════════════════════════════════════

class LoyaltyDirectory:
    """
    Read-only view over the enrolled customers.

    Settlement and reward checks resolve customers by id only.
    ``find`` serves the customer picker: it returns every candidate
    for a typed name or card number so the operator chooses one.
    """

    def __init__(self, customers: Iterable[LoyaltyCustomer] = ()):
        self._by_id = {c.customer_id: c for c in customers}

    def get(self, customer_id: Optional[uuid.UUID]) -> Optional[LoyaltyCustomer]:
        if customer_id is None:
            return None
        return self._by_id.get(customer_id)

    def find(self, query: str) -> tuple[LoyaltyCustomer, ...]:
        """Exact name, exact card number, or card number typed inside the query."""
        token = (query or "").strip()
        if not token:
            return ()
        return tuple(
            c for c in self._by_id.values()
            if c.name == token
            or c.card_number == token
            or c.card_number in token
        )

    def match(self, query: str) -> Optional[LoyaltyCustomer]:
        """The single candidate for ``query``, or None when absent or ambiguous."""
        candidates = self.find(query)
        if len(candidates) != 1:
            if len(candidates) > 1:
                logger.info(
                    "Ambiguous loyalty lookup %r matched %d customers",
                    query, len(candidates),
                )
            return None
        return candidates[0]

    def card_numbers(self) -> frozenset[str]:
        return frozenset(c.card_number for c in self._by_id.values())

    def __len__(self) -> int:
        return len(self._by_id)


# ══════════════════════════════════════════════════════════════
# POINTS CALCULATION
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class PointsCalculation:
    earned: int
    deducted: int

    @property
    def net_delta(self) -> int:
        return self.earned - self.deducted


NO_POINTS = PointsCalculation(earned=0, deducted=0)


def calculate_points(
    *,
    paid_subtotal: Decimal,
    discount_applied: Decimal,
    applied_reward: Optional["AppliedReward"],
    customer: Optional[LoyaltyCustomer],
    points_divisor: Decimal = PosRules.points_divisor,
) -> PointsCalculation:
    """
    Points earned and deducted for one order.

    Walk-in orders (no customer) neither earn nor spend points. The
    net delta may be negative when the reward costs more than the
    order earns; the balance check happens where the delta is applied.
    """
    if customer is None:
        return NO_POINTS

    net_amount = paid_subtotal - discount_applied
    earned = max(0, math.floor(net_amount / Decimal(points_divisor)))
    deducted = applied_reward.reward.points_required if applied_reward else 0
    return PointsCalculation(earned=earned, deducted=deducted)


# ══════════════════════════════════════════════════════════════
# LEDGER ENTRIES
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class LedgerEntry:
    """Append-only record of one points change. Points are signed."""
    customer_id: uuid.UUID
    customer_name: str
    order_id: uuid.UUID
    points: int
    entry_type: str
    timestamp: datetime
    processed_by: str
    processed_by_name: str
    reward_id: Optional[str] = None
    reward_name: Optional[str] = None

    def __post_init__(self):
        if self.entry_type not in VALID_LEDGER_TYPES:
            raise ValueError(
                f"entry_type '{self.entry_type}' not valid. "
                f"Must be one of: {sorted(VALID_LEDGER_TYPES)}"
            )
        if self.entry_type == LEDGER_EARNED and self.points <= 0:
            raise ValueError("earned entries must carry positive points.")
        if self.entry_type == LEDGER_REDEEMED and self.points >= 0:
            raise ValueError("redeemed entries must carry negative points.")

    def to_payload(self) -> dict[str, Any]:
        return {
            "customer_id": self.customer_id,
            "customer_name": self.customer_name,
            "order_id": self.order_id,
            "points": self.points,
            "entry_type": self.entry_type,
            "reward_id": self.reward_id,
            "reward_name": self.reward_name,
            "processed_by": self.processed_by,
            "processed_by_name": self.processed_by_name,
            "timestamp": self.timestamp,
        }


def build_ledger_entries(
    *,
    calculation: PointsCalculation,
    customer: Optional[LoyaltyCustomer],
    order_id: uuid.UUID,
    applied_reward: Optional["AppliedReward"],
    actor: Actor,
    timestamp: datetime,
) -> tuple[LedgerEntry, ...]:
    """Zero, one or two entries: one per earn event, one per redemption."""
    if customer is None:
        return ()

    entries = []
    if calculation.earned > 0:
        entries.append(LedgerEntry(
            customer_id=customer.customer_id,
            customer_name=customer.name,
            order_id=order_id,
            points=calculation.earned,
            entry_type=LEDGER_EARNED,
            timestamp=timestamp,
            processed_by=actor.actor_id,
            processed_by_name=actor.display_name,
        ))
    if calculation.deducted > 0 and applied_reward is not None:
        entries.append(LedgerEntry(
            customer_id=customer.customer_id,
            customer_name=customer.name,
            order_id=order_id,
            points=-calculation.deducted,
            entry_type=LEDGER_REDEEMED,
            timestamp=timestamp,
            processed_by=actor.actor_id,
            processed_by_name=actor.display_name,
            reward_id=applied_reward.reward.reward_id,
            reward_name=applied_reward.reward.name,
        ))
    return tuple(entries)


# ══════════════════════════════════════════════════════════════
# ENROLMENT
# ══════════════════════════════════════════════════════════════

def generate_card_number(prefix: str, rng: Optional[random.Random] = None) -> str:
    """``<prefix>-NNNNNN`` with a six-digit random suffix."""
    rng = rng or random.Random()
    return f"{prefix}-{rng.randint(100000, 999999)}"


class LoyaltyStoreProtocol(Protocol):
    def list_loyalty_customers(self) -> list[dict[str, Any]]:
        ...

    def create_loyalty_customer(self, payload: dict[str, Any]) -> dict[str, Any]:
        ...


class LoyaltyService:
    """Loyalty enrolment and directory access."""

    MAX_CARD_ATTEMPTS = 20

    def __init__(
        self,
        *,
        store: LoyaltyStoreProtocol,
        clock,
        rules: PosRules | None = None,
        rng: Optional[random.Random] = None,
    ):
        self._store = store
        self._clock = clock
        self._rules = rules or PosRules()
        self._rng = rng or random.Random()

    def directory(self) -> LoyaltyDirectory:
        return LoyaltyDirectory(
            LoyaltyCustomer.from_dict(row)
            for row in self._store.list_loyalty_customers()
        )

    def register_customer(
        self,
        *,
        name: str,
        phone: str = "",
        email: str = "",
    ) -> LoyaltyCustomer:
        """Enrol a customer with zero points and a fresh card number."""
        name = (name or "").strip()
        if not name:
            raise ValueError("name must be non-empty.")

        taken = self.directory().card_numbers()
        for _ in range(self.MAX_CARD_ATTEMPTS):
            card_number = generate_card_number(self._rules.card_prefix, self._rng)
            if card_number not in taken:
                break
        else:
            raise RuntimeError("Could not allocate a unique loyalty card number.")

        row = self._store.create_loyalty_customer({
            "id": uuid.uuid4(),
            "name": name,
            "phone": phone,
            "email": email,
            "card_number": card_number,
            "points": 0,
            "joined_at": self._clock.now_utc(),
        })
        customer = LoyaltyCustomer.from_dict(row)
        logger.info("Enrolled loyalty customer %s (%s)", customer.name, card_number)
        return customer
