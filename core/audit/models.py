"""
POS Core Audit — Activity Records
==================================
Append-only record of what staff did at the till. The owner
dashboard's activity feed reads these verbatim.
Frozen dataclasses: once created, never modified.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional


ORDER_CREATED = "order_created"
PAYMENT = "payment"
ORDER_COMPLETED = "order_completed"
ORDER_CANCELLED = "order_cancelled"

VALID_ACTIVITY_TYPES = frozenset({
    ORDER_CREATED, PAYMENT, ORDER_COMPLETED, ORDER_CANCELLED,
})


@dataclass(frozen=True)
class ActivityRecord:
    """
    Immutable record of one staff action.

    user_* fields are copied from the acting Actor at creation time so
    the feed stays readable after staff accounts change.
    """

    record_id: uuid.UUID
    activity_type: str
    description: str
    user_id: str
    user_email: str
    user_name: str
    occurred_at: datetime
    order_id: Optional[uuid.UUID] = None
    amount: Optional[Decimal] = None

    def __post_init__(self) -> None:
        if self.activity_type not in VALID_ACTIVITY_TYPES:
            raise ValueError(
                f"activity_type '{self.activity_type}' not valid. "
                f"Must be one of: {sorted(VALID_ACTIVITY_TYPES)}"
            )
        if not self.description:
            raise ValueError("description must be non-empty.")

    def to_payload(self) -> dict[str, Any]:
        return {
            "activity_id": self.record_id,
            "activity_type": self.activity_type,
            "description": self.description,
            "user_id": self.user_id,
            "user_email": self.user_email,
            "user_name": self.user_name,
            "order_id": self.order_id,
            "amount": self.amount,
            "occurred_at": self.occurred_at,
        }
