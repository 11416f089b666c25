"""
POS Core Audit — Pure Audit Functions
========================================
Factory for activity records. Pure: returns new frozen objects.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from core.audit.models import ActivityRecord
from core.primitives.actor import Actor


def create_activity_record(
    *,
    activity_type: str,
    description: str,
    actor: Actor,
    occurred_at: datetime,
    order_id: Optional[uuid.UUID] = None,
    amount: Optional[Decimal] = None,
) -> ActivityRecord:
    """Create an activity record attributed to ``actor``."""
    return ActivityRecord(
        record_id=uuid.uuid4(),
        activity_type=activity_type,
        description=description,
        user_id=actor.actor_id,
        user_email=actor.email,
        user_name=actor.display_name,
        occurred_at=occurred_at,
        order_id=order_id,
        amount=amount,
    )
