"""
POS Core Audit — Public API
==============================
Append-only activity records for the staff activity feed.
"""

from core.audit.models import (
    ORDER_CANCELLED,
    ORDER_COMPLETED,
    ORDER_CREATED,
    PAYMENT,
    ActivityRecord,
)
from core.audit.functions import create_activity_record

__all__ = [
    "ActivityRecord",
    "create_activity_record",
    "ORDER_CREATED",
    "PAYMENT",
    "ORDER_COMPLETED",
    "ORDER_CANCELLED",
]
