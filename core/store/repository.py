"""
POS Store - Read Repository
===========================
Plain-dict reads of store rows in deterministic order. Callers own
the conversion into their value types.
"""

from __future__ import annotations

import uuid

from core.store.models import (
    ActivityLog,
    LoyaltyCustomer,
    LoyaltyPointEntry,
    LoyaltyReward,
    Order,
    Product,
)

PRODUCT_FIELDS = ("id", "name", "price", "stock", "available", "category_id")

CUSTOMER_FIELDS = ("id", "name", "phone", "email", "card_number", "points", "joined_at")

REWARD_FIELDS = (
    "id",
    "name",
    "description",
    "points_required",
    "kind",
    "percent",
    "active",
)

ORDER_FIELDS = (
    "id",
    "customer_name",
    "notes",
    "items",
    "paid_subtotal",
    "discount_applied",
    "total",
    "customer_id",
    "points_earned",
    "points_deducted",
    "reward_used",
    "loyalty_summary",
    "status",
    "payment",
    "created_at",
    "updated_at",
    "created_by_id",
    "created_by_name",
    "completed_by_id",
    "completed_by_name",
)

POINT_ENTRY_FIELDS = (
    "seq",
    "entry_id",
    "customer_id",
    "customer_name",
    "order_id",
    "points",
    "entry_type",
    "reward_id",
    "reward_name",
    "processed_by",
    "processed_by_name",
    "timestamp",
)

ACTIVITY_FIELDS = (
    "seq",
    "activity_id",
    "activity_type",
    "description",
    "user_id",
    "user_email",
    "user_name",
    "order_id",
    "amount",
    "occurred_at",
)


def list_products() -> list[dict]:
    return [dict(row) for row in Product.objects.order_by("name", "id").values(*PRODUCT_FIELDS)]


def list_loyalty_customers() -> list[dict]:
    rows = LoyaltyCustomer.objects.order_by("name", "id").values(*CUSTOMER_FIELDS)
    return [dict(row) for row in rows]


def list_active_rewards() -> list[dict]:
    rows = (
        LoyaltyReward.objects.filter(active=True)
        .order_by("points_required", "name")
        .values(*REWARD_FIELDS)
    )
    return [dict(row) for row in rows]


def get_order(order_id: uuid.UUID) -> dict | None:
    row = Order.objects.filter(pk=order_id).values(*ORDER_FIELDS).first()
    return dict(row) if row is not None else None


def list_recent_orders(customer_id: uuid.UUID, limit: int = 5) -> list[dict]:
    """A customer's latest orders, newest first. Feeds repeat-order."""
    rows = (
        Order.objects.filter(customer_id=customer_id)
        .order_by("-created_at", "-id")
        .values(*ORDER_FIELDS)[:limit]
    )
    return [dict(row) for row in rows]


def list_point_entries(customer_id: uuid.UUID) -> tuple[dict, ...]:
    """
    Ledger history for one customer, oldest first. Entries written at
    the same instant come back in write order.
    """
    rows = (
        LoyaltyPointEntry.objects.filter(customer_id=customer_id)
        .order_by("timestamp", "seq")
        .values(*POINT_ENTRY_FIELDS)
    )
    return tuple(dict(row) for row in rows)


def list_activity(*, order_id: uuid.UUID | None = None, limit: int = 50) -> tuple[dict, ...]:
    """Most recent staff activity first. Same-instant rows newest insert first."""
    query = ActivityLog.objects.all()
    if order_id is not None:
        query = query.filter(order_id=order_id)
    rows = query.order_by("-occurred_at", "-seq").values(*ACTIVITY_FIELDS)[:limit]
    return tuple(dict(row) for row in rows)
