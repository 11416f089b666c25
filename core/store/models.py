"""
POS Store - Relational State
============================
Catalog, loyalty members and rewards, settled orders, and the two
append-only logs (points ledger, staff activity).

Order rows are snapshots: line items, names and prices are copied in
at settlement, so receipts and reports never re-read the catalog.
"""

from __future__ import annotations

import uuid

from django.db import models


class OrderStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    PAID = "paid", "Paid"
    CANCELLED = "cancelled", "Cancelled"
    COMPLETED = "completed", "Completed"


class RewardKind(models.TextChoices):
    PERCENTAGE_DISCOUNT = "percentage_discount", "Percentage discount"
    FREE_ITEM = "free_item", "Free item"


class PointEntryType(models.TextChoices):
    EARNED = "earned", "Earned"
    REDEEMED = "redeemed", "Redeemed"


class Product(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    price = models.DecimalField(max_digits=12, decimal_places=2)
    stock = models.IntegerField(default=0)
    available = models.BooleanField(default=True)
    category_id = models.CharField(max_length=64, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "pos_products"
        ordering = ["name", "id"]

    def __str__(self) -> str:
        return f"{self.name} ({self.price})"


class LoyaltyCustomer(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    phone = models.CharField(max_length=64, default="", blank=True)
    email = models.CharField(max_length=255, default="", blank=True)
    card_number = models.CharField(max_length=32, unique=True)
    points = models.IntegerField(default=0)
    joined_at = models.DateTimeField()

    class Meta:
        db_table = "pos_loyalty_customers"
        ordering = ["name", "id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(points__gte=0),
                name="ck_loyalty_customer_points_non_negative",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.card_number})"


class LoyaltyReward(models.Model):
    """
    Catalog reward. A blank ``kind`` marks a row created before kinds
    were stored; its kind is read from ``name`` when loaded.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    description = models.CharField(max_length=255, default="", blank=True)
    points_required = models.PositiveIntegerField()
    kind = models.CharField(
        max_length=32,
        choices=RewardKind.choices,
        default="",
        blank=True,
    )
    percent = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True)
    active = models.BooleanField(default=True)

    class Meta:
        db_table = "pos_loyalty_rewards"
        ordering = ["points_required", "name"]

    def __str__(self) -> str:
        return f"{self.name} ({self.points_required} pts)"


class Order(models.Model):
    id = models.UUIDField(primary_key=True, editable=False)
    customer_name = models.CharField(max_length=255)
    notes = models.TextField(default="", blank=True)
    items = models.JSONField(default=list)
    paid_subtotal = models.DecimalField(max_digits=12, decimal_places=2)
    discount_applied = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    total = models.DecimalField(max_digits=12, decimal_places=2)
    customer = models.ForeignKey(
        LoyaltyCustomer,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="orders",
        db_column="customer_id",
    )
    points_earned = models.IntegerField(default=0)
    points_deducted = models.IntegerField(default=0)
    reward_used = models.CharField(max_length=255, null=True, blank=True)
    loyalty_summary = models.JSONField(default=dict)
    status = models.CharField(
        max_length=16,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
    )
    payment = models.JSONField(null=True, blank=True)
    created_at = models.DateTimeField()
    updated_at = models.DateTimeField(null=True, blank=True)
    created_by_id = models.CharField(max_length=255)
    created_by_name = models.CharField(max_length=255, default="", blank=True)
    completed_by_id = models.CharField(max_length=255, default="", blank=True)
    completed_by_name = models.CharField(max_length=255, default="", blank=True)

    class Meta:
        db_table = "pos_orders"
        ordering = ["-created_at", "id"]
        indexes = [
            models.Index(fields=["status", "created_at"], name="idx_order_status_created"),
        ]

    def __str__(self) -> str:
        return f"Order #{str(self.id)[:8]} ({self.status})"


# ══════════════════════════════════════════════════════════════
# APPEND-ONLY LOGS
# ══════════════════════════════════════════════════════════════

class _AppendOnlyModel(models.Model):
    """
    INSERT only. Corrections are new rows.

    ``seq`` is assigned by the database in insertion order and breaks
    ties between rows written at the same instant.
    """

    class Meta:
        abstract = True

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise PermissionError(
                f"{type(self).__name__} rows are append-only and cannot be updated."
            )
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise PermissionError(
            f"{type(self).__name__} rows are append-only and cannot be deleted."
        )


class LoyaltyPointEntry(_AppendOnlyModel):
    seq = models.BigAutoField(primary_key=True)
    entry_id = models.UUIDField(default=uuid.uuid4, unique=True, editable=False)
    customer = models.ForeignKey(
        LoyaltyCustomer,
        on_delete=models.PROTECT,
        related_name="point_entries",
        db_column="customer_id",
    )
    customer_name = models.CharField(max_length=255)
    order = models.ForeignKey(
        Order,
        on_delete=models.PROTECT,
        related_name="point_entries",
        db_column="order_id",
    )
    points = models.IntegerField()
    entry_type = models.CharField(max_length=16, choices=PointEntryType.choices)
    reward_id = models.CharField(max_length=64, null=True, blank=True)
    reward_name = models.CharField(max_length=255, null=True, blank=True)
    processed_by = models.CharField(max_length=255)
    processed_by_name = models.CharField(max_length=255, default="", blank=True)
    timestamp = models.DateTimeField()

    class Meta:
        db_table = "pos_loyalty_point_entries"
        ordering = ["timestamp", "seq"]
        indexes = [
            models.Index(fields=["customer", "timestamp"], name="idx_points_customer_ts"),
        ]

    def __str__(self) -> str:
        return f"{self.entry_type} {self.points:+d} ({self.customer_name})"


class ActivityLog(_AppendOnlyModel):
    seq = models.BigAutoField(primary_key=True)
    activity_id = models.UUIDField(unique=True, editable=False)
    activity_type = models.CharField(max_length=32)
    description = models.CharField(max_length=512)
    user_id = models.CharField(max_length=255)
    user_email = models.CharField(max_length=255, default="", blank=True)
    user_name = models.CharField(max_length=255, default="", blank=True)
    order_id = models.UUIDField(null=True, blank=True)
    amount = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    occurred_at = models.DateTimeField()

    class Meta:
        db_table = "pos_activity_log"
        ordering = ["-occurred_at", "-seq"]

    def __str__(self) -> str:
        return f"[{self.activity_type}] {self.description}"
