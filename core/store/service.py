"""
POS Store — Write Service
===========================
The storage collaborator behind the orders and loyalty engines.

Every write method is one ``transaction.atomic()`` block. Settlement
writes (order snapshot, stock, points balance, ledger, activity)
either all land or none do.

Quantities are applied as relative ``F()`` updates so concurrent tills
never overwrite each other's stock or points. A redemption re-checks
the balance in the same UPDATE that applies it:

    UPDATE ... SET points = points + delta
    WHERE id = customer AND points >= required

Zero rows updated means the balance moved since the reward was
accepted; the transaction is aborted with CustomerBalanceConflict.
"""

from __future__ import annotations

import copy
import logging
import uuid
from datetime import datetime
from typing import Any

from django.db import transaction
from django.db.models import F

from core.audit.models import ActivityRecord
from core.primitives.actor import Actor
from core.store import repository
from core.store.errors import CustomerBalanceConflict, ProductNotFound
from core.store.models import (
    ActivityLog,
    LoyaltyCustomer,
    LoyaltyPointEntry,
    Order,
    OrderStatus,
    Product,
)


logger = logging.getLogger("pos.store")


class DjangoOrderStore:
    """Django ORM implementation of the order and loyalty store protocols."""

    # ── Reads ─────────────────────────────────────────────────

    def list_products(self) -> list[dict[str, Any]]:
        return repository.list_products()

    def list_loyalty_customers(self) -> list[dict[str, Any]]:
        return repository.list_loyalty_customers()

    def list_active_rewards(self) -> list[dict[str, Any]]:
        return repository.list_active_rewards()

    def get_order(self, order_id: uuid.UUID) -> dict[str, Any] | None:
        return repository.get_order(order_id)

    def list_recent_orders(
        self, customer_id: uuid.UUID, limit: int = 5,
    ) -> list[dict[str, Any]]:
        return repository.list_recent_orders(customer_id, limit)

    # ── Settlement ────────────────────────────────────────────

    def commit_settlement(self, plan) -> None:
        """
        Apply one settlement plan atomically.

        ``plan`` carries: order_payload, stock_adjustments
        (product_id, delta), points_adjustment (customer_id, delta,
        required_balance) or None, ledger_entries, activity.
        """
        with transaction.atomic():
            Order.objects.create(**copy.deepcopy(dict(plan.order_payload)))

            for adjustment in plan.stock_adjustments:
                updated = Product.objects.filter(pk=adjustment.product_id).update(
                    stock=F("stock") + adjustment.delta,
                )
                if updated == 0:
                    raise ProductNotFound(adjustment.product_id)

            points = plan.points_adjustment
            if points is not None:
                updated = LoyaltyCustomer.objects.filter(
                    pk=points.customer_id,
                    points__gte=points.required_balance,
                ).update(points=F("points") + points.delta)
                if updated == 0:
                    raise CustomerBalanceConflict(
                        points.customer_id, points.required_balance,
                    )

            for entry in plan.ledger_entries:
                LoyaltyPointEntry.objects.create(**entry.to_payload())

            ActivityLog.objects.create(**plan.activity.to_payload())

        logger.debug("Settlement rows committed for order %s", plan.order_id)

    # ── Lifecycle ─────────────────────────────────────────────

    def record_payment(
        self,
        *,
        order_id: uuid.UUID,
        payment: dict[str, Any],
        activity: ActivityRecord,
        updated_at: datetime,
    ) -> bool:
        """Store payment and move pending → paid. False if not pending."""
        with transaction.atomic():
            updated = Order.objects.filter(pk=order_id, status=OrderStatus.PENDING).update(
                status=OrderStatus.PAID,
                payment=payment,
                updated_at=updated_at,
            )
            if updated == 0:
                return False
            ActivityLog.objects.create(**activity.to_payload())
        return True

    def transition_status(
        self,
        *,
        order_id: uuid.UUID,
        from_status: str,
        to_status: str,
        activity: ActivityRecord,
        updated_at: datetime,
        completed_by: Actor | None = None,
    ) -> bool:
        """Compare-and-set the order status. False if it moved meanwhile."""
        changes: dict[str, Any] = {"status": to_status, "updated_at": updated_at}
        if completed_by is not None:
            changes["completed_by_id"] = completed_by.actor_id
            changes["completed_by_name"] = completed_by.display_name

        with transaction.atomic():
            updated = Order.objects.filter(pk=order_id, status=from_status).update(**changes)
            if updated == 0:
                return False
            ActivityLog.objects.create(**activity.to_payload())
        return True

    # ── Loyalty enrolment ─────────────────────────────────────

    def create_loyalty_customer(self, payload: dict[str, Any]) -> dict[str, Any]:
        with transaction.atomic():
            customer = LoyaltyCustomer.objects.create(**payload)
        return {
            field: getattr(customer, field)
            for field in repository.CUSTOMER_FIELDS
        }
