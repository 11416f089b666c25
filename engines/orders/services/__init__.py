"""
POS Orders Engine — Application Service
==========================================
Order submission, confirmation and settlement, then payment capture
and the remaining lifecycle transitions.

Settlement flow:
    1. prepare()   — pure: draft → SettlementPlan (totals, points,
                     stock deltas, ledger entries, activity record)
    2. gate        — large orders park in PENDING_CONFIRMATION with
                     their plan frozen; confirm() commits that exact
                     plan, cancel_confirmation() returns to BUILDING
    3. settle()    — ONE atomic store call. Any failure → SettlementError,
                     nothing committed, the caller's draft untouched.

Stock and points are written as relative deltas. The customer's
balance is re-checked inside the same transaction that applies the
delta, so two tills redeeming against one balance cannot overdraw it.
"""

from __future__ import annotations

import copy
import logging
import uuid
from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal
from types import MappingProxyType
from typing import Any, Mapping, Optional, Protocol

from core.audit.functions import create_activity_record
from core.audit.models import (
    ORDER_CANCELLED,
    ORDER_COMPLETED,
    ORDER_CREATED,
    PAYMENT,
    ActivityRecord,
)
from core.config.rules import PosRules
from core.primitives.actor import Actor, ActorProvider
from core.primitives.money import ZERO, to_money
from engines.loyalty.rewards import RewardDefinition, refresh_discount
from engines.loyalty.services import (
    LedgerEntry,
    LoyaltyCustomer,
    LoyaltyDirectory,
    build_ledger_entries,
    calculate_points,
)
from engines.orders.cart import Cart, Product, repeat_order
from engines.orders.draft import DraftState, OrderDraft
from engines.orders.errors import (
    ConfirmationRequiredError,
    EmptyOrderError,
    InvalidStatusTransitionError,
    OrderNotFoundError,
    PaymentAmountTooLowError,
    SettlementError,
)
from engines.orders.events import (
    STATUS_CANCELLED,
    STATUS_COMPLETED,
    STATUS_PAID,
    VALID_PAYMENT_METHODS,
    build_order_payload,
    build_payment_payload,
)
from engines.orders.policies import (
    order_must_have_lines_policy,
    payment_covers_total_policy,
    requires_confirmation,
    status_transition_policy,
)


logger = logging.getLogger("pos.orders")


# ══════════════════════════════════════════════════════════════
# PROTOCOLS
# ══════════════════════════════════════════════════════════════

class OrderStore(Protocol):
    """
    Storage collaborator. Reads return plain row dicts; each write is
    one atomic transaction.
    """

    def list_products(self) -> list[dict[str, Any]]:
        ...

    def list_loyalty_customers(self) -> list[dict[str, Any]]:
        ...

    def list_active_rewards(self) -> list[dict[str, Any]]:
        ...

    def get_order(self, order_id: uuid.UUID) -> Optional[dict[str, Any]]:
        ...

    def list_recent_orders(
        self, customer_id: uuid.UUID, limit: int = 5,
    ) -> list[dict[str, Any]]:
        ...

    def commit_settlement(self, plan: "SettlementPlan") -> None:
        ...

    def record_payment(
        self,
        *,
        order_id: uuid.UUID,
        payment: dict[str, Any],
        activity: ActivityRecord,
        updated_at: datetime,
    ) -> bool:
        ...

    def transition_status(
        self,
        *,
        order_id: uuid.UUID,
        from_status: str,
        to_status: str,
        activity: ActivityRecord,
        updated_at: datetime,
        completed_by: Optional[Actor] = None,
    ) -> bool:
        ...


# ══════════════════════════════════════════════════════════════
# SETTLEMENT PLAN
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class StockAdjustment:
    product_id: str
    delta: int


@dataclass(frozen=True)
class PointsAdjustment:
    """Apply ``delta`` only while the balance is at least ``required_balance``."""
    customer_id: uuid.UUID
    delta: int
    required_balance: int


@dataclass(frozen=True)
class SettlementPlan:
    """
    Everything one settlement writes, computed before anything is written.

    The plan shown for confirmation is the plan committed: confirm()
    only flips ``confirmed``. ``order_payload`` is a read-only view over
    a private copy of the snapshot.
    """
    order_id: uuid.UUID
    order_payload: Mapping[str, Any]
    stock_adjustments: tuple[StockAdjustment, ...]
    points_adjustment: Optional[PointsAdjustment]
    ledger_entries: tuple[LedgerEntry, ...]
    activity: ActivityRecord
    paid_subtotal: Decimal
    discount_applied: Decimal
    total: Decimal
    points_earned: int
    points_deducted: int
    requires_confirmation: bool
    confirmed: bool = False

    def __post_init__(self):
        object.__setattr__(
            self,
            "order_payload",
            MappingProxyType(copy.deepcopy(dict(self.order_payload))),
        )


@dataclass(frozen=True)
class Submission:
    state: DraftState
    draft: OrderDraft
    plan: Optional[SettlementPlan] = None
    order_id: Optional[uuid.UUID] = None


@dataclass(frozen=True)
class PaymentReceipt:
    order_id: uuid.UUID
    amount: Decimal
    total: Decimal
    method: str

    @property
    def change_due(self) -> Decimal:
        return self.amount - self.total


# ══════════════════════════════════════════════════════════════
# APPLICATION SERVICE
# ══════════════════════════════════════════════════════════════

class OrderService:
    """Orders engine application service — till to settled order."""

    def __init__(
        self,
        *,
        store: OrderStore,
        clock,
        rules: PosRules | None = None,
        actor_provider: ActorProvider | None = None,
    ):
        self._store = store
        self._clock = clock
        self._rules = rules or PosRules()
        self._actor_provider = actor_provider

    @property
    def rules(self) -> PosRules:
        return self._rules

    # ── Reads ─────────────────────────────────────────────────

    def products(self) -> list[Product]:
        products = (Product.from_dict(row) for row in self._store.list_products())
        return [p for p in products if p.available]

    def rewards(self) -> list[RewardDefinition]:
        return [
            RewardDefinition.from_dict(row)
            for row in self._store.list_active_rewards()
        ]

    def directory(self) -> LoyaltyDirectory:
        return LoyaltyDirectory(
            LoyaltyCustomer.from_dict(row)
            for row in self._store.list_loyalty_customers()
        )

    def recent_orders(
        self, customer_id: uuid.UUID, limit: int = 5,
    ) -> list[dict[str, Any]]:
        return self._store.list_recent_orders(customer_id, limit)

    def reorder(self, order: Mapping[str, Any]) -> Cart:
        """Cart for a past order, re-priced against the current catalog."""
        return repeat_order(order.get("items") or (), self.products())

    def _resolve_actor(self, actor: Optional[Actor]) -> Actor:
        if actor is not None:
            return actor
        if self._actor_provider is None:
            raise ValueError("No actor given and no actor provider configured.")
        return self._actor_provider.current_actor()

    # ── Settlement ────────────────────────────────────────────

    def prepare(self, draft: OrderDraft, actor: Actor) -> SettlementPlan:
        """Compute the settlement plan for ``draft``. Writes nothing."""
        rejection = order_must_have_lines_policy(draft.cart)
        if rejection is not None:
            logger.warning("Order submission refused: %s", rejection.message)
            raise EmptyOrderError(rejection.message)

        draft = refresh_discount(draft)
        order_id = uuid.uuid4()
        now = self._clock.now_utc()

        customer = None
        if draft.customer_id is not None:
            customer = self.directory().get(draft.customer_id)
        applied = draft.applied_reward
        if applied is not None and customer is None:
            raise SettlementError(
                order_id,
                LookupError(
                    f"Reward '{applied.reward.name}' requires an enrolled "
                    f"customer; customer {draft.customer_id} not found."
                ),
            )

        paid_subtotal = draft.cart.paid_subtotal()
        discount = applied.discount_amount if applied else ZERO
        discount = min(max(discount, ZERO), paid_subtotal)
        total = paid_subtotal - discount

        points = calculate_points(
            paid_subtotal=paid_subtotal,
            discount_applied=discount,
            applied_reward=applied,
            customer=customer,
            points_divisor=self._rules.points_divisor,
        )

        points_adjustment = None
        if customer is not None and (points.net_delta != 0 or points.deducted > 0):
            points_adjustment = PointsAdjustment(
                customer_id=customer.customer_id,
                delta=points.net_delta,
                required_balance=points.deducted,
            )

        return SettlementPlan(
            order_id=order_id,
            order_payload=build_order_payload(
                order_id=order_id,
                draft=draft,
                paid_subtotal=paid_subtotal,
                discount_applied=discount,
                total=total,
                customer_id=customer.customer_id if customer else None,
                points_earned=points.earned,
                points_deducted=points.deducted,
                actor=actor,
                created_at=now,
            ),
            stock_adjustments=tuple(
                StockAdjustment(product_id=item.product_id, delta=-item.quantity)
                for item in draft.cart.paid_lines()
            ),
            points_adjustment=points_adjustment,
            ledger_entries=build_ledger_entries(
                calculation=points,
                customer=customer,
                order_id=order_id,
                applied_reward=applied,
                actor=actor,
                timestamp=now,
            ),
            activity=create_activity_record(
                activity_type=ORDER_CREATED,
                description=f"New order created for {draft.display_customer_name}",
                actor=actor,
                occurred_at=now,
                order_id=order_id,
            ),
            paid_subtotal=paid_subtotal,
            discount_applied=discount,
            total=total,
            points_earned=points.earned,
            points_deducted=points.deducted,
            requires_confirmation=requires_confirmation(
                draft.cart.raw_subtotal(), draft.cart.line_count, self._rules,
            ),
        )

    def settle(self, plan: SettlementPlan) -> uuid.UUID:
        """Commit ``plan`` as one atomic unit."""
        if plan.requires_confirmation and not plan.confirmed:
            raise ConfirmationRequiredError(plan.order_id)

        try:
            self._store.commit_settlement(plan)
        except Exception as exc:
            logger.error(
                "Settlement of order %s failed; nothing committed: %s",
                plan.order_id, exc,
                exc_info=True,
            )
            raise SettlementError(plan.order_id, exc) from exc

        logger.info(
            "Order %s settled: total=%s earned=%d deducted=%d",
            plan.order_id, plan.total, plan.points_earned, plan.points_deducted,
        )
        return plan.order_id

    def submit(self, draft: OrderDraft, actor: Optional[Actor] = None) -> Submission:
        """
        Submit the draft. Small orders settle immediately; large ones
        come back PENDING_CONFIRMATION with their plan attached.
        """
        plan = self.prepare(draft, self._resolve_actor(actor))
        if plan.requires_confirmation:
            logger.info(
                "Order %s awaiting confirmation (total=%s, lines=%d)",
                plan.order_id, draft.cart.raw_subtotal(), draft.cart.line_count,
            )
            return Submission(
                state=DraftState.PENDING_CONFIRMATION, draft=draft, plan=plan,
            )
        order_id = self.settle(plan)
        return Submission(
            state=DraftState.SETTLED,
            draft=OrderDraft.empty(),
            plan=plan,
            order_id=order_id,
        )

    def confirm(self, submission: Submission) -> Submission:
        """Commit the plan the operator was shown, unchanged."""
        if submission.state != DraftState.PENDING_CONFIRMATION or submission.plan is None:
            raise ValueError("Only submissions pending confirmation can be confirmed.")
        plan = replace(submission.plan, confirmed=True)
        order_id = self.settle(plan)
        return Submission(
            state=DraftState.SETTLED,
            draft=OrderDraft.empty(),
            plan=plan,
            order_id=order_id,
        )

    def cancel_confirmation(self, submission: Submission) -> Submission:
        if submission.state != DraftState.PENDING_CONFIRMATION:
            raise ValueError("Only submissions pending confirmation can be cancelled.")
        return Submission(state=DraftState.BUILDING, draft=submission.draft)

    # ── Payment & lifecycle ───────────────────────────────────

    def _load_order(self, order_id: uuid.UUID) -> dict[str, Any]:
        order = self._store.get_order(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    def capture_payment(
        self,
        order_id: uuid.UUID,
        amount,
        method: str,
        actor: Optional[Actor] = None,
    ) -> PaymentReceipt:
        """Record tendered payment and move the order pending → paid."""
        if method not in VALID_PAYMENT_METHODS:
            raise ValueError(
                f"method '{method}' not valid. "
                f"Must be one of: {sorted(VALID_PAYMENT_METHODS)}"
            )
        actor = self._resolve_actor(actor)
        amount = to_money(amount)
        order = self._load_order(order_id)
        total = to_money(order["total"])

        if status_transition_policy(order["status"], STATUS_PAID) is not None:
            raise InvalidStatusTransitionError(order_id, order["status"], STATUS_PAID)
        if payment_covers_total_policy(amount, total) is not None:
            logger.warning(
                "Payment of %s refused for order %s (total %s)",
                amount, order_id, total,
            )
            raise PaymentAmountTooLowError(order_id, amount, total)

        now = self._clock.now_utc()
        recorded = self._store.record_payment(
            order_id=order_id,
            payment=build_payment_payload(
                amount=amount, method=method, actor=actor, paid_at=now,
            ),
            activity=create_activity_record(
                activity_type=PAYMENT,
                description=f"Payment processed for Order #{str(order_id)[:8]}",
                actor=actor,
                occurred_at=now,
                order_id=order_id,
                amount=amount,
            ),
            updated_at=now,
        )
        if not recorded:
            current = self._load_order(order_id)["status"]
            raise InvalidStatusTransitionError(order_id, current, STATUS_PAID)

        receipt = PaymentReceipt(
            order_id=order_id, amount=amount, total=total, method=method,
        )
        logger.info(
            "Payment captured for order %s: %s via %s, change %s",
            order_id, amount, method, receipt.change_due,
        )
        return receipt

    def _transition(
        self,
        order_id: uuid.UUID,
        target: str,
        activity_type: str,
        actor: Optional[Actor],
    ) -> None:
        actor = self._resolve_actor(actor)
        order = self._load_order(order_id)
        current = order["status"]
        if status_transition_policy(current, target) is not None:
            raise InvalidStatusTransitionError(order_id, current, target)

        now = self._clock.now_utc()
        applied = self._store.transition_status(
            order_id=order_id,
            from_status=current,
            to_status=target,
            activity=create_activity_record(
                activity_type=activity_type,
                description=f"Order #{str(order_id)[:8]} {target}",
                actor=actor,
                occurred_at=now,
                order_id=order_id,
            ),
            updated_at=now,
            completed_by=actor if target == STATUS_COMPLETED else None,
        )
        if not applied:
            raise InvalidStatusTransitionError(
                order_id, self._load_order(order_id)["status"], target,
            )
        logger.info("Order %s moved %s → %s", order_id, current, target)

    def complete_order(self, order_id: uuid.UUID, actor: Optional[Actor] = None) -> None:
        self._transition(order_id, STATUS_COMPLETED, ORDER_COMPLETED, actor)

    def cancel_order(self, order_id: uuid.UUID, actor: Optional[Actor] = None) -> None:
        self._transition(order_id, STATUS_CANCELLED, ORDER_CANCELLED, actor)
