"""
POS Orders Engine — Test Suite
================================
Tests for: cart model, confirmation gate, settlement, payment capture
and order status transitions.

Tests verify:
- Subtotal arithmetic over paid and reward lines
- Pure cart operations (merge, update, remove, repeat)
- Confirmation gate thresholds and the confirm/cancel round trip
- Settlement plans (totals, points, stock deltas, ledger, activity)
- Atomic failure handling and the redemption balance race
- Payment capture and lifecycle transitions
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from core.primitives.actor import Actor, StaticActorProvider
from core.time.clock import FixedClock

NOW = datetime(2026, 3, 14, 9, 30, 0, tzinfo=timezone.utc)
BARISTA = Actor.staff("staff-001", "ana@cafe.example", "Ana")

COFFEE_ID = str(uuid.uuid4())
CAKE_ID = str(uuid.uuid4())
LATTE_ID = str(uuid.uuid4())
PLATTER_ID = str(uuid.uuid4())
CUSTOMER_ID = uuid.uuid4()


# ══════════════════════════════════════════════════════════════
# TEST HELPERS
# ══════════════════════════════════════════════════════════════

def product_row(product_id, name, price, stock=50, available=True):
    return {
        "id": product_id,
        "name": name,
        "price": Decimal(price),
        "stock": stock,
        "available": available,
        "category_id": None,
    }


def customer_row(customer_id=CUSTOMER_ID, points=100, name="Maria Santos"):
    return {
        "id": customer_id,
        "name": name,
        "card_number": "LC-482913",
        "points": points,
        "phone": "",
        "email": "",
    }


def reward_row(name, points_required, description="", kind="", percent=None):
    return {
        "id": str(uuid.uuid4()),
        "name": name,
        "description": description,
        "points_required": points_required,
        "kind": kind,
        "percent": percent,
        "active": True,
    }


def default_products():
    return [
        product_row(COFFEE_ID, "Coffee", "80"),
        product_row(CAKE_ID, "Cake", "500"),
        product_row(LATTE_ID, "Latte", "120"),
        product_row(PLATTER_ID, "Party Platter", "1200", stock=5),
    ]


class StubOrderStore:
    """In-memory store; applies a settlement all-or-nothing."""

    def __init__(self, products=(), customers=(), rewards=()):
        self.products = {row["id"]: dict(row) for row in products}
        self.customers = {row["id"]: dict(row) for row in customers}
        self.rewards = [dict(row) for row in rewards]
        self.orders = {}
        self.ledger = []
        self.activity = []
        self.calls = []
        self.fail_with = None

    def list_products(self):
        self.calls.append("list_products")
        return [dict(row) for row in self.products.values()]

    def list_loyalty_customers(self):
        self.calls.append("list_loyalty_customers")
        return [dict(row) for row in self.customers.values()]

    def list_active_rewards(self):
        self.calls.append("list_active_rewards")
        return [dict(row) for row in self.rewards if row["active"]]

    def get_order(self, order_id):
        self.calls.append("get_order")
        order = self.orders.get(order_id)
        return dict(order) if order is not None else None

    def list_recent_orders(self, customer_id, limit=5):
        self.calls.append("list_recent_orders")
        rows = [o for o in self.orders.values() if o["customer_id"] == customer_id]
        rows.sort(key=lambda o: o["created_at"], reverse=True)
        return [dict(o) for o in rows[:limit]]

    def commit_settlement(self, plan):
        self.calls.append("commit_settlement")
        if self.fail_with is not None:
            raise self.fail_with
        for adjustment in plan.stock_adjustments:
            if adjustment.product_id not in self.products:
                raise LookupError(f"product {adjustment.product_id}")
        points = plan.points_adjustment
        if points is not None:
            customer = self.customers.get(points.customer_id)
            if customer is None or customer["points"] < points.required_balance:
                raise LookupError(f"balance conflict for {points.customer_id}")

        self.orders[plan.order_id] = dict(plan.order_payload)
        for adjustment in plan.stock_adjustments:
            self.products[adjustment.product_id]["stock"] += adjustment.delta
        if points is not None:
            self.customers[points.customer_id]["points"] += points.delta
        self.ledger.extend(plan.ledger_entries)
        self.activity.append(plan.activity)

    def record_payment(self, *, order_id, payment, activity, updated_at):
        self.calls.append("record_payment")
        order = self.orders[order_id]
        if order["status"] != "pending":
            return False
        order.update(status="paid", payment=payment, updated_at=updated_at)
        self.activity.append(activity)
        return True

    def transition_status(
        self, *, order_id, from_status, to_status, activity, updated_at,
        completed_by=None,
    ):
        self.calls.append("transition_status")
        order = self.orders[order_id]
        if order["status"] != from_status:
            return False
        order.update(status=to_status, updated_at=updated_at)
        if completed_by is not None:
            order["completed_by_id"] = completed_by.actor_id
        self.activity.append(activity)
        return True


def make_service(store, actor_provider=None):
    from engines.orders.services import OrderService
    return OrderService(
        store=store,
        clock=FixedClock(NOW),
        actor_provider=actor_provider,
    )


def product(store, product_id):
    from engines.orders.cart import Product
    return Product.from_dict(store.products[product_id])


def draft_with(store, *lines, customer_id=None):
    from engines.orders.draft import OrderDraft
    draft = OrderDraft.empty()
    if customer_id is not None:
        draft = draft.with_customer(customer_id, "Maria Santos")
    for product_id, quantity in lines:
        draft = draft.add_item(product(store, product_id), quantity)
    return draft


def apply(service, draft, name):
    from engines.loyalty.rewards import try_apply_reward
    reward = next(r for r in service.rewards() if r.name == name)
    return try_apply_reward(draft, reward, service.directory())


# ══════════════════════════════════════════════════════════════
# CART MODEL
# ══════════════════════════════════════════════════════════════

class TestCart:

    def _products(self):
        from engines.orders.cart import Product
        return (
            Product(product_id="p-1", name="Coffee", price=Decimal("80")),
            Product(product_id="p-2", name="Cake", price=Decimal("500")),
            Product(product_id="p-3", name="Muffin", price=Decimal("65.50")),
        )

    def test_paid_subtotal_is_order_independent(self):
        from engines.orders.cart import Cart, add_item
        coffee, cake, muffin = self._products()
        forward = add_item(add_item(add_item(Cart(), coffee, 2), cake, 1), muffin, 3)
        backward = add_item(add_item(add_item(Cart(), muffin, 3), cake, 1), coffee, 2)
        assert forward.paid_subtotal() == backward.paid_subtotal() == Decimal("856.50")

    def test_reward_lines_excluded_from_paid_subtotal(self):
        from engines.orders.cart import Cart, LineItem, add_item
        coffee, _, _ = self._products()
        cart = add_item(Cart(), coffee, 2)
        cart = Cart(items=cart.items + (
            LineItem(
                product_id="FREE-r1", name="Cookie", unit_price=Decimal("0"),
                quantity=1, is_reward=True, reward_id="r1",
            ),
        ))
        assert cart.paid_subtotal() == Decimal("160.00")
        assert cart.raw_subtotal() == Decimal("160.00")
        assert cart.line_count == 2
        assert len(cart.reward_lines()) == 1

    def test_add_same_product_merges_lines(self):
        from engines.orders.cart import Cart, add_item
        coffee, _, _ = self._products()
        cart = add_item(add_item(Cart(), coffee, 1), coffee, 2)
        assert cart.line_count == 1
        assert cart.find("p-1").quantity == 3

    def test_add_non_positive_quantity_is_noop(self):
        from engines.orders.cart import Cart, add_item
        coffee, _, _ = self._products()
        cart = Cart()
        assert add_item(cart, coffee, 0) == cart
        assert add_item(cart, coffee, -2) == cart

    def test_add_unavailable_product_rejected(self):
        from engines.orders.cart import Cart, Product, add_item
        sold_out = Product(
            product_id="p-9", name="Croissant", price=Decimal("90"), available=False,
        )
        with pytest.raises(ValueError):
            add_item(Cart(), sold_out, 1)

    def test_update_quantity_to_zero_removes_line(self):
        from engines.orders.cart import Cart, add_item, update_quantity
        coffee, cake, _ = self._products()
        cart = add_item(add_item(Cart(), coffee, 2), cake, 1)
        cart = update_quantity(cart, "p-1", 0)
        assert cart.find("p-1") is None
        assert cart.line_count == 1

    def test_remove_item_leaves_reward_lines(self):
        from engines.orders.cart import Cart, LineItem, remove_item
        reward_line = LineItem(
            product_id="FREE-r1", name="Cookie", unit_price=Decimal("0"),
            quantity=1, is_reward=True, reward_id="r1",
        )
        cart = remove_item(Cart(items=(reward_line,)), "FREE-r1")
        assert cart.items == (reward_line,)

    def test_reward_line_must_be_free(self):
        from engines.orders.cart import LineItem
        with pytest.raises(ValueError):
            LineItem(
                product_id="FREE-r1", name="Cookie", unit_price=Decimal("10"),
                quantity=1, is_reward=True, reward_id="r1",
            )

    def test_line_quantity_must_be_positive(self):
        from engines.orders.cart import LineItem
        with pytest.raises(ValueError):
            LineItem(product_id="p-1", name="Coffee", unit_price=Decimal("80"), quantity=0)

    def test_repeat_order_reprices_and_skips_rewards_and_missing(self):
        from engines.orders.cart import Product, repeat_order
        coffee = Product(product_id="p-1", name="Coffee", price=Decimal("85"))
        retired = Product(
            product_id="p-2", name="Cake", price=Decimal("500"), available=False,
        )
        cart = repeat_order(
            [
                {"product_id": "p-1", "quantity": 2, "unit_price": "80.00"},
                {"product_id": "p-2", "quantity": 1, "unit_price": "500.00"},
                {"product_id": "p-gone", "quantity": 1, "unit_price": "40.00"},
                {"product_id": "FREE-r1", "quantity": 1, "is_reward": True},
            ],
            [coffee, retired],
        )
        assert cart.line_count == 1
        assert cart.find("p-1").unit_price == Decimal("85.00")
        assert cart.paid_subtotal() == Decimal("170.00")


# ══════════════════════════════════════════════════════════════
# CONFIRMATION GATE
# ══════════════════════════════════════════════════════════════

class TestConfirmationGate:

    def test_total_above_threshold_requires_confirmation(self):
        from engines.orders.policies import requires_confirmation
        assert requires_confirmation(Decimal("1200"), 1) is True

    def test_total_at_threshold_does_not(self):
        from engines.orders.policies import requires_confirmation
        assert requires_confirmation(Decimal("1000"), 5) is False

    def test_line_count_above_threshold_requires_confirmation(self):
        from engines.orders.policies import requires_confirmation
        assert requires_confirmation(Decimal("300"), 6) is True

    def test_thresholds_come_from_rules(self):
        from core.config.rules import PosRules
        from engines.orders.policies import requires_confirmation
        rules = PosRules(large_order_threshold=Decimal("200"))
        assert requires_confirmation(Decimal("250"), 1, rules) is True


# ══════════════════════════════════════════════════════════════
# SETTLEMENT
# ══════════════════════════════════════════════════════════════

class TestSettlement:

    def test_walk_in_order_settles_without_points(self):
        from engines.orders.draft import DraftState
        store = StubOrderStore(products=default_products())
        service = make_service(store)
        draft = draft_with(store, (COFFEE_ID, 2))

        result = service.submit(draft, BARISTA)

        assert result.state == DraftState.SETTLED
        assert result.draft.cart.is_empty
        assert result.plan.paid_subtotal == Decimal("160.00")
        assert result.plan.points_earned == 0
        assert result.plan.points_adjustment is None
        assert store.products[COFFEE_ID]["stock"] == 48
        assert store.ledger == []
        order = store.orders[result.order_id]
        assert order["status"] == "pending"
        assert order["customer_name"] == "Walk-in Customer"
        assert order["created_by_name"] == "Ana"
        assert store.activity[0].description == "New order created for Walk-in Customer"

    def test_percentage_reward_settlement(self):
        store = StubOrderStore(
            products=default_products(),
            customers=[customer_row(points=100)],
            rewards=[reward_row("10% Off", 50)],
        )
        service = make_service(store)
        draft = draft_with(store, (CAKE_ID, 1), customer_id=CUSTOMER_ID)
        draft = apply(service, draft, "10% Off").draft

        result = service.submit(draft, BARISTA)
        plan = result.plan

        assert plan.discount_applied == Decimal("50.00")
        assert plan.total == Decimal("450.00")
        assert plan.points_deducted == 50
        assert plan.points_earned == 9
        assert store.customers[CUSTOMER_ID]["points"] == 59
        assert [e.points for e in store.ledger] == [9, -50]
        assert {e.order_id for e in store.ledger} == {result.order_id}
        summary = store.orders[result.order_id]["loyalty_summary"]
        assert summary == {
            "points_earned": 9,
            "points_deducted": 50,
            "discount_amount": "50.00",
            "reward_used": "10% Off",
        }

    def test_free_item_reward_settlement(self):
        store = StubOrderStore(
            products=default_products(),
            customers=[customer_row(points=30)],
            rewards=[reward_row("Free Cookie", 30, description="Cookie")],
        )
        service = make_service(store)
        draft = draft_with(store, (LATTE_ID, 1), customer_id=CUSTOMER_ID)
        draft = apply(service, draft, "Free Cookie").draft
        assert [line.name for line in draft.cart.reward_lines()] == ["Cookie"]

        result = service.submit(draft, BARISTA)
        plan = result.plan

        assert plan.paid_subtotal == Decimal("120.00")
        assert plan.discount_applied == Decimal("0.00")
        assert plan.points_deducted == 30
        assert plan.points_earned == 2
        assert store.customers[CUSTOMER_ID]["points"] == 2
        assert [a.product_id for a in plan.stock_adjustments] == [LATTE_ID]
        snapshot = store.orders[result.order_id]["items"]
        reward_lines = [line for line in snapshot if line["is_reward"]]
        assert reward_lines[0]["unit_price"] == "0.00"
        assert reward_lines[0]["name"] == "Cookie"

    def test_customer_without_reward_earns_points(self):
        store = StubOrderStore(
            products=default_products(),
            customers=[customer_row(points=10)],
        )
        service = make_service(store)
        draft = draft_with(store, (COFFEE_ID, 3), customer_id=CUSTOMER_ID)

        result = service.submit(draft, BARISTA)

        assert result.plan.points_earned == 4
        assert store.customers[CUSTOMER_ID]["points"] == 14
        assert len(store.ledger) == 1

    def test_empty_order_rejected_without_store_calls(self):
        from engines.orders.draft import OrderDraft
        from engines.orders.errors import EmptyOrderError
        store = StubOrderStore(products=default_products())
        service = make_service(store)

        with pytest.raises(EmptyOrderError):
            service.submit(OrderDraft.empty(), BARISTA)
        assert store.calls == []

    def test_storage_failure_raises_settlement_error_and_keeps_draft(self):
        from engines.orders.errors import SettlementError
        store = StubOrderStore(products=default_products())
        store.fail_with = RuntimeError("disk full")
        service = make_service(store)
        draft = draft_with(store, (COFFEE_ID, 2))

        with pytest.raises(SettlementError) as exc_info:
            service.submit(draft, BARISTA)

        assert isinstance(exc_info.value.cause, RuntimeError)
        assert store.orders == {}
        assert store.products[COFFEE_ID]["stock"] == 50
        assert draft.cart.find(COFFEE_ID).quantity == 2

    def test_balance_spent_elsewhere_aborts_settlement(self):
        from engines.orders.errors import SettlementError
        store = StubOrderStore(
            products=default_products(),
            customers=[customer_row(points=100)],
            rewards=[reward_row("10% Off", 50)],
        )
        service = make_service(store)
        draft = draft_with(store, (CAKE_ID, 1), customer_id=CUSTOMER_ID)
        draft = apply(service, draft, "10% Off").draft

        store.customers[CUSTOMER_ID]["points"] = 20

        with pytest.raises(SettlementError):
            service.submit(draft, BARISTA)
        assert store.customers[CUSTOMER_ID]["points"] == 20
        assert store.products[CAKE_ID]["stock"] == 50
        assert store.orders == {}

    def test_reward_for_removed_customer_fails_before_commit(self):
        from engines.orders.errors import SettlementError
        store = StubOrderStore(
            products=default_products(),
            customers=[customer_row(points=100)],
            rewards=[reward_row("10% Off", 50)],
        )
        service = make_service(store)
        draft = draft_with(store, (CAKE_ID, 1), customer_id=CUSTOMER_ID)
        draft = apply(service, draft, "10% Off").draft
        store.customers.clear()

        with pytest.raises(SettlementError):
            service.submit(draft, BARISTA)
        assert "commit_settlement" not in store.calls

    def test_notes_travel_into_order_snapshot(self):
        store = StubOrderStore(products=default_products())
        service = make_service(store)
        draft = draft_with(store, (COFFEE_ID, 1)).with_notes("Oat milk, no sugar")

        result = service.submit(draft, BARISTA)

        assert store.orders[result.order_id]["notes"] == "Oat milk, no sugar"

    def test_submit_uses_actor_provider(self):
        cashier = Actor.staff("staff-002", "ben@cafe.example")
        store = StubOrderStore(products=default_products())
        service = make_service(store, StaticActorProvider(cashier))

        result = service.submit(draft_with(store, (COFFEE_ID, 1)))

        assert store.orders[result.order_id]["created_by_id"] == "staff-002"
        assert store.orders[result.order_id]["created_by_name"] == "ben"

    def test_submit_without_any_actor_rejected(self):
        store = StubOrderStore(products=default_products())
        service = make_service(store)
        with pytest.raises(ValueError):
            service.submit(draft_with(store, (COFFEE_ID, 1)))


class TestConfirmationFlow:

    def test_large_order_waits_for_confirmation(self):
        from engines.orders.draft import DraftState
        store = StubOrderStore(products=default_products())
        service = make_service(store)
        draft = draft_with(store, (PLATTER_ID, 1))

        pending = service.submit(draft, BARISTA)

        assert pending.state == DraftState.PENDING_CONFIRMATION
        assert pending.plan.requires_confirmation is True
        assert pending.order_id is None
        assert "commit_settlement" not in store.calls
        assert store.products[PLATTER_ID]["stock"] == 5

    def test_confirm_commits_the_precomputed_plan(self):
        from engines.orders.draft import DraftState
        store = StubOrderStore(products=default_products())
        service = make_service(store)
        pending = service.submit(draft_with(store, (PLATTER_ID, 1)), BARISTA)

        settled = service.confirm(pending)

        assert settled.state == DraftState.SETTLED
        assert settled.order_id == pending.plan.order_id
        assert settled.plan.total == pending.plan.total == Decimal("1200.00")
        assert store.orders[settled.order_id]["total"] == Decimal("1200.00")
        assert store.products[PLATTER_ID]["stock"] == 4

    def test_pending_snapshot_cannot_be_edited_before_confirm(self):
        store = StubOrderStore(products=default_products())
        service = make_service(store)
        pending = service.submit(draft_with(store, (PLATTER_ID, 1)), BARISTA)
        shown = dict(pending.plan.order_payload)

        with pytest.raises(TypeError):
            pending.plan.order_payload["total"] = Decimal("1.00")
        settled = service.confirm(pending)

        assert store.orders[settled.order_id] == shown

    def test_unconfirmed_plan_cannot_settle(self):
        from engines.orders.errors import ConfirmationRequiredError
        store = StubOrderStore(products=default_products())
        service = make_service(store)
        pending = service.submit(draft_with(store, (PLATTER_ID, 1)), BARISTA)

        with pytest.raises(ConfirmationRequiredError):
            service.settle(pending.plan)
        assert store.orders == {}

    def test_cancel_confirmation_returns_draft_for_editing(self):
        from engines.orders.draft import DraftState
        store = StubOrderStore(products=default_products())
        service = make_service(store)
        draft = draft_with(store, (PLATTER_ID, 1))
        pending = service.submit(draft, BARISTA)

        back = service.cancel_confirmation(pending)

        assert back.state == DraftState.BUILDING
        assert back.draft == draft
        assert back.plan is None
        assert store.orders == {}

    def test_many_lines_require_confirmation(self):
        from engines.orders.draft import DraftState
        lines = [product_row(str(uuid.uuid4()), f"Item {i}", "10") for i in range(6)]
        store = StubOrderStore(products=lines)
        service = make_service(store)
        draft = draft_with(store, *[(row["id"], 1) for row in lines])

        assert service.submit(draft, BARISTA).state == DraftState.PENDING_CONFIRMATION

    def test_confirm_rejects_settled_submission(self):
        store = StubOrderStore(products=default_products())
        service = make_service(store)
        settled = service.submit(draft_with(store, (COFFEE_ID, 1)), BARISTA)
        with pytest.raises(ValueError):
            service.confirm(settled)


# ══════════════════════════════════════════════════════════════
# PAYMENT & LIFECYCLE
# ══════════════════════════════════════════════════════════════

class TestPaymentAndLifecycle:

    def _settled(self):
        store = StubOrderStore(products=default_products())
        service = make_service(store)
        result = service.submit(draft_with(store, (CAKE_ID, 1)), BARISTA)
        return store, service, result.order_id

    def test_capture_payment_returns_change(self):
        store, service, order_id = self._settled()

        receipt = service.capture_payment(order_id, "600", "cash", BARISTA)

        assert receipt.change_due == Decimal("100.00")
        order = store.orders[order_id]
        assert order["status"] == "paid"
        assert order["payment"]["amount"] == "600.00"
        assert order["payment"]["method"] == "cash"
        assert order["payment"]["processed_by_name"] == "Ana"
        assert store.activity[-1].activity_type == "payment"
        assert store.activity[-1].amount == Decimal("600.00")

    def test_payment_below_total_rejected(self):
        from engines.orders.errors import PaymentAmountTooLowError
        store, service, order_id = self._settled()

        with pytest.raises(PaymentAmountTooLowError):
            service.capture_payment(order_id, Decimal("499.99"), "card", BARISTA)
        assert store.orders[order_id]["status"] == "pending"
        assert "record_payment" not in store.calls

    def test_unknown_payment_method_rejected(self):
        store, service, order_id = self._settled()
        with pytest.raises(ValueError):
            service.capture_payment(order_id, "500", "cheque", BARISTA)

    def test_paying_twice_rejected(self):
        from engines.orders.errors import InvalidStatusTransitionError
        store, service, order_id = self._settled()
        service.capture_payment(order_id, "500", "mobile", BARISTA)
        with pytest.raises(InvalidStatusTransitionError):
            service.capture_payment(order_id, "500", "mobile", BARISTA)

    def test_complete_after_payment(self):
        store, service, order_id = self._settled()
        service.capture_payment(order_id, "500", "cash", BARISTA)

        service.complete_order(order_id, BARISTA)

        assert store.orders[order_id]["status"] == "completed"
        assert store.orders[order_id]["completed_by_id"] == "staff-001"
        assert store.activity[-1].description == f"Order #{str(order_id)[:8]} completed"

    def test_complete_unpaid_order_rejected(self):
        from engines.orders.errors import InvalidStatusTransitionError
        store, service, order_id = self._settled()
        with pytest.raises(InvalidStatusTransitionError) as exc_info:
            service.complete_order(order_id, BARISTA)
        assert exc_info.value.current == "pending"
        assert exc_info.value.target == "completed"

    def test_cancel_pending_order(self):
        store, service, order_id = self._settled()
        service.cancel_order(order_id, BARISTA)
        assert store.orders[order_id]["status"] == "cancelled"
        assert store.activity[-1].activity_type == "order_cancelled"

    def test_cancel_paid_order_rejected(self):
        from engines.orders.errors import InvalidStatusTransitionError
        store, service, order_id = self._settled()
        service.capture_payment(order_id, "500", "cash", BARISTA)
        with pytest.raises(InvalidStatusTransitionError):
            service.cancel_order(order_id, BARISTA)

    def test_unknown_order_not_found(self):
        from engines.orders.errors import OrderNotFoundError
        store, service, _ = self._settled()
        with pytest.raises(OrderNotFoundError):
            service.capture_payment(uuid.uuid4(), "500", "cash", BARISTA)


class TestCatalogReads:

    def test_products_hide_unavailable(self):
        rows = default_products() + [
            product_row(str(uuid.uuid4()), "Croissant", "90", available=False),
        ]
        service = make_service(StubOrderStore(products=rows))
        names = {p.name for p in service.products()}
        assert "Croissant" not in names
        assert "Coffee" in names

    def test_rewards_infer_legacy_kinds(self):
        from engines.loyalty.rewards import FreeItem, PercentageDiscount
        service = make_service(StubOrderStore(rewards=[
            reward_row("15% Off", 80),
            reward_row("Free Cookie", 30, description="Cookie"),
            reward_row("Mystery Gift", 10),
        ]))
        kinds = {r.name: r.kind for r in service.rewards()}
        assert kinds["15% Off"] == PercentageDiscount(Decimal("15"))
        assert kinds["Free Cookie"] == FreeItem("Cookie")
        assert kinds["Mystery Gift"] is None

    def test_reorder_from_recent_orders(self):
        from engines.orders.services import OrderService
        store = StubOrderStore(
            products=default_products(),
            customers=[customer_row(points=0)],
        )
        clock = FixedClock(NOW)
        service = OrderService(store=store, clock=clock)
        first = service.submit(
            draft_with(store, (COFFEE_ID, 2), customer_id=CUSTOMER_ID), BARISTA,
        )
        clock.advance(minutes=10)
        latest = service.submit(
            draft_with(store, (CAKE_ID, 1), (LATTE_ID, 1), customer_id=CUSTOMER_ID),
            BARISTA,
        )
        store.products[LATTE_ID]["price"] = Decimal("130")

        recent = service.recent_orders(CUSTOMER_ID)
        cart = service.reorder(recent[0])

        assert [o["id"] for o in recent] == [latest.order_id, first.order_id]
        assert [line.product_id for line in cart.items] == [CAKE_ID, LATTE_ID]
        assert cart.paid_subtotal() == Decimal("630.00")
