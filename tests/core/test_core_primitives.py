"""
Tests for core primitives — actor, money, rules, clock, rejections,
activity records.
"""

import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from core.audit.functions import create_activity_record
from core.commands.rejection import ReasonCode, RejectionReason
from core.config.rules import PosRules, build_pos_rules
from core.primitives.actor import Actor, ActorType, StaticActorProvider
from core.primitives.money import ZERO, money_str, to_money
from core.time.clock import FixedClock, SystemClock


# ── Actor ─────────────────────────────────────────────────────

class TestActor:
    def test_staff_display_name_falls_back_to_email(self):
        actor = Actor.staff("u-1", "ana.cruz@cafe.example")
        assert actor.display_name == "ana.cruz"
        assert actor.actor_type == ActorType.HUMAN

    def test_human_requires_email(self):
        with pytest.raises(ValueError):
            Actor(actor_type=ActorType.HUMAN, actor_id="u-1")

    def test_system_actor(self):
        actor = Actor.system("pos.till")
        assert actor.actor_type == ActorType.SYSTEM
        assert actor.display_name == "pos.till"

    def test_static_provider(self):
        actor = Actor.system("kiosk")
        assert StaticActorProvider(actor).current_actor() is actor


# ── Money ─────────────────────────────────────────────────────

class TestMoney:
    def test_quantizes_half_up(self):
        assert to_money("10.005") == Decimal("10.01")
        assert to_money(Decimal("2.344")) == Decimal("2.34")
        assert to_money(7) == Decimal("7.00")

    def test_refuses_floats(self):
        with pytest.raises(TypeError):
            to_money(0.1)

    def test_rejects_garbage(self):
        with pytest.raises(ValueError):
            to_money("abc")
        with pytest.raises(ValueError):
            to_money("NaN")

    def test_money_str(self):
        assert money_str(Decimal("80")) == "80.00"
        assert money_str(ZERO) == "0.00"


# ── Rules ─────────────────────────────────────────────────────

class TestPosRules:
    def test_defaults(self):
        rules = PosRules()
        assert rules.large_order_threshold == Decimal("1000")
        assert rules.large_item_count_threshold == 5
        assert rules.points_divisor == Decimal("50")
        assert rules.card_prefix == "LC"

    def test_partial_overrides(self):
        rules = build_pos_rules({"points_divisor": "25", "card_prefix": "MB"})
        assert rules.points_divisor == Decimal("25")
        assert rules.card_prefix == "MB"
        assert rules.large_order_threshold == Decimal("1000")

    def test_unknown_key_rejected(self):
        with pytest.raises(ValueError, match="Unknown POS_RULES keys"):
            build_pos_rules({"tax_rate": "0.12"})

    @pytest.mark.parametrize(
        "overrides",
        [
            {"points_divisor": "0"},
            {"points_divisor": "fifty"},
            {"large_order_threshold": "-1"},
            {"large_item_count_threshold": 2.5},
            {"card_prefix": ""},
            {"currency": "PHP"},
        ],
    )
    def test_invalid_values_rejected(self, overrides):
        with pytest.raises(ValueError):
            build_pos_rules(overrides)


# ── Clock ─────────────────────────────────────────────────────

class TestClock:
    def test_system_clock_is_utc(self):
        assert SystemClock().now_utc().tzinfo == timezone.utc

    def test_fixed_clock_advance(self):
        start = datetime(2026, 3, 1, 8, 0, tzinfo=timezone.utc)
        clock = FixedClock(start)
        clock.advance(minutes=5)
        assert clock.now_utc() == start + timedelta(minutes=5)

    def test_fixed_clock_rejects_naive(self):
        with pytest.raises(ValueError, match="timezone-aware"):
            FixedClock(datetime(2026, 3, 1))


# ── Rejections & activity ─────────────────────────────────────

class TestRejectionReason:
    def test_carries_code_and_policy(self):
        reason = RejectionReason(
            code=ReasonCode.EMPTY_ORDER,
            message="Cannot submit an empty order.",
            policy_name="order_must_have_lines_policy",
        )
        assert reason.code == "EMPTY_ORDER"
        assert reason.policy_name == "order_must_have_lines_policy"

    def test_blank_message_rejected(self):
        with pytest.raises(ValueError):
            RejectionReason(code="X", message="", policy_name="p")


class TestActivityRecord:
    def test_attributed_to_actor(self):
        order_id = uuid.uuid4()
        record = create_activity_record(
            activity_type="payment",
            description="Payment processed",
            actor=Actor.staff("u-1", "ana@cafe.example", "Ana"),
            occurred_at=datetime(2026, 3, 1, tzinfo=timezone.utc),
            order_id=order_id,
            amount=Decimal("100.00"),
        )
        payload = record.to_payload()
        assert payload["user_name"] == "Ana"
        assert payload["user_email"] == "ana@cafe.example"
        assert payload["order_id"] == order_id

    def test_unknown_activity_type_rejected(self):
        with pytest.raises(ValueError):
            create_activity_record(
                activity_type="refund",
                description="Refund",
                actor=Actor.system("pos"),
                occurred_at=datetime(2026, 3, 1, tzinfo=timezone.utc),
            )
