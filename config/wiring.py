"""
POS Service Wiring
==================
Builds the engine services over the Django store for a live till.
"""

from __future__ import annotations

from core.config.rules import load_pos_rules
from core.primitives.actor import ActorProvider
from core.store.service import DjangoOrderStore
from core.time.clock import SystemClock
from engines.loyalty.services import LoyaltyService
from engines.orders.services import OrderService


def build_order_service(actor_provider: ActorProvider | None = None) -> OrderService:
    return OrderService(
        store=DjangoOrderStore(),
        clock=SystemClock(),
        rules=load_pos_rules(),
        actor_provider=actor_provider,
    )


def build_loyalty_service() -> LoyaltyService:
    return LoyaltyService(
        store=DjangoOrderStore(),
        clock=SystemClock(),
        rules=load_pos_rules(),
    )
