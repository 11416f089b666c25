"""
POS Core Primitives — Shared Building Blocks
=============================================
Pure Python, immutable, no Django dependency.

Primitives:
    actor — staff identity used to attribute every write
    money — Decimal amounts, two places, half-up
"""

from core.primitives.actor import (
    Actor,
    ActorProvider,
    ActorType,
    StaticActorProvider,
)
from core.primitives.money import (
    ZERO,
    money_str,
    to_money,
)

__all__ = [
    "Actor",
    "ActorProvider",
    "ActorType",
    "StaticActorProvider",
    "ZERO",
    "money_str",
    "to_money",
]
