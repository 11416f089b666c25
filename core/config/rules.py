"""
POS Core Config — Store Rules
=============================
Doctrine: No magic numbers in engine logic.
Thresholds and loyalty constants come from one frozen rules object,
built from the Django ``POS_RULES`` setting. Partial overrides are
merged over the defaults observed in the shop's own procedures.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional


# ══════════════════════════════════════════════════════════════
# POS RULES
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class PosRules:
    """
    Store-wide rules consumed by the order and loyalty engines.

    Fields:
        large_order_threshold:       Orders above this amount need confirmation.
        large_item_count_threshold:  Orders with more line entries need confirmation.
        points_divisor:              Currency units spent per loyalty point.
        card_prefix:                 Prefix of generated loyalty card numbers.
    """

    large_order_threshold: Decimal = Decimal("1000")
    large_item_count_threshold: int = 5
    points_divisor: Decimal = Decimal("50")
    card_prefix: str = "LC"

    def __post_init__(self) -> None:
        for name in ("large_order_threshold", "points_divisor"):
            try:
                object.__setattr__(self, name, Decimal(str(getattr(self, name))))
            except InvalidOperation as exc:
                raise ValueError(f"{name} must be a decimal number.") from exc

        if self.large_order_threshold < 0:
            raise ValueError("large_order_threshold must be >= 0.")
        if not isinstance(self.large_item_count_threshold, int) or (
            self.large_item_count_threshold < 0
        ):
            raise ValueError("large_item_count_threshold must be a non-negative int.")
        if self.points_divisor <= 0:
            raise ValueError("points_divisor must be positive.")
        if not self.card_prefix:
            raise ValueError("card_prefix must be non-empty.")


_FIELD_NAMES = frozenset(f.name for f in fields(PosRules))


def build_pos_rules(overrides: Optional[Mapping[str, Any]] = None) -> PosRules:
    """Merge overrides over the defaults. Unknown keys are rejected."""
    if not overrides:
        return PosRules()
    unknown = set(overrides) - _FIELD_NAMES
    if unknown:
        raise ValueError(f"Unknown POS_RULES keys: {sorted(unknown)}")
    return replace(PosRules(), **dict(overrides))


def load_pos_rules() -> PosRules:
    """Build rules from ``settings.POS_RULES``."""
    from django.conf import settings

    return build_pos_rules(getattr(settings, "POS_RULES", None))
