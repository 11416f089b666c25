"""
POS Core Config — Public API
===============================
Store rules (confirmation thresholds, loyalty earn rate, card prefix).
"""

from core.config.rules import (
    PosRules,
    build_pos_rules,
    load_pos_rules,
)

__all__ = [
    "PosRules",
    "build_pos_rules",
    "load_pos_rules",
]
