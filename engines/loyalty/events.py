"""
POS Loyalty Engine — Ledger Entry Types
=======================================
Every change to a customer's points balance is mirrored by one
append-only ledger entry. One settlement writes at most one entry
of each type.
"""

# ── Ledger Entry Types ────────────────────────────────────────

LEDGER_EARNED = "earned"
LEDGER_REDEEMED = "redeemed"

VALID_LEDGER_TYPES = frozenset({LEDGER_EARNED, LEDGER_REDEEMED})

# ── Reward Kinds ──────────────────────────────────────────────

KIND_PERCENTAGE_DISCOUNT = "percentage_discount"
KIND_FREE_ITEM = "free_item"

VALID_REWARD_KINDS = frozenset({KIND_PERCENTAGE_DISCOUNT, KIND_FREE_ITEM})

FREE_ITEM_PRODUCT_PREFIX = "FREE-"
