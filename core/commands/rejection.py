"""
POS Command Layer — Rejection Model
======================================
Structured rejection reasons for refused operator actions.

A rejection is a decision, not a failure: applying a reward the
customer cannot afford is answered with a RejectionReason value and
leaves the order draft untouched. Failures that abort an operation
(storage errors, empty orders) are exceptions instead.

Every rejection must be:
- Deterministic (same input → same rejection)
- Machine-readable (code)
- Human-readable (message)
- Attributable (policy_name)
"""

from __future__ import annotations

from dataclasses import dataclass


# ══════════════════════════════════════════════════════════════
# REJECTION REASON (frozen explanation structure)
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class RejectionReason:
    """
    Structured reason for a refused action.

    Fields:
        code:        Machine-readable rejection code (e.g. 'INSUFFICIENT_POINTS').
        message:     Human-readable explanation, shown inline to the operator.
        policy_name: Name of the policy that produced the rejection.
    """

    code: str
    message: str
    policy_name: str

    def __post_init__(self):
        if not self.code or not isinstance(self.code, str):
            raise ValueError("code must be a non-empty string.")

        if not self.message or not isinstance(self.message, str):
            raise ValueError("message must be a non-empty string.")

        if not self.policy_name or not isinstance(self.policy_name, str):
            raise ValueError("policy_name must be a non-empty string.")


# ══════════════════════════════════════════════════════════════
# STANDARD REJECTION CODES
# ══════════════════════════════════════════════════════════════

class ReasonCode:
    """
    Known rejection codes.

    Convention: SCREAMING_SNAKE_CASE.
    """

    # ── Rewards ───────────────────────────────────────────────
    REWARD_ALREADY_APPLIED = "REWARD_ALREADY_APPLIED"
    CUSTOMER_NOT_ENROLLED = "CUSTOMER_NOT_ENROLLED"
    INSUFFICIENT_POINTS = "INSUFFICIENT_POINTS"
    REWARD_INACTIVE = "REWARD_INACTIVE"
    UNSUPPORTED_REWARD = "UNSUPPORTED_REWARD"

    # ── Orders ────────────────────────────────────────────────
    EMPTY_ORDER = "EMPTY_ORDER"
    PAYMENT_AMOUNT_TOO_LOW = "PAYMENT_AMOUNT_TOO_LOW"
    INVALID_STATUS_TRANSITION = "INVALID_STATUS_TRANSITION"
