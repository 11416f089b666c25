"""
POS Loyalty Engine — Policies
=============================
Reward redemption guards. Each policy returns None when satisfied
or a RejectionReason describing the refusal. The resolver evaluates
them in a fixed order and the first rejection wins.
"""

from typing import Optional

from core.commands.rejection import ReasonCode, RejectionReason


def reward_not_already_applied_policy(draft, reward) -> Optional[RejectionReason]:
    """Only one reward may be attached to an order."""
    if draft.applied_reward is None:
        return None
    return RejectionReason(
        code=ReasonCode.REWARD_ALREADY_APPLIED,
        message=(
            f"'{draft.applied_reward.reward.name}' is already applied. "
            f"Only one reward can be applied per order."
        ),
        policy_name="reward_not_already_applied_policy",
    )


def customer_enrolled_policy(customer) -> Optional[RejectionReason]:
    """The order's customer must be found in the loyalty directory."""
    if customer is not None:
        return None
    return RejectionReason(
        code=ReasonCode.CUSTOMER_NOT_ENROLLED,
        message="Customer not found in loyalty program.",
        policy_name="customer_enrolled_policy",
    )


def sufficient_points_policy(customer, reward) -> Optional[RejectionReason]:
    """Customer must hold at least the reward's point cost."""
    if customer.points >= reward.points_required:
        return None
    return RejectionReason(
        code=ReasonCode.INSUFFICIENT_POINTS,
        message=(
            f"Customer has {customer.points} points, "
            f"needs {reward.points_required}."
        ),
        policy_name="sufficient_points_policy",
    )


def reward_active_policy(reward) -> Optional[RejectionReason]:
    if reward.active:
        return None
    return RejectionReason(
        code=ReasonCode.REWARD_INACTIVE,
        message=f"Reward '{reward.name}' is not currently offered.",
        policy_name="reward_active_policy",
    )


def reward_kind_supported_policy(reward) -> Optional[RejectionReason]:
    if reward.kind is not None:
        return None
    return RejectionReason(
        code=ReasonCode.UNSUPPORTED_REWARD,
        message=(
            f"Reward '{reward.name}' is neither a percentage discount "
            f"nor a free item."
        ),
        policy_name="reward_kind_supported_policy",
    )
