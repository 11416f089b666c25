"""
POS Actor Primitive — Staff Identity
=====================================
The Actor Primitive captures WHO performed an action at the till.

Identity itself is owned by an external authentication provider.
The POS only reads the signed-in actor to attribute orders, payments,
ledger entries and activity records.

Actor types:
    HUMAN   — A staff member (cashier, barista, owner)
    SYSTEM  — Automated action (data import, scheduled job)
    DEVICE  — Unattended terminal (self-order kiosk)

Loyalty customers are NOT actors. They are parties tracked by a
points balance and never authenticate against the POS.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol


# ══════════════════════════════════════════════════════════════
# ENUMS
# ══════════════════════════════════════════════════════════════

class ActorType(Enum):
    """The type of entity that performed an action."""
    HUMAN = "Human"
    SYSTEM = "System"
    DEVICE = "Device"


# ══════════════════════════════════════════════════════════════
# ACTOR DEFINITION
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Actor:
    """
    Identifies who performed an action.

    Fields:
        actor_type:     HUMAN | SYSTEM | DEVICE
        actor_id:       Identity-provider user id (or component id)
        email:          Sign-in email; may be empty for SYSTEM/DEVICE
        display_name:   Name shown on receipts and in the activity log.
                        Falls back to the email local part when empty.
    """
    actor_type: ActorType
    actor_id: str
    email: str = ""
    display_name: str = ""

    def __post_init__(self):
        if not isinstance(self.actor_type, ActorType):
            raise ValueError("actor_type must be ActorType enum.")
        if not self.actor_id or not isinstance(self.actor_id, str):
            raise ValueError("actor_id must be a non-empty string.")
        if self.actor_type == ActorType.HUMAN and not self.email:
            raise ValueError("HUMAN actors must carry an email.")

        if not self.display_name:
            fallback = self.email.split("@")[0] if self.email else self.actor_id
            object.__setattr__(self, "display_name", fallback)

    @classmethod
    def staff(
        cls,
        user_id: str,
        email: str,
        display_name: Optional[str] = None,
    ) -> Actor:
        """Factory for signed-in staff members."""
        return cls(
            actor_type=ActorType.HUMAN,
            actor_id=user_id,
            email=email,
            display_name=display_name or "",
        )

    @classmethod
    def system(cls, component: str) -> Actor:
        """Factory for automated actions."""
        return cls(
            actor_type=ActorType.SYSTEM,
            actor_id=component,
            display_name=component,
        )


# ══════════════════════════════════════════════════════════════
# IDENTITY COLLABORATOR
# ══════════════════════════════════════════════════════════════

class ActorProvider(Protocol):
    """Supplies the currently signed-in actor."""

    def current_actor(self) -> Actor:
        ...  # pragma: no cover


class StaticActorProvider:
    """Provider pinned to one actor (terminals, scripts, tests)."""

    def __init__(self, actor: Actor) -> None:
        self._actor = actor

    def current_actor(self) -> Actor:
        return self._actor
