"""
POS Command Layer — Public API
================================
Structured, auditable rejection values shared by all engines.
"""

from core.commands.rejection import (
    ReasonCode,
    RejectionReason,
)

__all__ = [
    "ReasonCode",
    "RejectionReason",
]
