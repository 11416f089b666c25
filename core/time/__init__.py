"""
POS Core Time
=============
Injectable clocks for timestamping till operations.
"""

from core.time.clock import Clock, FixedClock, SystemClock

__all__ = ["Clock", "FixedClock", "SystemClock"]
