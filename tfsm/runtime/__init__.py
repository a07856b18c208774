"""
Runtime helpers shared by the engine: the pending guard admitting one
operation at a time, and the timer racing hooks against a timeout.
"""

from .pending import PendingGuard
from .timers import wait_with_timeout

__all__ = ["PendingGuard", "wait_with_timeout"]
