"""Mini README: Core package initializer for the relief ledger.

The package tracks disaster relief campaigns, the contributions made to
them, resource requests raised against them, and coordinator withdrawals.
High-level services are re-exported here so callers do not need to know
the exact module layout.
"""

from .ledger import ReliefLedger
from .logging_utils import get_logger

__all__ = ["ReliefLedger", "get_logger"]
