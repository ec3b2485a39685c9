"""Mini README: Accounting and authorisation core of the relief ledger.

Modules expose the domain records, the error kinds, composable
preconditions, the notification log and the ``ReliefLedger`` itself. Host
layers (HTTP, CLI) only talk to the names re-exported here.
"""

from .errors import (
    AlreadyFulfilled,
    CampaignInactive,
    Forbidden,
    InsufficientFunds,
    InvalidInput,
    LedgerError,
    NotFound,
    TransferFailed,
    Unauthorized,
)
from .events import EventLog
from .models import Disaster, Donation, LedgerEvent, ReliefRequest
from .relief_ledger import Payout, ReliefLedger

__all__ = [
    "AlreadyFulfilled",
    "CampaignInactive",
    "Disaster",
    "Donation",
    "EventLog",
    "Forbidden",
    "InsufficientFunds",
    "InvalidInput",
    "LedgerError",
    "LedgerEvent",
    "NotFound",
    "Payout",
    "ReliefLedger",
    "ReliefRequest",
    "TransferFailed",
    "Unauthorized",
]
