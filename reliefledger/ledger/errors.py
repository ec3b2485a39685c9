"""Mini README: Error kinds raised by the relief ledger.

Every failed operation raises exactly one ``LedgerError`` subclass and
leaves the ledger untouched. ``status_code`` lets the HTTP wrapper map an
error onto a response without a lookup table of its own.
"""

from __future__ import annotations


class LedgerError(Exception):
    """Base class for all ledger failures."""

    status_code = 400
    kind = "ledger_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class Unauthorized(LedgerError):
    """Caller does not hold the owner or coordinator role."""

    status_code = 403
    kind = "unauthorized"


class Forbidden(LedgerError):
    """Caller is not the coordinator of the campaign."""

    status_code = 403
    kind = "forbidden"


class NotFound(LedgerError, KeyError):
    """Referenced id lies outside the allocated range."""

    status_code = 404
    kind = "not_found"


class InvalidInput(LedgerError, ValueError):
    """Empty text, non-positive amount or blank identity."""

    status_code = 422
    kind = "invalid_input"


class CampaignInactive(LedgerError):
    status_code = 409
    kind = "campaign_inactive"


class AlreadyFulfilled(LedgerError):
    status_code = 409
    kind = "already_fulfilled"


class InsufficientFunds(LedgerError):
    """Withdrawal exceeds the campaign balance or the ledger reserve."""

    status_code = 409
    kind = "insufficient_funds"


class TransferFailed(LedgerError):
    """The payout hook raised; the withdrawal has been rolled back."""

    status_code = 502
    kind = "transfer_failed"
