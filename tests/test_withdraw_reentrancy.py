"""Mini README: Tests for the mutate-then-transfer ordering of withdrawals.

Structure:
    * NestedWithdrawPayout - payout hook that tries to withdraw again while
      it is being paid.
    * Rollback - a payout hook that raises leaves balances untouched.
"""

from __future__ import annotations

import threading
from typing import List, Optional

import pytest

from reliefledger.ledger import InsufficientFunds, ReliefLedger, TransferFailed

from .conftest import COORDINATOR, OWNER


class NestedWithdrawPayout:
    """Payout hook that re-enters ``withdraw`` on its first invocation."""

    def __init__(self) -> None:
        self.ledger: Optional[ReliefLedger] = None
        self.received: List[int] = []
        self.balance_seen_during_payout: List[int] = []
        self.nested_errors: List[Exception] = []

    def __call__(self, recipient: str, amount: int) -> None:
        self.received.append(amount)
        self.balance_seen_during_payout.append(self.ledger.get_campaign(1).raised_amount)
        if len(self.received) == 1:
            try:
                self.ledger.withdraw(1, amount, recipient)
            except InsufficientFunds as error:
                self.nested_errors.append(error)


def _ledger_with(payout) -> ReliefLedger:
    ledger = ReliefLedger(OWNER, payout=payout)
    ledger.authorize_coordinator(COORDINATOR, OWNER)
    ledger.register_campaign("Tsunami", "Coast", "", 1000, COORDINATOR)
    return ledger


def test_nested_withdrawal_sees_reduced_balance() -> None:
    payout = NestedWithdrawPayout()
    ledger = _ledger_with(payout)
    payout.ledger = ledger
    ledger.contribute(1, 500, "donor")

    ledger.withdraw(1, 500, COORDINATOR)

    assert payout.received == [500]
    assert payout.balance_seen_during_payout == [0]
    assert len(payout.nested_errors) == 1
    assert ledger.get_campaign(1).raised_amount == 0
    assert ledger.reserve() == 0
    assert len(ledger.events.history("funds_withdrawn")) == 1


def test_nested_withdrawal_within_remaining_balance_succeeds() -> None:
    """Re-entry is not forbidden outright; it is bounded by the updated balance."""

    payout = NestedWithdrawPayout()
    ledger = _ledger_with(payout)
    payout.ledger = ledger
    ledger.contribute(1, 600, "donor")

    ledger.withdraw(1, 300, COORDINATOR)

    assert payout.received == [300, 300]
    assert payout.nested_errors == []
    assert ledger.get_campaign(1).raised_amount == 0
    assert ledger.reserve() == 0


def test_payout_runs_outside_the_ledger_lock() -> None:
    """Another thread can read the ledger while the payout hook is running."""

    observed: List[int] = []

    def payout(recipient: str, amount: int) -> None:
        reader = threading.Thread(target=lambda: observed.append(ledger.reserve()))
        reader.start()
        reader.join(timeout=5)

    ledger = _ledger_with(payout)
    ledger.contribute(1, 250, "donor")
    ledger.withdraw(1, 100, COORDINATOR)

    assert observed == [150]


def test_failed_payout_rolls_back_withdrawal() -> None:
    def payout(recipient: str, amount: int) -> None:
        raise ConnectionError("settlement gateway unreachable")

    ledger = _ledger_with(payout)
    ledger.contribute(1, 400, "donor")

    with pytest.raises(TransferFailed) as excinfo:
        ledger.withdraw(1, 300, COORDINATOR)

    assert isinstance(excinfo.value.__cause__, ConnectionError)
    assert ledger.get_campaign(1).raised_amount == 400
    assert ledger.reserve() == 400
    assert ledger.events.history("funds_withdrawn") == []
