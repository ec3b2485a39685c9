"""Mini README: Shared fixtures for the relief ledger test-suite.

Structure:
    * fixed_clock - deterministic timestamps for created/donated records.
    * ledger - a fresh ledger owned by ``OWNER``.
    * funded_ledger - a ledger with campaign #1 registered by ``COORDINATOR``.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from reliefledger.ledger import ReliefLedger

OWNER = "owner"
COORDINATOR = "coordinator-alice"
FIXED_NOW = datetime(2024, 9, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def ledger(fixed_clock) -> ReliefLedger:
    return ReliefLedger(OWNER, clock=fixed_clock)


@pytest.fixture
def funded_ledger(ledger: ReliefLedger) -> ReliefLedger:
    """Campaign #1 coordinated by ``COORDINATOR`` with no funds yet."""

    ledger.authorize_coordinator(COORDINATOR, OWNER)
    ledger.register_campaign("Valley Floods", "Lower Valley", "", 5000, COORDINATOR)
    return ledger
