"""Mini README: Tests for the owner / coordinator / requester tiers.

Only the owner grants coordinator status, authorised coordinators may
register campaigns and fulfil requests, and only a campaign's own
coordinator may withdraw from or deactivate it.
"""

from __future__ import annotations

import pytest

from reliefledger.ledger import Forbidden, InvalidInput, ReliefLedger, Unauthorized

from .conftest import COORDINATOR, OWNER


def test_unauthorised_caller_cannot_register(ledger: ReliefLedger) -> None:
    with pytest.raises(Unauthorized):
        ledger.register_campaign("Quake", "City", "", 100, "stranger")
    assert ledger.campaign_count == 0


def test_authorisation_unlocks_register_and_fulfil(ledger: ReliefLedger) -> None:
    """After the owner grants status, the coordinator can act on both tiers."""

    assert not ledger.is_authorized("bob")
    ledger.authorize_coordinator("bob", OWNER)
    assert ledger.is_authorized("bob")

    campaign = ledger.register_campaign("Cyclone", "Delta", "", 900, "bob")
    assert campaign.coordinator == "bob"
    ledger.submit_request(campaign.disaster_id, "rice", 40, "medium", "farmer")
    assert ledger.fulfill_request(1, "bob").is_fulfilled


def test_only_owner_may_authorise(ledger: ReliefLedger) -> None:
    ledger.authorize_coordinator(COORDINATOR, OWNER)

    with pytest.raises(Unauthorized):
        ledger.authorize_coordinator("mallory", COORDINATOR)
    assert not ledger.is_authorized("mallory")


def test_authorise_is_idempotent(ledger: ReliefLedger) -> None:
    ledger.authorize_coordinator(COORDINATOR, OWNER)
    ledger.authorize_coordinator(COORDINATOR, OWNER)

    assert ledger.summarise()["coordinator_count"] == 1


@pytest.mark.parametrize("identity", ["", "   ", None])
def test_authorise_rejects_blank_identity(ledger: ReliefLedger, identity) -> None:
    with pytest.raises(InvalidInput):
        ledger.authorize_coordinator(identity, OWNER)


def test_unauthorised_caller_cannot_fulfil(funded_ledger: ReliefLedger) -> None:
    funded_ledger.submit_request(1, "water", 10, "high", "anyone")

    with pytest.raises(Unauthorized):
        funded_ledger.fulfill_request(1, "anyone")
    assert funded_ledger.get_request(1).is_fulfilled is False


def test_owner_can_fulfil_without_explicit_grant(funded_ledger: ReliefLedger) -> None:
    funded_ledger.submit_request(1, "water", 10, "high", "anyone")
    assert funded_ledger.fulfill_request(1, OWNER).is_fulfilled


def test_only_campaign_coordinator_may_withdraw(funded_ledger: ReliefLedger) -> None:
    """Neither the owner nor another coordinator can pull a campaign's funds."""

    funded_ledger.authorize_coordinator("coordinator-bob", OWNER)
    funded_ledger.contribute(1, 500, "donor")

    for caller in (OWNER, "coordinator-bob", "donor"):
        with pytest.raises(Forbidden):
            funded_ledger.withdraw(1, 100, caller)

    assert funded_ledger.get_campaign(1).raised_amount == 500
    funded_ledger.withdraw(1, 100, COORDINATOR)
    assert funded_ledger.get_campaign(1).raised_amount == 400


def test_owner_cannot_be_blank() -> None:
    with pytest.raises(InvalidInput):
        ReliefLedger("  ")
