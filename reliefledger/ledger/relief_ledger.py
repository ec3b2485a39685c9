"""Mini README: Transactional store for disaster relief campaigns.

Structure:
    * Payout - signature of the hook that moves value out of the ledger.
    * ReliefLedger - campaigns, contributions, relief requests, withdrawals
      and the coordinator set behind one re-entrant lock.

Every mutating operation runs its precondition checks, applies one
mutation and records one event while holding the lock, so callers only ever
observe fully committed states. Subscribers hear about the event once the
lock is released. ``withdraw`` is the single operation that
hands control to outside code: the campaign balance and the reserve are
decremented first, the lock is released, and only then is the payout hook
called. A nested withdrawal attempted from inside the hook therefore sees
the reduced balance.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, Dict, Iterator, List, Optional, Set

from ..logging_utils import get_logger
from . import events as event_names
from .errors import AlreadyFulfilled, InsufficientFunds, LedgerError, TransferFailed
from .events import EventLog
from .guards import (
    require_active,
    require_authorized,
    require_coordinator_of,
    require_identity,
    require_known_id,
    require_owner,
    require_positive,
    require_string,
    require_text,
)
from .models import Disaster, Donation, LedgerEvent, ReliefRequest

LOGGER = get_logger(__name__)

Payout = Callable[[str, int], None]
Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _log_payout(recipient: str, amount: int) -> None:
    """Default payout used when the host settles transfers itself."""

    LOGGER.info("Released %s to %s", amount, recipient)


class ReliefLedger:
    """Own all campaigns, donations, requests and coordinator grants."""

    def __init__(
        self,
        owner: str,
        *,
        payout: Optional[Payout] = None,
        clock: Optional[Clock] = None,
        events: Optional[EventLog] = None,
    ) -> None:
        self._owner = require_identity(owner, "owner")
        self._payout = payout or _log_payout
        self._clock = clock or _utc_now
        self._events = events if events is not None else EventLog()
        self._lock = threading.RLock()

        self._disasters: Dict[int, Disaster] = {}
        self._requests: Dict[int, ReliefRequest] = {}
        self._donations: Dict[int, List[Donation]] = {}
        self._contributions_by_donor: Dict[str, int] = {}
        self._coordinators: Set[str] = set()
        self._disaster_count = 0
        self._request_count = 0
        self._total_contributed = 0
        self._reserve = 0
        LOGGER.debug("Relief ledger initialised for owner %s", self._owner)

    @contextmanager
    def _transaction(self, operation: str) -> Iterator[None]:
        """Hold the ledger lock and log rejections before re-raising them."""

        with self._lock:
            try:
                yield
            except LedgerError as error:
                LOGGER.warning("%s rejected (%s): %s", operation, error.kind, error)
                raise

    def _campaign(self, campaign_id: int) -> Disaster:
        require_known_id(campaign_id, self._disaster_count, "Campaign")
        return self._disasters[campaign_id]

    def _request(self, request_id: int) -> ReliefRequest:
        require_known_id(request_id, self._request_count, "Relief request")
        return self._requests[request_id]

    @property
    def owner(self) -> str:
        return self._owner

    @property
    def events(self) -> EventLog:
        return self._events

    # Mutating operations -------------------------------------------------

    def register_campaign(
        self,
        name: str,
        location: str,
        description: str,
        target_amount: int,
        caller: str,
    ) -> Disaster:
        """Create a campaign coordinated by ``caller``."""

        with self._transaction("register_campaign"):
            require_authorized(caller, self._owner, self._coordinators)
            require_text(name, "name")
            require_text(location, "location")
            require_string(description, "description")
            require_positive(target_amount, "target_amount")

            self._disaster_count += 1
            disaster = Disaster(
                disaster_id=self._disaster_count,
                name=name,
                location=location,
                description=description,
                target_amount=target_amount,
                coordinator=caller,
                created_at=self._clock(),
            )
            self._disasters[disaster.disaster_id] = disaster
            self._donations[disaster.disaster_id] = []
            LOGGER.info(
                "Registered campaign %s '%s' at %s by %s",
                disaster.disaster_id,
                name,
                location,
                caller,
            )
            event = self._events.record(
                event_names.CAMPAIGN_REGISTERED,
                {
                    "campaign_id": disaster.disaster_id,
                    "name": name,
                    "location": location,
                    "coordinator": caller,
                },
            )
            snapshot = replace(disaster)
        self._events.publish(event)
        return snapshot

    def contribute(self, campaign_id: int, amount: int, donor: str) -> Donation:
        """Accept ``amount`` from ``donor`` into an active campaign."""

        with self._transaction("contribute"):
            disaster = self._campaign(campaign_id)
            require_active(disaster)
            require_positive(amount, "amount")
            require_identity(donor, "donor")

            donation = Donation(
                donor=donor,
                disaster_id=disaster.disaster_id,
                amount=amount,
                timestamp=self._clock(),
            )
            disaster.raised_amount += amount
            self._total_contributed += amount
            self._reserve += amount
            self._contributions_by_donor[donor] = (
                self._contributions_by_donor.get(donor, 0) + amount
            )
            self._donations[disaster.disaster_id].append(donation)
            LOGGER.info(
                "Contribution of %s from %s to campaign %s", amount, donor, campaign_id
            )
            event = self._events.record(
                event_names.CONTRIBUTION_RECEIVED,
                {"donor": donor, "campaign_id": campaign_id, "amount": amount},
            )
        self._events.publish(event)
        return donation

    def submit_request(
        self,
        campaign_id: int,
        resource_type: str,
        quantity: int,
        urgency_level: str,
        requester: str,
    ) -> ReliefRequest:
        """Record a resource need; any identity may submit one."""

        with self._transaction("submit_request"):
            disaster = self._campaign(campaign_id)
            require_active(disaster)
            require_text(resource_type, "resource_type")
            require_positive(quantity, "quantity")
            require_identity(requester, "requester")
            require_string(urgency_level, "urgency_level")

            self._request_count += 1
            request = ReliefRequest(
                request_id=self._request_count,
                disaster_id=disaster.disaster_id,
                requester=requester,
                resource_type=resource_type,
                quantity=quantity,
                urgency_level=urgency_level,
                created_at=self._clock(),
            )
            self._requests[request.request_id] = request
            LOGGER.info(
                "Relief request %s for %s x%s (%s) on campaign %s",
                request.request_id,
                resource_type,
                quantity,
                urgency_level,
                campaign_id,
            )
            event = self._events.record(
                event_names.RELIEF_REQUESTED,
                {
                    "request_id": request.request_id,
                    "campaign_id": campaign_id,
                    "requester": requester,
                    "resource_type": resource_type,
                    "quantity": quantity,
                },
            )
            snapshot = replace(request)
        self._events.publish(event)
        return snapshot

    def fulfill_request(self, request_id: int, caller: str) -> ReliefRequest:
        """Mark a request fulfilled; the flag can only flip once."""

        with self._transaction("fulfill_request"):
            require_authorized(caller, self._owner, self._coordinators)
            request = self._request(request_id)
            if request.is_fulfilled:
                raise AlreadyFulfilled(f"Relief request {request_id} is already fulfilled")

            request.is_fulfilled = True
            LOGGER.info("Relief request %s fulfilled by %s", request_id, caller)
            event = self._events.record(
                event_names.RELIEF_FULFILLED,
                {"request_id": request_id, "campaign_id": request.disaster_id},
            )
            snapshot = replace(request)
        self._events.publish(event)
        return snapshot

    def withdraw(self, campaign_id: int, amount: int, caller: str) -> Disaster:
        """Release ``amount`` of a campaign's funds to its coordinator.

        ``funds_withdrawn`` is recorded after the payout hook returns, so
        events triggered during the payout are sequenced before it.
        """

        with self._transaction("withdraw"):
            disaster = self._campaign(campaign_id)
            require_coordinator_of(disaster, caller)
            require_positive(amount, "amount")
            if amount > disaster.raised_amount:
                raise InsufficientFunds(
                    f"Campaign {campaign_id} holds {disaster.raised_amount}, cannot release {amount}"
                )
            if amount > self._reserve:
                raise InsufficientFunds(
                    f"Ledger reserve {self._reserve} cannot cover {amount}"
                )
            disaster.raised_amount -= amount
            self._reserve -= amount

        # State is final before control leaves the ledger.
        try:
            self._payout(caller, amount)
        except Exception as error:
            with self._lock:
                disaster.raised_amount += amount
                self._reserve += amount
            LOGGER.error(
                "Payout of %s to %s failed for campaign %s; withdrawal rolled back",
                amount,
                caller,
                campaign_id,
            )
            raise TransferFailed(f"Transfer of {amount} to {caller} failed: {error}") from error

        with self._lock:
            LOGGER.info("Withdrew %s from campaign %s to %s", amount, campaign_id, caller)
            event = self._events.record(
                event_names.FUNDS_WITHDRAWN,
                {"campaign_id": campaign_id, "coordinator": caller, "amount": amount},
            )
            snapshot = replace(disaster)
        self._events.publish(event)
        return snapshot

    def authorize_coordinator(self, identity: str, caller: str) -> None:
        """Grant coordinator status; grants are permanent and idempotent."""

        with self._transaction("authorize_coordinator"):
            require_owner(caller, self._owner)
            require_identity(identity, "identity")
            if identity in self._coordinators:
                LOGGER.debug("%s is already an authorised coordinator", identity)
            else:
                self._coordinators.add(identity)
                LOGGER.info("Authorised coordinator %s", identity)
            event = self._events.record(
                event_names.COORDINATOR_AUTHORIZED, {"coordinator": identity}
            )
        self._events.publish(event)

    def deactivate_campaign(self, campaign_id: int, caller: str) -> Disaster:
        """Close a campaign to contributions and requests.

        Deactivating an inactive campaign is a no-op: it succeeds without
        emitting a second event.
        """

        event: Optional[LedgerEvent] = None
        with self._transaction("deactivate_campaign"):
            disaster = self._campaign(campaign_id)
            require_coordinator_of(disaster, caller)
            if disaster.is_active:
                disaster.is_active = False
                LOGGER.info("Campaign %s deactivated by %s", campaign_id, caller)
                event = self._events.record(
                    event_names.CAMPAIGN_DEACTIVATED,
                    {"campaign_id": campaign_id, "coordinator": caller},
                )
            else:
                LOGGER.debug("Campaign %s already inactive", campaign_id)
            snapshot = replace(disaster)
        if event is not None:
            self._events.publish(event)
        return snapshot

    # Read accessors ------------------------------------------------------

    def get_campaign(self, campaign_id: int) -> Disaster:
        with self._lock:
            return replace(self._campaign(campaign_id))

    def get_request(self, request_id: int) -> ReliefRequest:
        with self._lock:
            return replace(self._request(request_id))

    def donation_count(self, campaign_id: int) -> int:
        with self._lock:
            self._campaign(campaign_id)
            return len(self._donations[campaign_id])

    def list_donations(self, campaign_id: int) -> List[Donation]:
        """Return a campaign's donations in the order they were accepted."""

        with self._lock:
            self._campaign(campaign_id)
            return list(self._donations[campaign_id])

    def list_campaigns(self) -> List[Disaster]:
        with self._lock:
            return [replace(disaster) for disaster in self._disasters.values()]

    def reserve(self) -> int:
        """Total value currently held across all campaigns."""

        with self._lock:
            return self._reserve

    def contribution_of(self, donor: str) -> int:
        with self._lock:
            return self._contributions_by_donor.get(donor, 0)

    def is_authorized(self, identity: str) -> bool:
        with self._lock:
            return identity == self._owner or identity in self._coordinators

    @property
    def total_contributed(self) -> int:
        with self._lock:
            return self._total_contributed

    @property
    def campaign_count(self) -> int:
        with self._lock:
            return self._disaster_count

    @property
    def request_count(self) -> int:
        with self._lock:
            return self._request_count

    def summarise(self) -> Dict[str, int]:
        """Aggregate ledger totals for dashboards and monitoring."""

        with self._lock:
            return {
                "campaign_count": self._disaster_count,
                "active_campaigns": sum(1 for d in self._disasters.values() if d.is_active),
                "request_count": self._request_count,
                "open_requests": sum(1 for r in self._requests.values() if not r.is_fulfilled),
                "total_contributed": self._total_contributed,
                "reserve": self._reserve,
                "donor_count": len(self._contributions_by_donor),
                "coordinator_count": len(self._coordinators),
            }
