"""Mini README: Domain records held by the relief ledger.

Structure:
    * Disaster - a registered relief campaign and its running balance.
    * Donation - immutable record of a single accepted contribution.
    * ReliefRequest - a resource need raised against a campaign.
    * LedgerEvent - notification emitted after a successful mutation.

Monetary values are integers expressed in the smallest currency unit so
totals never drift. Timestamps are timezone-aware UTC datetimes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict


@dataclass(slots=True)
class Disaster:
    """Relief campaign with its funding target and running balance."""

    disaster_id: int
    name: str
    location: str
    description: str
    target_amount: int
    coordinator: str
    created_at: datetime
    raised_amount: int = 0
    is_active: bool = True

    def as_dict(self) -> Dict[str, Any]:
        """Export the campaign with serialisable values."""

        return {
            "id": self.disaster_id,
            "name": self.name,
            "location": self.location,
            "description": self.description,
            "target_amount": self.target_amount,
            "raised_amount": self.raised_amount,
            "is_active": self.is_active,
            "coordinator": self.coordinator,
            "created_at": self.created_at.isoformat(),
        }


@dataclass(frozen=True, slots=True)
class Donation:
    donor: str
    disaster_id: int
    amount: int
    timestamp: datetime

    def as_dict(self) -> Dict[str, Any]:
        return {
            "donor": self.donor,
            "campaign_id": self.disaster_id,
            "amount": self.amount,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(slots=True)
class ReliefRequest:
    """Resource need submitted by any identity against an active campaign."""

    request_id: int
    disaster_id: int
    requester: str
    resource_type: str
    quantity: int
    urgency_level: str
    created_at: datetime
    is_fulfilled: bool = False

    def as_dict(self) -> Dict[str, Any]:
        """Export the request with serialisable values."""

        return {
            "id": self.request_id,
            "campaign_id": self.disaster_id,
            "requester": self.requester,
            "resource_type": self.resource_type,
            "quantity": self.quantity,
            "urgency_level": self.urgency_level,
            "is_fulfilled": self.is_fulfilled,
            "created_at": self.created_at.isoformat(),
        }


@dataclass(frozen=True, slots=True)
class LedgerEvent:
    """Notification describing one committed ledger mutation."""

    sequence: int
    name: str
    emitted_at: datetime
    payload: Dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "sequence": self.sequence,
            "name": self.name,
            "emitted_at": self.emitted_at.isoformat(),
            "payload": dict(self.payload),
        }
