"""Mini README: Composable precondition checks for ledger operations.

Each helper validates one condition and raises the matching ``LedgerError``
kind. Operations call them in sequence before touching any state, so a
failed check always leaves the ledger unchanged.
"""

from __future__ import annotations

from typing import AbstractSet

from .errors import (
    CampaignInactive,
    Forbidden,
    InvalidInput,
    NotFound,
    Unauthorized,
)
from .models import Disaster


def require_text(value: object, field_name: str) -> str:
    """Return ``value`` when it is a non-empty string."""

    if not isinstance(value, str) or not value:
        raise InvalidInput(f"{field_name} must be a non-empty string")
    return value


def require_string(value: object, field_name: str) -> str:
    """Accept any string, empty included; free-form fields carry no other rule."""

    if not isinstance(value, str):
        raise InvalidInput(f"{field_name} must be a string")
    return value


def require_positive(value: object, field_name: str) -> int:
    """Return ``value`` when it is a strictly positive integer."""

    # bool is an int subclass; True must not pass as an amount of one.
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInput(f"{field_name} must be an integer, got {type(value).__name__}")
    if value <= 0:
        raise InvalidInput(f"{field_name} must be greater than zero, got {value}")
    return value


def require_identity(identity: object, field_name: str = "identity") -> str:
    if not isinstance(identity, str) or not identity.strip():
        raise InvalidInput(f"{field_name} must be a non-blank identity")
    return identity


def require_known_id(identifier: object, allocated: int, label: str) -> int:
    """Ensure ``identifier`` falls within ``1..allocated``."""

    if isinstance(identifier, bool) or not isinstance(identifier, int):
        raise NotFound(f"{label} {identifier!r} not found")
    if identifier < 1 or identifier > allocated:
        raise NotFound(f"{label} {identifier} not found")
    return identifier


def require_active(disaster: Disaster) -> None:
    if not disaster.is_active:
        raise CampaignInactive(f"Campaign {disaster.disaster_id} is not active")


def require_coordinator_of(disaster: Disaster, caller: str) -> None:
    """Only the exact registering coordinator passes; the owner gets no bypass."""

    if caller != disaster.coordinator:
        raise Forbidden(
            f"{caller} is not the coordinator of campaign {disaster.disaster_id}"
        )


def require_authorized(caller: str, owner: str, coordinators: AbstractSet[str]) -> None:
    if caller != owner and caller not in coordinators:
        raise Unauthorized(f"{caller} is not an authorised coordinator")


def require_owner(caller: str, owner: str) -> None:
    if caller != owner:
        raise Unauthorized(f"{caller} is not the ledger owner")
