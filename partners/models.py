"""
Purpose: Core data models for the delivery partners domain.
What it does:
Defines a partner's declared availability and location profile without relying on Django ORM constraints.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class PartnerStatus(str, Enum):
    """
    Standardizes the availability a partner can declare.
    Only AVAILABLE partners are considered for assignment.
    """
    AVAILABLE = "available"
    BUSY = "busy"
    OFFLINE = "offline"


@dataclass(frozen=True)
class PartnerAvailability:
    """
    A partner's availability row at a specific point in time.
    Owned by the partner-facing side; the engine only writes `last_assigned_at`.
    """
    partner_id: str
    status: PartnerStatus
    last_assigned_at: Optional[datetime] = None

    @classmethod
    def new(
        cls,
        partner_id: str,
        status: str | PartnerStatus = PartnerStatus.AVAILABLE,
        last_assigned_at: Optional[datetime] = None,
    ) -> PartnerAvailability:
        if isinstance(status, str):
            status = PartnerStatus(status.strip().lower())

        return cls(
            partner_id=partner_id,
            status=status,
            last_assigned_at=last_assigned_at,
        )


@dataclass(frozen=True)
class PartnerProfile:
    """
    A partner's declared location. Any field may be unknown.
    """
    partner_id: str
    city: Optional[str] = None
    state: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


@dataclass(frozen=True)
class AvailablePartner:
    """
    Availability record joined with its profile (output of the directory).
    """
    availability: PartnerAvailability
    profile: PartnerProfile

    @property
    def partner_id(self) -> str:
        return self.availability.partner_id
