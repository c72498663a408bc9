"""
Purpose: Read-only view over partner availability + location profiles.
What it does:
Lists the partners that currently declare themselves AVAILABLE, joined with
their profile. A partner with no profile cannot be ranked and is dropped.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List, Sequence

from .models import AvailablePartner, PartnerAvailability, PartnerStatus

if TYPE_CHECKING:
    from dispatch.store import AssignmentStore

logger = logging.getLogger(__name__)


class PartnerDirectory:
    def __init__(self, store: "AssignmentStore"):
        self.store = store

    def list_available_records(self) -> List[PartnerAvailability]:
        return list(self.store.list_partner_availability(PartnerStatus.AVAILABLE))

    def join_profiles(self, records: Sequence[PartnerAvailability]) -> List[AvailablePartner]:
        if not records:
            return []

        profiles = {
            profile.partner_id: profile
            for profile in self.store.get_partner_profiles([record.partner_id for record in records])
        }

        available: List[AvailablePartner] = []
        for record in records:
            profile = profiles.get(record.partner_id)
            if profile is None:
                logger.debug("Partner %s is available but has no profile, skipping", record.partner_id)
                continue
            available.append(AvailablePartner(availability=record, profile=profile))

        return available

    def list_available_partners(self) -> List[AvailablePartner]:
        """
        Availability records with status AVAILABLE joined with profiles by partner id.
        An empty list is a normal outcome (nobody is on shift), not an error.
        """
        return self.join_profiles(self.list_available_records())
