"""
Delivery partners domain package.

Public API:
- Domain models: PartnerAvailability, PartnerProfile, AvailablePartner, PartnerStatus
- Configuration: AssignmentPolicy, default_assignment_policy
- Read views: PartnerDirectory, LoadTracker
"""
from .models import AvailablePartner, PartnerAvailability, PartnerProfile, PartnerStatus
from .policy import AssignmentPolicy, default_assignment_policy
from .directory import PartnerDirectory
from .load import LoadTracker

__all__ = [
    "AvailablePartner",
    "PartnerAvailability",
    "PartnerProfile",
    "PartnerStatus",
    "AssignmentPolicy",
    "default_assignment_policy",
    "PartnerDirectory",
    "LoadTracker",
]
