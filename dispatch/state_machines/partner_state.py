from dataclasses import replace

from partners.models import PartnerAvailability, PartnerStatus


class PartnerStateException(Exception):
    """Raised when an invalid availability value is given."""
    pass


def set_availability(availability: PartnerAvailability, status) -> PartnerAvailability:
    """
    Partner toggles their availability (available / busy / offline).
    `last_assigned_at` is kept so fairness survives going off shift.
    """
    if not isinstance(status, PartnerStatus):
        try:
            status = PartnerStatus(str(status).strip().lower())
        except ValueError:
            raise PartnerStateException(f"Unknown availability status: {status}")

    # frozen dataclass: hand back a new record
    return replace(availability, status=status)
