"""
Django ORM implementation of dispatch.store.AssignmentStore.

The only write that changes assignment state is `claim_order`, a single
UPDATE ... WHERE delivery_partner_id IS NULL. Its affected-row count is what
arbitrates concurrent assignment attempts; no table or row lock is taken.
"""
import logging
from datetime import timezone as dt_timezone
from typing import Iterable, List, Optional, Tuple

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import connections
from django.db.models import Q
from django.utils import timezone

from orders.models import DeliveryAddress, DeliveryStatus, Order, normalize_status
from partners.models import PartnerAvailability, PartnerProfile, PartnerStatus
from partners.policy import AssignmentPolicy
from users.models import Profile

from .models import CustomerOrder, DeliveryPartnerStatus

logger = logging.getLogger(__name__)


def assignment_policy_from_settings() -> AssignmentPolicy:
    policy = AssignmentPolicy(sweep_workers=getattr(settings, 'ASSIGNMENT_SWEEP_WORKERS', 1))
    policy.validate()
    return policy


def _aware(moment):
    if moment is not None and timezone.is_naive(moment):
        return timezone.make_aware(moment, dt_timezone.utc)
    return moment


def _to_order(row: CustomerOrder) -> Order:
    address = None
    if row.delivery_address_id and row.delivery_address is not None:
        address = DeliveryAddress(
            city=row.delivery_address.city,
            state=row.delivery_address.state,
            latitude=row.delivery_address.latitude,
            longitude=row.delivery_address.longitude,
        )

    return Order(
        id=str(row.pk),
        status=row.status,
        delivery_status=row.delivery_status,
        delivery_partner_id=str(row.delivery_partner_id) if row.delivery_partner_id else None,
        delivery_address_id=str(row.delivery_address_id) if row.delivery_address_id else None,
        total_price=row.total_price,
        address=address,
    )


class DjangoAssignmentStore:

    def get_order(self, order_id: str) -> Optional[Order]:
        try:
            row = CustomerOrder.objects.select_related('delivery_address').get(pk=order_id)
        except (CustomerOrder.DoesNotExist, ValidationError, ValueError):
            # a malformed id cannot name an existing order
            return None
        return _to_order(row)

    def list_partner_availability(self, status: PartnerStatus) -> List[PartnerAvailability]:
        rows = DeliveryPartnerStatus.objects.filter(status=status.value).order_by('partner_id').values_list(
            'partner_id', 'status', 'last_assigned_at'
        )
        return [
            PartnerAvailability.new(str(partner_id), row_status, last_assigned_at)
            for partner_id, row_status, last_assigned_at in rows
        ]

    def get_partner_profiles(self, partner_ids: Iterable[str]) -> List[PartnerProfile]:
        rows = Profile.objects.filter(user_id__in=list(partner_ids))
        return [
            PartnerProfile(
                partner_id=str(row.user_id),
                city=row.city,
                state=row.state,
                latitude=row.latitude,
                longitude=row.longitude,
            )
            for row in rows
        ]

    def list_partner_deliveries(self, partner_ids: Iterable[str]) -> List[Tuple[str, Optional[str]]]:
        rows = CustomerOrder.objects.filter(delivery_partner_id__in=list(partner_ids)).values_list(
            'delivery_partner_id', 'delivery_status'
        )
        return [(str(partner_id), delivery_status) for partner_id, delivery_status in rows]

    def mark_pending_assignment(self, order_id: str, now) -> int:
        return CustomerOrder.objects.filter(pk=order_id, delivery_partner__isnull=True).update(
            delivery_status=DeliveryStatus.PENDING_ASSIGNMENT.value,
            updated_at=_aware(now),
        )

    def claim_order(self, order_id: str, partner_id: str, now) -> Optional[str]:
        updated = CustomerOrder.objects.filter(pk=order_id, delivery_partner__isnull=True).update(
            delivery_partner_id=partner_id,
            delivery_status=DeliveryStatus.ASSIGNED.value,
            updated_at=_aware(now),
        )
        if updated == 0:
            return None
        return str(partner_id)

    def touch_partner_last_assigned(self, partner_id: str, now) -> None:
        now = _aware(now)
        DeliveryPartnerStatus.objects.filter(partner_id=partner_id).update(
            last_assigned_at=now,
            updated_at=now,
        )

    def list_sweepable_orders(self, order_statuses: Iterable[str], delivery_statuses: Iterable[str]) -> List[Order]:
        delivery_statuses = {normalize_status(value) for value in delivery_statuses}

        delivery_filter = Q(delivery_status__in=[value for value in delivery_statuses if value])
        if "" in delivery_statuses:
            delivery_filter |= Q(delivery_status__isnull=True) | Q(delivery_status="")

        rows = (
            CustomerOrder.objects.select_related('delivery_address')
            .filter(delivery_partner__isnull=True, status__in=[normalize_status(value) for value in order_statuses])
            .filter(delivery_filter)
            .order_by('created_at')
        )
        return [_to_order(row) for row in rows]

    def save_delivery_progress(self, order: Order, expected_partner_id: str, now) -> int:
        now = _aware(now)
        updates = {
            'delivery_status': order.delivery_status,
            'delivery_partner_id': order.delivery_partner_id,
            'status': order.status,
            'updated_at': now,
        }
        if order.delivery_status == DeliveryStatus.PICKUP_SCHEDULED.value:
            updates['pickup_time'] = now
        if order.delivery_status in (DeliveryStatus.DELIVERED.value, DeliveryStatus.COMPLETED.value):
            updates['delivered_time'] = now

        return CustomerOrder.objects.filter(pk=order.id, delivery_partner_id=expected_partner_id).update(**updates)

    def get_partner_availability(self, partner_id: str) -> Optional[PartnerAvailability]:
        row = DeliveryPartnerStatus.objects.filter(partner_id=partner_id).first()
        if row is None:
            return None
        return PartnerAvailability.new(str(row.partner_id), row.status, row.last_assigned_at)

    def set_partner_availability(self, availability: PartnerAvailability) -> None:
        DeliveryPartnerStatus.objects.update_or_create(
            partner_id=availability.partner_id,
            defaults={'status': availability.status.value},
        )
        logger.info("Partner %s is now %s", availability.partner_id, availability.status.value)

    def close(self) -> None:
        # connections are per thread; sweep workers must not leak theirs
        connections.close_all()
