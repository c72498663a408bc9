import uuid

from django.conf import settings
from django.db import models


class CustomerAddress(models.Model):
    """
    Geocoded delivery address. Latitude/longitude are optional because
    customers may type an address that was never geocoded.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    customer = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='addresses')
    label = models.CharField(max_length=50, default="Home")
    address_line = models.TextField()
    city = models.CharField(max_length=120)
    state = models.CharField(max_length=120)
    pincode = models.CharField(max_length=12, blank=True)

    latitude = models.FloatField(blank=True, null=True)
    longitude = models.FloatField(blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.label}: {self.city}, {self.state}"


class CustomerOrder(models.Model):
    """
    Central model for the marketplace workflow.
    Order lifecycle: pending -> confirmed -> dispatched -> delivered.
    Delivery progress is tracked separately in `delivery_status`.
    """
    class Status(models.TextChoices):
        PENDING = "pending", "Pending"
        CONFIRMED = "confirmed", "Confirmed"
        DISPATCHED = "dispatched", "Dispatched"
        DELIVERED = "delivered", "Delivered"
        CANCELLED = "cancelled", "Cancelled"

    class DeliveryStatus(models.TextChoices):
        PENDING_ASSIGNMENT = "pending_assignment", "Pending Assignment"
        ASSIGNED = "assigned", "Assigned"
        ACCEPTED = "accepted", "Accepted"
        REJECTED = "rejected", "Rejected"
        PICKUP_SCHEDULED = "pickup_scheduled", "Pickup Scheduled"
        PICKED_UP = "picked_up", "Picked Up"
        IN_TRANSIT = "in_transit", "In Transit"
        DELIVERED = "delivered", "Delivered"
        COMPLETED = "completed", "Completed"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Relationships
    customer = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='orders')
    delivery_address = models.ForeignKey(CustomerAddress, on_delete=models.SET_NULL, null=True, blank=True, related_name='orders')
    # Set only by the assignment engine's conditional write (or cleared on rejection)
    delivery_partner = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='deliveries')

    quantity = models.PositiveIntegerField(default=1)
    total_price = models.DecimalField(max_digits=10, decimal_places=2)

    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    delivery_status = models.CharField(max_length=30, choices=DeliveryStatus.choices, blank=True, null=True)

    pickup_time = models.DateTimeField(blank=True, null=True)
    delivered_time = models.DateTimeField(blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=['delivery_partner', 'delivery_status'], name='logistics_partner_dstatus_idx'),
            models.Index(fields=['status', 'delivery_status'], name='logistics_status_dstatus_idx'),
        ]

    def __str__(self):
        return f"Order #{self.id} - {self.status}"


class DeliveryPartnerStatus(models.Model):
    """
    One row per delivery partner declaring availability.
    Owned by the partner; the engine only writes `last_assigned_at`.
    """
    class Availability(models.TextChoices):
        AVAILABLE = "available", "Available"
        BUSY = "busy", "Busy"
        OFFLINE = "offline", "Offline"

    partner = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='delivery_availability')
    status = models.CharField(max_length=20, choices=Availability.choices, default=Availability.OFFLINE)
    last_assigned_at = models.DateTimeField(blank=True, null=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.partner_id}: {self.status}"
