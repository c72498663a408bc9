from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    class Roles(models.TextChoices):
        FARMER = "FARMER", "Farmer"
        MERCHANT = "MERCHANT", "Merchant"
        CUSTOMER = "CUSTOMER", "Customer"
        LOGISTICS = "LOGISTICS", "Delivery Partner"

    # Role fields define permissions in the app
    # CUSTOMER: Places orders
    # LOGISTICS: Receives delivery assignments
    # FARMER / MERCHANT: Sell produce
    role = models.CharField(max_length=20, choices=Roles.choices, default=Roles.CUSTOMER)

    def __str__(self):
        return f"{self.username} ({self.get_role_display()})"


class Profile(models.Model):
    """
    Declared location of a user. For delivery partners this is what the
    assignment engine ranks on (city / state / coordinates, any may be unset).
    """
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name="profile")
    full_name = models.CharField(max_length=255)

    city = models.CharField(max_length=120, blank=True, null=True)
    state = models.CharField(max_length=120, blank=True, null=True)
    latitude = models.FloatField(blank=True, null=True)
    longitude = models.FloatField(blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.full_name} ({self.city or 'unknown city'})"
