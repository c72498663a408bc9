"""
Orders domain package.

Public API:
- Domain models: Order, DeliveryAddress, OrderStatus, DeliveryStatus
- normalize_status helper used wherever stored status text is compared

Should not contain business logic.
"""
from .models import Order, DeliveryAddress, OrderStatus, DeliveryStatus, normalize_status

__all__ = ["Order",
           "DeliveryAddress",
             "OrderStatus",
               "DeliveryStatus",
               "normalize_status",
               ]
