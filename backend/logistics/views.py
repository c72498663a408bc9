import logging
from datetime import datetime, timezone

from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ParseError
from rest_framework.response import Response
from rest_framework.views import APIView

from dispatch.dispatcher import AssignmentRequestError, Dispatcher
from dispatch.state_machines.delivery_state import (
    DeliveryStateException,
    accept_delivery,
    advance_delivery,
    reject_delivery,
)
from dispatch.state_machines.partner_state import PartnerStateException, set_availability
from partners.models import PartnerAvailability, PartnerStatus
from users.models import User

from .models import CustomerOrder
from .serializers import AssignmentRequestSerializer, AvailabilitySerializer, CustomerOrderSerializer
from .store import DjangoAssignmentStore, assignment_policy_from_settings

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


def _first_error(errors):
    """
    Flatten DRF serializer errors into one human readable message.
    """
    if isinstance(errors, dict):
        for value in errors.values():
            return _first_error(value)
    if isinstance(errors, (list, tuple)) and errors:
        return _first_error(errors[0])
    return str(errors)


def build_dispatcher() -> Dispatcher:
    return Dispatcher(DjangoAssignmentStore(), assignment_policy_from_settings())


class LogisticsAssignmentView(APIView):
    """
    Single entry point for the assignment engine.
    POST {"action": "assign" | "reassign" | "assignPending", "order_id": "..."}
    """
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def options(self, request, *args, **kwargs):
        # pre-flight: success, no body
        return Response(status=status.HTTP_200_OK)

    def post(self, request):
        try:
            data = request.data
        except ParseError:
            # unreadable body is treated as empty
            data = {}

        serializer = AssignmentRequestSerializer(data=data)
        if not serializer.is_valid():
            return Response({"error": _first_error(serializer.errors)}, status=status.HTTP_400_BAD_REQUEST)

        try:
            result = build_dispatcher().handle(
                serializer.validated_data['action'],
                serializer.validated_data['order_id'],
            )
        except AssignmentRequestError as exc:
            return Response({"error": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        except Exception:
            logger.exception("Error in logistics-assignment")
            return Response({"error": "Internal server error"}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        return Response(result)

    def finalize_response(self, request, response, *args, **kwargs):
        response = super().finalize_response(request, response, *args, **kwargs)
        for header, value in CORS_HEADERS.items():
            response[header] = value
        return response


class IsDeliveryPartner(permissions.BasePermission):
    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and request.user.role == User.Roles.LOGISTICS)


class CustomerOrderViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Orders as seen by each role, plus the delivery partner's lifecycle actions.
    """
    serializer_class = CustomerOrderSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        """
        Filter orders by role:
        - Customer: See only their own orders
        - Delivery partner: See deliveries assigned to them
        """
        user = self.request.user
        if user.role == User.Roles.CUSTOMER:
            return CustomerOrder.objects.filter(customer=user)
        elif user.role == User.Roles.LOGISTICS:
            return CustomerOrder.objects.filter(delivery_partner=user)
        return CustomerOrder.objects.none()

    def _transition(self, request, pk, transition):
        partner_id = str(request.user.pk)
        store = DjangoAssignmentStore()

        order = store.get_order(pk)
        if order is None:
            return None, Response({"error": "Order not found"}, status=status.HTTP_404_NOT_FOUND)
        if order.delivery_partner_id != partner_id:
            return None, Response({"error": "Not authorized"}, status=status.HTTP_403_FORBIDDEN)

        try:
            order = transition(order, partner_id)
        except DeliveryStateException as exc:
            return None, Response({"error": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        if not store.save_delivery_progress(order, partner_id, datetime.now(timezone.utc)):
            # the order changed hands between read and write
            return None, Response({"error": "Delivery was updated concurrently"}, status=status.HTTP_409_CONFLICT)
        return order, None

    @action(detail=True, methods=['post'], url_path='accept-delivery', permission_classes=[IsDeliveryPartner])
    def accept_delivery(self, request, pk=None):
        order, error = self._transition(request, pk, accept_delivery)
        if error:
            return error
        return Response({"order_id": order.id, "delivery_status": order.delivery_status})

    @action(detail=True, methods=['post'], url_path='advance-delivery', permission_classes=[IsDeliveryPartner])
    def advance_delivery(self, request, pk=None):
        order, error = self._transition(request, pk, advance_delivery)
        if error:
            return error
        return Response({"order_id": order.id, "delivery_status": order.delivery_status})

    @action(detail=True, methods=['post'], url_path='reject-delivery', permission_classes=[IsDeliveryPartner])
    def reject_delivery(self, request, pk=None):
        """
        Partner declines the assignment; the order goes straight back through reassignment.
        """
        order, error = self._transition(request, pk, reject_delivery)
        if error:
            return error
        return Response(build_dispatcher().reassign(order.id).to_dict())


class PartnerAvailabilityView(APIView):
    """
    Delivery partner toggles their availability (available / busy / offline).
    """
    permission_classes = [IsDeliveryPartner]

    def post(self, request):
        serializer = AvailabilitySerializer(data=request.data)
        if not serializer.is_valid():
            return Response({"error": _first_error(serializer.errors)}, status=status.HTTP_400_BAD_REQUEST)

        store = DjangoAssignmentStore()
        partner_id = str(request.user.pk)
        current = store.get_partner_availability(partner_id) or PartnerAvailability.new(partner_id, PartnerStatus.OFFLINE)

        try:
            updated = set_availability(current, serializer.validated_data['status'])
        except PartnerStateException as exc:
            return Response({"error": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        store.set_partner_availability(updated)
        return Response({"partner_id": partner_id, "status": updated.status.value})
