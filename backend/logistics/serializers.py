from rest_framework import serializers

from dispatch.dispatcher import ACTION_ASSIGN, ACTION_REASSIGN, ACTIONS
from partners.models import PartnerStatus

from .models import CustomerOrder


class AssignmentRequestSerializer(serializers.Serializer):
    """
    Body of the logistics-assignment endpoint.
    `action` defaults to "assign"; `order_id` is required for assign / reassign.
    """
    action = serializers.ChoiceField(choices=ACTIONS, required=False, allow_null=True, allow_blank=True)
    order_id = serializers.CharField(required=False, allow_null=True, allow_blank=True, trim_whitespace=True)

    def validate(self, attrs):
        attrs['action'] = attrs.get('action') or ACTION_ASSIGN
        attrs['order_id'] = attrs.get('order_id') or None

        if attrs['action'] in (ACTION_ASSIGN, ACTION_REASSIGN) and not attrs['order_id']:
            raise serializers.ValidationError({'order_id': "order_id is required for this action"})
        return attrs


class AvailabilitySerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[status.value for status in PartnerStatus])


class CustomerOrderSerializer(serializers.ModelSerializer):
    class Meta:
        model = CustomerOrder
        fields = [
            'id', 'customer', 'delivery_address', 'delivery_partner', 'quantity', 'total_price',
            'status', 'delivery_status', 'pickup_time', 'delivered_time', 'created_at', 'updated_at',
        ]
        read_only_fields = fields
