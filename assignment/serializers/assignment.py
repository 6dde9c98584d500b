from rest_framework import serializers

from assignment.models import DriverAssignment


class DriverAssignmentSerializer(serializers.ModelSerializer):
    driver = serializers.CharField(source='driver.driver_id', read_only=True)
    driver_name = serializers.CharField(source='driver.name', read_only=True)
    vehicle_type = serializers.CharField(source='driver.vehicle_type', read_only=True)
    order = serializers.CharField(source='order.order_number', read_only=True)
    customer_name = serializers.CharField(source='order.customer_name', read_only=True)
    pickup = serializers.SerializerMethodField()
    delivery = serializers.SerializerMethodField()
    is_active = serializers.BooleanField(read_only=True)

    class Meta:
        model = DriverAssignment
        fields = [
            'id', 'driver', 'driver_name', 'vehicle_type', 'order', 'customer_name',
            'status', 'is_active', 'assigned_by', 'pickup', 'delivery',
            'assigned_at', 'accepted_at', 'actual_pickup_time', 'actual_delivery_time',
            'cancelled_at', 'notes', 'notification_sent',
        ]
        read_only_fields = fields

    def get_pickup(self, obj):
        return obj.pickup_location.as_dict()

    def get_delivery(self, obj):
        return obj.delivery_location.as_dict()


class AssignmentStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=DriverAssignment.STATUS_CHOICES)
    timestamp = serializers.DateTimeField(required=False)
