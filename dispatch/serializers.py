from rest_framework import serializers

from dispatch.models import DispatchRecord


class DispatchRecordSerializer(serializers.ModelSerializer):
    """Dispatch log entry joined with its driver, employee, shop and live assignment status."""
    order_number = serializers.CharField(source='order.order_number', read_only=True)
    customer_name = serializers.CharField(source='order.customer_name', read_only=True)
    driver_code = serializers.CharField(source='driver.driver_id', read_only=True)
    driver_name = serializers.CharField(source='driver.name', read_only=True)
    driver_phone = serializers.CharField(source='driver.phone', read_only=True)
    vehicle_type = serializers.CharField(source='driver.vehicle_type', read_only=True)
    employee_name = serializers.CharField(source='driver.employee.full_name', read_only=True, default=None)
    employee_phone = serializers.CharField(source='driver.employee.phone', read_only=True, default=None)
    profile_picture = serializers.CharField(source='driver.employee.profile_picture', read_only=True, default=None)
    shop_code = serializers.CharField(source='shop.code', read_only=True)
    shop_name = serializers.CharField(source='shop.name', read_only=True)
    assignment_status = serializers.CharField(source='assignment.status', read_only=True, default=None)

    class Meta:
        model = DispatchRecord
        fields = [
            'id', 'tracking_number', 'status', 'estimated_delivery_time', 'transport_cost', 'notes',
            'created_by', 'created_at',
            'order', 'order_number', 'customer_name',
            'driver', 'driver_code', 'driver_name', 'driver_phone', 'vehicle_type',
            'employee_name', 'employee_phone', 'profile_picture',
            'shop', 'shop_code', 'shop_name',
            'assignment', 'assignment_status',
        ]
        read_only_fields = fields


class DispatchAssignRequestSerializer(serializers.Serializer):
    """
    Optional dispatch details. Required identifiers are checked by the
    orchestrator so that every missing field is reported together.
    """
    orderId = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    driverId = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    shopId = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    trackingNumber = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    estimatedDeliveryTime = serializers.DateTimeField(required=False, allow_null=True)
    transportCost = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    SNAKE_CASE_ALIASES = {
        'order_id': 'orderId',
        'driver_id': 'driverId',
        'shop_id': 'shopId',
        'tracking_number': 'trackingNumber',
        'estimated_delivery_time': 'estimatedDeliveryTime',
        'transport_cost': 'transportCost',
    }

    def to_internal_value(self, data):
        data = dict(data.items()) if hasattr(data, 'items') else data
        if isinstance(data, dict):
            for snake, camel in self.SNAKE_CASE_ALIASES.items():
                if camel not in data and snake in data:
                    data[camel] = data[snake]
            # Empty optional values mean "not provided".
            for key in ('estimatedDeliveryTime', 'transportCost'):
                if data.get(key) == '':
                    data[key] = None
        return super().to_internal_value(data)
