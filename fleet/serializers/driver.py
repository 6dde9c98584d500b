from rest_framework import serializers

from assignment.services.ledger import count_active
from fleet.models import Driver, DriverLocation, Employee
from fleet.services.capacity import load_capacity_settings, max_active_orders


class EmployeeSerializer(serializers.ModelSerializer):
    class Meta:
        model = Employee
        fields = ['id', 'employee_id', 'full_name', 'department', 'phone', 'profile_picture', 'is_active']


class DriverLocationSerializer(serializers.ModelSerializer):
    class Meta:
        model = DriverLocation
        fields = ['timestamp', 'latitude', 'longitude', 'speed', 'heading']


class DriverSerializer(serializers.ModelSerializer):
    """
    Driver with live workload. ``active_order_count`` comes from the
    queryset annotation when present; capacity settings may be passed in
    the serializer context to avoid one lookup per driver.
    """
    is_available = serializers.BooleanField(read_only=True)
    active_order_count = serializers.SerializerMethodField()
    max_capacity = serializers.SerializerMethodField()
    employee_name = serializers.CharField(source='employee.full_name', read_only=True, default=None)

    class Meta:
        model = Driver
        fields = [
            'id', 'driver_id', 'name', 'phone', 'license_plate', 'vehicle_type', 'status',
            'employee', 'employee_name', 'user',
            'current_latitude', 'current_longitude', 'last_location_update',
            'is_available', 'active_order_count', 'max_capacity',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['status', 'current_latitude', 'current_longitude', 'last_location_update',
                            'created_at', 'updated_at']

    def _capacity_settings(self):
        if 'capacity_settings' not in self.context:
            self.context['capacity_settings'] = load_capacity_settings()
        return self.context['capacity_settings']

    def get_active_order_count(self, obj):
        annotated = getattr(obj, 'active_order_count', None)
        if annotated is not None:
            return annotated
        return count_active(obj)

    def get_max_capacity(self, obj):
        return max_active_orders(obj.vehicle_type, self._capacity_settings())


class DriverDetailSerializer(DriverSerializer):
    employee_detail = EmployeeSerializer(source='employee', read_only=True)
    location_history = serializers.SerializerMethodField()

    class Meta(DriverSerializer.Meta):
        fields = DriverSerializer.Meta.fields + ['employee_detail', 'location_history']

    def get_location_history(self, obj):
        records = obj.location_history.all()[:10]
        return DriverLocationSerializer(records, many=True).data


class CapacityLimitsSerializer(serializers.Serializer):
    motorbike = serializers.IntegerField(min_value=0, required=False)
    car = serializers.IntegerField(min_value=0, required=False)
    van = serializers.IntegerField(min_value=0, required=False)
    truck = serializers.IntegerField(min_value=0, required=False)
