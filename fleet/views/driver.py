import logging

from django.db.models import Count
from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from assignment.services.ledger import count_active, with_active_counts
from core.permissions import ROLE_ADMIN, ROLE_ECOMMERCE, ROLE_HR, IsAdminOrHR, user_has_role
from fleet.models import Driver, DriverLocation
from fleet.serializers import DriverDetailSerializer, DriverSerializer
from fleet.services.capacity import load_capacity_settings, max_active_orders
from fleet.services.status_services import mark_driver_available, mark_driver_offline, refresh_driver_status

logger = logging.getLogger(__name__)


class DriverViewSet(viewsets.ModelViewSet):
    """
    API endpoint for managing drivers.
    """
    queryset = Driver.objects.select_related('employee')
    serializer_class = DriverSerializer
    filterset_fields = ['status', 'vehicle_type']
    search_fields = ['driver_id', 'name', 'phone', 'license_plate', 'employee__employee_id']
    ordering_fields = ['driver_id', 'name', 'status', 'created_at']
    ordering = ['driver_id']

    def get_permissions(self):
        if self.action in ('create', 'update', 'partial_update', 'destroy'):
            return [IsAdminOrHR()]
        return [permissions.IsAuthenticated()]

    def get_serializer_class(self):
        if self.action == 'retrieve':
            return DriverDetailSerializer
        return super().get_serializer_class()

    def get_serializer_context(self):
        context = super().get_serializer_context()
        context['capacity_settings'] = load_capacity_settings()
        return context

    def get_queryset(self):
        return with_active_counts(super().get_queryset())

    def _can_manage(self, request, driver):
        if user_has_role(request.user, ROLE_ADMIN, ROLE_ECOMMERCE, ROLE_HR):
            return True
        return driver.user_id is not None and driver.user_id == request.user.pk

    def perform_create(self, serializer):
        driver = serializer.save()
        logger.info(f"Driver {driver.driver_id} registered by {self.request.user.username}")

    def destroy(self, request, *args, **kwargs):
        driver = self.get_object()
        if driver.assignments.exists():
            return Response(
                {'error': 'Drivers with delivery history cannot be deleted; set them offline instead.',
                 'details': {'driver_id': driver.driver_id}},
                status=status.HTTP_400_BAD_REQUEST,
            )
        return super().destroy(request, *args, **kwargs)

    @action(detail=False, methods=['get'])
    def available(self, request):
        """Drivers that are online and below their vehicle's active-order limit."""
        capacity_settings = load_capacity_settings()
        drivers = self.filter_queryset(self.get_queryset()).exclude(status='offline')
        if vehicle_type := request.query_params.get('vehicle_type'):
            drivers = drivers.filter(vehicle_type=vehicle_type)

        available = [
            driver for driver in drivers
            if driver.active_order_count < max_active_orders(driver.vehicle_type, capacity_settings)
        ]
        serializer = self.get_serializer(available, many=True)
        return Response(serializer.data)

    @action(detail=True, methods=['post'])
    def change_status(self, request, pk=None):
        """Set a driver online or offline; busy follows from active deliveries."""
        driver = self.get_object()
        if not self._can_manage(request, driver):
            return Response({'error': 'You can only change your own status', 'details': {}}, status=403)

        new_status = request.data.get('status')
        if new_status not in ('available', 'offline'):
            return Response(
                {'error': "Invalid status. Must be one of ['available', 'offline']",
                 'details': {'status': new_status}},
                status=400,
            )

        if new_status == 'offline':
            mark_driver_offline(driver)
        else:
            mark_driver_available(driver)
            refresh_driver_status(driver, count_active(driver))
        return Response({'driver_id': driver.driver_id, 'status': driver.status})

    @action(detail=True, methods=['post'])
    def update_location(self, request, pk=None):
        driver = self.get_object()
        if not self._can_manage(request, driver):
            return Response({'error': 'You can only report your own location', 'details': {}}, status=403)

        latitude = request.data.get('latitude')
        longitude = request.data.get('longitude')
        speed = request.data.get('speed')
        heading = request.data.get('heading')

        if latitude is None or longitude is None:
            return Response({'error': 'Latitude and longitude are required', 'details': {}}, status=400)

        try:
            latitude = float(latitude)
            longitude = float(longitude)
        except (TypeError, ValueError):
            return Response({'error': 'Invalid latitude or longitude', 'details': {}}, status=400)
        if not (-90 <= latitude <= 90 and -180 <= longitude <= 180):
            return Response({'error': 'Latitude or longitude out of range', 'details': {}}, status=400)

        driver.update_location(round(latitude, 6), round(longitude, 6))
        DriverLocation.objects.create(
            driver=driver,
            latitude=round(latitude, 6),
            longitude=round(longitude, 6),
            speed=speed or None,
            heading=heading or None,
        )
        return Response({'status': 'location updated'}, status=200)

    @action(detail=False, methods=['get'])
    def stats(self, request):
        status_counts = dict(
            Driver.objects.values('status').annotate(count=Count('id')).values_list('status', 'count')
        )
        for s, _ in Driver.STATUS_CHOICES:
            status_counts.setdefault(s, 0)

        capacity_settings = load_capacity_settings()
        by_vehicle = {}
        for driver in with_active_counts(Driver.objects.exclude(status='offline')):
            entry = by_vehicle.setdefault(driver.vehicle_type, {'drivers': 0, 'active_orders': 0, 'capacity': 0})
            entry['drivers'] += 1
            entry['active_orders'] += driver.active_order_count
            entry['capacity'] += max_active_orders(driver.vehicle_type, capacity_settings)

        return Response({
            'total_drivers': Driver.objects.count(),
            'status_counts': status_counts,
            'by_vehicle_type': by_vehicle,
        })
