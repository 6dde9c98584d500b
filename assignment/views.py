import logging

from django.core.exceptions import ValidationError
from django.shortcuts import get_object_or_404
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from assignment.models import DriverAssignment
from assignment.serializers import AssignmentStatusSerializer, DriverAssignmentSerializer
from assignment.services.ledger import update_assignment_status
from core.permissions import ROLE_ADMIN, ROLE_ECOMMERCE, user_has_role
from fleet.services.resolver import find_driver

logger = logging.getLogger(__name__)

# Statuses a driver may report for their own deliveries
DRIVER_REPORTABLE_STATUSES = ('accepted', 'picked_up', 'in_transit', 'delivered')


class AssignmentViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Driver assignments. Operations staff see every assignment, drivers only
    their own.
    """
    queryset = DriverAssignment.objects.select_related('driver', 'order')
    serializer_class = DriverAssignmentSerializer
    filterset_fields = ['status', 'driver', 'order']
    search_fields = ['order__order_number', 'driver__driver_id', 'driver__name']
    ordering_fields = ['assigned_at', 'status']

    def is_operations(self):
        return user_has_role(self.request.user, ROLE_ADMIN, ROLE_ECOMMERCE)

    def get_queryset(self):
        queryset = super().get_queryset()
        if not self.is_operations():
            queryset = queryset.filter(driver__user=self.request.user)
        if self.request.query_params.get('active') == 'true':
            queryset = queryset.active()
        return queryset

    @action(detail=False, methods=['get'], url_path='by-driver/(?P<driver_id>[^/.]+)')
    def by_driver(self, request, driver_id=None):
        driver = find_driver(driver_id)
        if driver is None:
            return Response({'error': 'Driver not found', 'details': {'driver_id': driver_id}}, status=404)
        if not self.is_operations() and driver.user_id != request.user.pk:
            return Response({'error': 'You can only view your own assignments', 'details': {}}, status=403)

        assignments = self.get_queryset().filter(driver=driver)
        return Response(self.get_serializer(assignments, many=True).data)

    @action(detail=True, methods=['patch'], url_path='status')
    def update_status(self, request, pk=None):
        assignment = get_object_or_404(DriverAssignment.objects.select_related('driver', 'order'), pk=pk)
        serializer = AssignmentStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        new_status = serializer.validated_data['status']

        if not self.is_operations():
            if assignment.driver.user_id != request.user.pk:
                return Response({'error': 'You can only update your own assignments', 'details': {}}, status=403)
            if new_status not in DRIVER_REPORTABLE_STATUSES:
                return Response(
                    {'error': f'Drivers can only set status to one of {list(DRIVER_REPORTABLE_STATUSES)}',
                     'details': {'status': new_status}},
                    status=403,
                )

        try:
            assignment = update_assignment_status(
                assignment, new_status, at=serializer.validated_data.get('timestamp')
            )
        except ValidationError as e:
            return Response({'error': e.message, 'details': {'status': new_status}}, status=status.HTTP_400_BAD_REQUEST)

        logger.info(f"{request.user.username} set assignment {assignment.pk} to {new_status}")
        return Response(self.get_serializer(assignment).data)
