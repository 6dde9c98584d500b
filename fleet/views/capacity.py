import logging

from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from core.permissions import IsAdmin
from fleet.serializers import CapacityLimitsSerializer
from fleet.services.capacity import (
    DEFAULT_CAPACITY_LIMITS,
    effective_capacity_limits,
    load_capacity_settings,
    save_capacity_limits,
)

logger = logging.getLogger(__name__)


class CapacityLimitsView(APIView):
    """
    GET: effective active-order limit per vehicle type.
    PUT: override one or more limits (admin only).
    """

    def get_permissions(self):
        if self.request.method in ('PUT', 'PATCH'):
            return [IsAdmin()]
        return [permissions.IsAuthenticated()]

    def get(self, request, format=None):
        return Response({
            'limits': effective_capacity_limits(load_capacity_settings()),
            'defaults': DEFAULT_CAPACITY_LIMITS,
        })

    def put(self, request, format=None):
        serializer = CapacityLimitsSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {'error': 'Invalid capacity limits', 'details': serializer.errors},
                status=status.HTTP_400_BAD_REQUEST,
            )
        if not serializer.validated_data:
            return Response(
                {'error': f'Provide at least one of {list(DEFAULT_CAPACITY_LIMITS)}', 'details': {}},
                status=status.HTTP_400_BAD_REQUEST,
            )
        limits = save_capacity_limits(serializer.validated_data, updated_by=request.user.get_username())
        return Response({'limits': limits, 'defaults': DEFAULT_CAPACITY_LIMITS})

    patch = put
