import logging

from rest_framework import viewsets
from rest_framework.decorators import api_view
from rest_framework.response import Response

from core.models import SystemSetting
from core.permissions import IsAdmin
from core.serializers import CurrentUserSerializer, SystemSettingSerializer

logger = logging.getLogger(__name__)


class SystemSettingViewSet(viewsets.ModelViewSet):
    """
    Administrator access to key/value system settings.
    """
    queryset = SystemSetting.objects.all()
    serializer_class = SystemSettingSerializer
    permission_classes = [IsAdmin]
    lookup_field = 'key'
    search_fields = ['key', 'description']
    ordering_fields = ['key', 'updated_at']

    def perform_create(self, serializer):
        setting = serializer.save(updated_by=self.request.user.username)
        logger.info(f"Setting {setting.key} created by {setting.updated_by}")

    def perform_update(self, serializer):
        setting = serializer.save(updated_by=self.request.user.username)
        logger.info(f"Setting {setting.key} updated by {setting.updated_by}")


@api_view(['GET'])
def current_user(request):
    """Return the authenticated user with their resolved role."""
    return Response(CurrentUserSerializer(request.user).data)
