from django.contrib.auth import get_user_model
from rest_framework import serializers

from core.models import SystemSetting
from core.permissions import user_role


class SystemSettingSerializer(serializers.ModelSerializer):
    class Meta:
        model = SystemSetting
        fields = ['id', 'key', 'value', 'description', 'updated_by', 'updated_at']
        read_only_fields = ['updated_by', 'updated_at']


class CurrentUserSerializer(serializers.ModelSerializer):
    role = serializers.SerializerMethodField()

    class Meta:
        model = get_user_model()
        fields = ['id', 'username', 'first_name', 'last_name', 'email', 'role']

    def get_role(self, obj):
        return user_role(obj)
