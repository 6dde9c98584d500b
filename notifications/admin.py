from django.contrib import admin

from .models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ('title', 'user_type', 'recipient', 'notification_type', 'is_read', 'created_at')
    list_filter = ('user_type', 'notification_type', 'is_read')
    search_fields = ('title', 'description', 'recipient__username')
    raw_id_fields = ('recipient', 'order')
