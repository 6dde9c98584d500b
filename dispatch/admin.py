from django.contrib import admin

from .models import DispatchRecord


@admin.register(DispatchRecord)
class DispatchRecordAdmin(admin.ModelAdmin):
    list_display = ('tracking_number', 'order', 'driver', 'shop', 'status', 'transport_cost', 'created_by', 'created_at')
    list_filter = ('status', 'shop')
    search_fields = ('tracking_number', 'order__order_number', 'driver__driver_id')
    raw_id_fields = ('order', 'driver', 'shop', 'assignment')
    date_hierarchy = 'created_at'

    def has_change_permission(self, request, obj=None):
        return False
