from django.contrib import admin

from .models import DriverAssignment


@admin.register(DriverAssignment)
class DriverAssignmentAdmin(admin.ModelAdmin):
    list_display = ('id', 'order', 'driver', 'status', 'assigned_by', 'assigned_at', 'actual_delivery_time')
    list_filter = ('status',)
    search_fields = ('order__order_number', 'driver__driver_id', 'driver__name')
    raw_id_fields = ('driver', 'order')
    readonly_fields = ('assigned_at', 'updated_at')

    fieldsets = (
        ('Assignment', {
            'fields': ('driver', 'order', 'status', 'assigned_by', 'notes', 'notification_sent')
        }),
        ('Pickup', {
            'fields': ('pickup_name', 'pickup_latitude', 'pickup_longitude')
        }),
        ('Delivery', {
            'fields': ('delivery_name', 'delivery_latitude', 'delivery_longitude')
        }),
        ('Timestamps', {
            'fields': ('assigned_at', 'accepted_at', 'actual_pickup_time', 'actual_delivery_time', 'cancelled_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )
