from django.contrib import admin

from .models import Driver, DriverLocation, Employee


@admin.register(Driver)
class DriverAdmin(admin.ModelAdmin):
    list_display = (
        'driver_id', 'name', 'vehicle_type', 'status', 'license_plate',
        'phone', 'employee', 'last_location_update'
    )
    list_filter = ('status', 'vehicle_type')
    search_fields = ('driver_id', 'name', 'license_plate', 'phone', 'employee__employee_id')
    raw_id_fields = ('employee', 'user')
    readonly_fields = ('created_at', 'updated_at', 'last_location_update')

    fieldsets = (
        ('Basic Information', {
            'fields': ('driver_id', 'name', 'phone', 'status')
        }),
        ('Vehicle', {
            'fields': ('vehicle_type', 'license_plate')
        }),
        ('Accounts', {
            'fields': ('employee', 'user')
        }),
        ('Current Location', {
            'fields': ('current_latitude', 'current_longitude', 'last_location_update')
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )


@admin.register(DriverLocation)
class DriverLocationAdmin(admin.ModelAdmin):
    list_display = ('driver', 'timestamp', 'latitude', 'longitude', 'speed', 'heading')
    list_filter = ('timestamp',)
    search_fields = ('driver__driver_id',)
    raw_id_fields = ('driver',)
    date_hierarchy = 'timestamp'


@admin.register(Employee)
class EmployeeAdmin(admin.ModelAdmin):
    list_display = ('employee_id', 'full_name', 'department', 'phone', 'is_active')
    list_filter = ('department', 'is_active')
    search_fields = ('employee_id', 'full_name')
    raw_id_fields = ('user',)
