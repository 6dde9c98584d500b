from django.contrib import admin

from .models import EcommerceOrder, OrderItem


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0


@admin.register(EcommerceOrder)
class EcommerceOrderAdmin(admin.ModelAdmin):
    list_display = ('order_number', 'customer_name', 'status', 'payment_status', 'shop', 'tracking_number', 'created_at')
    list_filter = ('status', 'payment_status', 'shop')
    search_fields = ('order_number', 'customer_name', 'customer_email', 'tracking_number')
    raw_id_fields = ('customer', 'shop')
    readonly_fields = ('status', 'payment_status', 'created_at', 'updated_at', 'dispatch_date', 'delivered_at')
    inlines = [OrderItemInline]
