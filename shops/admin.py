from django.contrib import admin

from .models import Shop, ShopInventory


class ShopInventoryInline(admin.TabularInline):
    model = ShopInventory
    extra = 0


@admin.register(Shop)
class ShopAdmin(admin.ModelAdmin):
    list_display = ('code', 'name', 'address', 'latitude', 'longitude', 'is_active')
    list_filter = ('is_active',)
    search_fields = ('code', 'name', 'address')
    inlines = [ShopInventoryInline]


@admin.register(ShopInventory)
class ShopInventoryAdmin(admin.ModelAdmin):
    list_display = ('shop', 'product_variant_id', 'product_name', 'stock', 'updated_at')
    list_filter = ('shop',)
    search_fields = ('product_variant_id', 'product_name', 'shop__code')
    raw_id_fields = ('shop',)
