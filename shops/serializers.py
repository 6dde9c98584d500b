from rest_framework import serializers

from shops.models import Shop, ShopInventory


class ShopInventorySerializer(serializers.ModelSerializer):
    class Meta:
        model = ShopInventory
        fields = ['id', 'product_variant_id', 'product_name', 'stock', 'updated_at']


class ShopSerializer(serializers.ModelSerializer):
    class Meta:
        model = Shop
        fields = ['id', 'code', 'name', 'address', 'phone', 'latitude', 'longitude', 'is_active', 'created_at']
