from rest_framework import serializers

from orders.models import EcommerceOrder, OrderItem


class OrderItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderItem
        fields = ['id', 'product_variant_id', 'product_name', 'quantity', 'unit_price', 'stock_reduced']


class EcommerceOrderSerializer(serializers.ModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)
    shop_code = serializers.CharField(source='shop.code', read_only=True, default=None)
    delivery_location = serializers.SerializerMethodField()
    can_dispatch = serializers.BooleanField(read_only=True)

    class Meta:
        model = EcommerceOrder
        fields = [
            'id', 'order_number', 'customer', 'customer_name', 'customer_email', 'customer_phone',
            'delivery_address', 'delivery_city', 'delivery_location',
            'status', 'payment_status', 'payment_method', 'total_amount',
            'shop', 'shop_code', 'tracking_number', 'dispatch_date', 'delivered_at',
            'can_dispatch', 'notes', 'items', 'created_at', 'updated_at',
        ]
        read_only_fields = fields

    def get_delivery_location(self, obj):
        return obj.delivery_location.as_dict()


class OrderTransitionSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=EcommerceOrder.STATUS_CHOICES)


class PaymentTransitionSerializer(serializers.Serializer):
    payment_status = serializers.ChoiceField(choices=EcommerceOrder.PAYMENT_STATUS_CHOICES)
