from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from shops.models import Shop
from shops.serializers import ShopInventorySerializer, ShopSerializer


class ShopViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Read access to shops and their stock levels.
    """
    queryset = Shop.objects.all()
    serializer_class = ShopSerializer
    filterset_fields = ['is_active']
    search_fields = ['code', 'name', 'address']
    ordering_fields = ['name', 'code']

    @action(detail=True, methods=['get'])
    def inventory(self, request, pk=None):
        shop = self.get_object()
        stock = shop.inventory.all()
        if variant := request.query_params.get('product_variant_id'):
            stock = stock.filter(product_variant_id=variant)
        return Response(ShopInventorySerializer(stock, many=True).data)
