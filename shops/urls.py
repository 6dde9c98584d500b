from django.urls import include, path
from rest_framework.routers import DefaultRouter

from shops.views import ShopViewSet

router = DefaultRouter()
router.register(r'shops', ShopViewSet)

urlpatterns = [
    path('', include(router.urls)),
]
