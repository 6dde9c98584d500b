from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import CapacityLimitsView, DriverViewSet

router = DefaultRouter()
router.register(r'drivers', DriverViewSet)

urlpatterns = [
    path('capacity/', CapacityLimitsView.as_view(), name='capacity-limits'),
    path('', include(router.urls)),
]
