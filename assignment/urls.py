from django.urls import include, path
from rest_framework.routers import DefaultRouter

from assignment.views import AssignmentViewSet

router = DefaultRouter()
router.register(r'assignments', AssignmentViewSet)

urlpatterns = [
    path('', include(router.urls)),
]
