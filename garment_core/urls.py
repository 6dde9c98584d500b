from django.contrib import admin
from django.urls import include, path
from drf_yasg import openapi
from drf_yasg.views import get_schema_view
from rest_framework import permissions

from core.urls import auth_urlpatterns

schema_view = get_schema_view(
    openapi.Info(
        title="Garment Dispatch API",
        default_version='v1',
        description="Order dispatch, driver assignment and shop inventory for the garment storefront",
    ),
    public=True,
    permission_classes=(permissions.AllowAny,),
)

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/auth/', include(auth_urlpatterns)),
    path('api/core/', include('core.urls')),
    path('api/fleet/', include('fleet.urls')),
    path('api/dispatch/', include('dispatch.urls')),
    path('api/', include('assignment.urls')),
    path('api/', include('orders.urls')),
    path('api/', include('shops.urls')),
    path('api/', include('notifications.urls')),
    path('swagger/', schema_view.with_ui('swagger', cache_timeout=0), name='schema-swagger-ui'),
]
