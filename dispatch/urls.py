from django.urls import path

from dispatch.views import DispatchAssignView

urlpatterns = [
    path('assign/', DispatchAssignView.as_view(), name='dispatch-assign'),
]
