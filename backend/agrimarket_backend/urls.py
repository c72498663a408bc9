from django.urls import path, include
from rest_framework.routers import DefaultRouter
from logistics.views import CustomerOrderViewSet, LogisticsAssignmentView, PartnerAvailabilityView

router = DefaultRouter()
router.register(r'orders', CustomerOrderViewSet, basename='order')

urlpatterns = [
    path('api/v1/', include(router.urls)),
    path('api/v1/logistics-assignment/', LogisticsAssignmentView.as_view(), name='logistics-assignment'),
    path('api/v1/partners/availability/', PartnerAvailabilityView.as_view(), name='partner-availability'),
]
