"""Main API URL router for /api/v1/."""
from django.urls import path, include
from rest_framework.routers import DefaultRouter
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from api.v1 import views as v1_views

router = DefaultRouter()
router.register(r'suppliers', v1_views.SupplierViewSet)
router.register(r'sales-orders', v1_views.SalesOrderViewSet)
router.register(r'commission-payments', v1_views.CommissionPaymentViewSet, basename='commission-payment')
router.register(r'commission-payment-items', v1_views.CommissionPaymentItemViewSet)
router.register(r'commission-allocations', v1_views.CommissionAllocationViewSet)


app_name = 'api'
urlpatterns = [
    path('', include(router.urls)),

    # Auth endpoints
    path('auth/token/', TokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('auth/token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),

    # Reports
    path('commission-outstanding/', v1_views.CommissionOutstandingView.as_view(), name='commission-outstanding'),
]
