from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'payments'

router = DefaultRouter()
router.register(r'payments', views.PaymentViewSet, basename='payment')

urlpatterns = [
    # GET/POST          /api/payments/
    # GET/PUT/PATCH/DEL /api/payments/{id}/
    # POST              /api/payments/pay_rent/
    # POST              /api/payments/{id}/submit/
    # POST              /api/payments/{id}/approve/
    # POST              /api/payments/{id}/decline/
    # POST              /api/payments/{id}/force_status/
    path('', include(router.urls)),
]
