from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'tenants'

router = DefaultRouter()
router.register(r'tenants', views.TenantViewSet, basename='tenant')

urlpatterns = [
    # GET/POST          /api/tenants/
    # GET/PUT/PATCH/DEL /api/tenants/{id}/
    # GET               /api/tenants/me/
    path('', include(router.urls)),
]
