from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'properties'

router = DefaultRouter()
router.register(r'properties', views.PropertyViewSet, basename='property')
router.register(r'rooms', views.RoomViewSet, basename='room')

urlpatterns = [
    # GET/POST          /api/properties/
    # GET/PUT/PATCH/DEL /api/properties/{id}/
    # GET               /api/properties/occupancy/
    # GET               /api/properties/{id}/occupancy/
    # GET/POST          /api/properties/{id}/qr_code/
    # GET/POST          /api/rooms/
    # GET/PUT/PATCH/DEL /api/rooms/{id}/
    path('', include(router.urls)),
]
