from django.contrib import admin
from .models import Property, Room


class RoomInline(admin.TabularInline):
    model = Room
    extra = 0
    fields = ['room_number', 'floor', 'type', 'capacity', 'price', 'is_available']
    # Availability follows tenant occupancy; edit tenants instead
    readonly_fields = ['is_available']


@admin.register(Property)
class PropertyAdmin(admin.ModelAdmin):
    list_display = ['name', 'city', 'owner', 'total_rooms', 'occupied_rooms', 'created_at']
    list_filter = ['city', 'state', 'created_at']
    search_fields = ['name', 'address', 'city', 'owner__email']
    readonly_fields = ['occupied_rooms', 'payment_qr_code', 'created_at', 'updated_at']
    raw_id_fields = ['owner']
    inlines = [RoomInline]


@admin.register(Room)
class RoomAdmin(admin.ModelAdmin):
    list_display = ['room_number', 'property', 'type', 'capacity', 'price', 'is_available']
    list_filter = ['type', 'is_available', 'property']
    search_fields = ['room_number', 'property__name']
    readonly_fields = ['is_available', 'created_at', 'updated_at']
    list_select_related = ['property']
