from django.contrib import admin
from .models import Tenant


@admin.register(Tenant)
class TenantAdmin(admin.ModelAdmin):
    """
    Read-mostly admin for tenants.

    Placing, moving and releasing tenants go through the API so room
    availability stays consistent: ``room`` is read-only and tenants cannot
    be added or deleted here.
    """

    list_display = ['name', 'email', 'room', 'rent_amount', 'lease_start', 'lease_end', 'owner']
    list_filter = ['lease_end', 'room__property']
    search_fields = ['name', 'email', 'phone', 'room__room_number', 'room__property__name']
    readonly_fields = ['room', 'created_at', 'updated_at']
    raw_id_fields = ['owner']
    list_select_related = ['room', 'room__property', 'owner']

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
