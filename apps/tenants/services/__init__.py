"""Services for tenant occupancy."""

from .exceptions import (
    TenantNotFoundError,
    TenantAccessDeniedError,
    RoomUnavailableError,
)
from .occupancy import (
    can_manage_tenant,
    visible_tenants,
    get_tenant,
    get_own_tenancies,
    assign_tenant,
    update_tenant,
    release_tenant,
    resync_room_availability,
)

__all__ = [
    # Exceptions
    'TenantNotFoundError',
    'TenantAccessDeniedError',
    'RoomUnavailableError',
    # Services
    'can_manage_tenant',
    'visible_tenants',
    'get_tenant',
    'get_own_tenancies',
    'assign_tenant',
    'update_tenant',
    'release_tenant',
    'resync_room_availability',
]
