"""Domain exceptions for tenant services."""

from apps.common.exceptions import (
    ForbiddenError,
    ResourceNotFoundError,
    RoomUnavailableError,
)


class TenantNotFoundError(ResourceNotFoundError):
    default_detail = 'Tenant not found.'
    default_code = 'tenant_not_found'


class TenantAccessDeniedError(ForbiddenError):
    default_detail = 'You do not manage this tenant.'
    default_code = 'tenant_forbidden'


__all__ = [
    'TenantNotFoundError',
    'TenantAccessDeniedError',
    'RoomUnavailableError',
]
