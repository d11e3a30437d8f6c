"""
Property management service.

Every function takes the acting user as ``caller`` and checks existence
before ownership, so a missing property is a 404 and a foreign one a 403.
"""

import logging
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.db.models import ProtectedError, QuerySet

from apps.accounts.models import User
from apps.properties.models import Property
from apps.tenants.models import Tenant

from .exceptions import (
    PropertyNotFoundError,
    PropertyAccessDeniedError,
    PropertyOccupiedError,
)

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    'name', 'address', 'city', 'state', 'zip_code', 'total_rooms', 'upi_id',
)


def can_manage_property(user: User, prop: Property) -> bool:
    """Admins manage every property, landlords their own."""
    return user.is_admin or prop.owner_id == user.id


def is_property_tenant(user: User, prop: Property) -> bool:
    """True when the account is a tenant living in the property."""
    return Tenant.objects.for_account(user).filter(room__property=prop).exists()


def visible_properties(user: User) -> QuerySet:
    queryset = Property.objects.select_related('owner')
    if user.is_admin:
        return queryset
    return queryset.filter(owner=user)


def get_property(*, property_id: UUID, caller: User) -> Property:
    """
    Fetch a property the caller manages.

    Raises:
        PropertyNotFoundError: If the property doesn't exist
        PropertyAccessDeniedError: If the caller neither owns it nor is admin
    """
    try:
        prop = Property.objects.select_related('owner').get(id=property_id)
    except Property.DoesNotExist:
        raise PropertyNotFoundError()

    if not can_manage_property(caller, prop):
        raise PropertyAccessDeniedError()

    return prop


@transaction.atomic
def create_property(
    *,
    caller: User,
    name: str,
    address: str,
    city: str,
    state: str,
    zip_code: str,
    total_rooms: int = 0,
    upi_id: str = '',
) -> Property:
    """Create a property owned by the caller. The occupancy counter starts at 0."""
    prop = Property.objects.create(
        owner=caller,
        name=name,
        address=address,
        city=city,
        state=state,
        zip_code=zip_code,
        total_rooms=total_rooms,
        upi_id=upi_id,
    )
    logger.info("Property created: %s by %s", prop.id, caller.id)
    return prop


@transaction.atomic
def update_property(*, property_id: UUID, caller: User, **fields) -> Property:
    """
    Update the editable fields of a property.

    ``occupied_rooms`` is not editable; it is owned by the occupancy
    transactions. Changing ``upi_id`` or ``name`` drops the cached UPI
    payload so the next read regenerates it.
    """
    prop = get_property(property_id=property_id, caller=caller)

    changed = []
    for field in EDITABLE_FIELDS:
        if field in fields and getattr(prop, field) != fields[field]:
            setattr(prop, field, fields[field])
            changed.append(field)

    if not changed:
        return prop

    if {'name', 'upi_id'} & set(changed):
        prop.payment_qr_code = ''
        changed.append('payment_qr_code')

    prop.save(update_fields=changed + ['updated_at'])
    logger.info("Property updated: %s (%s)", prop.id, ', '.join(changed))
    return prop


@transaction.atomic
def delete_property(*, property_id: UUID, caller: User) -> None:
    """
    Delete a property together with its rooms.

    Raises:
        PropertyOccupiedError: If any of its rooms still has a tenant
    """
    prop = get_property(property_id=property_id, caller=caller)

    if Tenant.objects.filter(room__property=prop).exists():
        logger.warning("Refused to delete occupied property %s", prop.id)
        raise PropertyOccupiedError()

    try:
        prop.delete()
    except ProtectedError:
        # A tenant was assigned between the check and the delete
        raise PropertyOccupiedError()

    logger.info("Property deleted: %s by %s", property_id, caller.id)


def refresh_occupancy_counters(*property_ids: Optional[UUID]) -> None:
    """
    Recount ``occupied_rooms`` for the given properties.

    Must run inside the transaction that toggled room availability.
    """
    for prop in Property.objects.filter(id__in={pid for pid in property_ids if pid}):
        prop.refresh_occupied_rooms()
