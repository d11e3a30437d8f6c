"""
Room occupancy service.

Keeps ``Room.is_available`` in step with tenant rows. Each operation is a
single transaction: either every row it touches changes or none does.

A room is taken with a conditional update (the claim) as the first write
of the transaction::

    UPDATE rooms SET is_available = false
    WHERE id = ? AND property_id = ? AND is_available AND <no tenant row>

Zero rows claimed means someone else got there first. Two concurrent
assignments to one room serialize on that row, so exactly one wins; the
unique index on ``tenants.room_id`` backs this up.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from django.db import transaction, IntegrityError
from django.db.models import QuerySet
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from apps.accounts.models import User
from apps.properties.models import Property, Room
from apps.properties.services import (
    PropertyNotFoundError,
    RoomNotFoundError,
    refresh_occupancy_counters,
)
from apps.tenants.models import Tenant

from .exceptions import (
    TenantNotFoundError,
    TenantAccessDeniedError,
    RoomUnavailableError,
)

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ('name', 'email', 'phone', 'lease_start', 'lease_end', 'rent_amount')

ROOM_NOT_IN_PROPERTY = 'Room does not belong to the given property.'


def can_manage_tenant(user: User, tenant: Tenant) -> bool:
    return tenant.owner_id == user.id


def visible_tenants(user: User) -> QuerySet:
    return (
        Tenant.objects
        .managed_by(user)
        .select_related('room', 'room__property')
    )


def get_tenant(*, tenant_id: UUID, caller: User) -> Tenant:
    """
    Fetch a tenant record the caller manages.

    Raises:
        TenantNotFoundError: If the tenant doesn't exist
        TenantAccessDeniedError: If the caller isn't the tenant's landlord
    """
    try:
        tenant = Tenant.objects.select_related('room', 'room__property').get(id=tenant_id)
    except Tenant.DoesNotExist:
        raise TenantNotFoundError()

    if not can_manage_tenant(caller, tenant):
        raise TenantAccessDeniedError()

    return tenant


def get_own_tenancies(*, caller: User) -> List[Tenant]:
    """Tenant records whose email matches the caller's account."""
    return list(
        Tenant.objects
        .for_account(caller)
        .select_related('room', 'room__property')
    )


def _resolve_target_room(property_id: UUID, room_id: UUID, caller: User) -> Room:
    """Existence and ownership checks for the room a tenant is moving into."""
    try:
        prop = Property.objects.get(id=property_id)
    except Property.DoesNotExist:
        raise PropertyNotFoundError()

    if prop.owner_id != caller.id:
        raise TenantAccessDeniedError('You do not own this property.')

    try:
        room = Room.objects.get(id=room_id)
    except Room.DoesNotExist:
        raise RoomNotFoundError()

    if room.property_id != prop.id:
        raise ValidationError({'room_id': ROOM_NOT_IN_PROPERTY})

    return room


def _claim_room(room: Room) -> None:
    claimed = (
        Room.objects
        .filter(
            id=room.id,
            property_id=room.property_id,
            is_available=True,
            tenant__isnull=True,
        )
        .update(is_available=False, updated_at=timezone.now())
    )
    if not claimed:
        logger.warning("Room %s is not available", room.id)
        raise RoomUnavailableError()


def _free_room(room_id: UUID) -> None:
    Room.objects.filter(id=room_id).update(is_available=True, updated_at=timezone.now())


def _check_lease(lease_start: date, lease_end: date) -> None:
    if lease_end <= lease_start:
        raise ValidationError({'lease_end': 'Lease end must be after lease start.'})


def assign_tenant(
    *,
    caller: User,
    property_id: UUID,
    room_id: UUID,
    name: str,
    email: str,
    phone: str,
    lease_end: date,
    rent_amount: Decimal,
    lease_start: Optional[date] = None,
) -> Tenant:
    """
    Create a tenant in a vacant room of one of the caller's properties.

    Args:
        caller: Landlord performing the assignment
        property_id: Property the room must belong to
        room_id: Room to occupy

    Returns:
        Created Tenant; its room is now unavailable

    Raises:
        PropertyNotFoundError / RoomNotFoundError: Unknown ids
        TenantAccessDeniedError: Caller doesn't own the property
        ValidationError: Room belongs to another property, or bad lease dates
        RoomUnavailableError: Room already occupied or unavailable
    """
    room = _resolve_target_room(property_id, room_id, caller)
    lease_start = lease_start or timezone.localdate()
    _check_lease(lease_start, lease_end)

    with transaction.atomic():
        _claim_room(room)
        try:
            tenant = Tenant.objects.create(
                owner=caller,
                room=room,
                name=name,
                email=email,
                phone=phone,
                lease_start=lease_start,
                lease_end=lease_end,
                rent_amount=rent_amount,
            )
        except IntegrityError:
            raise RoomUnavailableError()
        refresh_occupancy_counters(room.property_id)

    logger.info("Tenant assigned: %s to room %s", tenant.id, room.id)
    return tenant


def update_tenant(*, tenant_id: UUID, caller: User, **fields) -> Tenant:
    """
    Update tenant details and, when ``room_id`` changes, move the tenant.

    A move claims the new room, frees the old one and recounts both
    properties. Without ``property_id`` the new room must be in the
    tenant's current property. Same room means no availability changes.

    Raises:
        TenantNotFoundError / TenantAccessDeniedError: lookup failures
        PropertyNotFoundError / RoomNotFoundError: Unknown target ids
        ValidationError: Room outside the given property, or bad lease dates
        RoomUnavailableError: Target room is taken
    """
    tenant = get_tenant(tenant_id=tenant_id, caller=caller)

    room_id = fields.get('room_id')
    property_id = fields.get('property_id') or tenant.room.property_id
    moving = room_id is not None and room_id != tenant.room_id

    new_room = None
    if moving:
        new_room = _resolve_target_room(property_id, room_id, caller)
    elif property_id != tenant.room.property_id:
        raise ValidationError({'room_id': ROOM_NOT_IN_PROPERTY})

    with transaction.atomic():
        if moving:
            _claim_room(new_room)

        try:
            tenant = Tenant.objects.select_for_update().get(id=tenant.id)
        except Tenant.DoesNotExist:
            raise TenantNotFoundError()

        for field in EDITABLE_FIELDS:
            if field in fields and fields[field] is not None:
                setattr(tenant, field, fields[field])
        _check_lease(tenant.lease_start, tenant.lease_end)

        old_room_id = tenant.room_id
        old_property_id = Room.objects.values_list('property_id', flat=True).get(id=old_room_id)
        if moving:
            tenant.room = new_room
            _free_room(old_room_id)

        try:
            tenant.save()
        except IntegrityError:
            raise RoomUnavailableError()

        if moving:
            refresh_occupancy_counters(old_property_id, new_room.property_id)

    if moving:
        logger.info("Tenant moved: %s from room %s to %s", tenant.id, old_room_id, new_room.id)
    else:
        logger.info("Tenant updated: %s", tenant.id)
    return tenant


def release_tenant(*, tenant_id: UUID, caller: User) -> None:
    """
    Delete a tenant and free their room. Their payments go with them.

    Raises:
        TenantNotFoundError / TenantAccessDeniedError: lookup failures
    """
    tenant = get_tenant(tenant_id=tenant_id, caller=caller)

    with transaction.atomic():
        try:
            tenant = (
                Tenant.objects
                .select_for_update()
                .select_related('room')
                .get(id=tenant.id)
            )
        except Tenant.DoesNotExist:
            raise TenantNotFoundError()

        room_id = tenant.room_id
        property_id = tenant.room.property_id
        tenant.delete()
        _free_room(room_id)
        refresh_occupancy_counters(property_id)

    logger.info("Tenant released: %s, room %s is available", tenant_id, room_id)


@transaction.atomic
def resync_room_availability(*, dry_run: bool = False) -> dict:
    """
    Recompute every room's availability and every property's counter from
    tenant rows. Used to repair data written before the occupancy rules.

    Returns:
        dict with the ids of rooms marked occupied/vacant and the number of
        properties whose counter changed
    """
    occupied_ids = set(Tenant.objects.values_list('room_id', flat=True))

    to_occupy = list(
        Room.objects.filter(id__in=occupied_ids, is_available=True)
        .values_list('id', flat=True)
    )
    to_free = list(
        Room.objects.filter(is_available=False)
        .exclude(id__in=occupied_ids)
        .values_list('id', flat=True)
    )

    counters_changed = 0
    if not dry_run:
        now = timezone.now()
        Room.objects.filter(id__in=to_occupy).update(is_available=False, updated_at=now)
        Room.objects.filter(id__in=to_free).update(is_available=True, updated_at=now)
        for prop in Property.objects.all():
            before = prop.occupied_rooms
            if prop.refresh_occupied_rooms() != before:
                counters_changed += 1
    else:
        for prop in Property.objects.all():
            actual = prop.rooms.filter(id__in=occupied_ids).count()
            if actual != prop.occupied_rooms:
                counters_changed += 1

    if to_occupy or to_free:
        logger.warning(
            "Room availability resync: %d marked occupied, %d marked vacant%s",
            len(to_occupy), len(to_free), ' (dry run)' if dry_run else '',
        )

    return {
        'marked_occupied': to_occupy,
        'marked_vacant': to_free,
        'counters_changed': counters_changed,
    }
