"""
Room management service.

Rooms are managed by the owner of their property only. ``is_available``
mirrors occupancy, so it may be sent but never contradict it; the tenant
services are the only writers that flip it.
"""

import logging
from decimal import Decimal
from typing import Optional
from uuid import UUID

from django.db import transaction, IntegrityError
from django.db.models import ProtectedError, QuerySet
from rest_framework.exceptions import ValidationError

from apps.accounts.models import User
from apps.properties.models import Property, Room
from apps.tenants.models import Tenant

from .exceptions import (
    PropertyNotFoundError,
    RoomNotFoundError,
    RoomAccessDeniedError,
    RoomOccupiedError,
)
from .property_management import refresh_occupancy_counters

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ('room_number', 'floor', 'type', 'capacity', 'price')

DUPLICATE_ROOM_NUMBER = 'A room with this number already exists in the property.'


def can_manage_room(user: User, room: Room) -> bool:
    return room.property.owner_id == user.id


def visible_rooms(user: User) -> QuerySet:
    return (
        Room.objects
        .select_related('property', 'tenant')
        .filter(property__owner=user)
    )


def _get_owned_property(property_id: UUID, caller: User) -> Property:
    try:
        prop = Property.objects.get(id=property_id)
    except Property.DoesNotExist:
        raise PropertyNotFoundError()
    if prop.owner_id != caller.id:
        raise RoomAccessDeniedError('You do not own this property.')
    return prop


def _check_availability_flag(is_available: Optional[bool], occupied: bool) -> None:
    if is_available is not None and is_available == occupied:
        expected = 'false' if occupied else 'true'
        raise ValidationError({
            'is_available': f'Must be {expected}: availability follows tenant occupancy.'
        })


def get_room(*, room_id: UUID, caller: User) -> Room:
    """
    Fetch a room in one of the caller's properties.

    Raises:
        RoomNotFoundError: If the room doesn't exist
        RoomAccessDeniedError: If the caller doesn't own its property
    """
    try:
        room = Room.objects.select_related('property').get(id=room_id)
    except Room.DoesNotExist:
        raise RoomNotFoundError()

    if not can_manage_room(caller, room):
        raise RoomAccessDeniedError()

    return room


@transaction.atomic
def create_room(
    *,
    caller: User,
    property_id: UUID,
    room_number: str,
    type: str,
    capacity: int,
    price: Decimal,
    floor: str = '',
    is_available: Optional[bool] = None,
) -> Room:
    """
    Add a vacant room to one of the caller's properties.

    Raises:
        PropertyNotFoundError: If the property doesn't exist
        RoomAccessDeniedError: If the caller doesn't own the property
        ValidationError: Duplicate room number, or is_available=false
    """
    prop = _get_owned_property(property_id, caller)
    _check_availability_flag(is_available, occupied=False)

    if prop.rooms.filter(room_number=room_number).exists():
        raise ValidationError({'room_number': DUPLICATE_ROOM_NUMBER})

    try:
        with transaction.atomic():
            room = Room.objects.create(
                property=prop,
                room_number=room_number,
                floor=floor,
                type=type,
                capacity=capacity,
                price=price,
                is_available=True,
            )
    except IntegrityError:
        raise ValidationError({'room_number': DUPLICATE_ROOM_NUMBER})

    logger.info("Room created: %s in property %s", room.id, prop.id)
    return room


@transaction.atomic
def update_room(*, room_id: UUID, caller: User, **fields) -> Room:
    """
    Update room details, optionally moving it to another owned property.

    An occupied room cannot move: its tenant was assigned against the
    current property.

    Raises:
        RoomNotFoundError / RoomAccessDeniedError: lookup failures
        RoomOccupiedError: Moving a room that has a tenant
        ValidationError: Duplicate number or a contradicting is_available
    """
    room = get_room(room_id=room_id, caller=caller)
    # Lock the row so a concurrent assignment cannot interleave
    room = Room.objects.select_for_update().select_related('property').get(id=room.id)
    occupied = Tenant.objects.filter(room=room).exists()

    _check_availability_flag(fields.get('is_available'), occupied)

    old_property_id = room.property_id
    new_property_id = fields.get('property_id')
    if new_property_id and new_property_id != old_property_id:
        if occupied:
            raise RoomOccupiedError('An occupied room cannot move to another property.')
        room.property = _get_owned_property(new_property_id, caller)

    for field in EDITABLE_FIELDS:
        if field in fields:
            setattr(room, field, fields[field])

    duplicate = (
        Room.objects
        .filter(property_id=room.property_id, room_number=room.room_number)
        .exclude(id=room.id)
        .exists()
    )
    if duplicate:
        raise ValidationError({'room_number': DUPLICATE_ROOM_NUMBER})

    room.save()

    if room.property_id != old_property_id:
        refresh_occupancy_counters(old_property_id, room.property_id)

    logger.info("Room updated: %s", room.id)
    return room


@transaction.atomic
def delete_room(*, room_id: UUID, caller: User) -> None:
    """
    Delete a vacant room.

    Raises:
        RoomOccupiedError: If a tenant still lives in it
    """
    room = get_room(room_id=room_id, caller=caller)
    room = Room.objects.select_for_update().get(id=room.id)

    if Tenant.objects.filter(room=room).exists():
        logger.warning("Refused to delete occupied room %s", room.id)
        raise RoomOccupiedError()

    property_id = room.property_id
    try:
        room.delete()
    except ProtectedError:
        raise RoomOccupiedError()

    refresh_occupancy_counters(property_id)
    logger.info("Room deleted: %s from property %s", room_id, property_id)
