"""Services for properties and rooms."""

from .exceptions import (
    PropertyNotFoundError,
    RoomNotFoundError,
    PropertyAccessDeniedError,
    RoomAccessDeniedError,
    RoomOccupiedError,
    PropertyOccupiedError,
)
from .property_management import (
    can_manage_property,
    is_property_tenant,
    visible_properties,
    get_property,
    create_property,
    update_property,
    delete_property,
    refresh_occupancy_counters,
)
from .room_management import (
    can_manage_room,
    visible_rooms,
    get_room,
    create_room,
    update_room,
    delete_room,
)
from .occupancy_summary import get_property_occupancy, get_portfolio_occupancy
from .payment_qr import (
    UPIPaymentGenerator,
    get_property_payment_qr,
    regenerate_property_payment_qr,
)

__all__ = [
    # Exceptions
    'PropertyNotFoundError',
    'RoomNotFoundError',
    'PropertyAccessDeniedError',
    'RoomAccessDeniedError',
    'RoomOccupiedError',
    'PropertyOccupiedError',
    # Property management
    'can_manage_property',
    'is_property_tenant',
    'visible_properties',
    'get_property',
    'create_property',
    'update_property',
    'delete_property',
    'refresh_occupancy_counters',
    # Room management
    'can_manage_room',
    'visible_rooms',
    'get_room',
    'create_room',
    'update_room',
    'delete_room',
    # Occupancy summary
    'get_property_occupancy',
    'get_portfolio_occupancy',
    # Payment QR
    'UPIPaymentGenerator',
    'get_property_payment_qr',
    'regenerate_property_payment_qr',
]
