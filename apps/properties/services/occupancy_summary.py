"""
Occupancy Summary
=================

Read-only figures for the landlord dashboard, computed from room, tenant
and payment rows at query time:

- rooms on record, occupied and available, and the occupancy rate
- monthly rent roll (sum of current tenants' rent)
- payments collected (PAID) and awaiting approval

Example::

    from apps.properties.services import get_property_occupancy

    summary = get_property_occupancy(property_id=prop.id, caller=request.user)
    print(f"{summary['occupied_rooms']}/{summary['room_count']} let")
"""

from decimal import Decimal, ROUND_HALF_UP
from uuid import UUID

from django.db.models import Count, Q, Sum, DecimalField, Value
from django.db.models.functions import Coalesce

from apps.accounts.models import User
from apps.payments.models import Payment, PaymentStatus
from apps.properties.models import Property
from apps.tenants.models import Tenant

from .property_management import get_property, visible_properties

ZERO = Decimal('0.00')


def _money_sum(field, **filters):
    total = Sum(field, filter=Q(**filters)) if filters else Sum(field)
    return Coalesce(total, Value(ZERO), output_field=DecimalField(max_digits=12, decimal_places=2))


def _rate(occupied, total):
    if not total:
        return ZERO
    return (Decimal(occupied) * 100 / Decimal(total)).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)


def _summarize(property_ids):
    """Aggregate counts and money figures over a set of properties."""
    rooms = (
        Property.objects
        .filter(id__in=property_ids)
        .aggregate(
            room_count=Count('rooms'),
            occupied=Count('rooms', filter=Q(rooms__is_available=False)),
        )
    )
    rent_roll = (
        Tenant.objects
        .filter(room__property_id__in=property_ids)
        .aggregate(total=_money_sum('rent_amount'))['total']
    )
    payments = (
        Payment.objects
        .filter(tenant__room__property_id__in=property_ids)
        .aggregate(
            collected=_money_sum('amount', status=PaymentStatus.PAID),
            awaiting=_money_sum('amount', status=PaymentStatus.WAITING_APPROVAL),
            awaiting_count=Count('id', filter=Q(status=PaymentStatus.WAITING_APPROVAL)),
        )
    )

    room_count = rooms['room_count']
    occupied = rooms['occupied']
    return {
        'room_count': room_count,
        'occupied_rooms': occupied,
        'available_rooms': room_count - occupied,
        'occupancy_rate': _rate(occupied, room_count),
        'monthly_rent_roll': rent_roll,
        'collected_total': payments['collected'],
        'awaiting_approval_total': payments['awaiting'],
        'awaiting_approval_count': payments['awaiting_count'],
    }


def get_property_occupancy(*, property_id: UUID, caller: User) -> dict:
    """Summary of one property the caller manages."""
    prop = get_property(property_id=property_id, caller=caller)
    summary = _summarize([prop.id])
    summary.update({
        'property_id': prop.id,
        'property_name': prop.name,
        'total_rooms': prop.total_rooms,
    })
    return summary


def get_portfolio_occupancy(*, caller: User) -> dict:
    """Summary across every property the caller can see, with a per-property breakdown."""
    properties = list(visible_properties(caller).order_by('name'))
    ids = [prop.id for prop in properties]

    summary = _summarize(ids)
    summary['property_count'] = len(properties)
    summary['total_rooms'] = sum(prop.total_rooms for prop in properties)
    summary['properties'] = [
        get_property_occupancy(property_id=prop.id, caller=caller)
        for prop in properties
    ]
    return summary
