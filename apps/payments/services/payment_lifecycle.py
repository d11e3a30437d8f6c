"""
Payment lifecycle service.

Status flow::

    PENDING --submit--> WAITING_APPROVAL --approve--> PAID
                                         \--decline--> FAILED

Who may do what:

- tenant side (the tenant's own login, matched by email, or the landlord
  who keeps the tenant record): create, pay rent, submit
- reviewers (admin or the owner of the tenant's property): approve, decline
- admin: manual entries in any status and ``force_payment_status``

Transitions lock the payment row and write only that row. A caller outside
the allowed set gets ``PaymentAccessDeniedError``; an edge that doesn't
exist gets ``InvalidTransitionError``. Either way nothing changes.
"""

import logging
from decimal import Decimal
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.db.models import Q, QuerySet
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from apps.accounts.models import User
from apps.payments.models import Payment, PaymentStatus, PaymentType
from apps.tenants.models import Tenant
from apps.tenants.services import TenantNotFoundError

from .exceptions import (
    PaymentNotFoundError,
    PaymentAccessDeniedError,
    PaymentLockedError,
    InvalidTransitionError,
)

logger = logging.getLogger(__name__)

REVIEW_STATUSES = (PaymentStatus.PAID, PaymentStatus.FAILED, PaymentStatus.REFUNDED)
EDITABLE_FIELDS = ('amount', 'payment_type', 'note')


# =============================================================================
# Access rules
# =============================================================================

def is_occupant(user: User, tenant: Tenant) -> bool:
    """The tenant's own login."""
    return tenant.email.lower() == user.email.lower()


def is_tenant_side(user: User, tenant: Tenant) -> bool:
    return tenant.owner_id == user.id or is_occupant(user, tenant)


def is_property_owner(user: User, tenant: Tenant) -> bool:
    return tenant.room.property.owner_id == user.id


def can_access_payments(user: User, tenant: Tenant) -> bool:
    return (
        user.is_admin
        or tenant.owner_id == user.id
        or is_property_owner(user, tenant)
        or is_occupant(user, tenant)
    )


def can_review_payments(user: User, tenant: Tenant) -> bool:
    return user.is_admin or is_property_owner(user, tenant)


def can_delete_payments(user: User, tenant: Tenant) -> bool:
    return user.is_admin or tenant.owner_id == user.id


def visible_payments(user: User) -> QuerySet:
    queryset = Payment.objects.select_related(
        'tenant', 'tenant__room', 'tenant__room__property', 'reviewed_by'
    )
    if user.is_admin:
        return queryset
    return queryset.filter(
        Q(tenant__owner=user)
        | Q(tenant__room__property__owner=user)
        | Q(tenant__email__iexact=user.email)
    )


def _authorize_tenant_side(caller: User, tenant: Tenant, action: str) -> None:
    if not is_tenant_side(caller, tenant):
        raise PaymentAccessDeniedError(f'Only the tenant can {action} this payment.')


def _authorize_review(caller: User, tenant: Tenant, action: str) -> None:
    if not can_review_payments(caller, tenant):
        raise PaymentAccessDeniedError(
            f'Only the property owner or an admin can {action} this payment.'
        )


def _authorize_admin(caller: User, tenant: Tenant, action: str) -> None:
    if not caller.is_admin:
        raise PaymentAccessDeniedError(f'Only an admin can {action} this payment.')


# Ordinary edges: (from, to) -> (authorization check, verb used in messages)
TRANSITIONS = {
    (PaymentStatus.PENDING, PaymentStatus.WAITING_APPROVAL): (_authorize_tenant_side, 'submit'),
    (PaymentStatus.WAITING_APPROVAL, PaymentStatus.PAID): (_authorize_review, 'approve'),
    (PaymentStatus.WAITING_APPROVAL, PaymentStatus.FAILED): (_authorize_review, 'decline'),
}


# =============================================================================
# Lookups
# =============================================================================

def _get_tenant(tenant_id: UUID, caller: User) -> Tenant:
    try:
        tenant = Tenant.objects.select_related('room', 'room__property').get(id=tenant_id)
    except Tenant.DoesNotExist:
        raise TenantNotFoundError()

    if not can_access_payments(caller, tenant):
        raise PaymentAccessDeniedError('You do not have access to this tenant\'s payments.')
    return tenant


def get_payment(*, payment_id: UUID, caller: User) -> Payment:
    """
    Fetch a payment the caller may see.

    Raises:
        PaymentNotFoundError: If the payment doesn't exist
        PaymentAccessDeniedError: If the caller has no link to its tenant
    """
    try:
        payment = (
            Payment.objects
            .select_related('tenant', 'tenant__room', 'tenant__room__property', 'reviewed_by')
            .get(id=payment_id)
        )
    except Payment.DoesNotExist:
        raise PaymentNotFoundError()

    if not can_access_payments(caller, payment.tenant):
        raise PaymentAccessDeniedError()
    return payment


def _lock(payment: Payment) -> Payment:
    try:
        return (
            Payment.objects
            .select_for_update()
            .select_related('tenant', 'tenant__room', 'tenant__room__property')
            .get(id=payment.id)
        )
    except Payment.DoesNotExist:
        raise PaymentNotFoundError()


def _set_status(payment: Payment, target: str, caller: User) -> list:
    """Write the new status on a locked payment; returns the changed fields."""
    payment.status = target
    changed = ['status']
    if target in REVIEW_STATUSES:
        payment.reviewed_by = caller
        payment.reviewed_at = timezone.now()
        changed += ['reviewed_by', 'reviewed_at']
    return changed


def _check_rent_amount(tenant: Tenant, payment_type: str, amount: Decimal) -> None:
    if payment_type == PaymentType.RENT and amount != tenant.rent_amount:
        raise ValidationError({
            'amount': f'Rent payments must match the current rent of {tenant.rent_amount}.'
        })


# =============================================================================
# Operations
# =============================================================================

@transaction.atomic
def create_payment(
    *,
    caller: User,
    tenant_id: UUID,
    amount: Decimal,
    payment_type: str,
    status: Optional[str] = None,
    note: str = '',
) -> Payment:
    """
    Record a payment for a tenant.

    Without ``status`` the payment starts PENDING. WAITING_APPROVAL is the
    tenant's "I have paid" claim; a RENT claim must match the current rent.
    Any other initial status is a manual entry and needs an admin.

    Raises:
        TenantNotFoundError: If the tenant doesn't exist
        PaymentAccessDeniedError: No access to the tenant, or not allowed to claim
        InvalidTransitionError: Non-admin asking for PAID/FAILED/REFUNDED
        ValidationError: RENT claim with the wrong amount
    """
    tenant = _get_tenant(tenant_id, caller)
    status = status or PaymentStatus.PENDING

    if status == PaymentStatus.WAITING_APPROVAL:
        if not caller.is_admin:
            _authorize_tenant_side(caller, tenant, 'submit')
        _check_rent_amount(tenant, payment_type, amount)
    elif status != PaymentStatus.PENDING and not caller.is_admin:
        raise InvalidTransitionError(f'A new payment cannot start as {status}.')

    payment = Payment(
        tenant=tenant,
        amount=amount,
        payment_type=payment_type,
        note=note,
        created_by=caller,
    )
    _set_status(payment, status, caller)
    payment.save()

    logger.info(
        "Payment created: %s for tenant %s (%s, %s)",
        payment.id, tenant.id, payment_type, status,
    )
    return payment


def pay_rent(*, caller: User, tenant_id: UUID, note: str = '') -> Payment:
    """
    Tenant's "I've paid this month's rent" action.

    Creates a RENT payment for the current rent, waiting for approval.
    """
    tenant = _get_tenant(tenant_id, caller)
    _authorize_tenant_side(caller, tenant, 'pay rent for')
    return create_payment(
        caller=caller,
        tenant_id=tenant.id,
        amount=tenant.rent_amount,
        payment_type=PaymentType.RENT,
        status=PaymentStatus.WAITING_APPROVAL,
        note=note,
    )


def _transition(*, payment_id: UUID, caller: User, source: str, target: str) -> Payment:
    authorize, verb = TRANSITIONS[(source, target)]
    payment = get_payment(payment_id=payment_id, caller=caller)
    authorize(caller, payment.tenant, verb)

    with transaction.atomic():
        payment = _lock(payment)
        if payment.status != source:
            logger.warning(
                "Refused to %s payment %s in status %s", verb, payment.id, payment.status
            )
            raise InvalidTransitionError(
                f'Cannot {verb} a payment that is {payment.status}.'
            )
        changed = _set_status(payment, target, caller)
        payment.save(update_fields=changed + ['updated_at'])

    logger.info("Payment %s: %s -> %s by %s", payment.id, source, target, caller.id)
    return payment


def submit_payment(*, payment_id: UUID, caller: User) -> Payment:
    """PENDING -> WAITING_APPROVAL, by the tenant side."""
    return _transition(
        payment_id=payment_id,
        caller=caller,
        source=PaymentStatus.PENDING,
        target=PaymentStatus.WAITING_APPROVAL,
    )


def approve_payment(*, payment_id: UUID, caller: User) -> Payment:
    """WAITING_APPROVAL -> PAID, by the property owner or an admin."""
    return _transition(
        payment_id=payment_id,
        caller=caller,
        source=PaymentStatus.WAITING_APPROVAL,
        target=PaymentStatus.PAID,
    )


def decline_payment(*, payment_id: UUID, caller: User) -> Payment:
    """WAITING_APPROVAL -> FAILED, by the property owner or an admin."""
    return _transition(
        payment_id=payment_id,
        caller=caller,
        source=PaymentStatus.WAITING_APPROVAL,
        target=PaymentStatus.FAILED,
    )


def force_payment_status(*, payment_id: UUID, caller: User, status: str, note: Optional[str] = None) -> Payment:
    """
    Administrative override: set any status, skipping the ordinary edges.

    This is the only way to reach REFUNDED or to reopen a closed payment.
    """
    payment = get_payment(payment_id=payment_id, caller=caller)
    _authorize_admin(caller, payment.tenant, 'override the status of')

    with transaction.atomic():
        payment = _lock(payment)
        previous = payment.status
        changed = _set_status(payment, status, caller)
        if note is not None:
            payment.note = note
            changed.append('note')
        payment.save(update_fields=changed + ['updated_at'])

    logger.warning(
        "Payment %s status forced: %s -> %s by admin %s",
        payment.id, previous, status, caller.id,
    )
    return payment


def update_payment(
    *,
    payment_id: UUID,
    caller: User,
    amount: Optional[Decimal] = None,
    payment_type: Optional[str] = None,
    status: Optional[str] = None,
    note: Optional[str] = None,
) -> Payment:
    """
    Generic edit of a payment.

    Field edits are allowed while PENDING (admins: always). A ``status``
    value must be one of the ordinary edges from the current status and is
    authorized like the matching action; the same status is a no-op.
    Arbitrary status writes go through ``force_payment_status`` only.

    Raises:
        PaymentLockedError: Non-admin editing fields of a non-pending payment
        InvalidTransitionError: ``status`` is not reachable from the current one
        PaymentAccessDeniedError: Caller may not perform the requested edge
    """
    payment = get_payment(payment_id=payment_id, caller=caller)
    edits = {
        field: value
        for field, value in (('amount', amount), ('payment_type', payment_type), ('note', note))
        if value is not None
    }

    with transaction.atomic():
        payment = _lock(payment)
        source = payment.status
        changed = []

        if status is not None and status != source:
            if (source, status) not in TRANSITIONS:
                raise InvalidTransitionError(
                    f'Cannot change a payment from {source} to {status}.'
                )
            authorize, verb = TRANSITIONS[(source, status)]
            authorize(caller, payment.tenant, verb)

        edits = {f: v for f, v in edits.items() if getattr(payment, f) != v}
        if edits:
            if source != PaymentStatus.PENDING and not caller.is_admin:
                raise PaymentLockedError()
            for field, value in edits.items():
                setattr(payment, field, value)
            changed += list(edits)

        if status is not None and status != source:
            changed += _set_status(payment, status, caller)

        if changed:
            payment.save(update_fields=changed + ['updated_at'])

    if changed:
        logger.info("Payment updated: %s (%s)", payment.id, ', '.join(changed))
    return payment


@transaction.atomic
def delete_payment(*, payment_id: UUID, caller: User) -> None:
    """Delete a payment. Admins and the tenant's landlord only."""
    payment = get_payment(payment_id=payment_id, caller=caller)
    if not can_delete_payments(caller, payment.tenant):
        raise PaymentAccessDeniedError('Only the tenant\'s landlord or an admin can delete payments.')

    payment.delete()
    logger.info("Payment deleted: %s by %s", payment_id, caller.id)
