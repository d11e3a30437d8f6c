"""Services for the payment lifecycle."""

from .exceptions import (
    PaymentNotFoundError,
    PaymentAccessDeniedError,
    PaymentLockedError,
    InvalidTransitionError,
)
from .payment_lifecycle import (
    is_occupant,
    is_tenant_side,
    can_access_payments,
    can_review_payments,
    can_delete_payments,
    visible_payments,
    get_payment,
    create_payment,
    pay_rent,
    submit_payment,
    approve_payment,
    decline_payment,
    force_payment_status,
    update_payment,
    delete_payment,
)

__all__ = [
    # Exceptions
    'PaymentNotFoundError',
    'PaymentAccessDeniedError',
    'PaymentLockedError',
    'InvalidTransitionError',
    # Access rules
    'is_occupant',
    'is_tenant_side',
    'can_access_payments',
    'can_review_payments',
    'can_delete_payments',
    'visible_payments',
    # Operations
    'get_payment',
    'create_payment',
    'pay_rent',
    'submit_payment',
    'approve_payment',
    'decline_payment',
    'force_payment_status',
    'update_payment',
    'delete_payment',
]
