"""Domain exceptions for payment services."""

from apps.common.exceptions import (
    BusinessRuleError,
    ForbiddenError,
    InvalidTransitionError,
    ResourceNotFoundError,
)


class PaymentNotFoundError(ResourceNotFoundError):
    default_detail = 'Payment not found.'
    default_code = 'payment_not_found'


class PaymentAccessDeniedError(ForbiddenError):
    default_detail = 'You do not have access to this payment.'
    default_code = 'payment_forbidden'


class PaymentLockedError(BusinessRuleError):
    """Amount, type and note are frozen once a payment leaves PENDING."""
    default_detail = 'Only pending payments can be edited.'
    default_code = 'payment_locked'


__all__ = [
    'PaymentNotFoundError',
    'PaymentAccessDeniedError',
    'PaymentLockedError',
    'InvalidTransitionError',
]
