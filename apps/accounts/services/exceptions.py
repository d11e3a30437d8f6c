"""
Account errors.

They plug into the shared taxonomy, so views let them propagate and the
API exception handler renders ``{"error": ...}`` with the right status.
"""
from rest_framework.exceptions import APIException

from apps.common.exceptions import BusinessRuleError, ForbiddenError


class EmailTakenError(BusinessRuleError):
    default_detail = 'An account with this email already exists.'
    default_code = 'email_taken'


class InvalidCredentialsError(APIException):
    """Unknown email or wrong password; the two are not told apart."""
    status_code = 401
    default_detail = 'Invalid credentials'
    default_code = 'invalid_credentials'


class InactiveAccountError(ForbiddenError):
    default_detail = 'Account is deactivated'
    default_code = 'account_inactive'
