"""Account registration, admin provisioning and login."""

from .exceptions import EmailTakenError, InvalidCredentialsError, InactiveAccountError
from .user_authentication import authenticate_user
from .user_registration import register_user, create_admin_user

__all__ = [
    'EmailTakenError',
    'InvalidCredentialsError',
    'InactiveAccountError',
    'register_user',
    'create_admin_user',
    'authenticate_user',
]
