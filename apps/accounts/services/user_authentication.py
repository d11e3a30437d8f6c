"""Email/password login."""

import logging

from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone

from .exceptions import InvalidCredentialsError, InactiveAccountError

User = get_user_model()
logger = logging.getLogger(__name__)


@transaction.atomic
def authenticate_user(*, email: str, password: str) -> User:
    """
    Check credentials and stamp ``last_login``.

    Emails match case-insensitively. The row is locked so two logins of
    one account don't race on ``last_login``.

    Raises:
        InvalidCredentialsError: Unknown email or wrong password
        InactiveAccountError: Correct password on a deactivated account
    """
    user = (
        User.objects
        .select_for_update()
        .filter(email__iexact=email.strip())
        .first()
    )
    if user is None or not user.check_password(password):
        logger.warning("Failed login for %s", email)
        raise InvalidCredentialsError()

    if not user.is_active:
        logger.warning("Login attempt on deactivated account %s", user.id)
        raise InactiveAccountError()

    user.last_login = timezone.now()
    user.save(update_fields=['last_login'])
    logger.info("User logged in: %s (%s)", user.id, user.role)
    return user
