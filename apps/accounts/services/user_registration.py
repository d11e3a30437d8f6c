"""User registration service."""

import logging

from django.db import transaction, IntegrityError
from django.contrib.auth import get_user_model

from apps.accounts.models import Role
from .exceptions import EmailTakenError

User = get_user_model()
logger = logging.getLogger(__name__)


@transaction.atomic
def register_user(
    *,
    email: str,
    password: str,
    name: str = ""
) -> User:
    """
    Register a new account.

    Self-registration always yields a USER; administrators are created with
    ``createsuperuser`` or the ``create_admin`` command.

    Args:
        email: User's email address
        password: User's password (will be hashed)
        name: Optional display name

    Returns:
        Created User instance

    Raises:
        EmailTakenError: If the email is already taken (any case)
    """
    if User.objects.filter(email__iexact=email).exists():
        raise EmailTakenError()

    try:
        user = User.objects.create_user(
            email=email,
            password=password,
            name=name,
            role=Role.USER,
        )
    except IntegrityError:
        raise EmailTakenError()

    logger.info("User registered: %s", user.id)
    return user


@transaction.atomic
def create_admin_user(*, email: str, password: str, name: str = "") -> User:
    """
    Create a new ADMIN account.

    Existing accounts are never promoted: a role is fixed at creation.

    Raises:
        EmailTakenError: If an account with this email already exists
    """
    if User.objects.filter(email__iexact=email).exists():
        raise EmailTakenError()

    try:
        user = User.objects.create_superuser(email=email, password=password, name=name)
    except IntegrityError:
        raise EmailTakenError()

    logger.info("Admin account created: %s", user.id)
    return user
