"""
UPI payment payload generation.

UPI deep links are what Indian banking apps scan from a QR code::

    upi://pay?pa=<payee VPA>&pn=<payee name>&am=<amount>&cu=INR&tn=<note>

Fields:
    - pa: payee virtual payment address (e.g. ``landlord@okbank``)
    - pn: payee name, percent-encoded
    - am: amount with two decimals (optional; the payer types it otherwise)
    - cu: currency code
    - tn: transaction note (optional)

Only the payload string is produced here; rendering it as an image is left
to the client.
"""

import logging
from decimal import Decimal
from typing import Optional
from urllib.parse import quote, urlencode
from uuid import UUID

from django.conf import settings
from django.db import transaction

from apps.accounts.models import User
from apps.properties.models import Property

from .exceptions import PropertyNotFoundError, PropertyAccessDeniedError
from .property_management import can_manage_property, get_property, is_property_tenant

logger = logging.getLogger(__name__)


class UPIPaymentGenerator:
    """Build UPI ``pay`` deep links for properties and individual payments."""

    @staticmethod
    def generate_upi_string(
        payee_address: str,
        payee_name: str,
        amount: Optional[Decimal] = None,
        note: str = '',
        currency: Optional[str] = None,
    ) -> str:
        """
        Generate a UPI payment URI.

        Example::

            UPIPaymentGenerator.generate_upi_string('pg@upi', 'Sunshine Apartments')
            # 'upi://pay?pa=pg@upi&pn=Sunshine%20Apartments&cu=INR'
        """
        params = [('pa', payee_address), ('pn', payee_name)]
        if amount is not None:
            params.append(('am', f'{amount:.2f}'))
        params.append(('cu', currency or settings.PAYMENT_CURRENCY))
        if note:
            params.append(('tn', note))
        return 'upi://pay?' + urlencode(params, quote_via=quote, safe='@')

    @staticmethod
    def payee_address_for(prop: Property) -> str:
        return prop.upi_id or settings.PAYMENT_UPI_ID

    @classmethod
    def generate_for_property(cls, prop: Property) -> str:
        """Compute and cache the property's payment payload."""
        prop.payment_qr_code = cls.generate_upi_string(
            cls.payee_address_for(prop),
            prop.name,
        )
        prop.save(update_fields=['payment_qr_code', 'updated_at'])
        return prop.payment_qr_code


def get_property_payment_qr(*, property_id: UUID, caller: User) -> Property:
    """
    Return the property with its payment payload, generating it on first read.

    Visible to the property's managers and to tenants living in it.
    """
    try:
        prop = Property.objects.get(id=property_id)
    except Property.DoesNotExist:
        raise PropertyNotFoundError()

    if not (can_manage_property(caller, prop) or is_property_tenant(caller, prop)):
        raise PropertyAccessDeniedError('You do not have access to this property.')

    if not prop.payment_qr_code:
        with transaction.atomic():
            UPIPaymentGenerator.generate_for_property(prop)
        logger.info("Payment QR payload generated for property %s", prop.id)

    return prop


@transaction.atomic
def regenerate_property_payment_qr(*, property_id: UUID, caller: User) -> Property:
    """Rebuild the cached payload, for example after changing the UPI ID."""
    prop = get_property(property_id=property_id, caller=caller)
    UPIPaymentGenerator.generate_for_property(prop)
    logger.info("Payment QR payload regenerated for property %s", prop.id)
    return prop
