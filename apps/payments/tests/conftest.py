from decimal import Decimal

import pytest
from apps.payments.models import Payment, PaymentStatus, PaymentType


def make_payment(tenant, status=PaymentStatus.PENDING, amount=None, **extra):
    return Payment.objects.create(
        tenant=tenant,
        amount=amount or tenant.rent_amount,
        payment_type=extra.pop('payment_type', PaymentType.RENT),
        status=status,
        **extra
    )


@pytest.fixture
def pending_payment(tenant, landlord):
    return make_payment(tenant, created_by=landlord)


@pytest.fixture
def waiting_payment(tenant, tenant_user):
    return make_payment(tenant, PaymentStatus.WAITING_APPROVAL, created_by=tenant_user)


@pytest.fixture
def paid_payment(tenant, landlord):
    return make_payment(tenant, PaymentStatus.PAID, reviewed_by=landlord)


@pytest.fixture
def deposit_payment(tenant, landlord):
    return make_payment(
        tenant,
        amount=Decimal('10000.00'),
        payment_type=PaymentType.SECURITY_DEPOSIT,
        created_by=landlord,
    )
