from decimal import Decimal

import pytest
from rest_framework.exceptions import ValidationError

from apps.payments.models import Payment, PaymentStatus, PaymentType
from apps.payments.services import (
    PaymentNotFoundError,
    PaymentAccessDeniedError,
    PaymentLockedError,
    InvalidTransitionError,
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
from apps.tenants.services import TenantNotFoundError

MISSING_ID = '00000000-0000-0000-0000-000000000000'


def status_of(payment):
    return Payment.objects.values_list('status', flat=True).get(id=payment.id)


# =============================================================================
# Creation
# =============================================================================

@pytest.mark.django_db
class TestCreatePayment:

    def test_defaults_to_pending(self, landlord, tenant):
        payment = create_payment(
            caller=landlord,
            tenant_id=tenant.id,
            amount=Decimal('750.00'),
            payment_type=PaymentType.MAINTENANCE,
        )

        assert payment.status == PaymentStatus.PENDING
        assert payment.created_by == landlord
        assert payment.reviewed_by is None

    def test_tenant_claims_rent(self, tenant_user, tenant):
        payment = create_payment(
            caller=tenant_user,
            tenant_id=tenant.id,
            amount=Decimal('5000.00'),
            payment_type=PaymentType.RENT,
            status=PaymentStatus.WAITING_APPROVAL,
        )
        assert payment.status == PaymentStatus.WAITING_APPROVAL

    def test_rent_claim_must_match_rent(self, tenant_user, tenant):
        with pytest.raises(ValidationError) as exc_info:
            create_payment(
                caller=tenant_user,
                tenant_id=tenant.id,
                amount=Decimal('4000.00'),
                payment_type=PaymentType.RENT,
                status=PaymentStatus.WAITING_APPROVAL,
            )
        assert 'amount' in exc_info.value.detail
        assert not Payment.objects.exists()

    @pytest.mark.parametrize('initial', [
        PaymentStatus.PAID, PaymentStatus.FAILED, PaymentStatus.REFUNDED,
    ])
    def test_non_admin_cannot_start_closed(self, landlord, tenant, initial):
        with pytest.raises(InvalidTransitionError):
            create_payment(
                caller=landlord,
                tenant_id=tenant.id,
                amount=tenant.rent_amount,
                payment_type=PaymentType.RENT,
                status=initial,
            )
        assert not Payment.objects.exists()

    def test_admin_records_paid_entry(self, admin_user, tenant):
        payment = create_payment(
            caller=admin_user,
            tenant_id=tenant.id,
            amount=tenant.rent_amount,
            payment_type=PaymentType.RENT,
            status=PaymentStatus.PAID,
        )

        assert payment.status == PaymentStatus.PAID
        assert payment.reviewed_by == admin_user
        assert payment.reviewed_at is not None

    def test_stranger_forbidden(self, other_landlord, tenant):
        with pytest.raises(PaymentAccessDeniedError):
            create_payment(
                caller=other_landlord,
                tenant_id=tenant.id,
                amount=Decimal('100'),
                payment_type=PaymentType.OTHER,
            )

    def test_missing_tenant(self, landlord):
        with pytest.raises(TenantNotFoundError):
            create_payment(
                caller=landlord,
                tenant_id=MISSING_ID,
                amount=Decimal('100'),
                payment_type=PaymentType.OTHER,
            )

    def test_pay_rent_uses_current_rent(self, tenant_user, tenant):
        payment = pay_rent(caller=tenant_user, tenant_id=tenant.id, note='March')

        assert payment.amount == tenant.rent_amount
        assert payment.payment_type == PaymentType.RENT
        assert payment.status == PaymentStatus.WAITING_APPROVAL
        assert payment.note == 'March'

    def test_pay_rent_by_stranger(self, other_landlord, tenant):
        with pytest.raises(PaymentAccessDeniedError):
            pay_rent(caller=other_landlord, tenant_id=tenant.id)


# =============================================================================
# Transitions
# =============================================================================

@pytest.mark.django_db
class TestTransitions:

    def test_rent_claim_approved_by_owner(self, tenant_user, landlord, other_landlord, tenant):
        """Tenant claims rent, a stranger is refused, the owner approves."""
        payment = create_payment(
            caller=tenant_user,
            tenant_id=tenant.id,
            amount=Decimal('5000'),
            payment_type=PaymentType.RENT,
            status=PaymentStatus.WAITING_APPROVAL,
        )

        with pytest.raises(PaymentAccessDeniedError):
            approve_payment(payment_id=payment.id, caller=other_landlord)
        assert status_of(payment) == PaymentStatus.WAITING_APPROVAL

        approved = approve_payment(payment_id=payment.id, caller=landlord)

        assert approved.status == PaymentStatus.PAID
        assert approved.reviewed_by == landlord
        assert status_of(payment) == PaymentStatus.PAID

    def test_tenant_submits(self, tenant_user, pending_payment):
        payment = submit_payment(payment_id=pending_payment.id, caller=tenant_user)
        assert payment.status == PaymentStatus.WAITING_APPROVAL

    def test_tenant_cannot_approve_own_claim(self, tenant_user, waiting_payment):
        with pytest.raises(PaymentAccessDeniedError):
            approve_payment(payment_id=waiting_payment.id, caller=tenant_user)
        assert status_of(waiting_payment) == PaymentStatus.WAITING_APPROVAL

    def test_admin_approves(self, admin_user, waiting_payment):
        payment = approve_payment(payment_id=waiting_payment.id, caller=admin_user)
        assert payment.status == PaymentStatus.PAID

    def test_decline(self, landlord, waiting_payment):
        payment = decline_payment(payment_id=waiting_payment.id, caller=landlord)

        assert payment.status == PaymentStatus.FAILED
        assert payment.reviewed_at is not None

    def test_cannot_approve_pending(self, landlord, pending_payment):
        with pytest.raises(InvalidTransitionError):
            approve_payment(payment_id=pending_payment.id, caller=landlord)
        assert status_of(pending_payment) == PaymentStatus.PENDING

    def test_cannot_approve_twice(self, landlord, waiting_payment):
        approve_payment(payment_id=waiting_payment.id, caller=landlord)

        with pytest.raises(InvalidTransitionError):
            approve_payment(payment_id=waiting_payment.id, caller=landlord)

    def test_cannot_resubmit_paid(self, tenant_user, paid_payment):
        with pytest.raises(InvalidTransitionError):
            submit_payment(payment_id=paid_payment.id, caller=tenant_user)
        assert status_of(paid_payment) == PaymentStatus.PAID

    def test_stranger_gets_forbidden_before_state_check(self, other_landlord, paid_payment):
        with pytest.raises(PaymentAccessDeniedError):
            approve_payment(payment_id=paid_payment.id, caller=other_landlord)

    def test_missing_payment(self, landlord):
        with pytest.raises(PaymentNotFoundError):
            approve_payment(payment_id=MISSING_ID, caller=landlord)

    def test_admin_forces_refund(self, admin_user, paid_payment):
        payment = force_payment_status(
            payment_id=paid_payment.id,
            caller=admin_user,
            status=PaymentStatus.REFUNDED,
            note='Moved out early',
        )

        assert payment.status == PaymentStatus.REFUNDED
        assert payment.note == 'Moved out early'
        assert payment.reviewed_by == admin_user

    def test_admin_reopens_payment(self, admin_user, paid_payment):
        payment = force_payment_status(
            payment_id=paid_payment.id, caller=admin_user, status=PaymentStatus.PENDING,
        )
        assert payment.status == PaymentStatus.PENDING

    def test_landlord_cannot_force(self, landlord, paid_payment):
        with pytest.raises(PaymentAccessDeniedError):
            force_payment_status(
                payment_id=paid_payment.id, caller=landlord, status=PaymentStatus.REFUNDED,
            )
        assert status_of(paid_payment) == PaymentStatus.PAID


# =============================================================================
# Generic update / delete
# =============================================================================

@pytest.mark.django_db
class TestUpdatePayment:

    def test_edit_pending(self, landlord, deposit_payment):
        payment = update_payment(
            payment_id=deposit_payment.id, caller=landlord, amount=Decimal('12000.00'),
        )
        assert payment.amount == Decimal('12000.00')

    def test_fields_locked_after_submission(self, landlord, waiting_payment):
        with pytest.raises(PaymentLockedError):
            update_payment(payment_id=waiting_payment.id, caller=landlord, note='changed')

    def test_admin_edits_closed_payment(self, admin_user, paid_payment):
        payment = update_payment(payment_id=paid_payment.id, caller=admin_user, note='Cash')
        assert payment.note == 'Cash'

    def test_status_follows_edges(self, tenant_user, pending_payment):
        payment = update_payment(
            payment_id=pending_payment.id,
            caller=tenant_user,
            status=PaymentStatus.WAITING_APPROVAL,
        )
        assert payment.status == PaymentStatus.WAITING_APPROVAL

    def test_status_cannot_skip_approval(self, landlord, pending_payment):
        with pytest.raises(InvalidTransitionError):
            update_payment(
                payment_id=pending_payment.id, caller=landlord, status=PaymentStatus.PAID,
            )
        assert status_of(pending_payment) == PaymentStatus.PENDING

    def test_status_edge_is_authorized(self, tenant_user, waiting_payment):
        with pytest.raises(PaymentAccessDeniedError):
            update_payment(
                payment_id=waiting_payment.id, caller=tenant_user, status=PaymentStatus.PAID,
            )
        assert status_of(waiting_payment) == PaymentStatus.WAITING_APPROVAL

    def test_refund_only_through_force(self, admin_user, paid_payment):
        with pytest.raises(InvalidTransitionError):
            update_payment(
                payment_id=paid_payment.id, caller=admin_user, status=PaymentStatus.REFUNDED,
            )

    def test_same_status_is_noop(self, landlord, paid_payment):
        payment = update_payment(
            payment_id=paid_payment.id, caller=landlord, status=PaymentStatus.PAID,
        )
        assert payment.status == PaymentStatus.PAID

    def test_delete_by_landlord(self, landlord, pending_payment):
        delete_payment(payment_id=pending_payment.id, caller=landlord)
        assert not Payment.objects.filter(id=pending_payment.id).exists()

    def test_tenant_cannot_delete(self, tenant_user, pending_payment):
        with pytest.raises(PaymentAccessDeniedError):
            delete_payment(payment_id=pending_payment.id, caller=tenant_user)
        assert Payment.objects.filter(id=pending_payment.id).exists()


@pytest.mark.django_db
class TestVisibility:

    def test_visible_to_linked_accounts(self, landlord, tenant_user, admin_user, pending_payment):
        for user in (landlord, tenant_user, admin_user):
            assert list(visible_payments(user)) == [pending_payment]

    def test_hidden_from_strangers(self, other_landlord, pending_payment):
        assert not visible_payments(other_landlord).exists()
        with pytest.raises(PaymentAccessDeniedError):
            get_payment(payment_id=pending_payment.id, caller=other_landlord)
