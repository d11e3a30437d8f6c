from decimal import Decimal

from rest_framework import serializers

from apps.accounts.serializers import UserMinimalSerializer
from apps.properties.services import UPIPaymentGenerator
from .models import Payment, PaymentStatus, PaymentType


# =============================================================================
# Input Serializers
# =============================================================================

class PaymentCreateSerializer(serializers.Serializer):
    """
    Validate payment creation.

    Fields:
        tenant_id (UUID): Tenant the payment belongs to
        amount (Decimal): Positive amount
        payment_type (str): RENT, SECURITY_DEPOSIT, MAINTENANCE or OTHER
        status (str): Optional initial status (default PENDING)
        note (str): Optional note
    """

    tenant_id = serializers.UUIDField()
    amount = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0.01'))
    payment_type = serializers.ChoiceField(choices=PaymentType.choices)
    status = serializers.ChoiceField(choices=PaymentStatus.choices, required=False)
    note = serializers.CharField(max_length=500, required=False, allow_blank=True)


class PaymentUpdateSerializer(serializers.Serializer):
    """Every field optional; ``status`` follows the ordinary transitions."""

    amount = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal('0.01'), required=False
    )
    payment_type = serializers.ChoiceField(choices=PaymentType.choices, required=False)
    status = serializers.ChoiceField(choices=PaymentStatus.choices, required=False)
    note = serializers.CharField(max_length=500, required=False, allow_blank=True)


class PayRentInputSerializer(serializers.Serializer):
    tenant_id = serializers.UUIDField()
    note = serializers.CharField(max_length=500, required=False, allow_blank=True)


class ForceStatusInputSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=PaymentStatus.choices)
    note = serializers.CharField(max_length=500, required=False, allow_blank=True)


class PaymentFilterSerializer(serializers.Serializer):
    """
    Query Parameters:
        tenant (UUID): Payments of one tenant
        status (str): Filter by status
        payment_type (str): Filter by type
    """

    tenant = serializers.UUIDField(required=False)
    status = serializers.ChoiceField(choices=PaymentStatus.choices, required=False)
    payment_type = serializers.ChoiceField(choices=PaymentType.choices, required=False)


# =============================================================================
# Output Serializers
# =============================================================================

class PaymentSerializer(serializers.ModelSerializer):
    """
    Payment with its tenant summary.

    ``upi_payload`` is filled in while the payment is still open, so the
    tenant can pay the exact amount by scanning it.
    """

    tenant = serializers.SerializerMethodField()
    reviewed_by = UserMinimalSerializer(read_only=True)
    upi_payload = serializers.SerializerMethodField()

    class Meta:
        model = Payment
        fields = [
            'id',
            'tenant',
            'amount',
            'payment_type',
            'status',
            'payment_date',
            'note',
            'reviewed_by',
            'reviewed_at',
            'upi_payload',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_tenant(self, obj):
        tenant = obj.tenant
        return {
            'id': str(tenant.id),
            'name': tenant.name,
            'room_number': tenant.room.room_number,
            'property_id': str(tenant.room.property_id),
            'property_name': tenant.room.property.name,
        }

    def get_upi_payload(self, obj):
        if obj.status not in (PaymentStatus.PENDING, PaymentStatus.WAITING_APPROVAL):
            return None
        prop = obj.tenant.room.property
        return UPIPaymentGenerator.generate_upi_string(
            UPIPaymentGenerator.payee_address_for(prop),
            prop.name,
            amount=obj.amount,
            note=f'{obj.get_payment_type_display()} - {obj.tenant.name}',
        )
