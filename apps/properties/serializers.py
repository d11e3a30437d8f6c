from decimal import Decimal

from django.core.validators import RegexValidator
from rest_framework import serializers

from apps.accounts.serializers import UserMinimalSerializer
from .models import Property, Room, RoomType
from .services import UPIPaymentGenerator

upi_id_validator = RegexValidator(
    regex=r'^[\w.\-]{2,256}@[A-Za-z][A-Za-z0-9.\-]{1,63}$',
    message='Enter a valid UPI ID, e.g. name@bank.',
)


# =============================================================================
# Input Serializers
# =============================================================================

class PropertyInputSerializer(serializers.Serializer):
    """
    Validate property create/update payloads.

    ``occupied_rooms`` may be present in the body but is ignored: the
    counter is maintained by the occupancy transactions.
    """

    name = serializers.CharField(max_length=200)
    address = serializers.CharField(max_length=255)
    city = serializers.CharField(max_length=100)
    state = serializers.CharField(max_length=100)
    zip_code = serializers.CharField(max_length=20)
    total_rooms = serializers.IntegerField(min_value=0, required=False, default=0)
    upi_id = serializers.CharField(
        max_length=100,
        required=False,
        allow_blank=True,
        validators=[upi_id_validator],
    )


class RoomInputSerializer(serializers.Serializer):
    """Validate room create/update payloads."""

    property_id = serializers.UUIDField()
    room_number = serializers.CharField(max_length=20)
    floor = serializers.CharField(max_length=20, required=False, allow_blank=True)
    type = serializers.ChoiceField(choices=RoomType.choices)
    capacity = serializers.IntegerField(min_value=1)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0.01'))
    is_available = serializers.BooleanField(required=False)


class RoomFilterSerializer(serializers.Serializer):
    """
    Query Parameters:
        property (UUID): Only rooms of this property
        is_available (bool): Filter by availability
    """

    property = serializers.UUIDField(required=False)
    is_available = serializers.BooleanField(required=False, allow_null=True, default=None)


# =============================================================================
# Output Serializers
# =============================================================================

class PropertyMinimalSerializer(serializers.ModelSerializer):

    class Meta:
        model = Property
        fields = ['id', 'name', 'city']
        read_only_fields = fields


class PropertySerializer(serializers.ModelSerializer):
    """Property details."""

    owner = UserMinimalSerializer(read_only=True)

    class Meta:
        model = Property
        fields = [
            'id',
            'owner',
            'name',
            'address',
            'city',
            'state',
            'zip_code',
            'total_rooms',
            'occupied_rooms',
            'upi_id',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class RoomSerializer(serializers.ModelSerializer):
    """Room details with the current tenant, if any."""

    property = PropertyMinimalSerializer(read_only=True)
    tenant = serializers.SerializerMethodField()

    class Meta:
        model = Room
        fields = [
            'id',
            'property',
            'room_number',
            'floor',
            'type',
            'capacity',
            'price',
            'is_available',
            'tenant',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_tenant(self, obj):
        if not obj.is_occupied():
            return None
        return {'id': obj.tenant.id, 'name': obj.tenant.name}


class OccupancySummarySerializer(serializers.Serializer):
    property_id = serializers.UUIDField()
    property_name = serializers.CharField()
    total_rooms = serializers.IntegerField()
    room_count = serializers.IntegerField()
    occupied_rooms = serializers.IntegerField()
    available_rooms = serializers.IntegerField()
    occupancy_rate = serializers.DecimalField(max_digits=5, decimal_places=2)
    monthly_rent_roll = serializers.DecimalField(max_digits=12, decimal_places=2)
    collected_total = serializers.DecimalField(max_digits=12, decimal_places=2)
    awaiting_approval_total = serializers.DecimalField(max_digits=12, decimal_places=2)
    awaiting_approval_count = serializers.IntegerField()


class PortfolioOccupancySerializer(serializers.Serializer):
    property_count = serializers.IntegerField()
    total_rooms = serializers.IntegerField()
    room_count = serializers.IntegerField()
    occupied_rooms = serializers.IntegerField()
    available_rooms = serializers.IntegerField()
    occupancy_rate = serializers.DecimalField(max_digits=5, decimal_places=2)
    monthly_rent_roll = serializers.DecimalField(max_digits=12, decimal_places=2)
    collected_total = serializers.DecimalField(max_digits=12, decimal_places=2)
    awaiting_approval_total = serializers.DecimalField(max_digits=12, decimal_places=2)
    awaiting_approval_count = serializers.IntegerField()
    properties = OccupancySummarySerializer(many=True)


class PaymentQRSerializer(serializers.ModelSerializer):
    """UPI payload of a property; the client renders it as a QR image."""

    property_id = serializers.UUIDField(source='id', read_only=True)
    property_name = serializers.CharField(source='name', read_only=True)
    payee_address = serializers.SerializerMethodField()

    class Meta:
        model = Property
        fields = ['property_id', 'property_name', 'payee_address', 'payment_qr_code']
        read_only_fields = fields

    def get_payee_address(self, obj):
        return UPIPaymentGenerator.payee_address_for(obj)
