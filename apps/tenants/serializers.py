from decimal import Decimal

from django.utils import timezone
from rest_framework import serializers

from .models import Tenant


class TenantInputSerializer(serializers.Serializer):
    """
    Validate tenant create/update payloads.

    ``lease_start`` defaults to today. ``room_id`` together with
    ``property_id`` selects the room to occupy.
    """

    name = serializers.CharField(max_length=100)
    email = serializers.EmailField(max_length=255)
    phone = serializers.CharField(max_length=20)
    lease_start = serializers.DateField(required=False)
    lease_end = serializers.DateField()
    rent_amount = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0.01'))
    room_id = serializers.UUIDField()
    property_id = serializers.UUIDField()

    def validate(self, attrs):
        """Lease must end after it starts."""
        lease_end = attrs.get('lease_end')
        lease_start = attrs.get('lease_start')
        if lease_start is None and not self.partial:
            lease_start = timezone.localdate()

        if lease_end and lease_start and lease_end <= lease_start:
            raise serializers.ValidationError({
                'lease_end': 'Lease end must be after lease start.'
            })
        return attrs


class TenantFilterSerializer(serializers.Serializer):
    """
    Query Parameters:
        property (UUID): Only tenants living in this property
    """

    property = serializers.UUIDField(required=False)


class TenantSerializer(serializers.ModelSerializer):
    """Tenant with the room and property they occupy."""

    room = serializers.SerializerMethodField()
    property = serializers.SerializerMethodField()

    class Meta:
        model = Tenant
        fields = [
            'id',
            'name',
            'email',
            'phone',
            'lease_start',
            'lease_end',
            'rent_amount',
            'room',
            'property',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_room(self, obj):
        room = obj.room
        return {
            'id': str(room.id),
            'room_number': room.room_number,
            'floor': room.floor,
            'type': room.type,
        }

    def get_property(self, obj):
        prop = obj.room.property
        return {'id': str(prop.id), 'name': prop.name}
