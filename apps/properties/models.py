from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal
import uuid


class RoomType(models.TextChoices):
    SINGLE = 'SINGLE', 'Single'
    DOUBLE = 'DOUBLE', 'Double'
    TRIPLE = 'TRIPLE', 'Triple'
    SUITE = 'SUITE', 'Suite'


class Property(models.Model):
    """A building let out room by room, owned by one landlord."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='properties'
    )

    name = models.CharField(max_length=200)
    address = models.CharField(max_length=255)
    city = models.CharField(max_length=100)
    state = models.CharField(max_length=100)
    zip_code = models.CharField(max_length=20)

    # Planned capacity entered by the owner
    total_rooms = models.PositiveIntegerField(default=0)
    # Rooms currently let; rewritten inside every occupancy transaction
    occupied_rooms = models.PositiveIntegerField(default=0)

    # UPI payee address; empty means settings.PAYMENT_UPI_ID
    upi_id = models.CharField(max_length=100, blank=True)
    payment_qr_code = models.TextField(blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'properties'
        verbose_name_plural = 'properties'
        indexes = [
            models.Index(fields=['owner', 'created_at'], name='properties_owner_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.name} ({self.city})"

    def refresh_occupied_rooms(self):
        """Recount let rooms from room rows and persist the counter."""
        self.occupied_rooms = self.rooms.filter(is_available=False).count()
        self.save(update_fields=['occupied_rooms', 'updated_at'])
        return self.occupied_rooms


class Room(models.Model):
    """A lettable room. Holds at most one tenant."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    property = models.ForeignKey(
        Property,
        on_delete=models.CASCADE,
        related_name='rooms'
    )

    room_number = models.CharField(max_length=20)
    floor = models.CharField(max_length=20, blank=True)
    type = models.CharField(max_length=10, choices=RoomType.choices)
    capacity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    is_available = models.BooleanField(default=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'rooms'
        constraints = [
            models.UniqueConstraint(
                fields=['property', 'room_number'],
                name='unique_room_number_per_property'
            ),
        ]
        indexes = [
            models.Index(fields=['property', 'is_available'], name='rooms_availability_idx'),
        ]
        ordering = ['room_number']

    def __str__(self):
        return f"Room {self.room_number} - {self.property.name}"

    def is_occupied(self):
        # The 'property' field shadows the builtin decorator in this class body
        return hasattr(self, 'tenant')
