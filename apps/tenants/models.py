from django.db import models
from django.core.validators import MinValueValidator
from django.utils import timezone
from decimal import Decimal
import uuid


class TenantQuerySet(models.QuerySet):

    def for_account(self, user):
        """Tenancies whose email matches the given account."""
        return self.filter(email__iexact=user.email)

    def managed_by(self, user):
        return self.filter(owner=user)


class Tenant(models.Model):
    """
    A person renting a room.

    The row is created by the landlord (``owner``). The tenant's own login,
    if any, is linked to it by email.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='managed_tenants'
    )
    # One tenant per room, enforced by the unique index behind OneToOneField
    room = models.OneToOneField(
        'properties.Room',
        on_delete=models.PROTECT,
        related_name='tenant'
    )

    name = models.CharField(max_length=100)
    email = models.EmailField(max_length=255)
    phone = models.CharField(max_length=20)

    lease_start = models.DateField(default=timezone.localdate)
    lease_end = models.DateField()
    rent_amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TenantQuerySet.as_manager()

    class Meta:
        db_table = 'tenants'
        indexes = [
            models.Index(fields=['email'], name='tenants_email_idx'),
            models.Index(fields=['owner', 'created_at'], name='tenants_owner_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.name} - Room {self.room.room_number}"

    @property
    def property(self):
        return self.room.property
