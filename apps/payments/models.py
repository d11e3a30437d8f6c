from django.db import models
from django.core.validators import MinValueValidator
from django.utils import timezone
from decimal import Decimal
import uuid


class PaymentType(models.TextChoices):
    RENT = 'RENT', 'Rent'
    SECURITY_DEPOSIT = 'SECURITY_DEPOSIT', 'Security deposit'
    MAINTENANCE = 'MAINTENANCE', 'Maintenance'
    OTHER = 'OTHER', 'Other'


class PaymentStatus(models.TextChoices):
    PENDING = 'PENDING', 'Pending'
    WAITING_APPROVAL = 'WAITING_APPROVAL', 'Waiting for approval'
    PAID = 'PAID', 'Paid'
    FAILED = 'FAILED', 'Failed'
    REFUNDED = 'REFUNDED', 'Refunded'


class Payment(models.Model):
    """A payment made, or claimed to be made, by a tenant."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    tenant = models.ForeignKey(
        'tenants.Tenant',
        on_delete=models.CASCADE,
        related_name='payments'
    )

    amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    payment_type = models.CharField(max_length=20, choices=PaymentType.choices)
    status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING
    )
    payment_date = models.DateTimeField(default=timezone.now)
    note = models.TextField(blank=True)

    created_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='payments_recorded'
    )
    # Who approved or declined, and when
    reviewed_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='payments_reviewed'
    )
    reviewed_at = models.DateTimeField(null=True, blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'payments'
        indexes = [
            models.Index(fields=['tenant', 'status'], name='payments_tenant_status_idx'),
            models.Index(fields=['status'], name='payments_status_idx'),
            models.Index(fields=['payment_date'], name='payments_date_idx'),
        ]
        ordering = ['-payment_date', '-created_at']

    def __str__(self):
        return f"{self.get_payment_type_display()} {self.amount} ({self.status})"
