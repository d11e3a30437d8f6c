from django.contrib import admin
from django.utils import timezone
from .models import Payment, PaymentStatus


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ['tenant', 'payment_type', 'amount', 'status', 'payment_date', 'reviewed_by']
    list_filter = ['status', 'payment_type', 'payment_date']
    search_fields = ['tenant__name', 'tenant__email', 'note']
    readonly_fields = ['status', 'created_by', 'reviewed_by', 'reviewed_at', 'created_at', 'updated_at']
    raw_id_fields = ['tenant']
    date_hierarchy = 'payment_date'
    list_select_related = ['tenant', 'reviewed_by']

    actions = ['mark_refunded']

    @admin.action(description='Mark selected payments as refunded')
    def mark_refunded(self, request, queryset):
        """Admin override, same as the force_status endpoint."""
        count = queryset.exclude(status=PaymentStatus.REFUNDED).update(
            status=PaymentStatus.REFUNDED,
            reviewed_by=request.user,
            reviewed_at=timezone.now(),
        )
        self.message_user(request, f'Marked {count} payment(s) refunded.')
