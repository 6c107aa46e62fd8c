from django.contrib import admin

from .models import Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ('id', 'booking', 'user', 'amount', 'currency', 'status', 'paid_at')
    list_filter = ('status', 'currency')
    search_fields = ('stripe_payment_id', 'stripe_session_id', 'user__email')
    raw_id_fields = ('booking', 'user')
    readonly_fields = ('paid_at', 'refunded_at', 'webhook_received_at', 'created_at', 'updated_at')
