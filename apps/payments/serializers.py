# =============================================================================
# IMPORTS
# =============================================================================
from rest_framework import serializers

from apps.accounts.serializers import TouristSummarySerializer
from apps.bookings.serializers import BookingBriefSerializer
from .models import Payment


# =============================================================================
# READ SERIALIZERS
# =============================================================================
class PaymentSerializer(serializers.ModelSerializer):
    booking = BookingBriefSerializer(read_only=True)
    user = TouristSummarySerializer(read_only=True)

    class Meta:
        model = Payment
        fields = [
            'id', 'booking', 'user', 'amount', 'currency', 'status',
            'stripe_payment_id', 'stripe_session_id', 'payment_method',
            'paid_at', 'failure_reason', 'refund_reason', 'refunded_at',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields


class PaymentIntentSerializer(serializers.Serializer):
    client_secret = serializers.CharField()
    payment_intent_id = serializers.CharField()
    amount = serializers.IntegerField()
    payment = PaymentSerializer()


# =============================================================================
# WRITE SERIALIZERS
# =============================================================================
class BookingPaymentSerializer(serializers.Serializer):
    booking_id = serializers.UUIDField()


class ConfirmPaymentSerializer(BookingPaymentSerializer):
    payment_intent_id = serializers.CharField(max_length=255)


class RefundSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=500, required=False, allow_blank=True, default="")
