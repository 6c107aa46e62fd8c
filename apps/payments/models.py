# =============================================================================
# IMPORTS
# =============================================================================
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from apps.core.models import TimeStampedModel


# =============================================================================
# CHOICES
# =============================================================================
class PaymentStatus(models.TextChoices):
    PENDING = "PENDING", "Pending"
    PAID = "PAID", "Paid"
    FAILED = "FAILED", "Failed"
    REFUNDED = "REFUNDED", "Refunded"


# =============================================================================
# CUSTOM MANAGERS
# =============================================================================
class PaymentManager(models.Manager):
    """Custom manager for Payment model."""

    def paid(self):
        return self.filter(status=PaymentStatus.PAID)

    def pending(self):
        return self.filter(status=PaymentStatus.PENDING)

    def failed(self):
        return self.filter(status=PaymentStatus.FAILED)

    def refunded(self):
        return self.filter(status=PaymentStatus.REFUNDED)

    def visible_to(self, user):
        """Tourists see what they paid, guides see payments on their bookings, admins see all."""
        from apps.accounts.models import UserRole

        if user.role == UserRole.TOURIST:
            return self.filter(user=user)
        if user.role == UserRole.GUIDE:
            return self.filter(booking__guide=user)
        return self.all()


# =============================================================================
# PAYMENT MODEL
# =============================================================================
class Payment(TimeStampedModel):
    """Settlement record of a booking with Stripe; at most one per booking."""
    booking = models.OneToOneField(
        'bookings.Booking', on_delete=models.CASCADE, related_name='payment'
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='payments'
    )

    amount = models.DecimalField(
        max_digits=12, decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    currency = models.CharField(max_length=10, default="usd")
    status = models.CharField(
        max_length=20, choices=PaymentStatus.choices, default=PaymentStatus.PENDING
    )

    # Stripe correlation
    stripe_payment_id = models.CharField(max_length=255, blank=True, default="", db_index=True)
    stripe_session_id = models.CharField(max_length=255, blank=True, default="", db_index=True)
    payment_method = models.CharField(max_length=50, blank=True, default="")

    # Lifecycle details
    paid_at = models.DateTimeField(null=True, blank=True)
    failure_reason = models.TextField(blank=True, default="")
    refund_reason = models.TextField(blank=True, default="")
    refunded_at = models.DateTimeField(null=True, blank=True)
    webhook_received_at = models.DateTimeField(null=True, blank=True)

    objects = PaymentManager()

    class Meta(TimeStampedModel.Meta):
        verbose_name = "Payment"
        verbose_name_plural = "Payments"
        indexes = [
            models.Index(fields=['status'], name='payment_status_idx'),
            models.Index(fields=['user', 'status'], name='payment_user_status_idx'),
        ]

    def __str__(self):
        return f"{self.booking_id} - {self.amount} {self.currency} ({self.status})"

    @property
    def is_paid(self):
        return self.status == PaymentStatus.PAID

    def mark_paid(self, payment_intent_id=None, payment_method=None, session_id=None, from_webhook=False):
        """
        Move the payment to Paid.

        Only Pending and Failed payments advance; a Paid or Refunded payment is
        left untouched and False is returned, so repeated confirmations and
        webhook redeliveries are harmless.
        """
        if self.status not in (PaymentStatus.PENDING, PaymentStatus.FAILED):
            return False

        self.status = PaymentStatus.PAID
        self.paid_at = timezone.now()
        self.failure_reason = ""
        if payment_intent_id:
            self.stripe_payment_id = payment_intent_id
        if session_id:
            self.stripe_session_id = session_id
        if payment_method:
            self.payment_method = payment_method
        if from_webhook:
            self.webhook_received_at = timezone.now()
        self.save()
        return True

    def mark_failed(self, reason="", from_webhook=False):
        self.status = PaymentStatus.FAILED
        self.failure_reason = reason or "Payment failed"
        if from_webhook:
            self.webhook_received_at = timezone.now()
        self.save()

    def mark_refunded(self, reason=""):
        if not self.is_paid:
            raise ValueError("Only paid payments can be refunded.")
        self.status = PaymentStatus.REFUNDED
        self.refund_reason = reason or ""
        self.refunded_at = timezone.now()
        self.save()
