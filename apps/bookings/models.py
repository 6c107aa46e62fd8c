# =============================================================================
# IMPORTS
# =============================================================================
import logging
from decimal import Decimal

from django.conf import settings
from django.core.validators import MaxLengthValidator, MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone

from apps.core.exceptions import BadRequest
from apps.core.models import TimeStampedModel

logger = logging.getLogger(__name__)


# =============================================================================
# CHOICES
# =============================================================================
class BookingStatus(models.TextChoices):
    PENDING = "PENDING", "Pending"
    CONFIRMED = "CONFIRMED", "Confirmed"
    COMPLETED = "COMPLETED", "Completed"
    CANCELLED = "CANCELLED", "Cancelled"


ACTIVE_STATUSES = (BookingStatus.PENDING.value, BookingStatus.CONFIRMED.value)

# Completed and Cancelled are terminal
ALLOWED_TRANSITIONS = {
    BookingStatus.PENDING.value: {BookingStatus.CONFIRMED.value, BookingStatus.CANCELLED.value},
    BookingStatus.CONFIRMED.value: {BookingStatus.COMPLETED.value, BookingStatus.CANCELLED.value},
    BookingStatus.COMPLETED.value: set(),
    BookingStatus.CANCELLED.value: set(),
}


# =============================================================================
# CUSTOM MANAGERS
# =============================================================================
class BookingManager(models.Manager):
    """Custom manager for Booking model."""

    def pending(self):
        return self.filter(status=BookingStatus.PENDING)

    def confirmed(self):
        return self.filter(status=BookingStatus.CONFIRMED)

    def completed(self):
        return self.filter(status=BookingStatus.COMPLETED)

    def cancelled(self):
        return self.filter(status=BookingStatus.CANCELLED)

    def active(self):
        return self.filter(status__in=ACTIVE_STATUSES)

    def upcoming(self):
        today = timezone.localdate()
        return self.filter(status__in=ACTIVE_STATUSES, booking_date__gte=today)

    def past(self):
        today = timezone.localdate()
        return self.filter(models.Q(booking_date__lt=today) | models.Q(status=BookingStatus.COMPLETED))

    def visible_to(self, user):
        """Bookings scoped by role: tourists and guides see their own, admins see all."""
        from apps.accounts.models import UserRole

        if user.role == UserRole.TOURIST:
            return self.filter(tourist=user)
        if user.role == UserRole.GUIDE:
            return self.filter(guide=user)
        return self.all()


# =============================================================================
# BOOKING MODEL
# =============================================================================
class Booking(TimeStampedModel):
    """A tourist's reservation against a guide's listing."""
    tourist = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='tourist_bookings'
    )
    guide = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='guide_bookings'
    )
    listing = models.ForeignKey(
        'listings.Listing', on_delete=models.CASCADE, related_name='bookings'
    )

    # Schedule
    booking_date = models.DateField()
    start_time = models.TimeField()
    end_time = models.TimeField(null=True, blank=True)

    number_of_people = models.PositiveSmallIntegerField(
        default=1, validators=[MinValueValidator(1), MaxValueValidator(50)]
    )
    # Fixed at creation; later fee changes do not touch existing bookings
    total_amount = models.DecimalField(
        max_digits=12, decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )

    status = models.CharField(
        max_length=20, choices=BookingStatus.choices, default=BookingStatus.PENDING
    )
    special_requests = models.TextField(
        blank=True, default="", validators=[MaxLengthValidator(500)]
    )

    objects = BookingManager()

    class Meta(TimeStampedModel.Meta):
        verbose_name = "Booking"
        verbose_name_plural = "Bookings"
        indexes = [
            models.Index(fields=['status'], name='booking_status_idx'),
            models.Index(fields=['booking_date'], name='booking_date_idx'),
            models.Index(fields=['tourist', 'status'], name='booking_tourist_status_idx'),
            models.Index(fields=['guide', 'status'], name='booking_guide_status_idx'),
        ]

    def __str__(self):
        return f"{self.listing} on {self.booking_date} ({self.status})"

    @property
    def is_active(self):
        return str(self.status) in ACTIVE_STATUSES

    def involves(self, user):
        """True when ``user`` is this booking's tourist or guide."""
        return user.id in (self.tourist_id, self.guide_id)

    def can_transition_to(self, status):
        return str(status) in ALLOWED_TRANSITIONS[str(self.status)]

    def _transition(self, status):
        previous = self.status
        self.status = status
        self.save(update_fields=['status', 'updated_at'])
        logger.info(f"Booking {self.id} moved from {previous} to {status}")

    def confirm(self):
        """Confirm a pending booking."""
        if not self.can_transition_to(BookingStatus.CONFIRMED):
            raise BadRequest("Can only confirm pending bookings")
        self._transition(BookingStatus.CONFIRMED)

    def complete(self):
        if not self.can_transition_to(BookingStatus.COMPLETED):
            raise BadRequest("Can only complete confirmed bookings")
        self._transition(BookingStatus.COMPLETED)

    def cancel(self):
        """Cancel a pending or confirmed booking."""
        if self.status == BookingStatus.COMPLETED:
            raise BadRequest("Cannot cancel completed bookings")
        if not self.can_transition_to(BookingStatus.CANCELLED):
            raise BadRequest("Booking is already cancelled")
        self._transition(BookingStatus.CANCELLED)

    def cancel_for_refund(self):
        """Cancel after a refund; refunds override the transition table, even for Completed bookings."""
        if self.status != BookingStatus.CANCELLED:
            self._transition(BookingStatus.CANCELLED)
