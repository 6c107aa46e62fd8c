# =============================================================================
# IMPORTS
# =============================================================================
from decimal import Decimal

from django.conf import settings
from django.core.validators import (
    MaxLengthValidator, MaxValueValidator, MinLengthValidator, MinValueValidator,
)
from django.db import models

from apps.core.models import TimeStampedModel


# =============================================================================
# CUSTOM MANAGERS
# =============================================================================
class ListingManager(models.Manager):
    """Custom manager for Listing model."""

    def active(self):
        return self.filter(is_active=True)

    def by_guide(self, guide):
        return self.filter(guide=guide)


# =============================================================================
# LISTING MODEL
# =============================================================================
class Listing(TimeStampedModel):
    """A tour offering published by a guide."""
    guide = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='listings'
    )

    # Content
    title = models.CharField(max_length=200, validators=[MinLengthValidator(5)])
    description = models.TextField(
        validators=[MinLengthValidator(20), MaxLengthValidator(2000)]
    )
    itinerary = models.TextField(blank=True, default="")
    meeting_point = models.CharField(max_length=255)
    images = models.JSONField(default=list, blank=True)
    category = models.JSONField(default=list)

    # Pricing & capacity
    tour_fee = models.DecimalField(
        max_digits=10, decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    duration = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(24)],
        help_text="Tour length in hours"
    )
    max_group_size = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(50)]
    )

    # Location
    city = models.CharField(max_length=100)
    country = models.CharField(max_length=100)

    is_active = models.BooleanField(default=True)

    objects = ListingManager()

    class Meta(TimeStampedModel.Meta):
        verbose_name = "Listing"
        verbose_name_plural = "Listings"
        indexes = [
            models.Index(fields=['city'], name='listing_city_idx'),
            models.Index(fields=['is_active'], name='listing_active_idx'),
            models.Index(fields=['guide', 'is_active'], name='listing_guide_active_idx'),
        ]

    def __str__(self):
        return f"{self.title} ({self.city})"

    def is_owned_by(self, user):
        return self.guide_id == user.id

    def has_active_bookings(self):
        from apps.bookings.models import BookingStatus
        return self.bookings.filter(
            status__in=[BookingStatus.PENDING, BookingStatus.CONFIRMED]
        ).exists()
