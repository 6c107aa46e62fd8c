# =============================================================================
# IMPORTS
# =============================================================================
from django.conf import settings
from django.core.validators import MaxValueValidator, MinLengthValidator, MinValueValidator
from django.db import models

from apps.core.models import TimeStampedModel


# =============================================================================
# CUSTOM MANAGERS
# =============================================================================
class ReviewManager(models.Manager):
    """Custom manager for Review model."""

    def for_guide(self, guide_id):
        return self.filter(guide_id=guide_id)

    def for_listing(self, listing_id):
        return self.filter(listing_id=listing_id)

    def by_tourist(self, tourist):
        return self.filter(tourist=tourist)


# =============================================================================
# REVIEW MODEL
# =============================================================================
class Review(TimeStampedModel):
    """A tourist's rating of a completed booking; one per booking."""
    booking = models.OneToOneField(
        'bookings.Booking', on_delete=models.CASCADE, related_name='review'
    )
    tourist = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='reviews_given'
    )
    guide = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='reviews_received'
    )
    listing = models.ForeignKey(
        'listings.Listing', on_delete=models.CASCADE, related_name='reviews'
    )

    rating = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(5)]
    )
    comment = models.TextField(max_length=1000, validators=[MinLengthValidator(10)])

    objects = ReviewManager()

    class Meta(TimeStampedModel.Meta):
        verbose_name = "Review"
        verbose_name_plural = "Reviews"
        indexes = [
            models.Index(fields=['guide'], name='review_guide_idx'),
            models.Index(fields=['listing'], name='review_listing_idx'),
        ]

    def __str__(self):
        return f"{self.rating}/5 by {self.tourist_id} for {self.listing_id}"

    def is_written_by(self, user):
        return self.tourist_id == user.id
