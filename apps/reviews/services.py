# =============================================================================
# IMPORTS
# =============================================================================
import logging

from django.db import IntegrityError, transaction

from apps.accounts.models import User, UserRole
from apps.bookings.models import Booking, BookingStatus
from apps.core.exceptions import BadRequest, Conflict, Forbidden, NotFound
from apps.core.utils import average_of
from .models import Review

logger = logging.getLogger(__name__)


class ReviewService:
    """Reviews of completed bookings and their rating aggregates."""

    @staticmethod
    def base_queryset():
        return Review.objects.select_related('tourist', 'guide', 'listing')

    @staticmethod
    def get_review(review_id):
        review = ReviewService.base_queryset().filter(pk=review_id).first()
        if review is None:
            raise NotFound("Review not found")
        return review

    @staticmethod
    def create_review(tourist, booking_id, rating, comment):
        booking = Booking.objects.filter(pk=booking_id).first()
        if booking is None:
            raise NotFound("Booking not found")
        if booking.tourist_id != tourist.id:
            raise Forbidden("You can only review your own bookings")
        if booking.status != BookingStatus.COMPLETED:
            raise BadRequest("You can only review completed tours")
        if Review.objects.filter(booking=booking).exists():
            raise Conflict("You have already reviewed this booking")

        try:
            with transaction.atomic():
                review = Review.objects.create(
                    booking=booking,
                    tourist=tourist,
                    guide_id=booking.guide_id,
                    listing_id=booking.listing_id,
                    rating=rating,
                    comment=comment,
                )
        except IntegrityError:
            # Concurrent submission for the same booking
            raise Conflict("You have already reviewed this booking")

        logger.info(f"Tourist {tourist.id} reviewed booking {booking.id} with {rating}/5")
        return ReviewService.get_review(review.pk)

    @staticmethod
    def update_review(review_id, user, data):
        review = ReviewService.get_review(review_id)
        if not review.is_written_by(user):
            raise Forbidden("You can only update your own reviews")

        for field in ('rating', 'comment'):
            if field in data:
                setattr(review, field, data[field])
        review.save()
        return review

    @staticmethod
    def delete_review(review_id, user):
        review = ReviewService.get_review(review_id)
        if not user.is_admin and not review.is_written_by(user):
            raise Forbidden("You can only delete your own reviews")

        review.delete()
        logger.info(f"Review {review_id} deleted by {user.id}")

    @staticmethod
    def guide_reviews(guide_id):
        """A guide's reviews plus the rating aggregate over all of them."""
        if not User.objects.filter(pk=guide_id, role=UserRole.GUIDE).exists():
            raise NotFound("Guide not found")

        queryset = ReviewService.base_queryset().filter(guide_id=guide_id)
        return queryset, {
            'average_rating': average_of(queryset),
            'total_reviews': queryset.count(),
        }
