# =============================================================================
# IMPORTS
# =============================================================================
import logging

from django.db import transaction

from apps.core.exceptions import BadRequest, Forbidden, NotFound
from apps.core.utils import average_of, average_subquery, count_subquery
from .models import Listing

logger = logging.getLogger(__name__)


class ListingService:
    """Catalog reads and guide-owned listing writes."""

    @staticmethod
    def annotated(queryset):
        from apps.reviews.models import Review

        return queryset.select_related('guide').annotate(
            average_rating=average_subquery(Review, 'listing'),
            review_count=count_subquery(Review, 'listing'),
        )

    @staticmethod
    def public_queryset():
        return ListingService.annotated(Listing.objects.active())

    @staticmethod
    def guide_queryset(guide):
        from apps.bookings.models import Booking

        return ListingService.annotated(Listing.objects.by_guide(guide)).annotate(
            booking_count=count_subquery(Booking, 'listing'),
        )

    @staticmethod
    def get_listing(listing_id):
        listing = Listing.objects.select_related('guide').filter(pk=listing_id).first()
        if listing is None:
            raise NotFound("Listing not found")
        return listing

    @staticmethod
    def listing_detail(listing_id):
        """Listing with its guide's rating, latest reviews and counts."""
        listing = ListingService.get_listing(listing_id)
        reviews = listing.reviews.all()
        return {
            'listing': listing,
            'guide_average_rating': average_of(listing.guide.reviews_received.all()),
            'reviews': reviews.select_related('tourist').order_by('-created_at')[:10],
            'average_rating': average_of(reviews),
            'counts': {
                'reviews': reviews.count(),
                'bookings': listing.bookings.count(),
            },
        }

    @staticmethod
    def create_listing(guide, data):
        if not guide.is_guide:
            raise Forbidden("Only guides can create listings")
        listing = Listing.objects.create(guide=guide, **data)
        logger.info(f"Guide {guide.id} created listing {listing.id}")
        return listing

    @staticmethod
    def update_listing(listing_id, user, data):
        listing = ListingService.get_listing(listing_id)
        if not user.is_admin and not listing.is_owned_by(user):
            raise Forbidden("You can only update your own listings")

        for field, value in data.items():
            setattr(listing, field, value)
        listing.save()
        logger.info(f"Listing {listing.id} updated by {user.id}")
        return listing

    @staticmethod
    @transaction.atomic
    def delete_listing(listing_id, user):
        listing = Listing.objects.select_for_update().filter(pk=listing_id).first()
        if listing is None:
            raise NotFound("Listing not found")
        if not user.is_admin and not listing.is_owned_by(user):
            raise Forbidden("You can only delete your own listings")
        if listing.has_active_bookings():
            raise BadRequest("Cannot delete listing with active bookings")

        listing.delete()
        logger.info(f"Listing {listing_id} deleted by {user.id}")
