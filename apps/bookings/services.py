# =============================================================================
# IMPORTS
# =============================================================================
import logging

from django.db import transaction
from django.db.models import Count, Q

from apps.core.exceptions import BadRequest, Forbidden, NotFound
from apps.core.utils import sum_of
from apps.listings.models import Listing
from .models import Booking, BookingStatus

logger = logging.getLogger(__name__)


class BookingService:
    """
    Booking lifecycle: creation against a listing, role-gated status
    transitions and role-scoped reads.
    """

    @staticmethod
    def scoped_queryset(user):
        return Booking.objects.visible_to(user).select_related(
            'listing', 'tourist', 'guide', 'payment', 'review'
        )

    @staticmethod
    @transaction.atomic
    def create_booking(tourist, listing_id, booking_date, start_time, end_time=None,
                       number_of_people=1, special_requests=""):
        # Same row lock as listing deletion, so a listing cannot vanish under a new booking
        listing = Listing.objects.select_for_update().filter(pk=listing_id).first()
        if listing is None:
            raise NotFound("Listing not found")
        if not listing.is_active:
            raise BadRequest("This tour is currently not available")
        if listing.guide_id == tourist.id:
            raise BadRequest("You cannot book your own tour")
        if number_of_people > listing.max_group_size:
            raise BadRequest(f"Maximum group size is {listing.max_group_size}")

        booking = Booking.objects.create(
            tourist=tourist,
            guide_id=listing.guide_id,
            listing=listing,
            booking_date=booking_date,
            start_time=start_time,
            end_time=end_time,
            number_of_people=number_of_people,
            total_amount=listing.tour_fee * number_of_people,
            special_requests=special_requests or "",
        )
        logger.info(f"Tourist {tourist.id} requested booking {booking.id} for listing {listing.id}")
        return booking

    @staticmethod
    def get_booking(booking_id, user):
        """Fetch a booking readable by ``user`` (its tourist, its guide or an admin)."""
        booking = Booking.objects.select_related(
            'listing', 'tourist', 'guide'
        ).filter(pk=booking_id).first()
        if booking is None:
            raise NotFound("Booking not found")
        if not user.is_admin and not booking.involves(user):
            raise Forbidden("You do not have access to this booking")
        return booking

    @staticmethod
    def _lock(booking_id):
        booking = Booking.objects.select_for_update().filter(pk=booking_id).first()
        if booking is None:
            raise NotFound("Booking not found")
        return booking

    @staticmethod
    @transaction.atomic
    def update_status(booking_id, user, status):
        booking = BookingService._lock(booking_id)

        if status == BookingStatus.CONFIRMED:
            if not user.is_admin and booking.guide_id != user.id:
                raise Forbidden("Only the guide can confirm this booking")
            booking.confirm()
        elif status == BookingStatus.CANCELLED:
            if not user.is_admin and not booking.involves(user):
                raise Forbidden("You cannot cancel this booking")
            booking.cancel()
        else:
            raise BadRequest(f"Unsupported status: {status}")
        return booking

    @staticmethod
    @transaction.atomic
    def complete(booking_id, user):
        booking = BookingService._lock(booking_id)
        if not user.is_admin and booking.guide_id != user.id:
            raise Forbidden("Only the guide can complete this booking")
        booking.complete()
        return booking

    @staticmethod
    def stats(user):
        queryset = Booking.objects.visible_to(user)
        stats = queryset.aggregate(
            total=Count('id'),
            pending=Count('id', filter=Q(status=BookingStatus.PENDING)),
            confirmed=Count('id', filter=Q(status=BookingStatus.CONFIRMED)),
            completed=Count('id', filter=Q(status=BookingStatus.COMPLETED)),
            cancelled=Count('id', filter=Q(status=BookingStatus.CANCELLED)),
        )
        if user.is_guide:
            stats['total_earnings'] = sum_of(queryset.filter(status=BookingStatus.COMPLETED), 'total_amount')
        return stats
