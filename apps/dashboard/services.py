# =============================================================================
# IMPORTS
# =============================================================================
from django.db.models import Count, Q
from django.utils import timezone

from apps.accounts.models import User, UserRole
from apps.bookings.models import ACTIVE_STATUSES, Booking, BookingStatus
from apps.core.utils import average_of, average_subquery, count_subquery, sum_of
from apps.listings.models import Listing
from apps.payments.models import Payment
from apps.reviews.models import Review

RECENT_LIMIT = 5


class DashboardService:
    """Role-specific summary figures for the dashboard pages."""

    @staticmethod
    def admin_dashboard():
        bookings = Booking.objects.all()
        users = User.objects.all()

        stats = users.aggregate(
            total_users=Count('id'),
            total_guides=Count('id', filter=Q(role=UserRole.GUIDE)),
            total_tourists=Count('id', filter=Q(role=UserRole.TOURIST)),
        )
        stats.update(bookings.aggregate(
            total_bookings=Count('id'),
            pending_bookings=Count('id', filter=Q(status=BookingStatus.PENDING)),
            completed_bookings=Count('id', filter=Q(status=BookingStatus.COMPLETED)),
        ))
        stats['total_listings'] = Listing.objects.count()
        stats['total_revenue'] = sum_of(Payment.objects.paid(), 'amount')

        top_guides = User.objects.filter(role=UserRole.GUIDE).annotate(
            review_count=count_subquery(Review, 'guide'),
            average_rating=average_subquery(Review, 'guide'),
            listing_count=count_subquery(Listing, 'guide', is_active=True),
        ).order_by('-review_count', '-average_rating')[:RECENT_LIMIT]

        return {
            'stats': stats,
            'recent_bookings': bookings.select_related(
                'listing', 'tourist', 'guide'
            ).order_by('-created_at')[:RECENT_LIMIT],
            'recent_users': users.order_by('-created_at')[:RECENT_LIMIT],
            'top_guides': top_guides,
        }

    @staticmethod
    def guide_dashboard(guide):
        bookings = Booking.objects.filter(guide=guide)
        listings = Listing.objects.by_guide(guide)
        reviews = Review.objects.for_guide(guide.id)
        today = timezone.localdate()

        stats = bookings.aggregate(
            total_bookings=Count('id'),
            pending_bookings=Count('id', filter=Q(status=BookingStatus.PENDING)),
            confirmed_bookings=Count('id', filter=Q(status=BookingStatus.CONFIRMED)),
            completed_bookings=Count('id', filter=Q(status=BookingStatus.COMPLETED)),
            cancelled_bookings=Count('id', filter=Q(status=BookingStatus.CANCELLED)),
        )
        stats.update({
            'total_listings': listings.count(),
            'active_listings': listings.filter(is_active=True).count(),
            'total_earnings': sum_of(Payment.objects.paid().filter(booking__guide=guide), 'amount'),
            'total_reviews': reviews.count(),
            'average_rating': average_of(reviews),
        })

        return {
            'stats': stats,
            'upcoming_bookings': bookings.filter(
                status__in=ACTIVE_STATUSES, booking_date__gte=today
            ).select_related('listing', 'tourist').order_by('booking_date', 'start_time')[:RECENT_LIMIT],
            'recent_reviews': reviews.select_related(
                'tourist', 'guide', 'listing'
            ).order_by('-created_at')[:RECENT_LIMIT],
        }

    @staticmethod
    def tourist_dashboard(tourist):
        bookings = Booking.objects.filter(tourist=tourist)
        upcoming = Booking.objects.upcoming().filter(tourist=tourist).select_related('listing', 'guide')
        past = Booking.objects.past().filter(tourist=tourist).select_related('listing', 'guide')

        stats = {
            'total_bookings': bookings.count(),
            'upcoming_bookings': upcoming.count(),
            'completed_bookings': bookings.filter(status=BookingStatus.COMPLETED).count(),
            'total_spent': sum_of(Payment.objects.paid().filter(user=tourist), 'amount'),
            'reviews_given': Review.objects.by_tourist(tourist).count(),
        }

        return {
            'stats': stats,
            'upcoming_trips': upcoming.order_by('booking_date', 'start_time')[:RECENT_LIMIT],
            'past_trips': past.order_by('-booking_date')[:RECENT_LIMIT],
        }
