from datetime import timedelta
from decimal import Decimal
from unittest import mock

import pytest
from django.utils import timezone

from apps.bookings.models import Booking, BookingStatus
from apps.listings.models import Listing
from apps.reviews.models import Review

pytestmark = pytest.mark.django_db

LISTING_PAYLOAD = {
    'title': 'Hidden Jazz Bars of New York',
    'description': 'Discover the secret jazz spots that only locals know about.',
    'tour_fee': '85.00',
    'duration': 5,
    'meeting_point': 'Times Square, NYC - Red Steps',
    'max_group_size': 8,
    'city': 'New York',
    'country': 'USA',
    'category': ['Nightlife', 'Music'],
}


class TestCatalog:

    def test_list_shows_only_active_listings(self, api_client, make_listing, guide):
        make_listing(guide, title='Active tour')
        make_listing(guide, title='Retired tour', is_active=False)

        response = api_client.get('/api/listings')

        assert response.status_code == 200
        assert [row['title'] for row in response.json()['data']] == ['Active tour']

    def test_filters(self, api_client, make_listing, guide):
        make_listing(guide, title='Cheap food walk', tour_fee=Decimal('40'), category=['Food'])
        make_listing(guide, title='Pricey art tour', tour_fee=Decimal('200'), category=['Art'])

        response = api_client.get('/api/listings', {'category': 'Art'})
        assert [row['title'] for row in response.json()['data']] == ['Pricey art tour']

        response = api_client.get('/api/listings', {'max_price': 100})
        assert [row['title'] for row in response.json()['data']] == ['Cheap food walk']

        response = api_client.get('/api/listings', {'search': 'ART TOUR'})
        assert [row['title'] for row in response.json()['data']] == ['Pricey art tour']

    def test_sort_by_price(self, api_client, make_listing, guide):
        make_listing(guide, title='Second', tour_fee=Decimal('90'))
        make_listing(guide, title='First', tour_fee=Decimal('30'))

        response = api_client.get('/api/listings', {'sort_by': 'price'})

        assert [row['title'] for row in response.json()['data']] == ['First', 'Second']

    def test_pagination_limit_is_capped(self, api_client, listing):
        response = api_client.get('/api/listings', {'limit': 500, 'page': 1})

        pagination = response.json()['meta']['pagination']
        assert pagination['limit'] == 100
        assert pagination['total'] == 1
        assert pagination['hasNextPage'] is False
        assert pagination['hasPrevPage'] is False

    def test_page_below_one_is_clamped(self, api_client, listing):
        for page in (0, -3, 'abc'):
            response = api_client.get('/api/listings', {'page': page})

            assert response.status_code == 200
            assert len(response.json()['data']) == 1
            assert response.json()['meta']['pagination']['page'] == 1

    def test_page_past_the_end_is_empty(self, api_client, listing):
        response = api_client.get('/api/listings', {'page': 5})

        assert response.status_code == 200
        assert response.json()['data'] == []
        pagination = response.json()['meta']['pagination']
        assert pagination['page'] == 5
        assert pagination['total'] == 1
        assert pagination['totalPages'] == 1
        assert pagination['hasNextPage'] is False
        assert pagination['hasPrevPage'] is True

    def test_detail_includes_rating(self, api_client, listing, tourist, make_booking):
        booking = make_booking(listing, tourist, status=BookingStatus.COMPLETED)
        Review.objects.create(
            booking=booking, tourist=tourist, guide=listing.guide, listing=listing,
            rating=4, comment='Great food and a great guide',
        )

        response = api_client.get(f'/api/listings/{listing.id}')

        assert response.status_code == 200
        data = response.json()['data']
        assert data['average_rating'] == 4
        assert data['counts'] == {'reviews': 1, 'bookings': 1}
        assert len(data['reviews']) == 1

    def test_unknown_listing(self, api_client):
        response = api_client.get('/api/listings/00000000-0000-0000-0000-000000000000')

        assert response.status_code == 404
        assert response.json()['message'] == "Listing not found"


class TestGuideManagement:

    def test_guide_creates_listing(self, client_for, guide):
        response = client_for(guide).post('/api/listings', LISTING_PAYLOAD, format='json')

        assert response.status_code == 201
        listing = Listing.objects.get()
        assert listing.guide == guide
        assert listing.tour_fee == Decimal('85.00')

    def test_tourist_cannot_create_listing(self, client_for, tourist):
        response = client_for(tourist).post('/api/listings', LISTING_PAYLOAD, format='json')

        assert response.status_code == 403
        assert response.json()['message'] == "Only guides can create listings"

    def test_category_is_required(self, client_for, guide):
        payload = dict(LISTING_PAYLOAD, category=[])

        response = client_for(guide).post('/api/listings', payload, format='json')

        assert response.status_code == 400

    def test_my_listings_include_inactive(self, client_for, make_listing, guide):
        make_listing(guide, is_active=False)

        response = client_for(guide).get('/api/listings/my')

        assert response.status_code == 200
        assert len(response.json()['data']) == 1

    def test_only_owner_updates(self, client_for, listing, make_user):
        other_guide = make_user('GUIDE')

        response = client_for(other_guide).patch(
            f'/api/listings/{listing.id}', {'tour_fee': '1.00'}, format='json'
        )

        assert response.status_code == 403
        assert response.json()['message'] == "You can only update your own listings"

    def test_owner_updates_fee(self, client_for, listing, guide):
        response = client_for(guide).patch(f'/api/listings/{listing.id}', {'tour_fee': '70.00'}, format='json')

        assert response.status_code == 200
        listing.refresh_from_db()
        assert listing.tour_fee == Decimal('70.00')

    @pytest.mark.parametrize('status', [BookingStatus.PENDING, BookingStatus.CONFIRMED])
    def test_delete_blocked_by_active_booking(self, client_for, listing, guide, tourist, make_booking, status):
        make_booking(listing, tourist, status=status)

        response = client_for(guide).delete(f'/api/listings/{listing.id}')

        assert response.status_code == 400
        assert response.json()['message'] == "Cannot delete listing with active bookings"
        assert Listing.objects.filter(pk=listing.pk).exists()

    def test_delete_and_booking_lock_the_listing_row(self, client_for, listing, guide, tourist):
        manager = Listing.objects
        with mock.patch.object(manager, 'select_for_update', wraps=manager.select_for_update) as lock:
            client_for(tourist).post('/api/bookings', {
                'listing_id': str(listing.id),
                'booking_date': (timezone.localdate() + timedelta(days=5)).isoformat(),
                'start_time': '10:00',
            }, format='json')
            assert lock.call_count == 1

            response = client_for(guide).delete(f'/api/listings/{listing.id}')
            assert lock.call_count == 2

        assert response.status_code == 400
        assert Listing.objects.filter(pk=listing.pk).exists()

    def test_delete_cascades_to_finished_bookings(self, client_for, listing, guide, tourist, make_booking):
        make_booking(listing, tourist, status=BookingStatus.COMPLETED)
        make_booking(listing, tourist, status=BookingStatus.CANCELLED)

        response = client_for(guide).delete(f'/api/listings/{listing.id}')

        assert response.status_code == 200
        assert not Listing.objects.exists()
        assert not Booking.objects.exists()
