import pytest

from apps.bookings.models import BookingStatus
from apps.payments.models import Payment, PaymentStatus

pytestmark = pytest.mark.django_db


@pytest.fixture
def activity(listing, tourist, make_booking):
    upcoming = make_booking(listing, tourist, status=BookingStatus.CONFIRMED)
    completed = make_booking(listing, tourist, status=BookingStatus.COMPLETED, days_ahead=1)
    Payment.objects.create(
        booking=completed, user=tourist, amount=completed.total_amount, status=PaymentStatus.PAID
    )
    return upcoming, completed


class TestDashboards:

    def test_root_dispatches_on_role(self, client_for, tourist, guide, activity):
        tourist_data = client_for(tourist).get('/api/dashboard/').json()['data']
        guide_data = client_for(guide).get('/api/dashboard/').json()['data']

        assert 'upcoming_trips' in tourist_data
        assert 'upcoming_bookings' in guide_data

    def test_guide_dashboard(self, client_for, guide, activity):
        response = client_for(guide).get('/api/dashboard/guide')

        assert response.status_code == 200
        data = response.json()['data']
        assert data['stats']['total_listings'] == 1
        assert data['stats']['confirmed_bookings'] == 1
        assert data['stats']['total_earnings'] == 130.0
        assert [row['id'] for row in data['upcoming_bookings']] == [str(activity[0].id)]

    def test_tourist_dashboard(self, client_for, tourist, activity):
        data = client_for(tourist).get('/api/dashboard/tourist').json()['data']

        assert data['stats']['total_bookings'] == 2
        assert data['stats']['upcoming_bookings'] == 1
        assert data['stats']['total_spent'] == 130.0
        assert [row['id'] for row in data['past_trips']] == [str(activity[1].id)]

    def test_admin_dashboard(self, client_for, admin_user, activity):
        data = client_for(admin_user).get('/api/dashboard/admin').json()['data']

        assert data['stats']['total_users'] == 3
        assert data['stats']['total_guides'] == 1
        assert data['stats']['total_revenue'] == 130.0
        assert len(data['top_guides']) == 1

    def test_role_gates(self, client_for, tourist, guide):
        assert client_for(tourist).get('/api/dashboard/admin').status_code == 403
        assert client_for(tourist).get('/api/dashboard/guide').status_code == 403
        assert client_for(guide).get('/api/dashboard/tourist').status_code == 403
