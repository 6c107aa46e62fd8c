import hashlib
import hmac
import itertools
import json
from datetime import time, timedelta
from decimal import Decimal
from types import SimpleNamespace
from unittest import mock

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from apps.accounts.models import User, UserRole
from apps.accounts.tokens import issue_token
from apps.bookings.models import Booking, BookingStatus
from apps.listings.models import Listing
from services.stripe_service import StripeService

_sequence = itertools.count()


# =============================================================================
# ACCOUNTS
# =============================================================================
@pytest.fixture
def make_user(db):
    def factory(role=UserRole.TOURIST, password='secret123', **fields):
        n = next(_sequence)
        fields.setdefault('email', f"{role.lower()}{n}@example.com")
        fields.setdefault('name', f"{role.title()} {n}")
        return User.objects.create_user(password=password, role=role, **fields)
    return factory


@pytest.fixture
def tourist(make_user):
    return make_user(UserRole.TOURIST, name='Jane Tourist')


@pytest.fixture
def guide(make_user):
    return make_user(UserRole.GUIDE, name='John Guide', city='New York', country='USA')


@pytest.fixture
def admin_user(make_user):
    return make_user(UserRole.ADMIN, name='System Admin', is_staff=True, is_superuser=True)


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def client_for():
    """Build an APIClient authenticated as the given user."""
    def factory(user):
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {issue_token(user)}")
        return client
    return factory


# =============================================================================
# CATALOG & BOOKINGS
# =============================================================================
@pytest.fixture
def make_listing(db):
    def factory(guide, **fields):
        values = {
            'title': 'NYC Street Food Adventure',
            'description': 'Taste your way through the best street food vendors in the city.',
            'tour_fee': Decimal('65.00'),
            'duration': 6,
            'meeting_point': 'Central Park South Entrance',
            'max_group_size': 10,
            'city': 'New York',
            'country': 'USA',
            'category': ['Food', 'Culture'],
            'images': ['https://images.example.com/food.jpg'],
        }
        values.update(fields)
        return Listing.objects.create(guide=guide, **values)
    return factory


@pytest.fixture
def listing(make_listing, guide):
    return make_listing(guide)


@pytest.fixture
def make_booking(db):
    def factory(listing, tourist, status=BookingStatus.PENDING, number_of_people=2, days_ahead=7):
        return Booking.objects.create(
            listing=listing,
            tourist=tourist,
            guide_id=listing.guide_id,
            booking_date=timezone.localdate() + timedelta(days=days_ahead),
            start_time=time(10, 0),
            number_of_people=number_of_people,
            total_amount=listing.tour_fee * number_of_people,
            status=status,
        )
    return factory


@pytest.fixture
def confirmed_booking(make_booking, listing, tourist):
    return make_booking(listing, tourist, status=BookingStatus.CONFIRMED)


# =============================================================================
# STRIPE
# =============================================================================
@pytest.fixture
def stripe_client():
    """Stand-in for ``stripe.StripeClient`` returning canned Stripe objects."""
    client = mock.Mock()
    client.payment_intents.create.return_value = SimpleNamespace(
        id='pi_test_123', client_secret='pi_test_123_secret_abc', amount=13000
    )
    client.payment_intents.retrieve.return_value = SimpleNamespace(
        id='pi_test_123', status='succeeded', payment_method_types=['card'], metadata={}
    )
    client.checkout.sessions.create.return_value = SimpleNamespace(
        id='cs_test_123', url='https://checkout.stripe.com/c/pay/cs_test_123'
    )
    client.refunds.create.return_value = SimpleNamespace(id='re_test_123', status='succeeded')
    return client


@pytest.fixture
def stripe_gateway(stripe_client, settings):
    gateway = StripeService(
        api_key=settings.STRIPE_SECRET_KEY,
        webhook_secret=settings.STRIPE_WEBHOOK_SECRET,
        client=stripe_client,
    )
    with mock.patch('apps.payments.views.get_stripe_service', return_value=gateway):
        yield gateway


@pytest.fixture
def sign_payload(settings):
    """Build a ``Stripe-Signature`` header for a raw body."""
    def factory(payload, secret=None):
        timestamp = int(timezone.now().timestamp())
        digest = hmac.new(
            (secret or settings.STRIPE_WEBHOOK_SECRET).encode(),
            f"{timestamp}.{payload}".encode(),
            hashlib.sha256,
        ).hexdigest()
        return f"t={timestamp},v1={digest}"
    return factory


@pytest.fixture
def signed_event(sign_payload):
    """Serialize a Stripe event and sign it the way Stripe does."""
    def factory(event_type, data_object, secret=None):
        payload = json.dumps({
            'id': f"evt_{next(_sequence)}",
            'type': event_type,
            'data': {'object': data_object},
        })
        return payload, sign_payload(payload, secret)
    return factory
