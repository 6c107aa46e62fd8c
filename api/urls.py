from django.urls import include, path, re_path
from rest_framework.routers import DefaultRouter

from apps.accounts.views import UserViewSet
from apps.bookings.views import BookingViewSet
from apps.listings.views import ListingViewSet
from apps.payments.views import PaymentViewSet, stripe_webhook
from apps.reviews.views import ReviewViewSet
from .views import api_root, health_check, route_not_found


class OptionalSlashRouter(DefaultRouter):
    """Router whose routes match with or without a trailing slash."""
    include_root_view = False

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # SimpleRouter only accepts a boolean, so the pattern is set afterwards
        self.trailing_slash = '/?'


router = OptionalSlashRouter()
router.register(r'users', UserViewSet, basename='user')
router.register(r'listings', ListingViewSet, basename='listing')
router.register(r'bookings', BookingViewSet, basename='booking')
router.register(r'payments', PaymentViewSet, basename='payment')
router.register(r'reviews', ReviewViewSet, basename='review')

urlpatterns = [
    path('', api_root, name='api-root'),
    re_path(r'^health/?$', health_check, name='health'),
    path('auth', include('apps.accounts.urls')),
    path('dashboard', include('apps.dashboard.urls')),
    path('uploads', include('apps.uploads.urls')),

    re_path(r'^payments/webhook/?$', stripe_webhook, name='stripe-webhook'),
    path('', include(router.urls)),

    re_path(r'^(?P<path>.*)$', route_not_found, name='not-found'),
]
