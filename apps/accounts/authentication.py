# =============================================================================
# IMPORTS
# =============================================================================
import logging

from django.conf import settings
from django.core.exceptions import ValidationError
from rest_framework.authentication import BaseAuthentication, get_authorization_header

from apps.core.exceptions import Unauthorized
from .models import User
from .tokens import decode_token

logger = logging.getLogger(__name__)


def get_request_token(request):
    """Bearer token from the Authorization header, falling back to the cookie."""
    header = get_authorization_header(request).split()
    if header and header[0].lower() == b'bearer':
        if len(header) != 2:
            raise Unauthorized('Invalid token')
        try:
            return header[1].decode()
        except UnicodeError:
            raise Unauthorized('Invalid token')
    return request.COOKIES.get(settings.JWT_COOKIE_NAME) or None


def resolve_user(token):
    payload = decode_token(token)
    try:
        user = User.objects.filter(pk=payload.get('id')).first()
    except (ValidationError, ValueError):
        raise Unauthorized('Invalid token')
    if user is None:
        raise Unauthorized('User no longer exists')
    if not user.is_active:
        raise Unauthorized('Your account has been deactivated')
    return user


class JWTAuthentication(BaseAuthentication):
    """
    Resolve the request user from a signed session token.

    Requests without a token stay anonymous so that permission classes
    decide whether the route needs a user; a token that is present but
    invalid always fails the request.
    """

    def authenticate(self, request):
        token = get_request_token(request)
        if not token:
            return None
        user = resolve_user(token)
        return user, token

    def authenticate_header(self, request):
        return 'Bearer realm="api"'


class OptionalJWTAuthentication(JWTAuthentication):
    """Same token resolution, but any failure leaves the request anonymous."""

    def authenticate(self, request):
        try:
            return super().authenticate(request)
        except Unauthorized as exc:
            logger.debug(f"Ignoring invalid optional token: {exc.message}")
            return None
