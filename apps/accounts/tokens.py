"""
Signed session tokens.

Tokens are HS256 JWTs carrying the user id and role; expiry comes from
``JWT_EXPIRES_DAYS``.
"""
from datetime import timedelta

from django.conf import settings
from django.utils import timezone
from jose import ExpiredSignatureError, JWTError, jwt

from apps.core.exceptions import Unauthorized


def issue_token(user):
    now = timezone.now()
    payload = {
        'id': str(user.id),
        'role': user.role,
        'iat': int(now.timestamp()),
        'exp': int((now + timedelta(days=settings.JWT_EXPIRES_DAYS)).timestamp()),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token):
    """Return the token payload or raise Unauthorized."""
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError:
        raise Unauthorized('Token has expired')
    except JWTError:
        raise Unauthorized('Invalid token')


def set_token_cookie(response, token):
    response.set_cookie(
        settings.JWT_COOKIE_NAME,
        token,
        max_age=settings.JWT_COOKIE_EXPIRES_DAYS * 24 * 60 * 60,
        httponly=True,
        secure=settings.JWT_COOKIE_SECURE,
        samesite='Lax',
    )
    return response


def clear_token_cookie(response):
    response.delete_cookie(settings.JWT_COOKIE_NAME, samesite='Lax')
    return response
