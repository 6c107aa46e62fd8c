# =============================================================================
# IMPORTS
# =============================================================================
import logging
import traceback

from django.conf import settings
from django.core.exceptions import ObjectDoesNotExist, ValidationError as DjangoValidationError
from django.db import IntegrityError
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.views import exception_handler, set_rollback

from .exceptions import ApiError, NotFound, flatten_validation_errors, translate_integrity_error
from .responses import error_response

logger = logging.getLogger(__name__)


def _exception_detail_message(detail):
    if isinstance(detail, (list, tuple)) and detail:
        return str(detail[0])
    if isinstance(detail, dict):
        return 'Validation failed'
    return str(detail)


# =============================================================================
# DRF EXCEPTION HANDLER
# =============================================================================
def api_exception_handler(exc, context):
    """Render every failure in the ``{"status": "error", ...}`` envelope."""
    if isinstance(exc, (Http404, ObjectDoesNotExist)):
        exc = NotFound('Record not found')
    elif isinstance(exc, IntegrityError):
        exc = translate_integrity_error(exc) or exc
    elif isinstance(exc, DjangoValidationError):
        exc = exceptions.ValidationError(
            exc.message_dict if hasattr(exc, 'error_dict') else exc.messages
        )

    if isinstance(exc, ApiError):
        set_rollback()
        return error_response(exc.message, errors=exc.errors, status_code=exc.status_code)

    if isinstance(exc, exceptions.ValidationError):
        set_rollback()
        return error_response(
            'Validation failed',
            errors=flatten_validation_errors(exc.detail),
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    if isinstance(exc, exceptions.APIException):
        response = exception_handler(exc, context)
        if isinstance(exc, exceptions.NotAuthenticated):
            message = 'Please log in to access this resource'
        else:
            message = _exception_detail_message(exc.detail)
        response.data = {'status': 'error', 'message': message}
        return response

    view = context.get('view')
    logger.exception(f"Unhandled error in {view.__class__.__name__ if view else 'view'}: {exc}")
    set_rollback()

    extra = {}
    if settings.DEBUG:
        extra = {
            'error': str(exc),
            'stack': traceback.format_exception(type(exc), exc, exc.__traceback__),
        }
    return error_response(
        'Something went wrong',
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        **extra,
    )
