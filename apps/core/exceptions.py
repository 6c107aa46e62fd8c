# =============================================================================
# IMPORTS
# =============================================================================
import re

from rest_framework import exceptions, status

UNIQUE_VIOLATION = '23505'
FOREIGN_KEY_VIOLATION = '23503'


# =============================================================================
# DOMAIN ERRORS
# =============================================================================
class ApiError(exceptions.APIException):
    """
    Base class for errors raised by the service layer.

    Carries an HTTP status code, a human readable message and an optional
    list of ``{"field": ..., "message": ...}`` entries for validation failures.
    """
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'Something went wrong'

    def __init__(self, message=None, errors=None):
        self.message = message or self.default_detail
        self.errors = errors or []
        super().__init__(self.message)


class BadRequest(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Bad request'


class Unauthorized(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = 'Unauthorized'


class Forbidden(ApiError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'Forbidden'


class NotFound(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Resource not found'


class Conflict(ApiError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Resource already exists'


class InternalError(ApiError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'Internal server error'


# =============================================================================
# TRANSLATION HELPERS
# =============================================================================
def flatten_validation_errors(detail, prefix=None):
    """Turn DRF's nested error detail into a flat list of field/message pairs."""
    errors = []
    if isinstance(detail, dict):
        for field, value in detail.items():
            name = f"{prefix}.{field}" if prefix else str(field)
            errors.extend(flatten_validation_errors(value, name))
    elif isinstance(detail, list):
        for index, value in enumerate(detail):
            if isinstance(value, (dict, list)):
                name = f"{prefix}.{index}" if prefix else str(index)
                errors.extend(flatten_validation_errors(value, name))
            else:
                errors.append({'field': prefix, 'message': str(value)})
    else:
        errors.append({'field': prefix, 'message': str(detail)})
    return errors


def translate_integrity_error(exc):
    """
    Map a database constraint violation onto the nearest domain error.

    PostgreSQL exposes SQLSTATE codes through ``pgcode``; SQLite only gives a
    message, so both are inspected.
    """
    cause = exc.__cause__
    code = getattr(cause, 'pgcode', None)
    text = str(exc)

    if code == UNIQUE_VIOLATION or 'UNIQUE constraint failed' in text:
        match = re.search(r'Key \(([^)]+)\)=', text) or re.search(r'UNIQUE constraint failed: ([\w.,\s]+)', text)
        field = 'field'
        if match:
            field = match.group(1).split(',')[0].strip().split('.')[-1]
        return Conflict(f"A record with this {field} already exists")

    if code == FOREIGN_KEY_VIOLATION or 'FOREIGN KEY constraint failed' in text:
        return BadRequest('Invalid reference to related record')

    return None
