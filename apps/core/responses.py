from rest_framework import status
from rest_framework.response import Response


def success_response(data=None, message="Success", status_code=status.HTTP_200_OK, meta=None):
    """
    Create a standardized success response.

    Args:
        data: Optional response payload
        message: Success message
        status_code: HTTP status code
        meta: Optional metadata such as pagination

    Returns:
        DRF Response with success information
    """
    response_data = {
        "status": "success",
        "message": message,
    }

    if data is not None:
        response_data["data"] = data
    if meta:
        response_data["meta"] = meta

    return Response(response_data, status=status_code)


def created_response(data=None, message="Created successfully"):
    return success_response(data, message, status_code=status.HTTP_201_CREATED)


def error_response(message, errors=None, status_code=status.HTTP_400_BAD_REQUEST, **extra):
    """
    Create a standardized error response.

    Args:
        message: Error message
        errors: Optional list of field errors
        status_code: HTTP status code
        **extra: Additional keys, only used for debug details

    Returns:
        DRF Response with error information
    """
    response_data = {
        "status": "error",
        "message": message,
    }

    if errors:
        response_data["errors"] = errors
    response_data.update(extra)

    return Response(response_data, status=status_code)
