from django.conf import settings
from django.http import JsonResponse
from django.utils import timezone
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny

from apps.core.responses import error_response, success_response

API_NAME = "Local Guide API"
API_VERSION = "1.0.0"

ENDPOINT_GROUPS = {
    'auth': '/api/auth',
    'users': '/api/users',
    'listings': '/api/listings',
    'bookings': '/api/bookings',
    'payments': '/api/payments',
    'reviews': '/api/reviews',
    'dashboard': '/api/dashboard',
    'uploads': '/api/uploads',
}


@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def api_root(request):
    return success_response(
        {'name': API_NAME, 'version': API_VERSION, 'endpoints': ENDPOINT_GROUPS},
        "Welcome to the Local Guide API",
    )


@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def health_check(request):
    return success_response(
        {
            'status': 'healthy',
            'environment': settings.ENVIRONMENT,
            'timestamp': timezone.now().isoformat(),
        },
        "Server is running",
    )


@api_view(['GET', 'POST', 'PUT', 'PATCH', 'DELETE'])
@authentication_classes([])
@permission_classes([AllowAny])
def route_not_found(request, path=None):
    return error_response(f"Route {request.path} not found", status_code=404)


def handler404(request, exception=None):
    """Unknown routes outside the API prefix, rendered in the same envelope."""
    return JsonResponse(
        {'status': 'error', 'message': f"Route {request.path} not found"}, status=404
    )
