from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView

from apps.accounts.permissions import IsAdmin, IsGuide, IsTourist
from apps.accounts.serializers import GuideListSerializer, UserSerializer
from apps.bookings.serializers import BookingSerializer
from apps.core.responses import success_response
from apps.reviews.serializers import ReviewSerializer
from .services import DashboardService


# =============================================================================
# PAYLOAD BUILDERS
# =============================================================================
def admin_payload():
    dashboard = DashboardService.admin_dashboard()
    return {
        'stats': dashboard['stats'],
        'recent_bookings': BookingSerializer(dashboard['recent_bookings'], many=True).data,
        'recent_users': UserSerializer(dashboard['recent_users'], many=True).data,
        'top_guides': GuideListSerializer(dashboard['top_guides'], many=True).data,
    }


def guide_payload(user):
    dashboard = DashboardService.guide_dashboard(user)
    return {
        'stats': dashboard['stats'],
        'upcoming_bookings': BookingSerializer(dashboard['upcoming_bookings'], many=True).data,
        'recent_reviews': ReviewSerializer(dashboard['recent_reviews'], many=True).data,
    }


def tourist_payload(user):
    dashboard = DashboardService.tourist_dashboard(user)
    return {
        'stats': dashboard['stats'],
        'upcoming_trips': BookingSerializer(dashboard['upcoming_trips'], many=True).data,
        'past_trips': BookingSerializer(dashboard['past_trips'], many=True).data,
    }


# =============================================================================
# VIEWS
# =============================================================================
class DashboardView(APIView):
    """Dashboard of the caller's own role."""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        user = request.user
        if user.is_admin:
            data = admin_payload()
        elif user.is_guide:
            data = guide_payload(user)
        else:
            data = tourist_payload(user)
        return success_response(data, "Dashboard retrieved successfully")


class AdminDashboardView(APIView):
    permission_classes = [IsAdmin]

    def get(self, request):
        return success_response(admin_payload(), "Admin dashboard retrieved successfully")


class GuideDashboardView(APIView):
    permission_classes = [IsGuide]

    def get(self, request):
        return success_response(guide_payload(request.user), "Guide dashboard retrieved successfully")


class TouristDashboardView(APIView):
    permission_classes = [IsTourist]

    def get(self, request):
        return success_response(tourist_payload(request.user), "Tourist dashboard retrieved successfully")
