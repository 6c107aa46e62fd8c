from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated

from apps.accounts.permissions import IsGuideOrAdmin, IsTourist
from apps.core.mixins import EnvelopeListMixin
from apps.core.responses import created_response, success_response
from .filters import BookingFilter
from .serializers import BookingCreateSerializer, BookingSerializer, BookingStatusSerializer
from .services import BookingService


class BookingViewSet(EnvelopeListMixin, viewsets.GenericViewSet):
    """
    API endpoint for booking requests and their lifecycle.
    """
    serializer_class = BookingSerializer
    filterset_class = BookingFilter
    permission_classes = [IsAuthenticated]
    lookup_value_regex = '[0-9a-fA-F-]{36}'

    def get_queryset(self):
        return BookingService.scoped_queryset(self.request.user)

    def get_permissions(self):
        if self.action == 'create':
            return [IsTourist()]
        if self.action == 'complete':
            return [IsGuideOrAdmin()]
        return super().get_permissions()

    def list(self, request):
        queryset = self.filter_queryset(self.get_queryset())
        return self.paginated_response(queryset, message="Bookings retrieved successfully")

    def create(self, request):
        serializer = BookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        booking = BookingService.create_booking(request.user, **serializer.validated_data)
        return created_response(BookingSerializer(booking).data, "Booking request sent successfully")

    @action(detail=False, methods=['get'])
    def stats(self, request):
        return success_response(BookingService.stats(request.user), "Booking stats retrieved successfully")

    def retrieve(self, request, pk=None):
        booking = BookingService.get_booking(pk, request.user)
        return success_response(BookingSerializer(booking).data, "Booking retrieved successfully")

    @action(detail=True, methods=['patch'], url_path='status')
    def update_status(self, request, pk=None):
        serializer = BookingStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        status = serializer.validated_data['status']
        booking = BookingService.update_status(pk, request.user, status)
        return success_response(
            BookingSerializer(booking).data, f"Booking {status.lower()} successfully"
        )

    @action(detail=True, methods=['patch'])
    def complete(self, request, pk=None):
        booking = BookingService.complete(pk, request.user)
        return success_response(BookingSerializer(booking).data, "Booking marked as completed")
