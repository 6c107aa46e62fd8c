from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated

from apps.accounts.mixins import PublicActionsMixin
from apps.accounts.models import UserRole
from apps.accounts.permissions import IsGuide, IsGuideOrAdmin, allow_roles
from apps.core.mixins import EnvelopeListMixin
from apps.core.responses import created_response, success_response
from apps.reviews.serializers import ReviewSerializer
from .filters import ListingFilter
from .serializers import (
    ListingCreateSerializer, ListingSerializer, ListingUpdateSerializer,
    MyListingSerializer,
)
from .services import ListingService

IsListingAuthor = allow_roles(UserRole.GUIDE, message="Only guides can create listings")


class ListingViewSet(PublicActionsMixin, EnvelopeListMixin, viewsets.GenericViewSet):
    """
    API endpoint for the tour catalog.
    Browsing is public; guides manage their own listings.
    """
    serializer_class = ListingSerializer
    filterset_class = ListingFilter
    permission_classes = [IsAuthenticated]
    lookup_value_regex = '[0-9a-fA-F-]{36}'

    public_actions = ('list', 'retrieve')
    action_permissions = {
        'create': [IsListingAuthor],
        'my': [IsGuide],
        'partial_update': [IsGuideOrAdmin],
        'destroy': [IsGuideOrAdmin],
    }

    def get_queryset(self):
        if self.action == 'my':
            return ListingService.guide_queryset(self.request.user)
        return ListingService.public_queryset()

    def get_serializer_class(self):
        if self.action == 'create':
            return ListingCreateSerializer
        if self.action == 'partial_update':
            return ListingUpdateSerializer
        if self.action == 'my':
            return MyListingSerializer
        return ListingSerializer

    def list(self, request):
        queryset = self.filter_queryset(self.get_queryset())
        return self.paginated_response(queryset, message="Listings retrieved successfully")

    def retrieve(self, request, pk=None):
        detail = ListingService.listing_detail(pk)

        data = ListingSerializer(detail['listing']).data
        data['guide']['average_rating'] = detail['guide_average_rating']
        data['reviews'] = ReviewSerializer(detail['reviews'], many=True).data
        data['average_rating'] = detail['average_rating']
        data['counts'] = detail['counts']
        return success_response(data, "Listing retrieved successfully")

    def create(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        listing = ListingService.create_listing(request.user, serializer.validated_data)
        return created_response(ListingSerializer(listing).data, "Listing created successfully")

    @action(detail=False, methods=['get'], url_path='my')
    def my(self, request):
        queryset = self.filter_queryset(self.get_queryset())
        return self.paginated_response(queryset, message="Your listings retrieved successfully")

    def partial_update(self, request, pk=None):
        serializer = self.get_serializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        listing = ListingService.update_listing(pk, request.user, serializer.validated_data)
        return success_response(ListingSerializer(listing).data, "Listing updated successfully")

    def destroy(self, request, pk=None):
        ListingService.delete_listing(pk, request.user)
        return success_response(message="Listing deleted successfully")
