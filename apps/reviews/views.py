from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated

from apps.accounts.mixins import PublicActionsMixin
from apps.accounts.permissions import IsTourist, IsTouristOrAdmin
from apps.core.mixins import EnvelopeListMixin
from apps.core.responses import created_response, success_response
from .filters import ReviewFilter
from .serializers import ReviewCreateSerializer, ReviewSerializer, ReviewUpdateSerializer
from .services import ReviewService


class ReviewViewSet(PublicActionsMixin, EnvelopeListMixin, viewsets.GenericViewSet):
    """
    API endpoint for tour reviews.
    Reading is public; tourists review their completed bookings.
    """
    serializer_class = ReviewSerializer
    filterset_class = ReviewFilter
    permission_classes = [IsAuthenticated]
    lookup_value_regex = '[0-9a-fA-F-]{36}'

    public_actions = ('list', 'retrieve', 'guide')
    action_permissions = {
        'create': [IsTourist],
        'my': [IsTourist],
        'partial_update': [IsTourist],
        'destroy': [IsTouristOrAdmin],
    }

    def get_queryset(self):
        queryset = ReviewService.base_queryset()
        if self.action == 'my':
            return queryset.filter(tourist=self.request.user)
        return queryset

    def list(self, request):
        queryset = self.filter_queryset(self.get_queryset())
        return self.paginated_response(queryset, message="Reviews retrieved successfully")

    def create(self, request):
        serializer = ReviewCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        review = ReviewService.create_review(request.user, **serializer.validated_data)
        return created_response(ReviewSerializer(review).data, "Review submitted successfully")

    @action(detail=False, methods=['get'], url_path=r'guide/(?P<guide_id>[0-9a-fA-F-]{36})')
    def guide(self, request, guide_id=None):
        queryset, summary = ReviewService.guide_reviews(guide_id)
        page = self.paginate_queryset(queryset)
        data = {'reviews': ReviewSerializer(page, many=True).data, **summary}
        return success_response(
            data, "Guide reviews retrieved successfully",
            meta={'pagination': self.paginator.get_pagination_meta()},
        )

    @action(detail=False, methods=['get'])
    def my(self, request):
        return self.paginated_response(self.get_queryset(), message="Your reviews retrieved successfully")

    def retrieve(self, request, pk=None):
        review = ReviewService.get_review(pk)
        return success_response(ReviewSerializer(review).data, "Review retrieved successfully")

    def partial_update(self, request, pk=None):
        serializer = ReviewUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        review = ReviewService.update_review(pk, request.user, serializer.validated_data)
        return success_response(ReviewSerializer(review).data, "Review updated successfully")

    def destroy(self, request, pk=None):
        ReviewService.delete_review(pk, request.user)
        return success_response(message="Review deleted successfully")
