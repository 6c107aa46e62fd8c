# =============================================================================
# IMPORTS
# =============================================================================
from decimal import Decimal

from rest_framework import serializers

from apps.accounts.serializers import GuideSummarySerializer
from apps.core.utils import average_of
from .models import Listing


# =============================================================================
# READ SERIALIZERS
# =============================================================================
class ListingSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Listing
        fields = [
            'id', 'title', 'tour_fee', 'duration', 'max_group_size', 'city',
            'country', 'category', 'images', 'is_active',
        ]
        read_only_fields = fields


class ListingSerializer(serializers.ModelSerializer):
    guide = GuideSummarySerializer(read_only=True)
    average_rating = serializers.SerializerMethodField()
    review_count = serializers.SerializerMethodField()

    class Meta:
        model = Listing
        fields = [
            'id', 'title', 'description', 'itinerary', 'tour_fee', 'duration',
            'meeting_point', 'max_group_size', 'images', 'city', 'country',
            'category', 'is_active', 'guide', 'average_rating', 'review_count',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields

    def get_average_rating(self, obj):
        # Querysets from the listing service carry the annotation already
        if hasattr(obj, 'average_rating'):
            return obj.average_rating or 0
        return average_of(obj.reviews.all())

    def get_review_count(self, obj):
        if hasattr(obj, 'review_count'):
            return obj.review_count
        return obj.reviews.count()


class MyListingSerializer(ListingSerializer):
    booking_count = serializers.IntegerField(read_only=True)

    class Meta(ListingSerializer.Meta):
        fields = ListingSerializer.Meta.fields + ['booking_count']
        read_only_fields = fields


# =============================================================================
# WRITE SERIALIZERS
# =============================================================================
class ListingCreateSerializer(serializers.ModelSerializer):
    title = serializers.CharField(min_length=5, max_length=200)
    description = serializers.CharField(min_length=20, max_length=2000)
    itinerary = serializers.CharField(required=False, allow_blank=True)
    tour_fee = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal('0.00')
    )
    duration = serializers.IntegerField(min_value=1, max_value=24)
    max_group_size = serializers.IntegerField(min_value=1, max_value=50)
    images = serializers.ListField(child=serializers.URLField(), required=False)
    category = serializers.ListField(child=serializers.CharField(max_length=50), min_length=1)

    class Meta:
        model = Listing
        fields = [
            'title', 'description', 'itinerary', 'tour_fee', 'duration',
            'meeting_point', 'max_group_size', 'images', 'city', 'country',
            'category',
        ]


class ListingUpdateSerializer(ListingCreateSerializer):
    is_active = serializers.BooleanField(required=False)

    class Meta(ListingCreateSerializer.Meta):
        fields = ListingCreateSerializer.Meta.fields + ['is_active']
