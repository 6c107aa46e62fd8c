# =============================================================================
# IMPORTS
# =============================================================================
from rest_framework import serializers

from apps.accounts.serializers import GuideSummarySerializer, TouristSummarySerializer
from .models import Review


# =============================================================================
# READ SERIALIZERS
# =============================================================================
class ReviewListingSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    title = serializers.CharField()


class ReviewSerializer(serializers.ModelSerializer):
    tourist = TouristSummarySerializer(read_only=True)
    guide = GuideSummarySerializer(read_only=True)
    listing = ReviewListingSerializer(read_only=True)

    class Meta:
        model = Review
        fields = [
            'id', 'booking', 'tourist', 'guide', 'listing', 'rating',
            'comment', 'created_at', 'updated_at',
        ]
        read_only_fields = fields


# =============================================================================
# WRITE SERIALIZERS
# =============================================================================
class ReviewCreateSerializer(serializers.Serializer):
    booking_id = serializers.UUIDField()
    rating = serializers.IntegerField(min_value=1, max_value=5)
    comment = serializers.CharField(min_length=10, max_length=1000)


class ReviewUpdateSerializer(serializers.Serializer):
    rating = serializers.IntegerField(min_value=1, max_value=5, required=False)
    comment = serializers.CharField(min_length=10, max_length=1000, required=False)
