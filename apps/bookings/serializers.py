# =============================================================================
# IMPORTS
# =============================================================================
from django.utils import timezone
from rest_framework import serializers

from apps.accounts.serializers import GuideSummarySerializer, TouristSummarySerializer
from apps.listings.serializers import ListingSummarySerializer
from .models import Booking, BookingStatus

TIME_FORMAT = '%H:%M'


# =============================================================================
# READ SERIALIZERS
# =============================================================================
class BookingSerializer(serializers.ModelSerializer):
    listing = ListingSummarySerializer(read_only=True)
    tourist = TouristSummarySerializer(read_only=True)
    guide = GuideSummarySerializer(read_only=True)
    start_time = serializers.TimeField(format=TIME_FORMAT, read_only=True)
    end_time = serializers.TimeField(format=TIME_FORMAT, read_only=True)
    payment_status = serializers.SerializerMethodField()
    has_review = serializers.SerializerMethodField()

    class Meta:
        model = Booking
        fields = [
            'id', 'listing', 'tourist', 'guide', 'booking_date', 'start_time',
            'end_time', 'number_of_people', 'total_amount', 'status',
            'special_requests', 'payment_status', 'has_review',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields

    def get_payment_status(self, obj):
        payment = getattr(obj, 'payment', None)
        return payment.status if payment else None

    def get_has_review(self, obj):
        return hasattr(obj, 'review')


class BookingBriefSerializer(serializers.ModelSerializer):
    listing_title = serializers.CharField(source='listing.title', read_only=True)
    start_time = serializers.TimeField(format=TIME_FORMAT, read_only=True)

    class Meta:
        model = Booking
        fields = [
            'id', 'listing_title', 'booking_date', 'start_time',
            'number_of_people', 'total_amount', 'status',
        ]
        read_only_fields = fields


# =============================================================================
# WRITE SERIALIZERS
# =============================================================================
class BookingCreateSerializer(serializers.Serializer):
    listing_id = serializers.UUIDField()
    booking_date = serializers.DateField()
    start_time = serializers.TimeField(input_formats=[TIME_FORMAT])
    end_time = serializers.TimeField(input_formats=[TIME_FORMAT], required=False, allow_null=True)
    number_of_people = serializers.IntegerField(min_value=1, max_value=50, default=1)
    special_requests = serializers.CharField(
        max_length=500, required=False, allow_blank=True, default=""
    )

    def validate_booking_date(self, value):
        if value <= timezone.localdate():
            raise serializers.ValidationError("Booking date must be in the future")
        return value

    def validate(self, attrs):
        end_time = attrs.get('end_time')
        if end_time and end_time <= attrs['start_time']:
            raise serializers.ValidationError({'end_time': "End time must be after start time"})
        return attrs


class BookingStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(
        choices=[BookingStatus.CONFIRMED, BookingStatus.CANCELLED]
    )
