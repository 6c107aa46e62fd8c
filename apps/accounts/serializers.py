# =============================================================================
# IMPORTS
# =============================================================================
from rest_framework import serializers

from .models import User, UserRole


# =============================================================================
# READ SERIALIZERS
# =============================================================================
class UserSerializer(serializers.ModelSerializer):
    """Sanitized user record; the password hash is never exposed."""

    class Meta:
        model = User
        fields = [
            'id', 'email', 'role', 'name', 'profile_pic', 'bio', 'languages',
            'phone', 'is_verified', 'is_active', 'expertise', 'daily_rate',
            'city', 'country', 'travel_preferences', 'created_at', 'updated_at',
        ]
        read_only_fields = fields


class PublicProfileSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = [
            'id', 'name', 'role', 'profile_pic', 'bio', 'languages', 'expertise',
            'daily_rate', 'city', 'country', 'is_verified', 'created_at',
        ]
        read_only_fields = fields


class GuideSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = [
            'id', 'name', 'profile_pic', 'bio', 'languages', 'expertise',
            'city', 'country', 'is_verified',
        ]
        read_only_fields = fields


class TouristSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ['id', 'name', 'email', 'profile_pic', 'phone']
        read_only_fields = fields


class GuideListSerializer(PublicProfileSerializer):
    average_rating = serializers.FloatField(read_only=True)
    listing_count = serializers.IntegerField(read_only=True)
    review_count = serializers.IntegerField(read_only=True)

    class Meta(PublicProfileSerializer.Meta):
        fields = PublicProfileSerializer.Meta.fields + [
            'average_rating', 'listing_count', 'review_count',
        ]
        read_only_fields = fields


# =============================================================================
# AUTH SERIALIZERS
# =============================================================================
class RegisterSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(min_length=6, write_only=True, trim_whitespace=False)
    name = serializers.CharField(min_length=2, max_length=100)
    role = serializers.ChoiceField(
        choices=[UserRole.TOURIST, UserRole.GUIDE], default=UserRole.TOURIST
    )
    phone = serializers.CharField(max_length=20, required=False, allow_blank=True)
    languages = serializers.ListField(
        child=serializers.CharField(max_length=50), required=False, default=list
    )

    def validate_email(self, value):
        return value.strip().lower()


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)

    def validate_email(self, value):
        return value.strip().lower()


class ChangePasswordSerializer(serializers.Serializer):
    current_password = serializers.CharField(write_only=True, trim_whitespace=False)
    new_password = serializers.CharField(min_length=6, write_only=True, trim_whitespace=False)


# =============================================================================
# PROFILE UPDATE COMMANDS
# =============================================================================
class ProfileUpdateSerializer(serializers.ModelSerializer):
    """Fields every role may change on its own profile."""
    name = serializers.CharField(min_length=2, max_length=100, required=False)
    languages = serializers.ListField(
        child=serializers.CharField(max_length=50), required=False
    )

    class Meta:
        model = User
        fields = ['name', 'bio', 'phone', 'languages', 'profile_pic']


class GuideProfileUpdateSerializer(ProfileUpdateSerializer):
    expertise = serializers.ListField(
        child=serializers.CharField(max_length=50), required=False
    )

    class Meta(ProfileUpdateSerializer.Meta):
        fields = ProfileUpdateSerializer.Meta.fields + [
            'expertise', 'daily_rate', 'city', 'country',
        ]


class TouristProfileUpdateSerializer(ProfileUpdateSerializer):
    travel_preferences = serializers.ListField(
        child=serializers.CharField(max_length=50), required=False
    )

    class Meta(ProfileUpdateSerializer.Meta):
        fields = ProfileUpdateSerializer.Meta.fields + ['travel_preferences']


PROFILE_UPDATE_COMMANDS = {
    UserRole.TOURIST: TouristProfileUpdateSerializer,
    UserRole.GUIDE: GuideProfileUpdateSerializer,
    UserRole.ADMIN: ProfileUpdateSerializer,
}


def profile_update_serializer_for(user):
    return PROFILE_UPDATE_COMMANDS.get(user.role, ProfileUpdateSerializer)


class UserStatusSerializer(serializers.Serializer):
    is_active = serializers.BooleanField()
