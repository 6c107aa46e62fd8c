from django.conf import settings
from rest_framework import serializers

from apps.core.exceptions import BadRequest

INVALID_TYPE_MESSAGE = "Only JPEG, PNG, and WebP images are allowed"


class UploadedImageField(serializers.ImageField):
    """Image field that rejects disallowed content types and oversized files up front."""

    def to_internal_value(self, data):
        content_type = getattr(data, 'content_type', None)
        if content_type not in settings.UPLOAD_ALLOWED_TYPES:
            raise BadRequest(INVALID_TYPE_MESSAGE)
        if getattr(data, 'size', 0) > settings.UPLOAD_MAX_SIZE:
            raise BadRequest("File too large")
        return super().to_internal_value(data)


class SingleUploadSerializer(serializers.Serializer):
    image = UploadedImageField()


class MultipleUploadSerializer(serializers.Serializer):
    images = serializers.ListField(child=UploadedImageField(), allow_empty=False)

    def validate_images(self, value):
        if len(value) > settings.UPLOAD_MAX_FILES:
            raise serializers.ValidationError(
                f"You can upload at most {settings.UPLOAD_MAX_FILES} images"
            )
        return value


class DeleteUploadSerializer(serializers.Serializer):
    public_id = serializers.CharField(max_length=255)
