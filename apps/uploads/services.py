import logging

from apps.core.exceptions import InternalError
from services.cloudinary_service import MediaProviderError

logger = logging.getLogger(__name__)


class UploadService:
    """Image uploads through the media gateway."""

    def __init__(self, gateway):
        self.gateway = gateway

    def upload(self, image):
        try:
            return self.gateway.upload(image)
        except MediaProviderError as exc:
            raise InternalError(f"Upload failed: {exc}")

    def upload_many(self, images):
        return [self.upload(image) for image in images]

    def delete(self, public_id, user):
        try:
            deleted = self.gateway.delete(public_id)
        except MediaProviderError as exc:
            raise InternalError(f"Delete failed: {exc}")
        logger.info(f"Account {user.id} deleted media {public_id}")
        return deleted
