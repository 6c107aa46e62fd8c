import logging

import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError
from django.conf import settings

logger = logging.getLogger(__name__)


class MediaProviderError(Exception):
    pass


class CloudinaryService:
    """Upload and delete images on Cloudinary."""

    def __init__(self, cloud_name, api_key, api_secret, folder='local-guide'):
        self.folder = folder
        self.options = {
            'cloud_name': cloud_name,
            'api_key': api_key,
            'api_secret': api_secret,
            'secure': True,
        }

    def upload(self, file, folder=None):
        """
        Upload a file object.

        Returns:
            Dictionary with the secure URL and the Cloudinary public id
        """
        try:
            result = cloudinary.uploader.upload(
                file,
                folder=folder or self.folder,
                resource_type='auto',
                **self.options
            )
        except CloudinaryError as exc:
            logger.error(f"Cloudinary upload failed: {exc}")
            raise MediaProviderError(str(exc)) from exc

        logger.info(f"Uploaded media {result.get('public_id')}")
        return {'url': result['secure_url'], 'public_id': result['public_id']}

    def delete(self, public_id):
        """Delete an asset; returns False when Cloudinary does not know it."""
        try:
            result = cloudinary.uploader.destroy(public_id, **self.options)
        except CloudinaryError as exc:
            logger.error(f"Cloudinary delete failed for {public_id}: {exc}")
            raise MediaProviderError(str(exc)) from exc

        logger.info(f"Deleted media {public_id}: {result.get('result')}")
        return result.get('result') == 'ok'


_media_service = None


def get_media_service():
    """Process-wide media gateway built from settings on first use."""
    global _media_service
    if _media_service is None:
        credentials = settings.CLOUDINARY_STORAGE
        _media_service = CloudinaryService(
            cloud_name=credentials['CLOUD_NAME'],
            api_key=credentials['API_KEY'],
            api_secret=credentials['API_SECRET'],
            folder=settings.UPLOAD_FOLDER,
        )
    return _media_service
