import io
from unittest import mock

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from PIL import Image

from services.cloudinary_service import MediaProviderError

pytestmark = pytest.mark.django_db


def image_file(name='photo.png', content_type='image/png'):
    buffer = io.BytesIO()
    Image.new('RGB', (4, 4), color='red').save(buffer, format='PNG')
    return SimpleUploadedFile(name, buffer.getvalue(), content_type=content_type)


@pytest.fixture
def media_gateway():
    gateway = mock.Mock()
    gateway.upload.side_effect = lambda file: {
        'url': f"https://res.cloudinary.com/demo/image/upload/local-guide/{file.name}",
        'public_id': f"local-guide/{file.name}",
    }
    gateway.delete.return_value = True
    with mock.patch('apps.uploads.views.get_media_service', return_value=gateway):
        yield gateway


class TestUploads:

    def test_single_upload(self, client_for, guide, media_gateway):
        response = client_for(guide).post('/api/uploads/single', {'image': image_file()}, format='multipart')

        assert response.status_code == 200
        assert response.json()['data']['public_id'] == 'local-guide/photo.png'
        media_gateway.upload.assert_called_once()

    def test_multiple_upload(self, client_for, guide, media_gateway):
        files = [image_file(f'photo{n}.png') for n in range(3)]

        response = client_for(guide).post('/api/uploads/multiple', {'images': files}, format='multipart')

        assert response.status_code == 200
        assert len(response.json()['data']) == 3

    def test_rejects_non_images(self, client_for, guide, media_gateway):
        document = SimpleUploadedFile('notes.pdf', b'%PDF-1.4', content_type='application/pdf')

        response = client_for(guide).post('/api/uploads/single', {'image': document}, format='multipart')

        assert response.status_code == 400
        assert response.json()['message'] == "Only JPEG, PNG, and WebP images are allowed"
        media_gateway.upload.assert_not_called()

    def test_rejects_large_files(self, client_for, guide, media_gateway, settings):
        settings.UPLOAD_MAX_SIZE = 10

        response = client_for(guide).post('/api/uploads/single', {'image': image_file()}, format='multipart')

        assert response.status_code == 400
        assert response.json()['message'] == "File too large"

    def test_too_many_files(self, client_for, guide, media_gateway, settings):
        settings.UPLOAD_MAX_FILES = 2
        files = [image_file(f'photo{n}.png') for n in range(3)]

        response = client_for(guide).post('/api/uploads/multiple', {'images': files}, format='multipart')

        assert response.status_code == 400
        media_gateway.upload.assert_not_called()

    def test_provider_failure(self, client_for, guide, media_gateway):
        media_gateway.upload.side_effect = MediaProviderError('Invalid cloud name')

        response = client_for(guide).post('/api/uploads/single', {'image': image_file()}, format='multipart')

        assert response.status_code == 500
        assert response.json()['message'] == "Upload failed: Invalid cloud name"

    def test_delete(self, client_for, guide, media_gateway):
        response = client_for(guide).delete('/api/uploads/', {'public_id': 'local-guide/photo'}, format='json')

        assert response.status_code == 200
        media_gateway.delete.assert_called_once_with('local-guide/photo')

    def test_requires_login(self, api_client, media_gateway):
        response = api_client.post('/api/uploads/single', {'image': image_file()}, format='multipart')

        assert response.status_code == 401
