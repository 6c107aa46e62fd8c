from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView

from apps.core.responses import success_response
from services.cloudinary_service import get_media_service
from .serializers import DeleteUploadSerializer, MultipleUploadSerializer, SingleUploadSerializer
from .services import UploadService


class UploadServiceMixin:
    permission_classes = [IsAuthenticated]
    parser_classes = [MultiPartParser, FormParser]

    def get_upload_service(self):
        return UploadService(get_media_service())


class SingleUploadView(UploadServiceMixin, APIView):

    def post(self, request):
        serializer = SingleUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = self.get_upload_service().upload(serializer.validated_data['image'])
        return success_response(result, "Image uploaded successfully")


class MultipleUploadView(UploadServiceMixin, APIView):

    def post(self, request):
        serializer = MultipleUploadSerializer(data={'images': request.FILES.getlist('images')})
        serializer.is_valid(raise_exception=True)

        results = self.get_upload_service().upload_many(serializer.validated_data['images'])
        return success_response(results, "Images uploaded successfully")


class DeleteUploadView(UploadServiceMixin, APIView):
    parser_classes = [JSONParser, FormParser, MultiPartParser]

    def delete(self, request):
        serializer = DeleteUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        public_id = serializer.validated_data['public_id']
        deleted = self.get_upload_service().delete(public_id, request.user)
        return success_response({'public_id': public_id, 'deleted': deleted}, "Image deleted successfully")
