# =============================================================================
# IMPORTS
# =============================================================================
import logging

from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.views import APIView

from apps.core.mixins import EnvelopeListMixin
from apps.core.responses import created_response, success_response
from apps.listings.serializers import ListingSummarySerializer
from apps.reviews.serializers import ReviewSerializer
from .authentication import OptionalJWTAuthentication
from .filters import GuideFilter, UserFilter
from .mixins import PublicActionsMixin
from .models import User
from .permissions import IsAdmin, IsOwnerOrAdmin
from .serializers import (
    ChangePasswordSerializer, GuideListSerializer, LoginSerializer,
    PublicProfileSerializer, RegisterSerializer, UserSerializer,
    UserStatusSerializer, profile_update_serializer_for,
)
from .services import AuthService, UserService
from .tokens import clear_token_cookie, issue_token, set_token_cookie

logger = logging.getLogger(__name__)

UUID_PATTERN = '[0-9a-fA-F-]{36}'


# =============================================================================
# AUTH VIEWS
# =============================================================================
class RegisterView(APIView):
    authentication_classes = []
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = AuthService.register(**serializer.validated_data)
        token = issue_token(user)

        response = created_response(
            {'user': UserSerializer(user).data, 'token': token},
            "Registration successful",
        )
        return set_token_cookie(response, token)


class LoginView(APIView):
    authentication_classes = []
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = AuthService.login(**serializer.validated_data)
        token = issue_token(user)

        response = success_response(
            {'user': UserSerializer(user).data, 'token': token},
            "Login successful",
        )
        return set_token_cookie(response, token)


class LogoutView(APIView):
    authentication_classes = [OptionalJWTAuthentication]
    permission_classes = [AllowAny]

    def post(self, request):
        return clear_token_cookie(success_response(message="Logout successful"))


class MeView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        data = UserSerializer(request.user).data
        data['counts'] = AuthService.account_counts(request.user)
        return success_response(data, "User retrieved successfully")


class ChangePasswordView(APIView):
    permission_classes = [IsAuthenticated]

    def patch(self, request):
        serializer = ChangePasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        AuthService.change_password(
            request.user,
            serializer.validated_data['current_password'],
            serializer.validated_data['new_password'],
        )
        return success_response(message="Password changed successfully")


# =============================================================================
# USER VIEWSET
# =============================================================================
class UserViewSet(PublicActionsMixin, EnvelopeListMixin, viewsets.GenericViewSet):
    """
    Public guide directory and profiles, self-service profile updates and
    admin account management.
    """
    queryset = User.objects.all().order_by('-created_at')
    serializer_class = UserSerializer
    permission_classes = [IsAuthenticated]
    lookup_value_regex = UUID_PATTERN
    owner_field = 'id'

    public_actions = ('guides', 'retrieve')
    action_permissions = {
        'list': [IsAdmin],
        'destroy': [IsAdmin],
        'set_status': [IsAdmin],
        'partial_update': [IsOwnerOrAdmin],
    }

    @property
    def filterset_class(self):
        return GuideFilter if self.action == 'guides' else UserFilter

    def list(self, request):
        queryset = self.filter_queryset(self.get_queryset())
        return self.paginated_response(queryset, message="Users retrieved successfully")

    @action(detail=False, methods=['get'])
    def guides(self, request):
        queryset = self.filter_queryset(UserService.guides_queryset())
        return self.paginated_response(
            queryset, GuideListSerializer, message="Guides retrieved successfully"
        )

    def retrieve(self, request, pk=None):
        profile = UserService.public_profile(pk)

        data = PublicProfileSerializer(profile['user']).data
        data['listings'] = ListingSummarySerializer(profile['listings'], many=True).data
        data['reviews_received'] = ReviewSerializer(profile['reviews'], many=True).data
        data['average_rating'] = profile['average_rating']
        data['counts'] = profile['counts']
        return success_response(data, "User retrieved successfully")

    def partial_update(self, request, pk=None):
        user = UserService.get_user(pk)
        self.check_object_permissions(request, user)

        serializer = profile_update_serializer_for(user)(user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        UserService.update_profile(user, serializer)
        return success_response(UserSerializer(user).data, "Profile updated successfully")

    @action(detail=True, methods=['patch'], url_path='status')
    def set_status(self, request, pk=None):
        serializer = UserStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = UserService.set_status(pk, serializer.validated_data['is_active'])
        return success_response(UserSerializer(user).data, "User status updated successfully")

    def destroy(self, request, pk=None):
        UserService.delete_user(pk)
        return success_response(message="User deleted successfully")
