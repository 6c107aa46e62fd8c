# =============================================================================
# IMPORTS
# =============================================================================
import logging

from django.db import transaction

from apps.core.exceptions import Conflict, Forbidden, NotFound, Unauthorized
from apps.core.utils import average_of, average_subquery, count_subquery
from .models import User, UserRole

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


# =============================================================================
# AUTHENTICATION
# =============================================================================
class AuthService:
    """Registration, login and credential management."""

    @staticmethod
    def register(email, password, name, role=UserRole.TOURIST, phone="", languages=None):
        email = User.objects.normalize_email(email)
        if User.objects.filter(email=email).exists():
            raise Conflict("User with this email already exists")

        user = User.objects.create_user(
            email=email,
            password=password,
            name=name,
            role=role,
            phone=phone or "",
            languages=languages or [],
        )
        logger.info(f"Registered {user.role} account {user.id}")
        return user

    @staticmethod
    def login(email, password):
        """
        Return the user for valid credentials.

        Unknown email, deactivated account and wrong password all raise the
        same Unauthorized error.
        """
        user = User.objects.find_by_email(email)
        if user is None:
            # Run the hasher anyway so response time does not reveal the email
            User().set_password(password)
            raise Unauthorized(INVALID_CREDENTIALS)

        if not user.check_password(password) or not user.is_active:
            logger.info(f"Rejected login for account {user.id}")
            raise Unauthorized(INVALID_CREDENTIALS)

        return user

    @staticmethod
    def change_password(user, current_password, new_password):
        if not user.check_password(current_password):
            raise Unauthorized("Current password is incorrect")
        user.set_password(new_password)
        user.save(update_fields=['password', 'updated_at'])
        logger.info(f"Password changed for account {user.id}")

    @staticmethod
    def account_counts(user):
        return {
            'listings': user.listings.count(),
            'bookings_as_tourist': user.tourist_bookings.count(),
            'bookings_as_guide': user.guide_bookings.count(),
            'reviews_received': user.reviews_received.count(),
        }


# =============================================================================
# USER MANAGEMENT
# =============================================================================
class UserService:

    @staticmethod
    def get_user(user_id):
        user = User.objects.filter(pk=user_id).first()
        if user is None:
            raise NotFound("User not found")
        return user

    @staticmethod
    def guides_queryset():
        """Active guides annotated with rating and activity counts."""
        from apps.listings.models import Listing
        from apps.reviews.models import Review

        return User.objects.guides().annotate(
            average_rating=average_subquery(Review, 'guide'),
            review_count=count_subquery(Review, 'guide'),
            listing_count=count_subquery(Listing, 'guide', is_active=True),
        ).order_by('-created_at')

    @staticmethod
    def public_profile(user_id):
        user = UserService.get_user(user_id)
        reviews = user.reviews_received.all()
        return {
            'user': user,
            'listings': user.listings.filter(is_active=True).order_by('-created_at')[:5],
            'reviews': reviews.select_related('tourist', 'listing').order_by('-created_at')[:5],
            'average_rating': average_of(reviews),
            'counts': {
                'listings': user.listings.count(),
                'reviews_received': reviews.count(),
                'bookings_as_guide': user.guide_bookings.count(),
            },
        }

    @staticmethod
    def update_profile(user, serializer):
        serializer.save()
        logger.info(f"Updated profile of account {user.id}")
        return user

    @staticmethod
    def set_status(user_id, is_active):
        user = UserService.get_user(user_id)
        if user.is_admin:
            raise Forbidden("Cannot deactivate admin accounts")
        user.is_active = is_active
        user.save(update_fields=['is_active', 'updated_at'])
        logger.info(f"Account {user.id} {'activated' if is_active else 'deactivated'}")
        return user

    @staticmethod
    @transaction.atomic
    def delete_user(user_id):
        user = UserService.get_user(user_id)
        if user.is_admin:
            raise Forbidden("Cannot delete admin accounts")
        user.delete()
        logger.info(f"Deleted account {user_id}")
