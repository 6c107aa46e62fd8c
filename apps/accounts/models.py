# =============================================================================
# IMPORTS
# =============================================================================
from decimal import Decimal

from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.core.validators import MinLengthValidator, MinValueValidator
from django.db import models

from apps.core.models import TimeStampedModel


# =============================================================================
# CHOICES
# =============================================================================
class UserRole(models.TextChoices):
    TOURIST = "TOURIST", "Tourist"
    GUIDE = "GUIDE", "Guide"
    ADMIN = "ADMIN", "Admin"


# =============================================================================
# CUSTOM MANAGERS
# =============================================================================
class UserManager(BaseUserManager):
    """Manager for the email-keyed User model."""
    use_in_migrations = True

    @classmethod
    def normalize_email(cls, email):
        return (email or '').strip().lower()

    def _create_user(self, email, password, **extra_fields):
        if not email:
            raise ValueError("An email address is required.")
        user = self.model(email=self.normalize_email(email), **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_user(self, email, password=None, **extra_fields):
        extra_fields.setdefault('role', UserRole.TOURIST)
        extra_fields.setdefault('is_staff', False)
        extra_fields.setdefault('is_superuser', False)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields['role'] = UserRole.ADMIN
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('is_verified', True)
        return self._create_user(email, password, **extra_fields)

    def get_by_natural_key(self, email):
        return self.get(email__iexact=email)

    def find_by_email(self, email):
        return self.filter(email=self.normalize_email(email)).first()

    def guides(self):
        return self.filter(role=UserRole.GUIDE, is_active=True)

    def tourists(self):
        return self.filter(role=UserRole.TOURIST)


# =============================================================================
# USER MODEL
# =============================================================================
class User(AbstractBaseUser, PermissionsMixin, TimeStampedModel):
    """Platform account for tourists, guides and administrators."""
    email = models.EmailField(unique=True)
    name = models.CharField(max_length=100, validators=[MinLengthValidator(2)])
    role = models.CharField(
        max_length=10, choices=UserRole.choices, default=UserRole.TOURIST
    )

    # Profile
    profile_pic = models.URLField(max_length=500, blank=True, default="")
    bio = models.TextField(blank=True, default="")
    languages = models.JSONField(default=list, blank=True)
    phone = models.CharField(max_length=20, blank=True, default="")

    # Guide details
    expertise = models.JSONField(default=list, blank=True)
    daily_rate = models.DecimalField(
        max_digits=10, decimal_places=2, null=True, blank=True,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    city = models.CharField(max_length=100, blank=True, default="")
    country = models.CharField(max_length=100, blank=True, default="")

    # Tourist details
    travel_preferences = models.JSONField(default=list, blank=True)

    # Status
    is_verified = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    EMAIL_FIELD = 'email'
    REQUIRED_FIELDS = ['name']

    class Meta(TimeStampedModel.Meta):
        verbose_name = "User"
        verbose_name_plural = "Users"
        indexes = [
            models.Index(fields=['role'], name='user_role_idx'),
            models.Index(fields=['city'], name='user_city_idx'),
        ]

    def __str__(self):
        return f"{self.name} <{self.email}> ({self.role})"

    def save(self, *args, **kwargs):
        self.email = UserManager.normalize_email(self.email)
        super().save(*args, **kwargs)

    @property
    def is_admin(self):
        return self.role == UserRole.ADMIN

    @property
    def is_guide(self):
        return self.role == UserRole.GUIDE

    @property
    def is_tourist(self):
        return self.role == UserRole.TOURIST

    def get_full_name(self):
        return self.name

    def get_short_name(self):
        return self.name.split(' ')[0] if self.name else self.email
