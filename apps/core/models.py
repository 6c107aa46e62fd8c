# =============================================================================
# IMPORTS
# =============================================================================
import uuid

from django.db import models


# =============================================================================
# BASE ABSTRACT MODELS
# =============================================================================
class TimeStampedModel(models.Model):
    """Abstract base model with a UUID primary key and created_at/updated_at fields."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ['-created_at']
