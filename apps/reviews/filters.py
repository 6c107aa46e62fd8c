import django_filters

from .models import Review


class ReviewFilter(django_filters.FilterSet):
    guide_id = django_filters.UUIDFilter(field_name='guide_id')
    listing_id = django_filters.UUIDFilter(field_name='listing_id')
    rating = django_filters.NumberFilter(field_name='rating')

    class Meta:
        model = Review
        fields = ['rating']
