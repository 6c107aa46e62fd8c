import django_filters

from apps.core.utils import json_array_contains, search_filter
from .models import Listing

SORT_ORDERING = {
    'price': ('tour_fee', '-created_at'),
    'rating': ('-average_rating', '-created_at'),
    'newest': ('-created_at',),
}


class ListingFilter(django_filters.FilterSet):
    """Catalog filters; ``sort_by`` defaults to newest first."""
    city = django_filters.CharFilter(lookup_expr='icontains')
    country = django_filters.CharFilter(lookup_expr='icontains')
    category = django_filters.CharFilter(method='filter_category')
    min_price = django_filters.NumberFilter(field_name='tour_fee', lookup_expr='gte')
    max_price = django_filters.NumberFilter(field_name='tour_fee', lookup_expr='lte')
    duration = django_filters.NumberFilter(field_name='duration', lookup_expr='lte')
    search = django_filters.CharFilter(method='filter_search')
    guide_id = django_filters.UUIDFilter(field_name='guide_id')
    sort_by = django_filters.ChoiceFilter(
        choices=[(key, key) for key in SORT_ORDERING], method='filter_noop'
    )

    class Meta:
        model = Listing
        fields = ['city', 'country']

    def filter_category(self, queryset, name, value):
        return queryset.filter(json_array_contains('category', value))

    def filter_search(self, queryset, name, value):
        return queryset.filter(search_filter(value, 'title', 'description'))

    def filter_noop(self, queryset, name, value):
        return queryset

    def filter_queryset(self, queryset):
        queryset = super().filter_queryset(queryset)
        sort_by = self.form.cleaned_data.get('sort_by') or 'newest'
        return queryset.order_by(*SORT_ORDERING[sort_by])
