import django_filters

from apps.core.utils import json_array_contains, search_filter
from .models import User, UserRole


class UserFilter(django_filters.FilterSet):
    """Admin user directory filters."""
    role = django_filters.ChoiceFilter(choices=UserRole.choices)
    search = django_filters.CharFilter(method='filter_search')
    city = django_filters.CharFilter(lookup_expr='icontains')
    is_active = django_filters.BooleanFilter()

    class Meta:
        model = User
        fields = ['role', 'city', 'is_active']

    def filter_search(self, queryset, name, value):
        return queryset.filter(search_filter(value, 'name', 'email'))


class GuideFilter(django_filters.FilterSet):
    city = django_filters.CharFilter(lookup_expr='icontains')
    country = django_filters.CharFilter(lookup_expr='icontains')
    language = django_filters.CharFilter(method='filter_tag', field_name='languages')
    expertise = django_filters.CharFilter(method='filter_tag', field_name='expertise')
    min_rate = django_filters.NumberFilter(field_name='daily_rate', lookup_expr='gte')
    max_rate = django_filters.NumberFilter(field_name='daily_rate', lookup_expr='lte')
    search = django_filters.CharFilter(method='filter_search')

    class Meta:
        model = User
        fields = ['city', 'country']

    def filter_tag(self, queryset, name, value):
        return queryset.filter(json_array_contains(name, value))

    def filter_search(self, queryset, name, value):
        return queryset.filter(search_filter(value, 'name', 'bio'))
