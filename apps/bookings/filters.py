import django_filters

from .models import Booking, BookingStatus

SORT_FIELDS = ('created_at', 'booking_date', 'total_amount')


class BookingFilter(django_filters.FilterSet):
    """Status and date range filters with a selectable sort key."""
    status = django_filters.ChoiceFilter(choices=BookingStatus.choices)
    start_date = django_filters.DateFilter(field_name='booking_date', lookup_expr='gte')
    end_date = django_filters.DateFilter(field_name='booking_date', lookup_expr='lte')
    sort_by = django_filters.ChoiceFilter(
        choices=[(field, field) for field in SORT_FIELDS], method='filter_noop'
    )
    sort_order = django_filters.ChoiceFilter(
        choices=[('asc', 'asc'), ('desc', 'desc')], method='filter_noop'
    )

    class Meta:
        model = Booking
        fields = ['status']

    def filter_noop(self, queryset, name, value):
        return queryset

    def filter_queryset(self, queryset):
        queryset = super().filter_queryset(queryset)
        sort_by = self.form.cleaned_data.get('sort_by') or 'created_at'
        sort_order = self.form.cleaned_data.get('sort_order') or 'desc'
        prefix = '-' if sort_order == 'desc' else ''
        return queryset.order_by(f"{prefix}{sort_by}")
