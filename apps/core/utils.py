# =============================================================================
# IMPORTS
# =============================================================================
import json
from decimal import Decimal, ROUND_HALF_UP

from django.db import connection
from django.db.models import Avg, Count, FloatField, IntegerField, OuterRef, Q, Subquery, Sum, Value
from django.db.models.functions import Coalesce


# =============================================================================
# QUERY HELPERS
# =============================================================================
def json_array_contains(field, value):
    """
    Filter rows whose JSON list ``field`` holds ``value``.

    PostgreSQL supports containment on jsonb directly; SQLite does not, so
    there the quoted value is matched against the serialized list.
    """
    if connection.features.supports_json_field_contains:
        return Q(**{f"{field}__contains": [value]})
    return Q(**{f"{field}__icontains": json.dumps(value)})


def search_filter(term, *fields):
    """Case-insensitive substring match of ``term`` over any of ``fields``."""
    query = Q()
    for field in fields:
        query |= Q(**{f"{field}__icontains": term})
    return query


def average_subquery(model, fk_field, value_field='rating'):
    """Average of ``value_field`` over ``model`` rows pointing at the outer row."""
    rows = (
        model.objects.filter(**{fk_field: OuterRef('pk')})
        .order_by()
        .values(fk_field)
        .annotate(value=Avg(value_field))
        .values('value')
    )
    return Coalesce(Subquery(rows, output_field=FloatField()), Value(0.0))


def count_subquery(model, fk_field, **filters):
    rows = (
        model.objects.filter(**{fk_field: OuterRef('pk')}, **filters)
        .order_by()
        .values(fk_field)
        .annotate(value=Count('pk'))
        .values('value')
    )
    return Coalesce(Subquery(rows, output_field=IntegerField()), Value(0))


def sum_of(queryset, field):
    """Sum ``field`` over ``queryset``, returning Decimal('0.00') for empty sets."""
    return queryset.aggregate(total=Sum(field))['total'] or Decimal('0.00')


def average_of(queryset, field='rating'):
    return queryset.aggregate(avg=Avg(field))['avg'] or 0


# =============================================================================
# MONEY
# =============================================================================
def to_minor_units(amount):
    """Convert a Decimal amount into integer cents, rounding half up."""
    value = Decimal(str(amount)) * 100
    return int(value.quantize(Decimal('1'), rounding=ROUND_HALF_UP))
