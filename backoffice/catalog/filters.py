import django_filters
from django.db.models import Q
from .models import Item


# Public sort keys -> ORM fields
ITEM_ORDERING_FIELDS = {
    'name': 'name',
    'item_code': 'item_code',
    'category_name': 'category__name',
    'sell_price': 'sell_price',
    'created_at': 'created_at',
}
DEFAULT_ITEM_ORDERING = 'name'


def resolve_item_ordering(value):
    """
    Translate an ``ordering`` query value into ORM order_by arguments.

    Accepts one of ITEM_ORDERING_FIELDS, optionally prefixed with "-" for
    descending. Unknown values fall back to name ascending. The primary key is
    appended as a tie-breaker so pages stay stable.
    """
    value = (value or '').strip()
    descending = value.startswith('-')
    key = value[1:] if descending else value

    field = ITEM_ORDERING_FIELDS.get(key)
    if field is None:
        field = ITEM_ORDERING_FIELDS[DEFAULT_ITEM_ORDERING]
        descending = False

    prefix = '-' if descending else ''
    return [f'{prefix}{field}', f'{prefix}pk']


class ItemFilter(django_filters.FilterSet):
    """Filter for Item listings using django-filter"""

    # Search across name, item code and barcode
    search = django_filters.CharFilter(method='filter_search', label='Search')
    category = django_filters.NumberFilter(field_name='category_id', lookup_expr='exact')
    active = django_filters.CharFilter(method='filter_active', label='Active')

    class Meta:
        model = Item
        fields = ['search', 'category', 'active']

    def filter_search(self, queryset, name, value):
        """Case-insensitive substring match on name, item code or barcode"""
        search = (value or '').strip()
        if not search:
            return queryset
        return queryset.filter(
            Q(name__icontains=search) |
            Q(item_code__icontains=search) |
            Q(barcode__icontains=search)
        )

    def filter_active(self, queryset, name, value):
        if value is None or value == '':
            return queryset
        normalized = value.strip().lower()
        if normalized in ('true', '1', 'yes'):
            return queryset.filter(is_active=True)
        if normalized in ('false', '0', 'no'):
            return queryset.filter(is_active=False)
        return queryset
