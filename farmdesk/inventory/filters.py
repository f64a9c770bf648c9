import django_filters
from .models import InventoryItem, InventoryTransaction, PurchaseRequest
from .services import critical_items


class InventoryItemFilter(django_filters.FilterSet):
    category = django_filters.ChoiceFilter(choices=InventoryItem.CATEGORY_CHOICES)
    search = django_filters.CharFilter(field_name='name', lookup_expr='icontains')
    critical = django_filters.BooleanFilter(method='filter_critical')

    class Meta:
        model = InventoryItem
        fields = ['category', 'search', 'critical']

    def filter_critical(self, queryset, name, value):
        if value:
            return critical_items(queryset)
        return queryset.exclude(pk__in=critical_items(queryset).values('pk'))


class InventoryTransactionFilter(django_filters.FilterSet):
    item = django_filters.NumberFilter(field_name='item_id')
    transaction_type = django_filters.ChoiceFilter(choices=InventoryTransaction.TYPE_CHOICES)
    date_from = django_filters.DateFilter(field_name='created_at', lookup_expr='date__gte')
    date_to = django_filters.DateFilter(field_name='created_at', lookup_expr='date__lte')

    class Meta:
        model = InventoryTransaction
        fields = ['item', 'transaction_type', 'date_from', 'date_to']


class PurchaseRequestFilter(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(choices=PurchaseRequest.STATUS_CHOICES)
    urgent = django_filters.BooleanFilter()
    search = django_filters.CharFilter(field_name='product', lookup_expr='icontains')

    class Meta:
        model = PurchaseRequest
        fields = ['status', 'urgent', 'search']
