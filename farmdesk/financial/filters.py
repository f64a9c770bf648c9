import django_filters
from django.db.models import Q
from .models import Cost


class CostFilter(django_filters.FilterSet):
    category = django_filters.ChoiceFilter(choices=Cost.CATEGORY_CHOICES)
    date_from = django_filters.DateFilter(field_name='date', lookup_expr='gte')
    date_to = django_filters.DateFilter(field_name='date', lookup_expr='lte')
    search = django_filters.CharFilter(method='filter_search')

    class Meta:
        model = Cost
        fields = ['category', 'date_from', 'date_to', 'search']

    def filter_search(self, queryset, name, value):
        return queryset.filter(
            Q(description__icontains=value) |
            Q(supplier__icontains=value) |
            Q(document_number__icontains=value)
        )
