import django_filters
from django.db.models import Q
from .models import Crop


class CropFilter(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(choices=Crop.STATUS_CHOICES)
    sector = django_filters.CharFilter(field_name='sector', lookup_expr='iexact')
    search = django_filters.CharFilter(method='filter_search')

    class Meta:
        model = Crop
        fields = ['status', 'sector', 'search']

    def filter_search(self, queryset, name, value):
        return queryset.filter(Q(name__icontains=value) | Q(sector__icontains=value))
