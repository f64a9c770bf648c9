import django_filters
from .models import AuditLog


class AuditLogFilter(django_filters.FilterSet):
    action = django_filters.CharFilter(field_name='action')
    model = django_filters.CharFilter(field_name='model_name', lookup_expr='iexact')
    farm = django_filters.NumberFilter(field_name='farm_id')
    user = django_filters.NumberFilter(field_name='user_id')
    date_from = django_filters.DateFilter(field_name='created_at', lookup_expr='date__gte')
    date_to = django_filters.DateFilter(field_name='created_at', lookup_expr='date__lte')

    class Meta:
        model = AuditLog
        fields = ['action', 'model', 'farm', 'user', 'date_from', 'date_to']
