import django_filters
from django.db.models import Q
from .models import Farm, UserPermission


class FarmFilter(django_filters.FilterSet):
    search = django_filters.CharFilter(method='filter_search')
    farm_type = django_filters.ChoiceFilter(choices=Farm.TYPE_CHOICES)

    class Meta:
        model = Farm
        fields = ['search', 'farm_type']

    def filter_search(self, queryset, name, value):
        return queryset.filter(Q(name__icontains=value) | Q(location__icontains=value))


class UserPermissionFilter(django_filters.FilterSet):
    user = django_filters.NumberFilter(field_name='user_id')
    module = django_filters.CharFilter(field_name='module')

    class Meta:
        model = UserPermission
        fields = ['user', 'module']
