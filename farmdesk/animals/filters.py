import django_filters
from django.db.models import Q
from .models import Animal, Vaccination


class AnimalFilter(django_filters.FilterSet):
    species = django_filters.CharFilter(field_name='species', lookup_expr='iexact')
    status = django_filters.ChoiceFilter(choices=Animal.STATUS_CHOICES)
    gender = django_filters.ChoiceFilter(choices=Animal.GENDER_CHOICES)
    search = django_filters.CharFilter(method='filter_search')

    class Meta:
        model = Animal
        fields = ['species', 'status', 'gender', 'search']

    def filter_search(self, queryset, name, value):
        return queryset.filter(Q(identification_code__icontains=value) | Q(breed__icontains=value))


class RemovedAnimalFilter(django_filters.FilterSet):
    reason = django_filters.ChoiceFilter(field_name='removal_reason', choices=Animal.REMOVAL_REASON_CHOICES)
    date_from = django_filters.DateFilter(field_name='removed_at', lookup_expr='gte')
    date_to = django_filters.DateFilter(field_name='removed_at', lookup_expr='lte')

    class Meta:
        model = Animal
        fields = ['reason', 'date_from', 'date_to']


class VaccinationFilter(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(choices=Vaccination.STATUS_CHOICES)
    vaccine = django_filters.CharFilter(field_name='vaccine_name', lookup_expr='icontains')
    date_from = django_filters.DateFilter(field_name='application_date', lookup_expr='gte')
    date_to = django_filters.DateFilter(field_name='application_date', lookup_expr='lte')
    due_before = django_filters.DateFilter(field_name='next_application_date', lookup_expr='lte')

    class Meta:
        model = Vaccination
        fields = ['animal', 'status', 'vaccine', 'date_from', 'date_to', 'due_before']
