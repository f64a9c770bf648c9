import django_filters
from .models import CalendarEvent, Goal


class CalendarEventFilter(django_filters.FilterSet):
    date_from = django_filters.DateFilter(field_name='date', lookup_expr='date__gte')
    date_to = django_filters.DateFilter(field_name='date', lookup_expr='date__lte')
    event_type = django_filters.ChoiceFilter(choices=CalendarEvent.EVENT_TYPE_CHOICES)

    class Meta:
        model = CalendarEvent
        fields = ['date_from', 'date_to', 'event_type']


class GoalFilter(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(choices=Goal.STATUS_CHOICES)
    assigned_to = django_filters.NumberFilter(field_name='assigned_to_id')
    crop = django_filters.NumberFilter(field_name='crop_id')

    class Meta:
        model = Goal
        fields = ['status', 'assigned_to', 'crop']
