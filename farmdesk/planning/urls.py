from django.urls import path
from .views import (
    calendar_event_list_create, calendar_event_detail,
    goal_list_create, goal_detail, goal_status_list
)

urlpatterns = [
    # Calendar events
    path('farms/<int:farm_id>/calendar-events/', calendar_event_list_create, name='calendar-event-list-create'),
    path('farms/<int:farm_id>/calendar-events/<int:pk>/', calendar_event_detail, name='calendar-event-detail'),

    # Goals
    path('farms/<int:farm_id>/goals/', goal_list_create, name='goal-list-create'),
    path('farms/<int:farm_id>/goals/status/<str:goal_status>/', goal_status_list, name='goal-status-list'),
    path('farms/<int:farm_id>/goals/<int:pk>/', goal_detail, name='goal-detail'),
]
