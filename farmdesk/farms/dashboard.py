"""Farm dashboard counters, limited to the modules the user can read"""
from datetime import timedelta
from decimal import Decimal

from django.db.models import Count, Sum
from django.utils import timezone

from farmdesk.animals.models import Animal
from farmdesk.crops.models import Crop
from farmdesk.financial.models import Cost
from farmdesk.inventory.models import InventoryItem
from farmdesk.inventory.services import critical_items
from farmdesk.planning.models import CalendarEvent, Goal
from farmdesk.tasks.models import Task
from .access import get_module_access_map
from .models import SystemModule, AccessLevel

UPCOMING_EVENT_DAYS = 7


def _count_by(queryset, field):
    rows = queryset.order_by().values(field).annotate(count=Count('id'))
    return {row[field]: row['count'] for row in rows}


def build_dashboard(user, farm):
    access = get_module_access_map(user, farm)
    readable = {module for module, level in access.items() if AccessLevel.satisfies(level, AccessLevel.READ_ONLY)}
    today = timezone.localdate()

    data = {
        'farm': {'id': farm.pk, 'name': farm.name},
        'access': access,
    }

    if SystemModule.ANIMALS in readable:
        animals = Animal.objects.filter(farm=farm, removed_at__isnull=True)
        data['animals'] = {
            'total': animals.count(),
            'by_status': _count_by(animals, 'status'),
            'by_species': _count_by(animals, 'species'),
        }

    if SystemModule.CROPS in readable:
        crops = Crop.objects.filter(farm=farm)
        data['crops'] = {
            'total': crops.count(),
            'by_status': _count_by(crops, 'status'),
            'growing_area': str(crops.filter(status='growing').aggregate(total=Sum('area'))['total'] or Decimal('0.00')),
        }

    if SystemModule.INVENTORY in readable:
        items = InventoryItem.objects.filter(farm=farm)
        data['inventory'] = {
            'total_items': items.count(),
            'critical_items': critical_items(items).count(),
        }

    if SystemModule.TASKS in readable:
        tasks = Task.objects.filter(farm=farm)
        upcoming_events = CalendarEvent.objects.filter(
            farm=farm,
            date__date__gte=today,
            date__date__lte=today + timedelta(days=UPCOMING_EVENT_DAYS),
        )
        data['tasks'] = {
            'pending': tasks.filter(status='pending').count(),
            'in_progress': tasks.filter(status='in_progress').count(),
            'overdue': tasks.filter(status__in=['pending', 'in_progress'], due_date__lt=today).count(),
            'upcoming_events': upcoming_events.count(),
        }

    if SystemModule.FINANCIAL in readable:
        month_costs = Cost.objects.filter(farm=farm, date__year=today.year, date__month=today.month)
        data['financial'] = {
            'month_total': str(month_costs.aggregate(total=Sum('amount'))['total'] or Decimal('0.00')),
            'month_count': month_costs.count(),
        }

    if SystemModule.GOALS in readable:
        data['goals'] = {
            'by_status': _count_by(Goal.objects.filter(farm=farm), 'status'),
        }

    return data
