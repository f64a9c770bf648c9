from decimal import Decimal, ROUND_HALF_UP

from django.conf import settings
from django.db import models
from django.utils import timezone
from farmdesk.farms.models import Farm


class CalendarEvent(models.Model):
    """Dated event on a farm calendar"""
    EVENT_TYPE_CHOICES = [
        ('general', 'General'),
        ('planting', 'Planting'),
        ('harvest', 'Harvest'),
        ('vaccination', 'Vaccination'),
        ('maintenance', 'Maintenance'),
        ('meeting', 'Meeting'),
        ('other', 'Other'),
    ]

    farm = models.ForeignKey(Farm, on_delete=models.CASCADE, related_name='calendar_events')
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    date = models.DateTimeField()
    end_date = models.DateTimeField(null=True, blank=True)
    all_day = models.BooleanField(default=False)
    event_type = models.CharField(max_length=20, choices=EVENT_TYPE_CHOICES, default='general')
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='calendar_events')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'calendar_events'
        ordering = ['date', 'id']
        indexes = [
            models.Index(fields=['farm', 'date'], name='event_farm_date_idx'),
        ]

    def __str__(self):
        return self.title


class Goal(models.Model):
    """Measurable target of a farm, optionally tied to a crop"""
    UNIT_CHOICES = [
        ('hectares', 'Hectares'),
        ('meters', 'Meters'),
        ('units', 'Units'),
        ('kilograms', 'Kilograms'),
        ('liters', 'Liters'),
        ('percentage', 'Percentage'),
    ]

    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('in_progress', 'In Progress'),
        ('partial', 'Partially Completed'),
        ('completed', 'Completed'),
        ('cancelled', 'Cancelled'),
    ]

    farm = models.ForeignKey(Farm, on_delete=models.CASCADE, related_name='goals')
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    assigned_to = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='assigned_goals')
    start_date = models.DateField()
    end_date = models.DateField()
    target_value = models.DecimalField(max_digits=12, decimal_places=2)
    actual_value = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    unit = models.CharField(max_length=20, choices=UNIT_CHOICES, default='units')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending')
    crop = models.ForeignKey('crops.Crop', on_delete=models.SET_NULL, null=True, blank=True, related_name='goals')
    notes = models.TextField(blank=True)
    completion_date = models.DateTimeField(null=True, blank=True)
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='created_goals')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'goals'
        ordering = ['end_date', 'id']

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        if self.status == 'completed':
            if self.completion_date is None:
                self.completion_date = timezone.now()
        else:
            self.completion_date = None
        super().save(*args, **kwargs)

    @property
    def progress(self):
        """Completion percentage, 0 to 100"""
        if not self.target_value or self.target_value <= 0:
            return 0
        ratio = Decimal(self.actual_value or 0) / Decimal(self.target_value) * 100
        percent = int(ratio.quantize(Decimal('1'), rounding=ROUND_HALF_UP))
        return max(0, min(100, percent))

    @property
    def is_overdue(self):
        return self.status not in ('completed', 'cancelled') and self.end_date < timezone.localdate()
