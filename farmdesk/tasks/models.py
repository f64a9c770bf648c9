from django.conf import settings
from django.db import models
from django.utils import timezone
from farmdesk.farms.models import Farm


class Task(models.Model):
    """Work item of a farm, optionally linked to an animal, crop or inventory item"""
    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('in_progress', 'In Progress'),
        ('completed', 'Completed'),
        ('cancelled', 'Cancelled'),
    ]

    PRIORITY_CHOICES = [
        ('low', 'Low'),
        ('medium', 'Medium'),
        ('high', 'High'),
    ]

    CATEGORY_CHOICES = [
        ('animal', 'Animal'),
        ('crop', 'Crop'),
        ('inventory', 'Inventory'),
        ('general', 'General'),
    ]

    farm = models.ForeignKey(Farm, on_delete=models.CASCADE, related_name='tasks')
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    due_date = models.DateField()
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending')
    priority = models.CharField(max_length=10, choices=PRIORITY_CHOICES, default='medium')
    assigned_to = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='assigned_tasks')
    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES, default='general')
    related_id = models.PositiveIntegerField(null=True, blank=True, help_text="ID of the animal, crop or inventory item the task refers to")
    completed_at = models.DateTimeField(null=True, blank=True)
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='created_tasks')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'tasks'
        ordering = ['-due_date', '-id']
        indexes = [
            models.Index(fields=['farm', 'status', 'due_date'], name='task_farm_status_due_idx'),
        ]

    def __str__(self):
        return self.title

    def save(self, *args, **kwargs):
        if self.status == 'completed':
            if self.completed_at is None:
                self.completed_at = timezone.now()
        else:
            self.completed_at = None
        update_fields = kwargs.get('update_fields')
        if update_fields is not None and 'status' in update_fields:
            kwargs['update_fields'] = set(update_fields) | {'completed_at'}
        super().save(*args, **kwargs)

    @property
    def is_overdue(self):
        return self.status in ('pending', 'in_progress') and self.due_date < timezone.localdate()
