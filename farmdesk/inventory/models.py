from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone
from farmdesk.farms.models import Farm


class InventoryItem(models.Model):
    """Stocked supply of a farm (feed, medicine, seeds, ...)"""
    CATEGORY_CHOICES = [
        ('feed', 'Feed'),
        ('medicine', 'Medicine'),
        ('seeds', 'Seeds'),
        ('fertilizer', 'Fertilizer'),
        ('pesticide', 'Pesticide'),
        ('equipment', 'Equipment'),
        ('fuel', 'Fuel'),
        ('other', 'Other'),
    ]

    farm = models.ForeignKey(Farm, on_delete=models.CASCADE, related_name='inventory_items')
    name = models.CharField(max_length=255)
    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES, default='other')
    quantity = models.DecimalField(max_digits=12, decimal_places=3, default=Decimal('0.000'))
    unit = models.CharField(max_length=20)
    minimum_level = models.DecimalField(max_digits=12, decimal_places=3, null=True, blank=True)
    unit_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'inventory_items'
        ordering = ['name']
        indexes = [
            models.Index(fields=['farm', 'category'], name='inventory_farm_category_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.quantity} {self.unit})"

    @property
    def is_critical(self):
        return self.minimum_level is not None and self.quantity <= self.minimum_level


class InventoryTransaction(models.Model):
    """Stock movement of an inventory item"""
    TYPE_CHOICES = [
        ('entry', 'Entry'),
        ('withdrawal', 'Withdrawal'),
        ('adjustment', 'Adjustment'),
    ]

    item = models.ForeignKey(InventoryItem, on_delete=models.CASCADE, related_name='transactions')
    transaction_type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    quantity = models.DecimalField(max_digits=12, decimal_places=3)
    previous_quantity = models.DecimalField(max_digits=12, decimal_places=3)
    new_quantity = models.DecimalField(max_digits=12, decimal_places=3)
    reason = models.CharField(max_length=255, blank=True)
    notes = models.TextField(blank=True)
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, related_name='inventory_transactions')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'inventory_transactions'
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"{self.transaction_type} {self.quantity} of {self.item.name}"


class PurchaseRequest(models.Model):
    """Request to buy supplies for a farm, tracked from creation until the purchase is done"""
    NEW = 'new'
    IN_PROGRESS = 'in_progress'
    COMPLETED = 'completed'

    STATUS_CHOICES = [
        (NEW, 'New'),
        (IN_PROGRESS, 'In Progress'),
        (COMPLETED, 'Completed'),
    ]

    # status -> statuses it may move to
    TRANSITIONS = {
        NEW: {IN_PROGRESS, COMPLETED},
        IN_PROGRESS: {COMPLETED},
        COMPLETED: set(),
    }

    farm = models.ForeignKey(Farm, on_delete=models.CASCADE, related_name='purchase_requests')
    product = models.CharField(max_length=255)
    quantity = models.CharField(max_length=50, help_text="Free text, e.g. '25kg' or '1 kit'")
    notes = models.TextField(blank=True)
    responsible = models.CharField(max_length=100)
    needed_by = models.DateField(null=True, blank=True)
    urgent = models.BooleanField(default=False)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=NEW)
    progress_notes = models.TextField(blank=True)
    completed_by_name = models.CharField(max_length=100, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
                                   related_name='purchase_requests')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'purchase_requests'
        ordering = ['-urgent', '-created_at', '-id']
        indexes = [
            models.Index(fields=['farm', 'status'], name='purchase_farm_status_idx'),
        ]

    def __str__(self):
        return f"{self.product} ({self.quantity}) - {self.status}"

    def save(self, *args, **kwargs):
        if self.status == self.COMPLETED and self.completed_at is None:
            self.completed_at = timezone.now()
        elif self.status != self.COMPLETED:
            self.completed_at = None
        super().save(*args, **kwargs)
