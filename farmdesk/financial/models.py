from django.conf import settings
from django.db import models
from farmdesk.farms.models import Farm


class Cost(models.Model):
    """Expense recorded against a farm"""
    CATEGORY_CHOICES = [
        ('feed', 'Feed'),
        ('medicine', 'Medicine'),
        ('seeds', 'Seeds'),
        ('fertilizer', 'Fertilizer'),
        ('equipment', 'Equipment'),
        ('labor', 'Labor'),
        ('fuel', 'Fuel'),
        ('maintenance', 'Maintenance'),
        ('utilities', 'Utilities'),
        ('transport', 'Transport'),
        ('veterinary', 'Veterinary'),
        ('other', 'Other'),
    ]

    PAYMENT_METHOD_CHOICES = [
        ('cash', 'Cash'),
        ('bank_transfer', 'Bank Transfer'),
        ('card', 'Card'),
        ('check', 'Check'),
        ('other', 'Other'),
    ]

    farm = models.ForeignKey(Farm, on_delete=models.CASCADE, related_name='costs')
    date = models.DateField()
    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES, default='other')
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    description = models.CharField(max_length=255)
    supplier = models.CharField(max_length=255, blank=True)
    payment_method = models.CharField(max_length=20, choices=PAYMENT_METHOD_CHOICES, blank=True)
    document_number = models.CharField(max_length=100, blank=True)
    notes = models.TextField(blank=True)
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='costs')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'costs'
        ordering = ['-date', '-id']
        indexes = [
            models.Index(fields=['farm', 'date'], name='cost_farm_date_idx'),
            models.Index(fields=['farm', 'category'], name='cost_farm_category_idx'),
        ]

    def __str__(self):
        return f"{self.description} ({self.amount})"
