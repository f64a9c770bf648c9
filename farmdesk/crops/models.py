from django.db import models
from farmdesk.farms.models import Farm


class Crop(models.Model):
    """Crop planted in a sector of a farm"""
    STATUS_CHOICES = [
        ('planned', 'Planned'),
        ('growing', 'Growing'),
        ('harvested', 'Harvested'),
        ('failed', 'Failed'),
    ]

    farm = models.ForeignKey(Farm, on_delete=models.CASCADE, related_name='crops')
    name = models.CharField(max_length=255)
    sector = models.CharField(max_length=100, blank=True)
    area = models.DecimalField(max_digits=10, decimal_places=2, help_text="Area in hectares")
    planting_date = models.DateField()
    expected_harvest_date = models.DateField(null=True, blank=True)
    actual_harvest_date = models.DateField(null=True, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='growing')
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'crops'
        ordering = ['-planting_date', 'name']

    def __str__(self):
        return f"{self.name} ({self.sector})" if self.sector else self.name
