from django.conf import settings
from django.db import models
from django.db.models import Max
from farmdesk.farms.models import Farm


class Animal(models.Model):
    """Livestock animal registered on a farm"""
    GENDER_CHOICES = [
        ('male', 'Male'),
        ('female', 'Female'),
    ]

    STATUS_CHOICES = [
        ('healthy', 'Healthy'),
        ('sick', 'Sick'),
        ('treatment', 'Under Treatment'),
        ('quarantine', 'Quarantine'),
        ('pregnant', 'Pregnant'),
    ]

    REMOVAL_REASON_CHOICES = [
        ('sold', 'Sold'),
        ('dead', 'Dead'),
        ('slaughtered', 'Slaughtered'),
        ('transferred', 'Transferred'),
        ('other', 'Other'),
    ]

    farm = models.ForeignKey(Farm, on_delete=models.CASCADE, related_name='animals')
    identification_code = models.CharField(max_length=50)
    species = models.CharField(max_length=50)
    breed = models.CharField(max_length=100, blank=True)
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES)
    birth_date = models.DateField(null=True, blank=True)
    weight = models.DecimalField(max_digits=8, decimal_places=2, null=True, blank=True, help_text="Weight in kg")
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='healthy')
    last_vaccine_date = models.DateField(null=True, blank=True)
    notes = models.TextField(blank=True)
    removed_at = models.DateField(null=True, blank=True)
    removal_reason = models.CharField(max_length=20, choices=REMOVAL_REASON_CHOICES, blank=True)
    removal_notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'animals'
        ordering = ['identification_code']
        unique_together = [['farm', 'identification_code']]
        indexes = [
            models.Index(fields=['farm', 'status'], name='animal_farm_status_idx'),
            models.Index(fields=['farm', 'removed_at'], name='animal_farm_removed_idx'),
        ]

    def __str__(self):
        return f"{self.identification_code} ({self.species})"

    @property
    def is_removed(self):
        return self.removed_at is not None

    def refresh_last_vaccine_date(self):
        """Set last_vaccine_date from the latest completed vaccination"""
        latest = self.vaccinations.filter(status=Vaccination.COMPLETED).aggregate(latest=Max('application_date'))['latest']
        if latest != self.last_vaccine_date:
            self.last_vaccine_date = latest
            self.save(update_fields=['last_vaccine_date', 'updated_at'])


class Vaccination(models.Model):
    """A vaccine dose applied to, or scheduled for, an animal"""
    SCHEDULED = 'scheduled'
    COMPLETED = 'completed'
    MISSED = 'missed'
    CANCELLED = 'cancelled'

    STATUS_CHOICES = [
        (SCHEDULED, 'Scheduled'),
        (COMPLETED, 'Completed'),
        (MISSED, 'Missed'),
        (CANCELLED, 'Cancelled'),
    ]

    farm = models.ForeignKey(Farm, on_delete=models.CASCADE, related_name='vaccinations')
    animal = models.ForeignKey(Animal, on_delete=models.CASCADE, related_name='vaccinations')
    vaccine_name = models.CharField(max_length=100)
    application_date = models.DateField()
    next_application_date = models.DateField(null=True, blank=True)
    dose_number = models.PositiveSmallIntegerField(default=1)
    batch_number = models.CharField(max_length=50, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=COMPLETED)
    notes = models.TextField(blank=True)
    applied_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
                                   related_name='vaccinations_applied')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'animal_vaccinations'
        ordering = ['-application_date', '-id']
        indexes = [
            models.Index(fields=['animal', 'application_date'], name='vaccination_animal_date_idx'),
            models.Index(fields=['farm', 'next_application_date'], name='vaccination_farm_next_idx'),
        ]

    def __str__(self):
        return f"{self.vaccine_name} - {self.animal.identification_code} ({self.application_date})"

    def save(self, *args, **kwargs):
        self.farm_id = self.animal.farm_id
        super().save(*args, **kwargs)
        self.animal.refresh_last_vaccine_date()

    def delete(self, *args, **kwargs):
        animal = self.animal
        result = super().delete(*args, **kwargs)
        animal.refresh_last_vaccine_date()
        return result
