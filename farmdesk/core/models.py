from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """Farm platform user with a global role"""
    SUPER_ADMIN = 'super_admin'
    FARM_ADMIN = 'farm_admin'
    MANAGER = 'manager'
    EMPLOYEE = 'employee'
    VETERINARIAN = 'veterinarian'
    AGRONOMIST = 'agronomist'
    CONSULTANT = 'consultant'

    ROLE_CHOICES = [
        (SUPER_ADMIN, 'Super Admin'),
        (FARM_ADMIN, 'Farm Admin'),
        (MANAGER, 'Manager'),
        (EMPLOYEE, 'Employee'),
        (VETERINARIAN, 'Veterinarian'),
        (AGRONOMIST, 'Agronomist'),
        (CONSULTANT, 'Consultant'),
    ]

    LANGUAGE_CHOICES = [
        ('pt', 'Portuguese'),
        ('en', 'English'),
    ]

    name = models.CharField(max_length=255, blank=True)
    phone = models.CharField(max_length=20, blank=True, null=True)
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=EMPLOYEE)
    language = models.CharField(max_length=5, choices=LANGUAGE_CHOICES, default='pt')
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'users'

    @property
    def is_super_admin(self):
        return self.role == self.SUPER_ADMIN or self.is_superuser

    def get_display_name(self):
        return self.name or self.get_full_name() or self.username


class AuditLog(models.Model):
    """Audit log for critical operations"""
    ACTION_CHOICES = [
        ('create', 'Create'),
        ('update', 'Update'),
        ('delete', 'Delete'),
        ('login', 'Login'),
        ('login_failed', 'Login Failed'),
        ('login_locked', 'Login Locked'),
        ('logout', 'Logout'),
        ('password_change', 'Password Change'),
        ('permission_change', 'Permission Change'),
        ('membership_change', 'Membership Change'),
        ('animal_remove', 'Animal Removed'),
        ('inventory_transaction', 'Inventory Transaction'),
    ]

    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, related_name='audit_logs')
    action = models.CharField(max_length=50, choices=ACTION_CHOICES)
    model_name = models.CharField(max_length=100)
    object_id = models.CharField(max_length=100)
    object_name = models.CharField(max_length=255, blank=True, null=True, help_text="Human-readable name of the object (e.g., animal code, farm name)")
    farm_id = models.BigIntegerField(null=True, blank=True, help_text="Farm the object belongs to, if any")
    changes = models.JSONField(default=dict, blank=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'audit_logs'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['-created_at'], name='audit_log_created_idx'),
            models.Index(fields=['action'], name='audit_log_action_idx'),
            models.Index(fields=['model_name'], name='audit_log_model_idx'),
            models.Index(fields=['farm_id'], name='audit_log_farm_idx'),
        ]

    def __str__(self):
        return f"{self.action} {self.model_name}#{self.object_id}"
