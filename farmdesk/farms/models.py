from django.conf import settings
from django.db import models


class SystemModule:
    """Functional areas used as the unit of permission granularity"""
    ANIMALS = 'animals'
    CROPS = 'crops'
    INVENTORY = 'inventory'
    TASKS = 'tasks'
    FINANCIAL = 'financial'
    GOALS = 'goals'
    ADMINISTRATION = 'administration'

    CHOICES = [
        (ANIMALS, 'Animals'),
        (CROPS, 'Crops'),
        (INVENTORY, 'Inventory'),
        (TASKS, 'Tasks'),
        (FINANCIAL, 'Financial'),
        (GOALS, 'Goals'),
        (ADMINISTRATION, 'Administration'),
    ]

    ALL = [value for value, _ in CHOICES]


class AccessLevel:
    """Ordered access levels, lowest first"""
    NONE = 'none'
    READ_ONLY = 'read_only'
    EDIT = 'edit'
    MANAGE = 'manage'
    FULL = 'full'

    CHOICES = [
        (NONE, 'No Access'),
        (READ_ONLY, 'Read Only'),
        (EDIT, 'Edit'),
        (MANAGE, 'Manage'),
        (FULL, 'Full Access'),
    ]

    RANK = {value: index for index, (value, _) in enumerate(CHOICES)}

    @classmethod
    def rank(cls, level):
        if level not in cls.RANK:
            raise ValueError(f"Unknown access level: {level}")
        return cls.RANK[level]

    @classmethod
    def satisfies(cls, level, required):
        return cls.rank(level) >= cls.rank(required)


class Farm(models.Model):
    """A farm owning animals, crops, inventory, tasks and costs"""
    TYPE_CHOICES = [
        ('mixed', 'Mixed'),
        ('livestock', 'Livestock'),
        ('crop', 'Crop'),
    ]

    name = models.CharField(max_length=255)
    location = models.CharField(max_length=255, blank=True)
    size = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True, help_text="Area in hectares")
    farm_type = models.CharField(max_length=20, choices=TYPE_CHOICES, default='mixed')
    description = models.TextField(blank=True)
    coordinates = models.CharField(max_length=100, blank=True)
    admin = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='administered_farms')
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='created_farms')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'farms'
        ordering = ['name']

    def __str__(self):
        return self.name


class UserFarm(models.Model):
    """Membership of a user in a farm"""
    ADMIN = 'admin'
    MANAGER = 'manager'
    WORKER = 'worker'
    SPECIALIST = 'specialist'
    MEMBER = 'member'

    ROLE_CHOICES = [
        (ADMIN, 'Admin'),
        (MANAGER, 'Manager'),
        (WORKER, 'Worker'),
        (SPECIALIST, 'Specialist'),
        (MEMBER, 'Member'),
    ]

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='farm_memberships')
    farm = models.ForeignKey(Farm, on_delete=models.CASCADE, related_name='memberships')
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=MEMBER)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'user_farms'
        unique_together = [['user', 'farm']]
        ordering = ['farm', 'user']

    def __str__(self):
        return f"{self.user} @ {self.farm} ({self.role})"


class UserPermission(models.Model):
    """Access level of a user for one module of one farm"""
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='farm_permissions')
    farm = models.ForeignKey(Farm, on_delete=models.CASCADE, related_name='permissions')
    module = models.CharField(max_length=20, choices=SystemModule.CHOICES)
    access_level = models.CharField(max_length=20, choices=AccessLevel.CHOICES, default=AccessLevel.NONE)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'farm_user_permissions'
        unique_together = [['user', 'farm', 'module']]
        ordering = ['farm', 'user', 'module']

    def __str__(self):
        return f"{self.user} {self.module}={self.access_level} @ {self.farm}"
