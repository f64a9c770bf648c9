"""
Test utilities and factories for creating test data
"""
import random
import string
from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.test import TestCase, TransactionTestCase
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from farmdesk.animals.models import Animal, Vaccination
from farmdesk.crops.models import Crop
from farmdesk.farms.access import assign_user_to_farm, set_user_permission
from farmdesk.farms.models import Farm, UserFarm, AccessLevel
from farmdesk.financial.models import Cost
from farmdesk.inventory.models import InventoryItem, PurchaseRequest
from farmdesk.planning.models import CalendarEvent, Goal
from farmdesk.tasks.models import Task

User = get_user_model()


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def create_user(username=None, email=None, password='testpass123', role=User.EMPLOYEE, is_superuser=False, **extra):
        """Create a test user"""
        if not username:
            username = f'testuser_{TestDataFactory.random_string(6)}'
        if not email:
            email = f'{username}@test.com'
        return User.objects.create_user(
            username=username,
            email=email,
            password=password,
            role=role,
            is_superuser=is_superuser,
            **extra
        )

    @staticmethod
    def create_super_admin(**kwargs):
        return TestDataFactory.create_user(role=User.SUPER_ADMIN, **kwargs)

    @staticmethod
    def create_farm(name=None, admin=None, created_by=None, **extra):
        """Create a test farm"""
        if not name:
            name = f'Farm_{TestDataFactory.random_string(6)}'
        return Farm.objects.create(
            name=name,
            location=extra.pop('location', 'Test Valley'),
            size=extra.pop('size', Decimal('120.50')),
            admin=admin,
            created_by=created_by or admin,
            **extra
        )

    @staticmethod
    def add_member(user, farm, role=UserFarm.MEMBER, permissions=None, apply_defaults=False):
        """Add a user to a farm, optionally granting {module: level} permissions"""
        membership, _ = assign_user_to_farm(user, farm, role=role, apply_defaults=apply_defaults)
        for module, level in (permissions or {}).items():
            set_user_permission(user, farm, module, level)
        return membership

    @staticmethod
    def create_member(farm, modules=None, level=AccessLevel.FULL, role=User.EMPLOYEE, **kwargs):
        """Create a user who is a member of the farm with `level` on each of `modules`"""
        user = TestDataFactory.create_user(role=role, **kwargs)
        TestDataFactory.add_member(user, farm, permissions={module: level for module in (modules or [])})
        return user

    @staticmethod
    def create_animal(farm, identification_code=None, **extra):
        """Create a test animal"""
        if not identification_code:
            identification_code = f'BR-{TestDataFactory.random_string(5).upper()}'
        defaults = {
            'species': 'cattle',
            'breed': 'Nelore',
            'gender': 'female',
            'birth_date': timezone.localdate() - timedelta(days=700),
            'weight': Decimal('420.00'),
        }
        defaults.update(extra)
        return Animal.objects.create(farm=farm, identification_code=identification_code, **defaults)

    @staticmethod
    def create_crop(farm, name=None, **extra):
        """Create a test crop"""
        defaults = {
            'sector': 'North',
            'area': Decimal('12.50'),
            'planting_date': timezone.localdate() - timedelta(days=30),
            'expected_harvest_date': timezone.localdate() + timedelta(days=90),
        }
        defaults.update(extra)
        return Crop.objects.create(farm=farm, name=name or f'Crop_{TestDataFactory.random_string(6)}', **defaults)

    @staticmethod
    def create_vaccination(animal, vaccine_name='Aftosa', application_date=None, **extra):
        """Create a test vaccination record"""
        return Vaccination.objects.create(
            animal=animal,
            vaccine_name=vaccine_name,
            application_date=application_date or timezone.localdate() - timedelta(days=5),
            **extra
        )

    @staticmethod
    def create_inventory_item(farm, name=None, quantity=Decimal('100.000'), minimum_level=None, **extra):
        """Create a test inventory item"""
        defaults = {'category': 'feed', 'unit': 'kg'}
        defaults.update(extra)
        return InventoryItem.objects.create(
            farm=farm,
            name=name or f'Item_{TestDataFactory.random_string(6)}',
            quantity=quantity,
            minimum_level=minimum_level,
            **defaults
        )

    @staticmethod
    def create_purchase_request(farm, product=None, **extra):
        """Create a test purchase request"""
        defaults = {'quantity': '25kg', 'responsible': 'Joao Santos'}
        defaults.update(extra)
        return PurchaseRequest.objects.create(
            farm=farm,
            product=product or f'Product_{TestDataFactory.random_string(6)}',
            **defaults
        )

    @staticmethod
    def create_task(farm, title=None, due_date=None, **extra):
        """Create a test task"""
        return Task.objects.create(
            farm=farm,
            title=title or f'Task {TestDataFactory.random_string(6)}',
            due_date=due_date or timezone.localdate() + timedelta(days=3),
            **extra
        )

    @staticmethod
    def create_cost(farm, amount=Decimal('150.00'), date=None, **extra):
        """Create a test cost"""
        defaults = {'category': 'feed', 'description': 'Feed purchase'}
        defaults.update(extra)
        return Cost.objects.create(farm=farm, amount=amount, date=date or timezone.localdate(), **defaults)

    @staticmethod
    def create_calendar_event(farm, title=None, date=None, **extra):
        """Create a test calendar event"""
        return CalendarEvent.objects.create(
            farm=farm,
            title=title or f'Event {TestDataFactory.random_string(6)}',
            date=date or timezone.now() + timedelta(days=2),
            **extra
        )

    @staticmethod
    def create_goal(farm, name=None, target_value=Decimal('100.00'), actual_value=Decimal('0.00'), **extra):
        """Create a test goal"""
        defaults = {
            'start_date': timezone.localdate() - timedelta(days=10),
            'end_date': timezone.localdate() + timedelta(days=20),
            'unit': 'hectares',
        }
        defaults.update(extra)
        return Goal.objects.create(
            farm=farm,
            name=name or f'Goal {TestDataFactory.random_string(6)}',
            target_value=target_value,
            actual_value=actual_value,
            **defaults
        )


class AuthenticatedAPIClient(APIClient):
    """APIClient with authentication helper"""

    def authenticate_user(self, user):
        """Authenticate the client with a user"""
        refresh = RefreshToken.for_user(user)
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return self

    def logout(self):
        """Remove authentication"""
        self.credentials()


class FarmFixtureMixin:
    """A farm, its admin and a cleared cache"""

    def setUp(self):
        cache.clear()
        self.client = AuthenticatedAPIClient()
        self.farm_admin = TestDataFactory.create_user(role=User.FARM_ADMIN)
        self.farm = TestDataFactory.create_farm(admin=self.farm_admin)
        TestDataFactory.add_member(self.farm_admin, self.farm, role=UserFarm.ADMIN)
        self.other_farm = TestDataFactory.create_farm(admin=TestDataFactory.create_user(role=User.FARM_ADMIN))

    def tearDown(self):
        cache.clear()


class FarmAPITestCase(FarmFixtureMixin, TestCase):
    """Base test case with a farm, its admin and a cleared cache"""


class FarmTransactionTestCase(FarmFixtureMixin, TransactionTestCase):
    """Farm fixture with real commits, for code that behaves differently inside a transaction"""
