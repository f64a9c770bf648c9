"""
Test suite for Core module
Tests: login lockout, authentication endpoints, profile, user administration, audit logs
"""
import time
from concurrent.futures import ThreadPoolExecutor
from unittest import mock

from django.core.cache import cache
from django.core.cache.backends.locmem import LocMemCache
from django.test import TestCase, override_settings
from rest_framework import status

from farmdesk.core import lockout
from farmdesk.core.models import User, AuditLog
from farmdesk.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from farmdesk.core.utils import create_audit_log
from farmdesk.farms.models import UserFarm

STRONG_PASSWORD = 'Pasture-Gate-2024!'


class LockoutTests(TestCase):
    """Test failure counting and lockout expiry"""

    def setUp(self):
        cache.clear()

    def test_failures_count_down(self):
        self.assertEqual(lockout.register_failure('joao'), (2, 0))
        self.assertEqual(lockout.register_failure('joao'), (1, 0))
        self.assertFalse(lockout.is_locked('joao'))

    def test_third_failure_locks_for_ten_minutes(self):
        lockout.register_failure('joao')
        lockout.register_failure('joao')
        remaining, locked_for = lockout.register_failure('joao')
        self.assertEqual(remaining, 0)
        self.assertEqual(locked_for, 600)
        self.assertTrue(lockout.is_locked('joao'))
        self.assertGreater(lockout.get_lockout_remaining('joao'), 590)

    def test_username_is_case_insensitive(self):
        for _ in range(3):
            lockout.register_failure('Joao')
        self.assertTrue(lockout.is_locked('joao'))
        self.assertTrue(lockout.is_locked(' JOAO '))

    def test_lockout_expires(self):
        for _ in range(3):
            lockout.register_failure('joao')
        later = time.time() + 601
        with mock.patch('farmdesk.core.lockout.time.time', return_value=later):
            self.assertFalse(lockout.is_locked('joao'))
        self.assertEqual(lockout.get_failed_attempts('joao'), 0)

    def test_reset_clears_counter_and_lock(self):
        for _ in range(3):
            lockout.register_failure('joao')
        lockout.reset_attempts('joao')
        self.assertFalse(lockout.is_locked('joao'))
        self.assertEqual(lockout.get_failed_attempts('joao'), 0)

    def test_parallel_failures_are_all_counted(self):
        original_get = LocMemCache.get

        def slow_get(backend, *args, **kwargs):
            time.sleep(0.05)
            return original_get(backend, *args, **kwargs)

        with mock.patch.object(LocMemCache, 'get', slow_get):
            with ThreadPoolExecutor(max_workers=10) as pool:
                results = list(pool.map(lambda _: lockout.register_failure('victim'), range(10)))
        self.assertTrue(lockout.is_locked('victim'))
        self.assertTrue(any(locked_for for _, locked_for in results))

    @override_settings(LOGIN_MAX_ATTEMPTS=5, LOGIN_LOCKOUT_SECONDS=60)
    def test_limits_follow_settings(self):
        for _ in range(4):
            lockout.register_failure('maria')
        self.assertFalse(lockout.is_locked('maria'))
        self.assertEqual(lockout.register_failure('maria'), (0, 60))


class LoginAPITests(TestCase):
    """Test the login endpoint including lockout"""

    def setUp(self):
        cache.clear()
        self.client = AuthenticatedAPIClient()
        self.user = TestDataFactory.create_user(username='farmer', password=STRONG_PASSWORD)

    def login(self, password, username='farmer'):
        return self.client.post('/api/login/', {'username': username, 'password': password}, format='json')

    def test_login_success_returns_tokens_and_user(self):
        response = self.login(STRONG_PASSWORD)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)
        self.assertIn('refresh', response.data)
        self.assertEqual(response.data['user']['username'], 'farmer')
        self.assertNotIn('password', response.data['user'])
        self.assertTrue(AuditLog.objects.filter(action='login', user=self.user).exists())

    def test_failed_login_reports_remaining_attempts(self):
        response = self.login('wrong')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data['attempts_remaining'], 2)
        response = self.login('wrong')
        self.assertEqual(response.data['attempts_remaining'], 1)
        self.assertEqual(AuditLog.objects.filter(action='login_failed', object_id='farmer').count(), 2)

    def test_third_failure_blocks_login(self):
        self.login('wrong')
        self.login('wrong')
        response = self.login('wrong')
        self.assertEqual(response.status_code, status.HTTP_429_TOO_MANY_REQUESTS)
        self.assertEqual(response.data['retry_after'], 600)
        self.assertEqual(response['Retry-After'], '600')

    def test_correct_password_rejected_while_locked(self):
        for _ in range(3):
            self.login('wrong')
        response = self.login(STRONG_PASSWORD)
        self.assertEqual(response.status_code, status.HTTP_429_TOO_MANY_REQUESTS)
        self.assertNotIn('access', response.data)
        self.assertTrue(AuditLog.objects.filter(action='login_locked').exists())

    def test_login_allowed_after_lockout_expires(self):
        for _ in range(3):
            self.login('wrong')
        later = time.time() + 601
        with mock.patch('farmdesk.core.lockout.time.time', return_value=later):
            response = self.login(STRONG_PASSWORD)
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_success_resets_failure_counter(self):
        self.login('wrong')
        self.login('wrong')
        self.assertEqual(self.login(STRONG_PASSWORD).status_code, status.HTTP_200_OK)
        response = self.login('wrong')
        self.assertEqual(response.data['attempts_remaining'], 2)

    def test_unknown_username_is_counted(self):
        for _ in range(3):
            response = self.login('whatever', username='ghost')
        self.assertEqual(response.status_code, status.HTTP_429_TOO_MANY_REQUESTS)

    def test_inactive_user_cannot_login(self):
        self.user.is_active = False
        self.user.save()
        response = self.login(STRONG_PASSWORD)
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_missing_fields(self):
        response = self.client.post('/api/login/', {'username': 'farmer'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('password', response.data)


class RegisterAndSessionAPITests(TestCase):
    """Test registration, logout, token refresh and current user endpoints"""

    def setUp(self):
        cache.clear()
        self.client = AuthenticatedAPIClient()

    def test_register_creates_employee(self):
        response = self.client.post('/api/register/', {
            'username': 'newhand',
            'email': 'newhand@test.com',
            'name': 'New Hand',
            'password': STRONG_PASSWORD,
            'role': User.SUPER_ADMIN,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIn('access', response.data)
        user = User.objects.get(username='newhand')
        self.assertEqual(user.role, User.EMPLOYEE)
        self.assertTrue(user.check_password(STRONG_PASSWORD))

    def test_register_duplicate_username(self):
        TestDataFactory.create_user(username='taken')
        response = self.client.post('/api/register/', {
            'username': 'taken', 'password': STRONG_PASSWORD,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('username', response.data)

    def test_register_username_differing_only_in_case(self):
        TestDataFactory.create_user(username='Taken')
        response = self.client.post('/api/register/', {
            'username': 'taken', 'password': STRONG_PASSWORD,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('username', response.data)
        self.assertFalse(User.objects.filter(username='taken').exists())

    def test_register_password_mismatch(self):
        response = self.client.post('/api/register/', {
            'username': 'mismatch', 'password': STRONG_PASSWORD, 'password_confirm': 'Other-Pass-2024!',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_logout_blacklists_refresh_token(self):
        TestDataFactory.create_user(username='leaver', password=STRONG_PASSWORD)
        tokens = self.client.post('/api/login/', {'username': 'leaver', 'password': STRONG_PASSWORD}, format='json').data
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens['access']}")

        response = self.client.post('/api/logout/', {'refresh': tokens['refresh']}, format='json')
        self.assertEqual(response.status_code, status.HTTP_205_RESET_CONTENT)

        response = self.client.post('/api/token/refresh/', {'refresh': tokens['refresh']}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_token_refresh(self):
        TestDataFactory.create_user(username='refresher', password=STRONG_PASSWORD)
        tokens = self.client.post('/api/login/', {'username': 'refresher', 'password': STRONG_PASSWORD}, format='json').data
        response = self.client.post('/api/token/refresh/', {'refresh': tokens['refresh']}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)

    def test_current_user_lists_farms(self):
        user = TestDataFactory.create_user()
        farm = TestDataFactory.create_farm()
        TestDataFactory.create_farm()
        TestDataFactory.add_member(user, farm, role=UserFarm.WORKER)
        self.client.authenticate_user(user)

        response = self.client.get('/api/user/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['farms'], [farm.pk])
        self.assertFalse(response.data['is_super_admin'])

    def test_current_user_requires_authentication(self):
        response = self.client.get('/api/user/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_update_profile(self):
        user = TestDataFactory.create_user()
        self.client.authenticate_user(user)
        response = self.client.patch('/api/user/profile/', {'name': 'Ana Lima', 'language': 'en'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        user.refresh_from_db()
        self.assertEqual(user.name, 'Ana Lima')
        self.assertEqual(user.language, 'en')

    def test_profile_cannot_change_role(self):
        user = TestDataFactory.create_user()
        self.client.authenticate_user(user)
        self.client.patch('/api/user/profile/', {'role': User.SUPER_ADMIN}, format='json')
        user.refresh_from_db()
        self.assertEqual(user.role, User.EMPLOYEE)

    def test_change_password(self):
        user = TestDataFactory.create_user(password=STRONG_PASSWORD)
        self.client.authenticate_user(user)
        response = self.client.post('/api/user/password/', {
            'current_password': STRONG_PASSWORD, 'new_password': 'Harvest-Moon-2025!',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        user.refresh_from_db()
        self.assertTrue(user.check_password('Harvest-Moon-2025!'))

    def test_change_password_wrong_current(self):
        user = TestDataFactory.create_user(password=STRONG_PASSWORD)
        self.client.authenticate_user(user)
        response = self.client.post('/api/user/password/', {
            'current_password': 'nope', 'new_password': 'Harvest-Moon-2025!',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('current_password', response.data)


class UserAdministrationAPITests(TestCase):
    """Test super admin user management"""

    def setUp(self):
        cache.clear()
        self.client = AuthenticatedAPIClient()
        self.super_admin = TestDataFactory.create_super_admin()
        self.employee = TestDataFactory.create_user()

    def test_super_admin_lists_users(self):
        self.client.authenticate_user(self.super_admin)
        response = self.client.get('/api/users/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 2)

    def test_django_superuser_counts_as_super_admin(self):
        root = TestDataFactory.create_user(is_superuser=True)
        self.client.authenticate_user(root)
        response = self.client.get('/api/users/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_employee_cannot_list_users(self):
        self.client.authenticate_user(self.employee)
        response = self.client.get('/api/users/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_super_admin_creates_user_with_role(self):
        self.client.authenticate_user(self.super_admin)
        response = self.client.post('/api/users/', {
            'username': 'vet1', 'password': STRONG_PASSWORD, 'role': User.VETERINARIAN,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(User.objects.get(username='vet1').role, User.VETERINARIAN)
        self.assertNotIn('password', response.data)

    def test_super_admin_changes_role(self):
        self.client.authenticate_user(self.super_admin)
        response = self.client.patch(f'/api/users/{self.employee.pk}/', {'role': User.MANAGER}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.employee.refresh_from_db()
        self.assertEqual(self.employee.role, User.MANAGER)

    def test_super_admin_deletes_user(self):
        self.client.authenticate_user(self.super_admin)
        response = self.client.delete(f'/api/users/{self.employee.pk}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(User.objects.filter(pk=self.employee.pk).exists())

    def test_super_admin_cannot_delete_self(self):
        self.client.authenticate_user(self.super_admin)
        response = self.client.delete(f'/api/users/{self.super_admin.pk}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class AuditLogAPITests(TestCase):
    """Test audit log helper and visibility rules"""

    def setUp(self):
        cache.clear()
        self.client = AuthenticatedAPIClient()
        self.super_admin = TestDataFactory.create_super_admin()
        self.employee = TestDataFactory.create_user()
        create_audit_log(action='create', model_name='Cost', object_id=1, user=self.employee, farm_id=7)
        create_audit_log(action='delete', model_name='Animal', object_id=2, user=self.super_admin, farm_id=8)

    def test_missing_fields_skip_entry(self):
        self.assertIsNone(create_audit_log(action='create', model_name=None, object_id=1))
        self.assertEqual(AuditLog.objects.count(), 2)

    def test_super_admin_sees_all_entries(self):
        self.client.authenticate_user(self.super_admin)
        response = self.client.get('/api/logs/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 2)

    def test_user_sees_own_entries(self):
        self.client.authenticate_user(self.employee)
        response = self.client.get('/api/logs/')
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['results'][0]['model_name'], 'Cost')

    def test_filters(self):
        self.client.authenticate_user(self.super_admin)
        response = self.client.get('/api/logs/', {'farm': 8})
        self.assertEqual(response.data['count'], 1)
        response = self.client.get('/api/logs/', {'action': 'create', 'model': 'cost'})
        self.assertEqual(response.data['count'], 1)

    def test_detail_of_foreign_entry_forbidden(self):
        entry = AuditLog.objects.get(model_name='Animal')
        self.client.authenticate_user(self.employee)
        response = self.client.get(f'/api/logs/{entry.pk}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class HealthTests(TestCase):

    def test_health(self):
        response = self.client.get('/health/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['status'], 'ok')
