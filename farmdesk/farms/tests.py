"""
Test suite for Farms module
Tests: access computation, access cache, membership and permission endpoints, dashboard, role defaults command
"""
from decimal import Decimal
from io import StringIO

from django.core.cache import cache
from django.core.management import call_command
from django.core.management.base import CommandError
from django.db import transaction
from rest_framework import status

from farmdesk.core.models import User, AuditLog
from farmdesk.core.test_utils import TestDataFactory, FarmAPITestCase, FarmTransactionTestCase
from farmdesk.farms.access import (
    get_access_level, check_access, get_module_access_map, get_accessible_farms, set_user_permission,
    assign_user_to_farm, remove_user_from_farm, apply_role_defaults, default_permissions_for_role,
    required_level_for_method, get_access_cache_key, MembershipRequiredError,
)
from farmdesk.farms.models import Farm, UserFarm, UserPermission, SystemModule, AccessLevel


class AccessLevelTests(FarmAPITestCase):
    """Test level ordering and method mapping"""

    def test_levels_are_ordered(self):
        order = [AccessLevel.NONE, AccessLevel.READ_ONLY, AccessLevel.EDIT, AccessLevel.MANAGE, AccessLevel.FULL]
        for lower, higher in zip(order, order[1:]):
            self.assertTrue(AccessLevel.satisfies(higher, lower))
            self.assertFalse(AccessLevel.satisfies(lower, higher))

    def test_required_level_for_method(self):
        self.assertEqual(required_level_for_method('GET'), AccessLevel.READ_ONLY)
        self.assertEqual(required_level_for_method('HEAD'), AccessLevel.READ_ONLY)
        self.assertEqual(required_level_for_method('POST'), AccessLevel.EDIT)
        self.assertEqual(required_level_for_method('PATCH'), AccessLevel.EDIT)
        self.assertEqual(required_level_for_method('DELETE'), AccessLevel.MANAGE)


class AccessServiceTests(FarmAPITestCase):
    """Test effective access computation"""

    def test_super_admin_has_full_access_everywhere(self):
        super_admin = TestDataFactory.create_super_admin()
        for module in SystemModule.ALL:
            self.assertEqual(get_access_level(super_admin, self.other_farm, module), AccessLevel.FULL)

    def test_designated_farm_admin_has_full_access(self):
        self.assertTrue(check_access(self.farm_admin, self.farm, SystemModule.FINANCIAL, AccessLevel.FULL))

    def test_unknown_required_level_rejected(self):
        with self.assertRaises(ValueError):
            check_access(self.farm_admin, self.farm, SystemModule.ANIMALS, 'read-only')
        with self.assertRaises(ValueError):
            AccessLevel.rank('owner')

    def test_farm_admin_role_without_designation_has_no_access(self):
        self.assertEqual(get_access_level(self.farm_admin, self.other_farm, SystemModule.ANIMALS), AccessLevel.NONE)

    def test_member_gets_granted_level_only(self):
        user = TestDataFactory.create_member(self.farm, [SystemModule.CROPS], level=AccessLevel.EDIT)
        access = get_module_access_map(user, self.farm)
        self.assertEqual(access[SystemModule.CROPS], AccessLevel.EDIT)
        self.assertEqual(access[SystemModule.ANIMALS], AccessLevel.NONE)
        self.assertTrue(check_access(user, self.farm, SystemModule.CROPS, AccessLevel.READ_ONLY))
        self.assertFalse(check_access(user, self.farm, SystemModule.CROPS, AccessLevel.MANAGE))

    def test_no_grant_means_no_access(self):
        user = TestDataFactory.create_user()
        self.assertFalse(check_access(user, self.farm, SystemModule.TASKS))

    def test_accessible_farms(self):
        member = TestDataFactory.create_member(self.other_farm)
        self.assertEqual(list(get_accessible_farms(member)), [self.other_farm])
        self.assertEqual(list(get_accessible_farms(self.farm_admin)), [self.farm])
        super_admin = TestDataFactory.create_super_admin()
        self.assertEqual(get_accessible_farms(super_admin).count(), 2)


class PermissionManagementTests(FarmAPITestCase):
    """Test grants, membership and role defaults"""

    def setUp(self):
        super().setUp()
        self.user = TestDataFactory.create_user(role=User.VETERINARIAN)

    def test_set_permission_requires_membership(self):
        with self.assertRaises(MembershipRequiredError):
            set_user_permission(self.user, self.farm, SystemModule.ANIMALS, AccessLevel.EDIT)
        self.assertFalse(UserPermission.objects.filter(user=self.user).exists())

    def test_set_permission_upserts(self):
        TestDataFactory.add_member(self.user, self.farm)
        _, created = set_user_permission(self.user, self.farm, SystemModule.ANIMALS, AccessLevel.EDIT)
        self.assertTrue(created)
        _, created = set_user_permission(self.user, self.farm, SystemModule.ANIMALS, AccessLevel.READ_ONLY)
        self.assertFalse(created)
        self.assertEqual(UserPermission.objects.filter(user=self.user, farm=self.farm).count(), 1)
        self.assertEqual(get_access_level(self.user, self.farm, SystemModule.ANIMALS), AccessLevel.READ_ONLY)

    def test_set_permission_rejects_unknown_values(self):
        TestDataFactory.add_member(self.user, self.farm)
        with self.assertRaises(ValueError):
            set_user_permission(self.user, self.farm, 'weather', AccessLevel.EDIT)
        with self.assertRaises(ValueError):
            set_user_permission(self.user, self.farm, SystemModule.ANIMALS, 'owner')

    def test_assign_applies_role_defaults(self):
        membership, created = assign_user_to_farm(self.user, self.farm)
        self.assertTrue(created)
        self.assertEqual(membership.role, UserFarm.MEMBER)
        self.assertEqual(get_access_level(self.user, self.farm, SystemModule.ANIMALS), AccessLevel.FULL)
        self.assertEqual(get_access_level(self.user, self.farm, SystemModule.TASKS), AccessLevel.READ_ONLY)
        self.assertEqual(get_access_level(self.user, self.farm, SystemModule.FINANCIAL), AccessLevel.NONE)

    def test_assign_twice_updates_role(self):
        assign_user_to_farm(self.user, self.farm, apply_defaults=False)
        membership, created = assign_user_to_farm(self.user, self.farm, role=UserFarm.SPECIALIST, apply_defaults=False)
        self.assertFalse(created)
        self.assertEqual(membership.role, UserFarm.SPECIALIST)
        self.assertEqual(UserFarm.objects.filter(user=self.user, farm=self.farm).count(), 1)

    def test_role_defaults_keep_existing_grants(self):
        TestDataFactory.add_member(self.user, self.farm, permissions={SystemModule.ANIMALS: AccessLevel.READ_ONLY})
        written = apply_role_defaults(self.user, self.farm)
        self.assertEqual(written, 1)
        self.assertEqual(get_access_level(self.user, self.farm, SystemModule.ANIMALS), AccessLevel.READ_ONLY)

    def test_role_defaults_reset(self):
        TestDataFactory.add_member(self.user, self.farm, permissions={
            SystemModule.ANIMALS: AccessLevel.READ_ONLY,
            SystemModule.FINANCIAL: AccessLevel.EDIT,
        })
        written = apply_role_defaults(self.user, self.farm, reset=True)
        self.assertEqual(written, len(default_permissions_for_role(User.VETERINARIAN)))
        self.assertEqual(get_access_level(self.user, self.farm, SystemModule.ANIMALS), AccessLevel.FULL)
        self.assertEqual(get_access_level(self.user, self.farm, SystemModule.FINANCIAL), AccessLevel.NONE)

    def test_consultant_defaults_match_employee(self):
        self.assertEqual(default_permissions_for_role(User.CONSULTANT), default_permissions_for_role(User.EMPLOYEE))

    def test_remove_user_deletes_permissions(self):
        TestDataFactory.add_member(self.user, self.farm, permissions={SystemModule.ANIMALS: AccessLevel.FULL})
        self.assertTrue(remove_user_from_farm(self.user, self.farm))
        self.assertFalse(UserFarm.objects.filter(user=self.user, farm=self.farm).exists())
        self.assertFalse(UserPermission.objects.filter(user=self.user, farm=self.farm).exists())
        self.assertEqual(get_access_level(self.user, self.farm, SystemModule.ANIMALS), AccessLevel.NONE)
        self.assertFalse(remove_user_from_farm(self.user, self.farm))


class AccessCacheTests(FarmTransactionTestCase):
    """Test that cached access maps are dropped when their inputs change"""

    def setUp(self):
        super().setUp()
        self.user = TestDataFactory.create_member(self.farm, [SystemModule.ANIMALS], level=AccessLevel.READ_ONLY)

    def test_map_is_cached(self):
        self.assertEqual(get_access_level(self.user, self.farm, SystemModule.ANIMALS), AccessLevel.READ_ONLY)
        # Bulk update bypasses signals, so the cached map is still served
        UserPermission.objects.filter(user=self.user).update(access_level=AccessLevel.FULL)
        self.assertEqual(get_access_level(self.user, self.farm, SystemModule.ANIMALS), AccessLevel.READ_ONLY)

    def test_permission_change_invalidates(self):
        self.assertEqual(get_access_level(self.user, self.farm, SystemModule.ANIMALS), AccessLevel.READ_ONLY)
        set_user_permission(self.user, self.farm, SystemModule.ANIMALS, AccessLevel.MANAGE)
        self.assertEqual(get_access_level(self.user, self.farm, SystemModule.ANIMALS), AccessLevel.MANAGE)

    def test_role_change_invalidates(self):
        self.assertTrue(check_access(self.farm_admin, self.farm, SystemModule.FINANCIAL, AccessLevel.FULL))
        self.farm_admin.role = User.EMPLOYEE
        self.farm_admin.save()
        self.assertFalse(check_access(self.farm_admin, self.farm, SystemModule.FINANCIAL))

    def test_admin_change_invalidates(self):
        self.assertFalse(check_access(self.user, self.farm, SystemModule.FINANCIAL))
        self.user.role = User.FARM_ADMIN
        self.user.save()
        self.farm.admin = self.user
        self.farm.save()
        self.assertTrue(check_access(self.user, self.farm, SystemModule.FINANCIAL, AccessLevel.FULL))

    def test_removed_member_loses_cached_access(self):
        self.assertEqual(get_access_level(self.user, self.farm, SystemModule.ANIMALS), AccessLevel.READ_ONLY)
        remove_user_from_farm(self.user, self.farm)
        self.assertEqual(get_access_level(self.user, self.farm, SystemModule.ANIMALS), AccessLevel.NONE)

    def test_rolled_back_grant_is_not_cached(self):
        self.assertEqual(get_access_level(self.user, self.farm, SystemModule.FINANCIAL), AccessLevel.NONE)
        with self.assertRaises(RuntimeError):
            with transaction.atomic():
                set_user_permission(self.user, self.farm, SystemModule.FINANCIAL, AccessLevel.FULL)
                self.assertEqual(get_access_level(self.user, self.farm, SystemModule.FINANCIAL), AccessLevel.FULL)
                raise RuntimeError('abort')
        self.assertFalse(UserPermission.objects.filter(user=self.user, module=SystemModule.FINANCIAL).exists())
        self.assertEqual(get_access_level(self.user, self.farm, SystemModule.FINANCIAL), AccessLevel.NONE)

    def test_map_cached_before_commit_is_dropped(self):
        stale = get_module_access_map(self.user, self.farm)
        with transaction.atomic():
            remove_user_from_farm(self.user, self.farm)
            # another connection still sees the committed rows and caches them
            cache.set(get_access_cache_key(self.user.pk, self.farm.pk), stale, 300)
        self.assertEqual(get_access_level(self.user, self.farm, SystemModule.ANIMALS), AccessLevel.NONE)
        self.assertNotIn(self.farm, get_accessible_farms(self.user))


class FarmAPITests(FarmAPITestCase):
    """Test farm CRUD endpoints"""

    def test_list_only_accessible_farms(self):
        self.client.authenticate_user(self.farm_admin)
        response = self.client.get('/api/farms/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([farm['id'] for farm in response.data], [self.farm.pk])

    def test_requires_authentication(self):
        response = self.client.get('/api/farms/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_farm_admin_creates_farm_and_becomes_admin(self):
        self.client.authenticate_user(self.farm_admin)
        response = self.client.post('/api/farms/', {
            'name': 'Fazenda Boa Vista', 'location': 'Goiás', 'size': '350.00', 'farm_type': 'livestock',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['admin'], self.farm_admin.pk)
        self.assertEqual(response.data['created_by'], self.farm_admin.pk)
        self.assertEqual(response.data['size'], '350.00')
        farm = Farm.objects.get(pk=response.data['id'])
        self.assertEqual(UserFarm.objects.get(farm=farm, user=self.farm_admin).role, UserFarm.ADMIN)
        self.assertTrue(AuditLog.objects.filter(action='create', model_name='Farm', farm_id=farm.pk).exists())

    def test_super_admin_creates_farm_for_admin(self):
        super_admin = TestDataFactory.create_super_admin()
        owner = TestDataFactory.create_user(role=User.FARM_ADMIN)
        self.client.authenticate_user(super_admin)
        response = self.client.post('/api/farms/', {'name': 'Sítio Novo', 'admin': owner.pk}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        farm = Farm.objects.get(pk=response.data['id'])
        self.assertEqual(farm.admin, owner)
        self.assertTrue(check_access(owner, farm, SystemModule.ADMINISTRATION, AccessLevel.FULL))

    def test_employee_cannot_create_farm(self):
        self.client.authenticate_user(TestDataFactory.create_user())
        response = self.client.post('/api/farms/', {'name': 'Nope Farm'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_create_validation(self):
        self.client.authenticate_user(self.farm_admin)
        response = self.client.post('/api/farms/', {'name': 'X', 'size': '-1'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('name', response.data)
        self.assertIn('size', response.data)

    def test_member_can_view_farm(self):
        member = TestDataFactory.create_member(self.farm)
        self.client.authenticate_user(member)
        response = self.client.get(f'/api/farms/{self.farm.pk}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['name'], self.farm.name)

    def test_non_member_cannot_view_farm(self):
        self.client.authenticate_user(TestDataFactory.create_user())
        response = self.client.get(f'/api/farms/{self.farm.pk}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_missing_farm_is_404(self):
        self.client.authenticate_user(self.farm_admin)
        response = self.client.get('/api/farms/999999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_update_requires_administration_edit(self):
        reader = TestDataFactory.create_member(self.farm, [SystemModule.ADMINISTRATION], level=AccessLevel.READ_ONLY)
        self.client.authenticate_user(reader)
        response = self.client.patch(f'/api/farms/{self.farm.pk}/', {'location': 'Elsewhere'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        editor = TestDataFactory.create_member(self.farm, [SystemModule.ADMINISTRATION], level=AccessLevel.EDIT)
        self.client.authenticate_user(editor)
        response = self.client.patch(f'/api/farms/{self.farm.pk}/', {'location': 'Elsewhere'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['location'], 'Elsewhere')

    def test_only_super_admin_deletes_farm(self):
        self.client.authenticate_user(self.farm_admin)
        response = self.client.delete(f'/api/farms/{self.farm.pk}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.authenticate_user(TestDataFactory.create_super_admin())
        response = self.client.delete(f'/api/farms/{self.farm.pk}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Farm.objects.filter(pk=self.farm.pk).exists())


class MembershipAPITests(FarmAPITestCase):
    """Test membership and permission endpoints"""

    def setUp(self):
        super().setUp()
        self.client.authenticate_user(self.farm_admin)
        self.worker = TestDataFactory.create_user(role=User.EMPLOYEE)

    def test_add_member_with_defaults(self):
        response = self.client.post(f'/api/farms/{self.farm.pk}/users/', {
            'user': self.worker.pk, 'role': UserFarm.WORKER,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['role'], UserFarm.WORKER)
        self.assertEqual(get_access_level(self.worker, self.farm, SystemModule.TASKS), AccessLevel.FULL)

        response = self.client.post(f'/api/farms/{self.farm.pk}/users/', {
            'user': self.worker.pk, 'role': UserFarm.MANAGER,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(UserFarm.objects.get(user=self.worker, farm=self.farm).role, UserFarm.MANAGER)

    def test_add_member_without_defaults(self):
        self.client.post(f'/api/farms/{self.farm.pk}/users/', {
            'user': self.worker.pk, 'apply_defaults': False,
        }, format='json')
        self.assertFalse(UserPermission.objects.filter(user=self.worker, farm=self.farm).exists())

    def test_list_members(self):
        TestDataFactory.add_member(self.worker, self.farm)
        response = self.client.get(f'/api/farms/{self.farm.pk}/users/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 2)

    def test_remove_member_revokes_access(self):
        TestDataFactory.add_member(self.worker, self.farm, permissions={SystemModule.ANIMALS: AccessLevel.FULL})
        response = self.client.delete(f'/api/farms/{self.farm.pk}/users/{self.worker.pk}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(UserPermission.objects.filter(user=self.worker, farm=self.farm).exists())

        self.client.authenticate_user(self.worker)
        response = self.client.get(f'/api/farms/{self.farm.pk}/animals/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_designated_admin_cannot_be_removed(self):
        response = self.client.delete(f'/api/farms/{self.farm.pk}/users/{self.farm_admin.pk}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('error', response.data)
        self.assertTrue(UserFarm.objects.filter(user=self.farm_admin, farm=self.farm).exists())
        self.assertIn(self.farm, get_accessible_farms(self.farm_admin))

    def test_change_member_role(self):
        TestDataFactory.add_member(self.worker, self.farm)
        response = self.client.patch(f'/api/farms/{self.farm.pk}/users/{self.worker.pk}/', {
            'role': UserFarm.SPECIALIST,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['role'], UserFarm.SPECIALIST)

    def test_grant_permission_upsert(self):
        TestDataFactory.add_member(self.worker, self.farm)
        url = f'/api/farms/{self.farm.pk}/permissions/'
        data = {'user': self.worker.pk, 'module': SystemModule.INVENTORY, 'access_level': AccessLevel.EDIT}
        response = self.client.post(url, data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

        data['access_level'] = AccessLevel.MANAGE
        response = self.client.post(url, data, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['access_level'], AccessLevel.MANAGE)
        self.assertEqual(UserPermission.objects.filter(user=self.worker, farm=self.farm).count(), 1)
        self.assertTrue(AuditLog.objects.filter(action='permission_change', farm_id=self.farm.pk).exists())

    def test_grant_to_non_member_rejected(self):
        response = self.client.post(f'/api/farms/{self.farm.pk}/permissions/', {
            'user': self.worker.pk, 'module': SystemModule.ANIMALS, 'access_level': AccessLevel.EDIT,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('error', response.data)

    def test_grant_invalid_level(self):
        TestDataFactory.add_member(self.worker, self.farm)
        response = self.client.post(f'/api/farms/{self.farm.pk}/permissions/', {
            'user': self.worker.pk, 'module': SystemModule.ANIMALS, 'access_level': 'owner',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('access_level', response.data)

    def test_list_permissions_filtered(self):
        TestDataFactory.add_member(self.worker, self.farm, permissions={
            SystemModule.ANIMALS: AccessLevel.EDIT, SystemModule.CROPS: AccessLevel.READ_ONLY,
        })
        response = self.client.get(f'/api/farms/{self.farm.pk}/permissions/', {'module': SystemModule.CROPS})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['access_level'], AccessLevel.READ_ONLY)

    def test_apply_defaults_endpoint(self):
        TestDataFactory.add_member(self.worker, self.farm)
        response = self.client.post(f'/api/farms/{self.farm.pk}/users/{self.worker.pk}/apply-defaults/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['written'], len(default_permissions_for_role(User.EMPLOYEE)))

    def test_member_without_administration_cannot_manage(self):
        TestDataFactory.add_member(self.worker, self.farm, permissions={SystemModule.ADMINISTRATION: AccessLevel.READ_ONLY})
        self.client.authenticate_user(self.worker)
        response = self.client.get(f'/api/farms/{self.farm.pk}/users/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        response = self.client.post(f'/api/farms/{self.farm.pk}/permissions/', {
            'user': self.worker.pk, 'module': SystemModule.FINANCIAL, 'access_level': AccessLevel.FULL,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_my_permissions(self):
        TestDataFactory.add_member(self.worker, self.farm, permissions={SystemModule.CROPS: AccessLevel.EDIT})
        self.client.authenticate_user(self.worker)
        response = self.client.get('/api/permissions/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['modules'][SystemModule.CROPS], AccessLevel.EDIT)
        self.assertEqual(response.data[0]['modules'][SystemModule.FINANCIAL], AccessLevel.NONE)
        self.assertFalse(response.data[0]['is_farm_admin'])


class DashboardAPITests(FarmAPITestCase):
    """Test the farm dashboard"""

    def test_dashboard_for_farm_admin(self):
        TestDataFactory.create_animal(self.farm)
        TestDataFactory.create_inventory_item(self.farm, quantity=5, minimum_level=10)
        TestDataFactory.create_cost(self.farm)
        self.client.authenticate_user(self.farm_admin)
        response = self.client.get(f'/api/farms/{self.farm.pk}/dashboard/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['animals']['total'], 1)
        self.assertEqual(response.data['inventory']['critical_items'], 1)
        self.assertEqual(Decimal(response.data['financial']['month_total']), Decimal('150.00'))
        self.assertIn('goals', response.data)

    def test_dashboard_limited_to_readable_modules(self):
        member = TestDataFactory.create_member(self.farm, [SystemModule.ANIMALS], level=AccessLevel.READ_ONLY)
        self.client.authenticate_user(member)
        response = self.client.get(f'/api/farms/{self.farm.pk}/dashboard/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('animals', response.data)
        self.assertNotIn('financial', response.data)
        self.assertNotIn('inventory', response.data)

    def test_dashboard_forbidden_for_outsider(self):
        self.client.authenticate_user(TestDataFactory.create_user())
        response = self.client.get(f'/api/farms/{self.farm.pk}/dashboard/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class ApplyRolePermissionsCommandTests(FarmAPITestCase):
    """Test the apply_role_permissions management command"""

    def test_command_grants_defaults(self):
        vet = TestDataFactory.create_user(role=User.VETERINARIAN)
        TestDataFactory.add_member(vet, self.farm)
        out = StringIO()
        call_command('apply_role_permissions', farm=self.farm.pk, stdout=out)
        self.assertIn('Completed: 2 memberships processed', out.getvalue())
        self.assertEqual(get_access_level(vet, self.farm, SystemModule.ANIMALS), AccessLevel.FULL)

    def test_command_unknown_farm(self):
        with self.assertRaises(CommandError):
            call_command('apply_role_permissions', farm=999999, stdout=StringIO())
