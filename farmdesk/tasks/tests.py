"""
Test suite for Tasks module
Tests: CRUD, ordering, completion stamp, assignment, id-only endpoint
"""
from datetime import timedelta

from django.utils import timezone
from rest_framework import status

from farmdesk.core.test_utils import TestDataFactory, FarmAPITestCase
from farmdesk.farms.models import SystemModule, AccessLevel
from farmdesk.tasks.models import Task


class TaskModelTests(FarmAPITestCase):
    """Test completion stamp and overdue flag"""

    def test_completion_sets_and_clears_timestamp(self):
        task = TestDataFactory.create_task(self.farm)
        self.assertIsNone(task.completed_at)

        task.status = 'completed'
        task.save()
        self.assertIsNotNone(task.completed_at)
        stamp = task.completed_at

        task.save()
        self.assertEqual(task.completed_at, stamp)

        task.status = 'pending'
        task.save(update_fields=['status'])
        task.refresh_from_db()
        self.assertIsNone(task.completed_at)

    def test_is_overdue(self):
        late = TestDataFactory.create_task(self.farm, due_date=timezone.localdate() - timedelta(days=1))
        done = TestDataFactory.create_task(self.farm, due_date=timezone.localdate() - timedelta(days=1), status='completed')
        upcoming = TestDataFactory.create_task(self.farm)
        self.assertTrue(late.is_overdue)
        self.assertFalse(done.is_overdue)
        self.assertFalse(upcoming.is_overdue)


class TaskAPITests(FarmAPITestCase):
    """Test task endpoints"""

    def setUp(self):
        super().setUp()
        self.client.authenticate_user(self.farm_admin)
        self.url = f'/api/farms/{self.farm.pk}/tasks/'
        self.worker = TestDataFactory.create_member(self.farm, [SystemModule.TASKS], level=AccessLevel.EDIT)

    def test_create_then_fetch(self):
        data = {
            'title': 'Vacinar bezerros',
            'description': 'Aftosa, lote 4',
            'due_date': (timezone.localdate() + timedelta(days=5)).isoformat(),
            'priority': 'high',
            'category': 'animal',
            'assigned_to': self.worker.pk,
        }
        response = self.client.post(self.url, data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['created_by'], self.farm_admin.pk)
        self.assertEqual(response.data['status'], 'pending')

        response = self.client.get(f"{self.url}{response.data['id']}/")
        for field, value in data.items():
            self.assertEqual(response.data[field], value)

    def test_short_title_rejected(self):
        response = self.client.post(self.url, {'title': 'ab', 'due_date': '2025-01-10'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('title', response.data)

    def test_assignee_must_be_member(self):
        outsider = TestDataFactory.create_user()
        response = self.client.post(self.url, {
            'title': 'Consertar cerca', 'due_date': '2025-01-10', 'assigned_to': outsider.pk,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('assigned_to', response.data)

    def test_list_latest_due_first(self):
        today = timezone.localdate()
        first = TestDataFactory.create_task(self.farm, due_date=today + timedelta(days=1))
        last = TestDataFactory.create_task(self.farm, due_date=today + timedelta(days=10))
        response = self.client.get(self.url)
        self.assertEqual([task['id'] for task in response.data], [last.pk, first.pk])

    def test_pending_nearest_due_first(self):
        today = timezone.localdate()
        later = TestDataFactory.create_task(self.farm, due_date=today + timedelta(days=8))
        sooner = TestDataFactory.create_task(self.farm, due_date=today + timedelta(days=2))
        TestDataFactory.create_task(self.farm, due_date=today, status='completed')
        TestDataFactory.create_task(self.other_farm, due_date=today)
        response = self.client.get(f'{self.url}pending/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([task['id'] for task in response.data], [sooner.pk, later.pk])

    def test_complete_via_api(self):
        task = TestDataFactory.create_task(self.farm)
        response = self.client.patch(f'{self.url}{task.pk}/', {'status': 'completed'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNotNone(response.data['completed_at'])

    def test_filter_by_status(self):
        TestDataFactory.create_task(self.farm, status='in_progress')
        TestDataFactory.create_task(self.farm)
        response = self.client.get(self.url, {'status': 'in_progress'})
        self.assertEqual(len(response.data), 1)

    def test_task_of_other_farm_is_404(self):
        foreign = TestDataFactory.create_task(self.other_farm)
        response = self.client.get(f'{self.url}{foreign.pk}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_assigned_tasks(self):
        mine = TestDataFactory.create_task(self.farm, assigned_to=self.worker)
        TestDataFactory.create_task(self.farm)
        self.client.authenticate_user(self.worker)
        response = self.client.get('/api/tasks/assigned/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([task['id'] for task in response.data], [mine.pk])


class TaskByIdTests(FarmAPITestCase):
    """Test the endpoint addressing a task by id alone"""

    def setUp(self):
        super().setUp()
        self.task = TestDataFactory.create_task(self.farm)
        self.url = f'/api/tasks/{self.task.pk}/'

    def test_reader_can_get(self):
        user = TestDataFactory.create_member(self.farm, [SystemModule.TASKS], level=AccessLevel.READ_ONLY)
        self.client.authenticate_user(user)
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['farm'], self.farm.pk)

    def test_reader_cannot_update(self):
        user = TestDataFactory.create_member(self.farm, [SystemModule.TASKS], level=AccessLevel.READ_ONLY)
        self.client.authenticate_user(user)
        response = self.client.patch(self.url, {'status': 'in_progress'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_member_of_other_farm_forbidden(self):
        user = TestDataFactory.create_member(self.other_farm, [SystemModule.TASKS])
        self.client.authenticate_user(user)
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_manager_can_delete(self):
        user = TestDataFactory.create_member(self.farm, [SystemModule.TASKS], level=AccessLevel.MANAGE)
        self.client.authenticate_user(user)
        response = self.client.delete(self.url)
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Task.objects.filter(pk=self.task.pk).exists())

    def test_missing_task(self):
        self.client.authenticate_user(self.farm_admin)
        response = self.client.get('/api/tasks/999999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
