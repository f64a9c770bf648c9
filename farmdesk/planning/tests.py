"""
Test suite for Planning module
Tests: calendar events, goals, goal progress and completion
"""
from datetime import timedelta
from decimal import Decimal

from django.utils import timezone
from rest_framework import status

from farmdesk.core.test_utils import TestDataFactory, FarmAPITestCase
from farmdesk.farms.models import SystemModule, AccessLevel
from farmdesk.planning.models import CalendarEvent, Goal


class GoalModelTests(FarmAPITestCase):
    """Test goal progress and completion date"""

    def test_progress(self):
        goal = TestDataFactory.create_goal(self.farm, target_value=Decimal('200'), actual_value=Decimal('50'))
        self.assertEqual(goal.progress, 25)

    def test_progress_rounds_half_up(self):
        goal = TestDataFactory.create_goal(self.farm, target_value=Decimal('8'), actual_value=Decimal('1'))
        self.assertEqual(goal.progress, 13)

    def test_progress_capped_at_100(self):
        goal = TestDataFactory.create_goal(self.farm, target_value=Decimal('10'), actual_value=Decimal('15'))
        self.assertEqual(goal.progress, 100)

    def test_completion_date(self):
        goal = TestDataFactory.create_goal(self.farm)
        self.assertIsNone(goal.completion_date)
        goal.status = 'completed'
        goal.save()
        self.assertIsNotNone(goal.completion_date)
        goal.status = 'in_progress'
        goal.save()
        self.assertIsNone(goal.completion_date)

    def test_is_overdue(self):
        past = timezone.localdate() - timedelta(days=1)
        goal = TestDataFactory.create_goal(self.farm, start_date=past - timedelta(days=10), end_date=past)
        self.assertTrue(goal.is_overdue)
        goal.status = 'completed'
        self.assertFalse(goal.is_overdue)


class GoalAPITests(FarmAPITestCase):
    """Test goal endpoints"""

    def setUp(self):
        super().setUp()
        self.client.authenticate_user(self.farm_admin)
        self.url = f'/api/farms/{self.farm.pk}/goals/'

    def test_create_then_fetch(self):
        crop = TestDataFactory.create_crop(self.farm)
        data = {
            'name': 'Plantar 40 ha de soja',
            'start_date': '2024-09-01',
            'end_date': '2024-12-31',
            'target_value': '40.00',
            'actual_value': '10.00',
            'unit': 'hectares',
            'status': 'in_progress',
            'crop': crop.pk,
        }
        response = self.client.post(self.url, data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

        response = self.client.get(f"{self.url}{response.data['id']}/")
        for field, value in data.items():
            self.assertEqual(response.data[field], value)
        self.assertEqual(response.data['progress'], 25)
        self.assertEqual(response.data['crop_name'], crop.name)

    def test_validation(self):
        response = self.client.post(self.url, {
            'name': 'ab', 'start_date': '2024-09-01', 'end_date': '2024-12-31', 'target_value': '0',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('name', response.data)
        self.assertIn('target_value', response.data)

    def test_end_before_start_rejected(self):
        response = self.client.post(self.url, {
            'name': 'Reformar cerca', 'start_date': '2024-09-01', 'end_date': '2024-08-01', 'target_value': '10',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('end_date', response.data)

    def test_crop_of_other_farm_rejected(self):
        foreign_crop = TestDataFactory.create_crop(self.other_farm)
        response = self.client.post(self.url, {
            'name': 'Colher milho', 'start_date': '2024-09-01', 'end_date': '2024-12-31',
            'target_value': '10', 'crop': foreign_crop.pk,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('crop', response.data)

    def test_complete_goal(self):
        goal = TestDataFactory.create_goal(self.farm)
        response = self.client.patch(f'{self.url}{goal.pk}/', {'status': 'completed', 'actual_value': '100.00'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNotNone(response.data['completion_date'])
        self.assertEqual(response.data['progress'], 100)

    def test_goals_by_status(self):
        done = TestDataFactory.create_goal(self.farm, status='completed')
        TestDataFactory.create_goal(self.farm)
        response = self.client.get(f'{self.url}status/completed/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([goal['id'] for goal in response.data], [done.pk])

    def test_goals_by_invalid_status(self):
        response = self.client.get(f'{self.url}status/finished/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('error', response.data)

    def test_goals_module_required(self):
        user = TestDataFactory.create_member(self.farm, [SystemModule.TASKS])
        self.client.authenticate_user(user)
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_goal_of_other_farm_is_404(self):
        foreign = TestDataFactory.create_goal(self.other_farm)
        response = self.client.delete(f'{self.url}{foreign.pk}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertTrue(Goal.objects.filter(pk=foreign.pk).exists())


class CalendarEventAPITests(FarmAPITestCase):
    """Test calendar event endpoints"""

    def setUp(self):
        super().setUp()
        self.client.authenticate_user(self.farm_admin)
        self.url = f'/api/farms/{self.farm.pk}/calendar-events/'

    def test_create_then_fetch(self):
        data = {
            'title': 'Visita técnica',
            'description': 'Agrônomo da cooperativa',
            'date': '2024-11-20T09:00:00Z',
            'end_date': '2024-11-20T11:30:00Z',
            'all_day': False,
            'event_type': 'meeting',
        }
        response = self.client.post(self.url, data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

        response = self.client.get(f"{self.url}{response.data['id']}/")
        self.assertEqual(response.data['title'], data['title'])
        self.assertEqual(response.data['event_type'], 'meeting')
        self.assertFalse(response.data['all_day'])
        self.assertEqual(response.data['created_by'], self.farm_admin.pk)

    def test_end_before_start_rejected(self):
        response = self.client.post(self.url, {
            'title': 'Colheita', 'date': '2024-11-20T09:00:00Z', 'end_date': '2024-11-19T09:00:00Z',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('end_date', response.data)

    def test_list_in_date_order_and_filter(self):
        now = timezone.now()
        later = TestDataFactory.create_calendar_event(self.farm, date=now + timedelta(days=20))
        sooner = TestDataFactory.create_calendar_event(self.farm, date=now + timedelta(days=1), event_type='harvest')
        TestDataFactory.create_calendar_event(self.other_farm)

        response = self.client.get(self.url)
        self.assertEqual([event['id'] for event in response.data], [sooner.pk, later.pk])
        response = self.client.get(self.url, {'event_type': 'harvest'})
        self.assertEqual([event['id'] for event in response.data], [sooner.pk])

    def test_tasks_module_governs_events(self):
        event = TestDataFactory.create_calendar_event(self.farm)
        reader = TestDataFactory.create_member(self.farm, [SystemModule.TASKS], level=AccessLevel.READ_ONLY)
        self.client.authenticate_user(reader)
        self.assertEqual(self.client.get(self.url).status_code, status.HTTP_200_OK)
        response = self.client.delete(f'{self.url}{event.pk}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertTrue(CalendarEvent.objects.filter(pk=event.pk).exists())

        goals_only = TestDataFactory.create_member(self.farm, [SystemModule.GOALS])
        self.client.authenticate_user(goals_only)
        self.assertEqual(self.client.get(self.url).status_code, status.HTTP_403_FORBIDDEN)
