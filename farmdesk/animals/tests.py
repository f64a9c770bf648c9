"""
Test suite for Animals module
Tests: CRUD, module access enforcement, farm scoping, removal, vaccination history
"""
from datetime import timedelta

from django.utils import timezone
from rest_framework import status

from farmdesk.core.models import AuditLog
from farmdesk.core.test_utils import TestDataFactory, FarmAPITestCase
from farmdesk.farms.models import SystemModule, AccessLevel
from farmdesk.animals.models import Animal, Vaccination


class AnimalAPITests(FarmAPITestCase):
    """Test animal endpoints as the farm admin"""

    def setUp(self):
        super().setUp()
        self.client.authenticate_user(self.farm_admin)
        self.url = f'/api/farms/{self.farm.pk}/animals/'

    def test_create_then_fetch(self):
        data = {
            'identification_code': 'BR-0001',
            'species': 'cattle',
            'breed': 'Nelore',
            'gender': 'female',
            'birth_date': '2022-03-10',
            'weight': '412.50',
            'status': 'healthy',
        }
        response = self.client.post(self.url, data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['farm'], self.farm.pk)

        response = self.client.get(f"{self.url}{response.data['id']}/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        for field, value in data.items():
            self.assertEqual(response.data[field], value)
        self.assertFalse(response.data['is_removed'])
        self.assertTrue(AuditLog.objects.filter(action='create', model_name='Animal', farm_id=self.farm.pk).exists())

    def test_duplicate_code_on_same_farm_rejected(self):
        TestDataFactory.create_animal(self.farm, identification_code='BR-0002')
        response = self.client.post(self.url, {
            'identification_code': 'BR-0002', 'species': 'cattle', 'gender': 'male',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('identification_code', response.data)

    def test_same_code_allowed_on_other_farm(self):
        TestDataFactory.create_animal(self.other_farm, identification_code='BR-0003')
        response = self.client.post(self.url, {
            'identification_code': 'BR-0003', 'species': 'cattle', 'gender': 'male',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_validation(self):
        response = self.client.post(self.url, {
            'identification_code': 'BR-0004',
            'species': 'cattle',
            'gender': 'female',
            'birth_date': (timezone.localdate() + timedelta(days=5)).isoformat(),
            'weight': '0',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('birth_date', response.data)
        self.assertIn('weight', response.data)

    def test_list_filters(self):
        TestDataFactory.create_animal(self.farm, species='cattle', status='sick')
        TestDataFactory.create_animal(self.farm, species='goat')
        response = self.client.get(self.url, {'species': 'cattle'})
        self.assertEqual(len(response.data), 1)
        response = self.client.get(self.url, {'status': 'sick'})
        self.assertEqual(len(response.data), 1)

    def test_update(self):
        animal = TestDataFactory.create_animal(self.farm)
        response = self.client.patch(f'{self.url}{animal.pk}/', {'status': 'treatment', 'weight': '430.00'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        animal.refresh_from_db()
        self.assertEqual(animal.status, 'treatment')

    def test_delete(self):
        animal = TestDataFactory.create_animal(self.farm)
        response = self.client.delete(f'{self.url}{animal.pk}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Animal.objects.filter(pk=animal.pk).exists())

    def test_animal_of_other_farm_is_404(self):
        foreign = TestDataFactory.create_animal(self.other_farm)
        response = self.client.get(f'{self.url}{foreign.pk}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        response = self.client.delete(f'{self.url}{foreign.pk}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertTrue(Animal.objects.filter(pk=foreign.pk).exists())

    def test_unknown_farm_is_404(self):
        response = self.client.get('/api/farms/999999/animals/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class AnimalRemovalTests(FarmAPITestCase):
    """Test taking animals out of the herd"""

    def setUp(self):
        super().setUp()
        self.client.authenticate_user(self.farm_admin)
        self.animal = TestDataFactory.create_animal(self.farm)
        self.url = f'/api/farms/{self.farm.pk}/animals/'

    def test_remove_animal(self):
        response = self.client.post(f'{self.url}{self.animal.pk}/remove/', {
            'reason': 'sold', 'notes': 'Sold at auction',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['is_removed'])
        self.assertEqual(response.data['removal_reason'], 'sold')
        self.assertEqual(response.data['removed_at'], timezone.localdate().isoformat())
        self.assertTrue(AuditLog.objects.filter(action='animal_remove', object_id=str(self.animal.pk)).exists())

        response = self.client.get(self.url)
        self.assertEqual(len(response.data), 0)
        response = self.client.get(f'{self.url}removed/')
        self.assertEqual([animal['id'] for animal in response.data], [self.animal.pk])

    def test_remove_twice_rejected(self):
        self.client.post(f'{self.url}{self.animal.pk}/remove/', {'reason': 'dead'}, format='json')
        response = self.client.post(f'{self.url}{self.animal.pk}/remove/', {'reason': 'dead'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Animal has already been removed')

    def test_remove_requires_reason(self):
        response = self.client.post(f'{self.url}{self.animal.pk}/remove/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('reason', response.data)

    def test_removed_list_filters_by_reason(self):
        other = TestDataFactory.create_animal(self.farm)
        self.client.post(f'{self.url}{self.animal.pk}/remove/', {'reason': 'sold'}, format='json')
        self.client.post(f'{self.url}{other.pk}/remove/', {'reason': 'dead'}, format='json')
        response = self.client.get(f'{self.url}removed/', {'reason': 'dead'})
        self.assertEqual([animal['id'] for animal in response.data], [other.pk])


class AnimalAccessTests(FarmAPITestCase):
    """Test module access levels on animal endpoints"""

    def setUp(self):
        super().setUp()
        self.animal = TestDataFactory.create_animal(self.farm)
        self.url = f'/api/farms/{self.farm.pk}/animals/'
        self.payload = {'identification_code': 'BR-9000', 'species': 'cattle', 'gender': 'male'}

    def as_member(self, level, modules=(SystemModule.ANIMALS,)):
        user = TestDataFactory.create_member(self.farm, list(modules), level=level)
        self.client.authenticate_user(user)
        return user

    def test_unauthenticated(self):
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_non_member_forbidden(self):
        self.client.authenticate_user(TestDataFactory.create_user())
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['detail'], 'Not authorized - insufficient module permissions')

    def test_grant_on_other_module_forbidden(self):
        self.as_member(AccessLevel.FULL, modules=[SystemModule.CROPS])
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_read_only_can_list_but_not_create(self):
        self.as_member(AccessLevel.READ_ONLY)
        self.assertEqual(self.client.get(self.url).status_code, status.HTTP_200_OK)
        self.assertEqual(self.client.get(f'{self.url}{self.animal.pk}/').status_code, status.HTTP_200_OK)
        response = self.client.post(self.url, self.payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        response = self.client.post(f'{self.url}{self.animal.pk}/remove/', {'reason': 'sold'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_edit_can_create_but_not_delete(self):
        self.as_member(AccessLevel.EDIT)
        response = self.client.post(self.url, self.payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        response = self.client.delete(f'{self.url}{self.animal.pk}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_manage_can_delete(self):
        self.as_member(AccessLevel.MANAGE)
        response = self.client.delete(f'{self.url}{self.animal.pk}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)

    def test_grant_on_one_farm_does_not_open_another(self):
        self.as_member(AccessLevel.FULL)
        response = self.client.get(f'/api/farms/{self.other_farm.pk}/animals/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_super_admin_reads_any_farm(self):
        self.client.authenticate_user(TestDataFactory.create_super_admin())
        response = self.client.get(f'/api/farms/{self.other_farm.pk}/animals/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)


class VaccinationTests(FarmAPITestCase):
    """Test vaccination history and the animal's last vaccine date"""

    def setUp(self):
        super().setUp()
        self.client.authenticate_user(self.farm_admin)
        self.animal = TestDataFactory.create_animal(self.farm)
        self.url = f'/api/farms/{self.farm.pk}/animals/{self.animal.pk}/vaccinations/'
        self.today = timezone.localdate()

    def test_create_then_fetch(self):
        data = {
            'vaccine_name': 'Febre aftosa',
            'application_date': (self.today - timedelta(days=3)).isoformat(),
            'next_application_date': (self.today + timedelta(days=180)).isoformat(),
            'dose_number': 2,
            'batch_number': 'LT-4471',
            'status': 'completed',
            'notes': 'Reforço semestral',
        }
        response = self.client.post(self.url, data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['farm'], self.farm.pk)
        self.assertEqual(response.data['animal'], self.animal.pk)
        self.assertEqual(response.data['applied_by'], self.farm_admin.pk)

        response = self.client.get(f"/api/farms/{self.farm.pk}/vaccinations/{response.data['id']}/")
        for field, value in data.items():
            self.assertEqual(response.data[field], value)
        self.assertEqual(response.data['animal_code'], self.animal.identification_code)

    def test_last_vaccine_date_follows_completed_records(self):
        older = TestDataFactory.create_vaccination(self.animal, application_date=self.today - timedelta(days=60))
        newer = TestDataFactory.create_vaccination(self.animal, application_date=self.today - timedelta(days=10))
        TestDataFactory.create_vaccination(
            self.animal, application_date=self.today + timedelta(days=30), status=Vaccination.SCHEDULED,
        )
        self.animal.refresh_from_db()
        self.assertEqual(self.animal.last_vaccine_date, newer.application_date)

        response = self.client.delete(f'/api/farms/{self.farm.pk}/vaccinations/{newer.pk}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.animal.refresh_from_db()
        self.assertEqual(self.animal.last_vaccine_date, older.application_date)

        response = self.client.patch(f'/api/farms/{self.farm.pk}/vaccinations/{older.pk}/', {
            'status': Vaccination.CANCELLED,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.animal.refresh_from_db()
        self.assertIsNone(self.animal.last_vaccine_date)

    def test_history_is_newest_first(self):
        first = TestDataFactory.create_vaccination(self.animal, application_date=self.today - timedelta(days=90))
        second = TestDataFactory.create_vaccination(self.animal, application_date=self.today - timedelta(days=1))
        TestDataFactory.create_vaccination(TestDataFactory.create_animal(self.farm))
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['id'] for row in response.data], [second.pk, first.pk])

    def test_validation(self):
        response = self.client.post(self.url, {
            'vaccine_name': 'Brucelose',
            'application_date': self.today.isoformat(),
            'next_application_date': (self.today - timedelta(days=1)).isoformat(),
            'dose_number': 0,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('dose_number', response.data)

        response = self.client.post(self.url, {
            'vaccine_name': 'Brucelose',
            'application_date': self.today.isoformat(),
            'next_application_date': (self.today - timedelta(days=1)).isoformat(),
        }, format='json')
        self.assertIn('next_application_date', response.data)

    def test_completed_vaccination_cannot_be_in_future(self):
        future = (self.today + timedelta(days=7)).isoformat()
        response = self.client.post(self.url, {'vaccine_name': 'Raiva', 'application_date': future}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('application_date', response.data)

        response = self.client.post(self.url, {
            'vaccine_name': 'Raiva', 'application_date': future, 'status': Vaccination.SCHEDULED,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.animal.refresh_from_db()
        self.assertIsNone(self.animal.last_vaccine_date)

    def test_removed_animal_cannot_be_vaccinated(self):
        self.animal.removed_at = self.today
        self.animal.removal_reason = 'sold'
        self.animal.save()
        response = self.client.post(self.url, {
            'vaccine_name': 'Aftosa', 'application_date': self.today.isoformat(),
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(Vaccination.objects.filter(animal=self.animal).exists())

    def test_farm_list_filters(self):
        due = TestDataFactory.create_vaccination(
            self.animal, next_application_date=self.today + timedelta(days=5),
        )
        TestDataFactory.create_vaccination(self.animal, next_application_date=self.today + timedelta(days=90))
        TestDataFactory.create_vaccination(TestDataFactory.create_animal(self.other_farm))

        response = self.client.get(f'/api/farms/{self.farm.pk}/vaccinations/')
        self.assertEqual(len(response.data), 2)
        response = self.client.get(f'/api/farms/{self.farm.pk}/vaccinations/', {
            'due_before': (self.today + timedelta(days=30)).isoformat(),
        })
        self.assertEqual([row['id'] for row in response.data], [due.pk])

    def test_other_farm_scoping(self):
        foreign_animal = TestDataFactory.create_animal(self.other_farm)
        foreign = TestDataFactory.create_vaccination(foreign_animal)
        response = self.client.get(f'/api/farms/{self.farm.pk}/animals/{foreign_animal.pk}/vaccinations/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        response = self.client.delete(f'/api/farms/{self.farm.pk}/vaccinations/{foreign.pk}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertTrue(Vaccination.objects.filter(pk=foreign.pk).exists())

    def test_animals_module_governs_vaccinations(self):
        reader = TestDataFactory.create_member(self.farm, [SystemModule.ANIMALS], level=AccessLevel.READ_ONLY)
        self.client.authenticate_user(reader)
        self.assertEqual(self.client.get(self.url).status_code, status.HTTP_200_OK)
        response = self.client.post(self.url, {
            'vaccine_name': 'Aftosa', 'application_date': self.today.isoformat(),
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
