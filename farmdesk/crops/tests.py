"""
Test suite for Crops module
"""
from datetime import timedelta

from rest_framework import status

from farmdesk.core.test_utils import TestDataFactory, FarmAPITestCase
from farmdesk.crops.models import Crop
from farmdesk.farms.models import SystemModule, AccessLevel


class CropAPITests(FarmAPITestCase):
    """Test crop endpoints"""

    def setUp(self):
        super().setUp()
        self.client.authenticate_user(self.farm_admin)
        self.url = f'/api/farms/{self.farm.pk}/crops/'

    def test_create_then_fetch(self):
        data = {
            'name': 'Soja safra 24/25',
            'sector': 'Talhão 3',
            'area': '48.75',
            'planting_date': '2024-10-01',
            'expected_harvest_date': '2025-02-15',
            'status': 'growing',
        }
        response = self.client.post(self.url, data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

        response = self.client.get(f"{self.url}{response.data['id']}/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        for field, value in data.items():
            self.assertEqual(response.data[field], value)
        self.assertEqual(response.data['farm'], self.farm.pk)

    def test_default_status_is_growing(self):
        response = self.client.post(self.url, {
            'name': 'Milho', 'area': '10.00', 'planting_date': '2024-09-01',
        }, format='json')
        self.assertEqual(response.data['status'], 'growing')

    def test_area_must_be_positive(self):
        response = self.client.post(self.url, {
            'name': 'Milho', 'area': '0', 'planting_date': '2024-09-01',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('area', response.data)

    def test_harvest_before_planting_rejected(self):
        response = self.client.post(self.url, {
            'name': 'Milho', 'area': '10.00', 'planting_date': '2024-09-01', 'expected_harvest_date': '2024-08-01',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('expected_harvest_date', response.data)

    def test_partial_update_checks_stored_planting_date(self):
        crop = TestDataFactory.create_crop(self.farm)
        response = self.client.patch(f'{self.url}{crop.pk}/', {
            'actual_harvest_date': (crop.planting_date - timedelta(days=1)).isoformat(),
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('actual_harvest_date', response.data)

    def test_harvest(self):
        crop = TestDataFactory.create_crop(self.farm)
        response = self.client.patch(f'{self.url}{crop.pk}/', {
            'status': 'harvested', 'actual_harvest_date': crop.expected_harvest_date.isoformat(),
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'harvested')

    def test_filter_by_status(self):
        TestDataFactory.create_crop(self.farm, status='planned')
        TestDataFactory.create_crop(self.farm, status='growing')
        response = self.client.get(self.url, {'status': 'planned'})
        self.assertEqual(len(response.data), 1)

    def test_list_is_scoped_to_farm(self):
        TestDataFactory.create_crop(self.farm)
        foreign = TestDataFactory.create_crop(self.other_farm)
        response = self.client.get(self.url)
        self.assertEqual(len(response.data), 1)
        response = self.client.get(f'{self.url}{foreign.pk}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_delete(self):
        crop = TestDataFactory.create_crop(self.farm)
        response = self.client.delete(f'{self.url}{crop.pk}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Crop.objects.filter(pk=crop.pk).exists())


class CropAccessTests(FarmAPITestCase):
    """Test module access levels on crop endpoints"""

    def setUp(self):
        super().setUp()
        self.crop = TestDataFactory.create_crop(self.farm)
        self.url = f'/api/farms/{self.farm.pk}/crops/'

    def test_animals_grant_does_not_open_crops(self):
        user = TestDataFactory.create_member(self.farm, [SystemModule.ANIMALS])
        self.client.authenticate_user(user)
        self.assertEqual(self.client.get(self.url).status_code, status.HTTP_403_FORBIDDEN)

    def test_read_only(self):
        user = TestDataFactory.create_member(self.farm, [SystemModule.CROPS], level=AccessLevel.READ_ONLY)
        self.client.authenticate_user(user)
        self.assertEqual(self.client.get(self.url).status_code, status.HTTP_200_OK)
        response = self.client.patch(f'{self.url}{self.crop.pk}/', {'status': 'failed'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_edit_cannot_delete(self):
        user = TestDataFactory.create_member(self.farm, [SystemModule.CROPS], level=AccessLevel.EDIT)
        self.client.authenticate_user(user)
        response = self.client.patch(f'{self.url}{self.crop.pk}/', {'status': 'failed'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        response = self.client.delete(f'{self.url}{self.crop.pk}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
