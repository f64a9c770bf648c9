"""
Test suite for Financial module
"""
from datetime import date
from decimal import Decimal

from rest_framework import status

from farmdesk.core.test_utils import TestDataFactory, FarmAPITestCase
from farmdesk.farms.models import SystemModule, AccessLevel
from farmdesk.financial.models import Cost


class CostAPITests(FarmAPITestCase):
    """Test cost endpoints"""

    def setUp(self):
        super().setUp()
        self.client.authenticate_user(self.farm_admin)
        self.url = f'/api/farms/{self.farm.pk}/costs/'

    def test_create_then_fetch(self):
        data = {
            'date': '2024-11-05',
            'category': 'veterinary',
            'amount': '150.00',
            'description': 'Vacinas aftosa',
            'supplier': 'AgroVet Ltda',
            'payment_method': 'bank_transfer',
            'document_number': 'NF-88231',
        }
        response = self.client.post(self.url, data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['created_by'], self.farm_admin.pk)

        response = self.client.get(f"{self.url}{response.data['id']}/")
        for field, value in data.items():
            self.assertEqual(response.data[field], value)

    def test_default_category(self):
        response = self.client.post(self.url, {
            'date': '2024-11-05', 'amount': '10.00', 'description': 'Misc',
        }, format='json')
        self.assertEqual(response.data['category'], 'other')

    def test_amount_must_be_positive(self):
        response = self.client.post(self.url, {
            'date': '2024-11-05', 'amount': '0.00', 'description': 'Nothing',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('amount', response.data)

    def test_description_required(self):
        response = self.client.post(self.url, {'date': '2024-11-05', 'amount': '5.00', 'description': '  '}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('description', response.data)

    def test_filter_by_date_range(self):
        TestDataFactory.create_cost(self.farm, date=date(2024, 1, 15))
        TestDataFactory.create_cost(self.farm, date=date(2024, 2, 15))
        TestDataFactory.create_cost(self.farm, date=date(2024, 3, 15))
        response = self.client.get(self.url, {'date_from': '2024-02-01', 'date_to': '2024-03-31'})
        self.assertEqual(len(response.data), 2)
        self.assertEqual(response.data[0]['date'], '2024-03-15')

    def test_summary(self):
        TestDataFactory.create_cost(self.farm, amount=Decimal('100.00'), category='feed', date=date(2024, 5, 1))
        TestDataFactory.create_cost(self.farm, amount=Decimal('50.50'), category='feed', date=date(2024, 5, 2))
        TestDataFactory.create_cost(self.farm, amount=Decimal('200.00'), category='fuel', date=date(2024, 5, 3))
        TestDataFactory.create_cost(self.farm, amount=Decimal('999.00'), category='fuel', date=date(2024, 6, 1))
        TestDataFactory.create_cost(self.other_farm, amount=Decimal('75.00'), date=date(2024, 5, 1))

        response = self.client.get(f'{self.url}summary/', {'date_from': '2024-05-01', 'date_to': '2024-05-31'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(Decimal(response.data['total']), Decimal('350.50'))
        self.assertEqual(response.data['count'], 3)
        by_category = {row['category']: row for row in response.data['by_category']}
        self.assertEqual(Decimal(by_category['feed']['total']), Decimal('150.50'))
        self.assertEqual(by_category['fuel']['count'], 1)
        self.assertEqual(response.data['by_category'][0]['category'], 'fuel')

    def test_summary_without_costs(self):
        response = self.client.get(f'{self.url}summary/')
        self.assertEqual(Decimal(response.data['total']), Decimal('0'))
        self.assertEqual(response.data['count'], 0)
        self.assertEqual(response.data['by_category'], [])

    def test_cost_of_other_farm_is_404(self):
        foreign = TestDataFactory.create_cost(self.other_farm)
        response = self.client.patch(f'{self.url}{foreign.pk}/', {'amount': '1.00'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        foreign.refresh_from_db()
        self.assertEqual(foreign.amount, Decimal('150.00'))

    def test_delete(self):
        cost = TestDataFactory.create_cost(self.farm)
        response = self.client.delete(f'{self.url}{cost.pk}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Cost.objects.filter(pk=cost.pk).exists())


class CostAccessTests(FarmAPITestCase):
    """Test module access levels on cost endpoints"""

    def test_financial_is_separate_from_other_modules(self):
        user = TestDataFactory.create_member(
            self.farm, [SystemModule.ANIMALS, SystemModule.CROPS, SystemModule.TASKS], level=AccessLevel.FULL
        )
        self.client.authenticate_user(user)
        response = self.client.get(f'/api/farms/{self.farm.pk}/costs/summary/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_read_only_cannot_record(self):
        user = TestDataFactory.create_member(self.farm, [SystemModule.FINANCIAL], level=AccessLevel.READ_ONLY)
        self.client.authenticate_user(user)
        url = f'/api/farms/{self.farm.pk}/costs/'
        self.assertEqual(self.client.get(url).status_code, status.HTTP_200_OK)
        response = self.client.post(url, {'date': '2024-11-05', 'amount': '5.00', 'description': 'Diesel'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
