"""
Test suite for Inventory module
Tests: item CRUD, critical items, stock transactions, purchase requests
"""
from decimal import Decimal

from rest_framework import status

from farmdesk.core.models import AuditLog
from farmdesk.core.test_utils import TestDataFactory, FarmAPITestCase
from farmdesk.farms.models import SystemModule, AccessLevel
from farmdesk.inventory.models import InventoryItem, InventoryTransaction, PurchaseRequest
from farmdesk.inventory.services import apply_transaction, critical_items, InsufficientStockError


class InventoryServiceTests(FarmAPITestCase):
    """Test stock movement rules"""

    def setUp(self):
        super().setUp()
        self.item = TestDataFactory.create_inventory_item(self.farm, quantity=Decimal('50.000'), minimum_level=Decimal('20.000'))

    def test_entry_adds(self):
        item, movement = apply_transaction(self.item.pk, 'entry', Decimal('25'), user=self.farm_admin)
        self.assertEqual(item.quantity, Decimal('75.000'))
        self.assertEqual(movement.previous_quantity, Decimal('50.000'))
        self.assertEqual(movement.new_quantity, Decimal('75.000'))
        self.assertEqual(movement.created_by, self.farm_admin)

    def test_withdrawal_subtracts(self):
        item, _ = apply_transaction(self.item.pk, 'withdrawal', Decimal('35'))
        self.assertEqual(item.quantity, Decimal('15.000'))
        self.assertTrue(item.is_critical)

    def test_withdrawal_beyond_stock_rejected(self):
        with self.assertRaises(InsufficientStockError):
            apply_transaction(self.item.pk, 'withdrawal', Decimal('50.001'))
        self.item.refresh_from_db()
        self.assertEqual(self.item.quantity, Decimal('50.000'))
        self.assertFalse(InventoryTransaction.objects.exists())

    def test_adjustment_sets_quantity(self):
        item, movement = apply_transaction(self.item.pk, 'adjustment', Decimal('12.5'))
        self.assertEqual(item.quantity, Decimal('12.5'))
        self.assertEqual(movement.previous_quantity, Decimal('50.000'))

    def test_unknown_type(self):
        with self.assertRaises(ValueError):
            apply_transaction(self.item.pk, 'theft', Decimal('1'))

    def test_critical_items(self):
        TestDataFactory.create_inventory_item(self.farm, quantity=Decimal('5'), minimum_level=Decimal('5'))
        TestDataFactory.create_inventory_item(self.farm, quantity=Decimal('0'))
        self.assertEqual(critical_items(InventoryItem.objects.filter(farm=self.farm)).count(), 1)


class InventoryAPITests(FarmAPITestCase):
    """Test inventory endpoints"""

    def setUp(self):
        super().setUp()
        self.client.authenticate_user(self.farm_admin)
        self.url = f'/api/farms/{self.farm.pk}/inventory/'

    def test_create_then_fetch(self):
        data = {
            'name': 'Ração bovina',
            'category': 'feed',
            'quantity': '500.000',
            'unit': 'kg',
            'minimum_level': '100.000',
            'unit_price': '2.35',
        }
        response = self.client.post(self.url, data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

        response = self.client.get(f"{self.url}{response.data['id']}/")
        for field, value in data.items():
            self.assertEqual(response.data[field], value)
        self.assertFalse(response.data['is_critical'])

    def test_negative_quantity_rejected(self):
        response = self.client.post(self.url, {'name': 'Diesel', 'quantity': '-1', 'unit': 'L'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('quantity', response.data)

    def test_critical_endpoint_and_filter(self):
        low = TestDataFactory.create_inventory_item(self.farm, quantity=Decimal('3'), minimum_level=Decimal('10'))
        TestDataFactory.create_inventory_item(self.farm, quantity=Decimal('30'), minimum_level=Decimal('10'))
        TestDataFactory.create_inventory_item(self.other_farm, quantity=Decimal('0'), minimum_level=Decimal('10'))

        response = self.client.get(f'{self.url}critical/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item['id'] for item in response.data], [low.pk])
        self.assertTrue(response.data[0]['is_critical'])

        response = self.client.get(self.url, {'critical': 'true'})
        self.assertEqual([item['id'] for item in response.data], [low.pk])
        response = self.client.get(self.url, {'critical': 'false'})
        self.assertEqual(len(response.data), 1)

    def test_record_withdrawal(self):
        item = TestDataFactory.create_inventory_item(self.farm, quantity=Decimal('100.000'))
        response = self.client.post(f'{self.url}{item.pk}/transactions/', {
            'transaction_type': 'withdrawal', 'quantity': '30', 'reason': 'Feeding lot 2',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['item']['quantity'], '70.000')
        self.assertEqual(response.data['transaction']['previous_quantity'], '100.000')
        self.assertEqual(response.data['transaction']['new_quantity'], '70.000')
        self.assertTrue(AuditLog.objects.filter(action='inventory_transaction', object_id=str(item.pk)).exists())

        response = self.client.get(f'{self.url}{item.pk}/transactions/')
        self.assertEqual(len(response.data), 1)

    def test_insufficient_stock(self):
        item = TestDataFactory.create_inventory_item(self.farm, quantity=Decimal('10.000'))
        response = self.client.post(f'{self.url}{item.pk}/transactions/', {
            'transaction_type': 'withdrawal', 'quantity': '11',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('Insufficient stock', response.data['error'])

    def test_zero_entry_rejected(self):
        item = TestDataFactory.create_inventory_item(self.farm)
        response = self.client.post(f'{self.url}{item.pk}/transactions/', {
            'transaction_type': 'entry', 'quantity': '0',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('quantity', response.data)

    def test_adjust_to_zero(self):
        item = TestDataFactory.create_inventory_item(self.farm)
        response = self.client.post(f'{self.url}{item.pk}/transactions/', {
            'transaction_type': 'adjustment', 'quantity': '0',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['item']['quantity'], '0.000')

    def test_farm_transaction_list(self):
        item = TestDataFactory.create_inventory_item(self.farm)
        apply_transaction(item.pk, 'entry', Decimal('5'))
        apply_transaction(item.pk, 'withdrawal', Decimal('2'))
        foreign = TestDataFactory.create_inventory_item(self.other_farm)
        apply_transaction(foreign.pk, 'entry', Decimal('5'))

        response = self.client.get(f'{self.url}transactions/')
        self.assertEqual(len(response.data), 2)
        response = self.client.get(f'{self.url}transactions/', {'transaction_type': 'entry'})
        self.assertEqual(len(response.data), 1)

    def test_item_of_other_farm_is_404(self):
        foreign = TestDataFactory.create_inventory_item(self.other_farm)
        response = self.client.post(f'{self.url}{foreign.pk}/transactions/', {
            'transaction_type': 'entry', 'quantity': '1',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class InventoryAccessTests(FarmAPITestCase):
    """Test module access levels on inventory endpoints"""

    def test_read_only_cannot_record_transactions(self):
        item = TestDataFactory.create_inventory_item(self.farm)
        user = TestDataFactory.create_member(self.farm, [SystemModule.INVENTORY], level=AccessLevel.READ_ONLY)
        self.client.authenticate_user(user)
        url = f'/api/farms/{self.farm.pk}/inventory/{item.pk}/transactions/'
        self.assertEqual(self.client.get(url).status_code, status.HTTP_200_OK)
        response = self.client.post(url, {'transaction_type': 'entry', 'quantity': '1'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class PurchaseRequestAPITests(FarmAPITestCase):
    """Test purchase request endpoints and status workflow"""

    def setUp(self):
        super().setUp()
        self.client.authenticate_user(self.farm_admin)
        self.url = f'/api/farms/{self.farm.pk}/purchase-requests/'

    def test_create_then_fetch(self):
        data = {
            'product': 'Sementes de Milho Premium',
            'quantity': '25kg',
            'notes': 'Variedade resistente à seca',
            'responsible': 'Eng. João Santos',
            'needed_by': '2025-07-15',
            'urgent': True,
        }
        response = self.client.post(self.url, data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], PurchaseRequest.NEW)
        self.assertEqual(response.data['created_by'], self.farm_admin.pk)
        self.assertIsNone(response.data['completed_at'])

        response = self.client.get(f"{self.url}{response.data['id']}/")
        for field, value in data.items():
            self.assertEqual(response.data[field], value)

    def test_product_required(self):
        response = self.client.post(self.url, {'product': ' ', 'quantity': '1', 'responsible': 'Ana'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('product', response.data)

    def test_list_urgent_first_and_filters(self):
        routine = TestDataFactory.create_purchase_request(self.farm)
        urgent = TestDataFactory.create_purchase_request(self.farm, urgent=True)
        done = TestDataFactory.create_purchase_request(
            self.farm, status=PurchaseRequest.COMPLETED, completed_by_name='Carlos',
        )
        TestDataFactory.create_purchase_request(self.other_farm, urgent=True)

        response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['id'] for row in response.data], [urgent.pk, done.pk, routine.pk])

        response = self.client.get(self.url, {'urgent': 'true'})
        self.assertEqual([row['id'] for row in response.data], [urgent.pk])
        response = self.client.get(self.url, {'status': PurchaseRequest.COMPLETED})
        self.assertEqual([row['id'] for row in response.data], [done.pk])

    def test_workflow(self):
        purchase_request = TestDataFactory.create_purchase_request(self.farm)
        detail = f'{self.url}{purchase_request.pk}/'

        response = self.client.patch(detail, {
            'status': PurchaseRequest.IN_PROGRESS, 'progress_notes': 'Orçamento pedido a 3 fornecedores',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], PurchaseRequest.IN_PROGRESS)

        response = self.client.patch(detail, {'status': PurchaseRequest.COMPLETED}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('completed_by_name', response.data)

        response = self.client.patch(detail, {
            'status': PurchaseRequest.COMPLETED, 'completed_by_name': 'Maria Silva',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNotNone(response.data['completed_at'])
        self.assertTrue(AuditLog.objects.filter(
            action='update', model_name='PurchaseRequest', object_id=purchase_request.pk,
            changes__previous_status=PurchaseRequest.IN_PROGRESS,
        ).exists())

    def test_cannot_move_back_to_new(self):
        purchase_request = TestDataFactory.create_purchase_request(self.farm, status=PurchaseRequest.IN_PROGRESS)
        response = self.client.patch(f'{self.url}{purchase_request.pk}/', {'status': PurchaseRequest.NEW}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('status', response.data)

    def test_completed_request_is_frozen(self):
        purchase_request = TestDataFactory.create_purchase_request(
            self.farm, status=PurchaseRequest.COMPLETED, completed_by_name='Carlos',
        )
        response = self.client.patch(f'{self.url}{purchase_request.pk}/', {'quantity': '50kg'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        purchase_request.refresh_from_db()
        self.assertEqual(purchase_request.quantity, '25kg')

        response = self.client.delete(f'{self.url}{purchase_request.pk}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)

    def test_request_of_other_farm_is_404(self):
        foreign = TestDataFactory.create_purchase_request(self.other_farm)
        response = self.client.get(f'{self.url}{foreign.pk}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_inventory_module_governs_requests(self):
        reader = TestDataFactory.create_member(self.farm, [SystemModule.INVENTORY], level=AccessLevel.READ_ONLY)
        self.client.authenticate_user(reader)
        self.assertEqual(self.client.get(self.url).status_code, status.HTTP_200_OK)
        response = self.client.post(self.url, {'product': 'Diesel', 'quantity': '200L', 'responsible': 'Ana'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        crops_only = TestDataFactory.create_member(self.farm, [SystemModule.CROPS])
        self.client.authenticate_user(crops_only)
        self.assertEqual(self.client.get(self.url).status_code, status.HTTP_403_FORBIDDEN)
