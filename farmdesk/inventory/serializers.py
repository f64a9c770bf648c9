from decimal import Decimal

from rest_framework import serializers
from .models import InventoryItem, InventoryTransaction, PurchaseRequest


class InventoryItemSerializer(serializers.ModelSerializer):
    is_critical = serializers.BooleanField(read_only=True)

    class Meta:
        model = InventoryItem
        fields = ['id', 'farm', 'name', 'category', 'quantity', 'unit', 'minimum_level', 'unit_price',
                  'notes', 'is_critical', 'created_at', 'updated_at']
        read_only_fields = ['farm', 'created_at', 'updated_at']

    def validate_quantity(self, value):
        if value < 0:
            raise serializers.ValidationError('Quantity cannot be negative')
        return value

    def validate_minimum_level(self, value):
        if value is not None and value < 0:
            raise serializers.ValidationError('Minimum level cannot be negative')
        return value

    def validate_unit_price(self, value):
        if value is not None and value < 0:
            raise serializers.ValidationError('Unit price cannot be negative')
        return value


class InventoryTransactionSerializer(serializers.ModelSerializer):
    item_name = serializers.CharField(source='item.name', read_only=True)
    created_by_name = serializers.SerializerMethodField()

    class Meta:
        model = InventoryTransaction
        fields = ['id', 'item', 'item_name', 'transaction_type', 'quantity', 'previous_quantity', 'new_quantity',
                  'reason', 'notes', 'created_by', 'created_by_name', 'created_at']
        read_only_fields = fields

    def get_created_by_name(self, obj):
        return obj.created_by.get_display_name() if obj.created_by else None


class TransactionCreateSerializer(serializers.Serializer):
    transaction_type = serializers.ChoiceField(choices=InventoryTransaction.TYPE_CHOICES)
    quantity = serializers.DecimalField(max_digits=12, decimal_places=3)
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
    notes = serializers.CharField(required=False, allow_blank=True, default='')

    def validate(self, attrs):
        quantity = attrs['quantity']
        if attrs['transaction_type'] == 'adjustment':
            if quantity < 0:
                raise serializers.ValidationError({'quantity': 'Adjusted quantity cannot be negative'})
        elif quantity <= Decimal('0'):
            raise serializers.ValidationError({'quantity': 'Quantity must be greater than zero'})
        return attrs


class PurchaseRequestSerializer(serializers.ModelSerializer):
    class Meta:
        model = PurchaseRequest
        fields = ['id', 'farm', 'product', 'quantity', 'notes', 'responsible', 'needed_by', 'urgent', 'status',
                  'progress_notes', 'completed_by_name', 'completed_at', 'created_by', 'created_at', 'updated_at']
        read_only_fields = ['farm', 'completed_at', 'created_by', 'created_at', 'updated_at']

    def validate_product(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Product is required')
        return value

    def validate(self, attrs):
        instance = self.instance
        if instance is not None and instance.status == PurchaseRequest.COMPLETED:
            raise serializers.ValidationError({'status': 'Completed purchase requests cannot be changed'})

        current = instance.status if instance else PurchaseRequest.NEW
        target = attrs.get('status', current)
        if target != current and target not in PurchaseRequest.TRANSITIONS[current]:
            raise serializers.ValidationError({'status': f"Cannot move a request from '{current}' to '{target}'"})

        completed_by = attrs.get('completed_by_name', instance.completed_by_name if instance else '')
        if target == PurchaseRequest.COMPLETED and not (completed_by or '').strip():
            raise serializers.ValidationError({'completed_by_name': 'Required when completing a request'})
        return attrs
