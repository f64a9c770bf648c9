import logging
from decimal import Decimal

from django.db import transaction
from django.db.models import F

from .models import InventoryItem, InventoryTransaction

logger = logging.getLogger(__name__)


class InsufficientStockError(Exception):
    """Raised when a withdrawal exceeds the quantity in stock"""

    def __init__(self, item, requested):
        self.item = item
        self.requested = requested
        super().__init__(
            f"Insufficient stock for {item.name}: requested {requested} {item.unit}, available {item.quantity} {item.unit}"
        )


def critical_items(queryset):
    """Items with a minimum level whose quantity is at or below it"""
    return queryset.filter(minimum_level__isnull=False, quantity__lte=F('minimum_level'))


def apply_transaction(item_id, transaction_type, quantity, user=None, reason='', notes=''):
    """
    Record a stock movement and update the item quantity.

    entry adds, withdrawal subtracts and adjustment sets the absolute
    quantity. The item row is locked for the duration of the update.
    """
    quantity = Decimal(quantity)
    with transaction.atomic():
        item = InventoryItem.objects.select_for_update().get(pk=item_id)
        previous = item.quantity

        if transaction_type == 'entry':
            new_quantity = previous + quantity
        elif transaction_type == 'withdrawal':
            if quantity > previous:
                raise InsufficientStockError(item, quantity)
            new_quantity = previous - quantity
        elif transaction_type == 'adjustment':
            new_quantity = quantity
        else:
            raise ValueError(f"Unknown transaction type: {transaction_type}")

        item.quantity = new_quantity
        item.save(update_fields=['quantity', 'updated_at'])

        movement = InventoryTransaction.objects.create(
            item=item,
            transaction_type=transaction_type,
            quantity=quantity,
            previous_quantity=previous,
            new_quantity=new_quantity,
            reason=reason or '',
            notes=notes or '',
            created_by=user if user and user.is_authenticated else None,
        )

    if item.is_critical:
        logger.warning(f"Inventory item {item.pk} '{item.name}' at or below minimum level ({item.quantity} <= {item.minimum_level})")
    return item, movement
