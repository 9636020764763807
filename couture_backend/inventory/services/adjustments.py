# inventory/services/adjustments.py

"""
MANUAL STOCK ADJUSTMENTS

Rules:
- quantity_delta must be a non-zero number
- an adjustment cannot take quantity below zero
- writes StockMovement(reason=ADJUSTMENT), direction from the delta sign
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django.db import transaction

from inventory.models import InventoryItem, StockMovement
from inventory.services.exceptions import InventoryItemNotFound, StockAdjustmentError
from inventory.services.stock_sync import QTY_PLACES, fmt_qty


@dataclass(frozen=True)
class AdjustmentResult:
    item: InventoryItem
    movement: StockMovement
    quantity_delta: Decimal


def _to_delta(value) -> Decimal:
    if value is None or value == "" or isinstance(value, bool):
        raise StockAdjustmentError("quantity_delta is required")
    try:
        delta = Decimal(str(value)).quantize(QTY_PLACES, rounding=ROUND_HALF_UP)
    except (InvalidOperation, TypeError, ValueError):
        raise StockAdjustmentError("quantity_delta must be a number")
    if delta == 0:
        raise StockAdjustmentError("quantity_delta cannot be 0")
    return delta


@transaction.atomic
def adjust_stock(*, item: InventoryItem, quantity_delta, user=None, note: str = "") -> AdjustmentResult:
    """
    +N adds stock (IN), -N removes stock (OUT).
    """
    delta = _to_delta(quantity_delta)
    locked = InventoryItem.objects.select_for_update().filter(pk=item.pk).first()
    if locked is None:
        raise InventoryItemNotFound(f"Item with ID {item.pk} not found")

    current = Decimal(locked.quantity or 0)
    if current + delta < 0:
        raise StockAdjustmentError(
            f"Cannot reduce stock below zero. Current: {fmt_qty(current)}, Requested OUT: {fmt_qty(-delta)}"
        )

    locked.quantity = current + delta
    locked.save(update_fields=["quantity", "updated_at"])

    movement = StockMovement.objects.create(
        item=locked,
        movement_type=StockMovement.MovementType.IN if delta > 0 else StockMovement.MovementType.OUT,
        reason=StockMovement.Reason.ADJUSTMENT,
        quantity=abs(delta),
        quantity_after=locked.quantity,
        performed_by=user if getattr(user, "is_authenticated", False) else None,
        note=(note or "")[:255],
    )
    return AdjustmentResult(item=locked, movement=movement, quantity_delta=delta)
