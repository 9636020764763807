# inventory/services/stock_sync.py

"""
ORDER ↔ INVENTORY STOCK SYNC

Purpose:
- Check, deduct and restore inventory quantities for tailoring orders.

Line references:
- A line is (reference, quantity). The reference is an InventoryItem id,
  an item name, or a product type.
- Resolution: UUID -> that item; otherwise items with that exact name,
  falling back to items of that product type (oldest first).

Rules:
- Shortages are REPORTED (missing_items / shortages), not raised, so an order
  can still be taken when the shop is short. strict=True raises
  InsufficientStockError instead and rolls everything back.
- Direct-id lines are all-or-nothing; name/type lines deduct greedily
  across every match.
- Each call is one transaction with row locks, and every quantity change
  writes a StockMovement.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable

from django.db import transaction

from inventory.models import InventoryItem, StockMovement
from inventory.services.exceptions import InsufficientStockError, InventorySyncError

logger = logging.getLogger("inventory")

QTY_PLACES = Decimal("0.001")


# ---------------------------------------------------------
# Inputs / results
# ---------------------------------------------------------
@dataclass(frozen=True)
class StockLine:
    reference: str
    quantity: Decimal


@dataclass(frozen=True)
class MaterialLine:
    item_id: str
    name: str
    quantity: Decimal
    unit: str = "units"


@dataclass
class StockSyncResult:
    success: bool
    missing_items: list[str] = field(default_factory=list)
    movements: list[StockMovement] = field(default_factory=list)


@dataclass
class AvailabilityResult:
    available: bool
    shortages: list[str] = field(default_factory=list)


@dataclass
class RestoreResult:
    success: bool
    errors: list[str] = field(default_factory=list)
    movements: list[StockMovement] = field(default_factory=list)


# ---------------------------------------------------------
# Helpers
# ---------------------------------------------------------
def _to_quantity(value) -> Decimal:
    if isinstance(value, bool):
        raise InventorySyncError("quantity must be a number")
    try:
        qty = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise InventorySyncError("quantity must be a number")
    if not qty.is_finite():
        raise InventorySyncError("quantity must be a number")
    qty = qty.quantize(QTY_PLACES, rounding=ROUND_HALF_UP)
    if qty <= 0:
        raise InventorySyncError("quantity must be greater than zero")
    return qty


def fmt_qty(value) -> str:
    """3.000 -> "3", 2.500 -> "2.5"."""
    d = Decimal(value or 0).normalize()
    return format(d, "f")


def coerce_lines(lines: Iterable) -> list[StockLine]:
    """
    Accepts StockLine, (reference, qty) tuples or dicts with
    reference|type|item_id + quantity.
    """
    out = []
    for line in lines or []:
        if isinstance(line, StockLine):
            out.append(line)
            continue
        if isinstance(line, dict):
            ref = line.get("reference") or line.get("type") or line.get("item_id") or ""
            qty = line.get("quantity")
        else:
            ref, qty = line
        ref = str(ref or "").strip()
        if not ref:
            raise InventorySyncError("reference is required")
        out.append(StockLine(reference=ref, quantity=_to_quantity(qty)))
    return out


def coerce_materials(materials: Iterable) -> list[MaterialLine]:
    out = []
    for m in materials or []:
        if isinstance(m, MaterialLine):
            out.append(m)
            continue
        item_id = str(m.get("item_id") or m.get("id") or "").strip()
        if not item_id:
            raise InventorySyncError("material item_id is required")
        out.append(
            MaterialLine(
                item_id=item_id,
                name=(m.get("name") or "").strip() or item_id,
                quantity=_to_quantity(m.get("quantity")),
                unit=(m.get("unit") or "units").strip(),
            )
        )
    return out


def _as_uuid(reference: str):
    try:
        return uuid.UUID(str(reference))
    except (ValueError, AttributeError, TypeError):
        return None


def _locked_matches(reference: str) -> list[InventoryItem]:
    """
    Items with that exact name, else items of that product type. Oldest first.
    """
    base = InventoryItem.objects.select_for_update().order_by("created_at", "id")

    matches = list(base.filter(name=reference))
    if not matches:
        matches = list(base.filter(product_type=reference))
    return matches


def _locked_item(item_id) -> InventoryItem | None:
    return InventoryItem.objects.select_for_update().filter(pk=item_id).first()


def _move(
    item: InventoryItem,
    delta: Decimal,
    *,
    reason: str,
    order=None,
    user=None,
    note: str = "",
) -> StockMovement:
    """
    Apply delta to a locked item and append the ledger row.
    """
    new_quantity = Decimal(item.quantity) + delta
    if new_quantity < 0:
        raise InventorySyncError(f"{item.name} cannot go below zero")

    item.quantity = new_quantity
    item.save(update_fields=["quantity", "updated_at"])

    movement = StockMovement.objects.create(
        item=item,
        movement_type=StockMovement.MovementType.IN if delta > 0 else StockMovement.MovementType.OUT,
        reason=reason,
        quantity=abs(delta),
        quantity_after=new_quantity,
        order=order,
        performed_by=user if getattr(user, "is_authenticated", False) else None,
        note=note[:255],
    )
    logger.info(
        "Stock %s %s of %s, now %s",
        "restored" if delta > 0 else "deducted",
        fmt_qty(abs(delta)),
        item.name,
        fmt_qty(new_quantity),
        extra={"item_id": str(item.id), "reason": reason},
    )
    return movement


def _finish(result, *, strict: bool, missing: list[str]):
    if strict and missing:
        logger.warning("Strict stock sync aborted", extra={"missing_items": missing})
        raise InsufficientStockError(missing)
    if missing:
        logger.warning("Stock sync incomplete", extra={"missing_items": missing})
    return result


# ---------------------------------------------------------
# Availability (read-only)
# ---------------------------------------------------------
def check_inventory_availability(lines) -> AvailabilityResult:
    shortages: list[str] = []

    for line in coerce_lines(lines):
        item_id = _as_uuid(line.reference)
        if item_id is not None:
            item = InventoryItem.objects.filter(pk=item_id).first()
            if item is None:
                shortages.append(f"Item with ID {line.reference} not found")
            elif item.quantity < line.quantity:
                shortages.append(
                    f"{item.name} - need {fmt_qty(line.quantity)}, have {fmt_qty(item.quantity)}"
                )
            continue

        matches = list(InventoryItem.objects.filter(name=line.reference))
        if not matches:
            matches = list(InventoryItem.objects.filter(product_type=line.reference))
        if not matches:
            shortages.append(f"{line.reference} - not in inventory")
            continue

        total = sum((Decimal(m.quantity) for m in matches), Decimal("0"))
        if total < line.quantity:
            shortages.append(
                f"{line.reference} - need {fmt_qty(line.quantity)}, have {fmt_qty(total)}"
            )

    return AvailabilityResult(available=not shortages, shortages=shortages)


# ---------------------------------------------------------
# Deductions
# ---------------------------------------------------------
def _deduct_greedy(items, remaining: Decimal, *, reason, order, user, movements) -> Decimal:
    for item in items:
        if remaining <= 0:
            break
        available = Decimal(item.quantity)
        if available <= 0:
            continue
        take = min(remaining, available)
        movements.append(_move(item, -take, reason=reason, order=order, user=user))
        remaining -= take
    return remaining


@transaction.atomic
def update_inventory_stock(lines, *, order=None, user=None, strict: bool = False) -> StockSyncResult:
    """
    Product-type deduction: greedy across in-stock items of that type.
    A type with no stock at all is reported by its bare name.
    """
    missing: list[str] = []
    movements: list[StockMovement] = []

    for line in coerce_lines(lines):
        items = list(
            InventoryItem.objects.select_for_update()
            .filter(product_type=line.reference, quantity__gt=0)
            .order_by("created_at", "id")
        )
        if not items:
            missing.append(line.reference)
            continue

        remaining = _deduct_greedy(
            items,
            line.quantity,
            reason=StockMovement.Reason.ORDER_DEDUCTION,
            order=order,
            user=user,
            movements=movements,
        )
        if remaining > 0:
            missing.append(f"{line.reference} ({fmt_qty(remaining)} units short)")

    result = StockSyncResult(success=not missing, missing_items=missing, movements=movements)
    return _finish(result, strict=strict, missing=missing)


@transaction.atomic
def deduct_inventory_for_order(lines, *, order=None, user=None, strict: bool = False) -> StockSyncResult:
    missing: list[str] = []
    movements: list[StockMovement] = []

    for line in coerce_lines(lines):
        item_id = _as_uuid(line.reference)
        if item_id is not None:
            item = _locked_item(item_id)
            if item is None:
                missing.append(f"Item with ID {line.reference} not found")
            elif item.quantity >= line.quantity:
                movements.append(
                    _move(
                        item,
                        -line.quantity,
                        reason=StockMovement.Reason.ORDER_DEDUCTION,
                        order=order,
                        user=user,
                    )
                )
            else:
                short = line.quantity - Decimal(item.quantity)
                missing.append(f"{item.name} ({fmt_qty(short)} units short)")
            continue

        matches = _locked_matches(line.reference)
        if not matches:
            missing.append(f"{line.reference} - not found in inventory")
            continue

        remaining = _deduct_greedy(
            matches,
            line.quantity,
            reason=StockMovement.Reason.ORDER_DEDUCTION,
            order=order,
            user=user,
            movements=movements,
        )
        if remaining > 0:
            missing.append(f"{line.reference} ({fmt_qty(remaining)} units short)")

    result = StockSyncResult(success=not missing, missing_items=missing, movements=movements)
    return _finish(result, strict=strict, missing=missing)


@transaction.atomic
def deduct_required_materials(materials, *, order=None, user=None, strict: bool = False) -> StockSyncResult:
    """
    Per-material deduction by item id. A material is only deducted when
    the whole quantity is in stock.
    """
    missing: list[str] = []
    movements: list[StockMovement] = []

    for material in coerce_materials(materials):
        item_id = _as_uuid(material.item_id)
        item = _locked_item(item_id) if item_id is not None else None

        if item is None:
            missing.append(f"{material.name} - not found in inventory")
            continue

        if item.quantity >= material.quantity:
            movements.append(
                _move(
                    item,
                    -material.quantity,
                    reason=StockMovement.Reason.MATERIAL_DEDUCTION,
                    order=order,
                    user=user,
                )
            )
        else:
            short = material.quantity - Decimal(item.quantity)
            missing.append(f"{material.name} ({fmt_qty(short)} {material.unit} short)")

    result = StockSyncResult(success=not missing, missing_items=missing, movements=movements)
    return _finish(result, strict=strict, missing=missing)


# ---------------------------------------------------------
# Restoration (order cancelled)
# ---------------------------------------------------------
@transaction.atomic
def restore_inventory_for_order(lines, *, order=None, user=None) -> RestoreResult:
    """
    Add quantities back. Name/type references restore into the first match.
    """
    errors: list[str] = []
    movements: list[StockMovement] = []

    for line in coerce_lines(lines):
        item_id = _as_uuid(line.reference)
        if item_id is not None:
            item = _locked_item(item_id)
            if item is None:
                errors.append(f"Item with ID {line.reference} not found for restoration")
                continue
        else:
            matches = _locked_matches(line.reference)
            if not matches:
                errors.append(f"{line.reference} - not found for restoration")
                continue
            item = matches[0]

        movements.append(
            _move(
                item,
                line.quantity,
                reason=StockMovement.Reason.ORDER_RESTORE,
                order=order,
                user=user,
            )
        )

    if errors:
        logger.warning("Stock restore incomplete", extra={"errors": errors})
    return RestoreResult(success=not errors, errors=errors, movements=movements)
