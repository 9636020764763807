# orders/services/order_service.py

"""
ORDER SERVICE

Purpose:
- Create / update tailoring orders from a list of items.
- Status lifecycle (cancel restores deducted stock once).
- Advance payments and workshop progress flags.

Rules:
- An order needs at least one item; every item needs made_for, category,
  delivery_date and a price > 0.
- Totals are server-side: total = sum(price * qty), remaining = total - advance (>= 0).
- The customer is matched by name (then phone) or created.
- Required materials are deducted at creation only. Shortages come back as
  warnings; the order is still saved.
- A cancelled order cannot be reopened.
- A new order cannot start cancelled, so every deduction has a cancel to undo it.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django.db import transaction

from customers.services.customer_service import record_order, upsert_customer_for_order
from inventory.services.stock_sync import (
    MaterialLine,
    deduct_required_materials,
    restore_inventory_for_order,
)
from orders.models import Order, OrderItem, OrderItemMaterial, OrderStatus
from orders.models.order import PROGRESS_STEPS, default_progress
from orders.services.exceptions import (
    InvalidOrderItems,
    InvalidPaymentAmount,
    InvalidStatusTransition,
    OrderServiceError,
)

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")
ORDER_NUMBER_ATTEMPTS = 20


@dataclass
class OrderResult:
    order: Order
    warnings: list[str] = field(default_factory=list)


# ---------------------------------------------------------
# Helpers
# ---------------------------------------------------------
def _money(v) -> Decimal:
    if v is None or v == "":
        return Decimal("0.00")
    return Decimal(str(v)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def generate_order_number() -> str:
    """
    ORD- + last 6 digits of the epoch milliseconds; bumps forward on collision.
    """
    base = int(time.time() * 1000)
    for attempt in range(ORDER_NUMBER_ATTEMPTS):
        candidate = f"ORD-{str(base + attempt)[-6:]}"
        if not Order.objects.filter(order_number=candidate).exists():
            return candidate
    raise OrderServiceError("Could not allocate a unique order number")


def validate_items(items) -> None:
    if not items:
        raise InvalidOrderItems("Please add at least one item to the order")

    for i, item in enumerate(items, start=1):
        made_for = (item.get("made_for") or "").strip()
        category = (item.get("category") or "").strip()
        try:
            price = Decimal(str(item.get("price") or 0))
        except (InvalidOperation, TypeError, ValueError):
            price = Decimal("0")
        if not made_for or not category or not item.get("delivery_date") or price <= 0:
            raise InvalidOrderItems(f"Please complete all required fields for item {i}")


def _unique(values):
    seen = []
    for v in values:
        if v and v not in seen:
            seen.append(v)
    return seen


def _create_items(order: Order, items) -> list[OrderItem]:
    created = []
    for position, data in enumerate(items):
        item = OrderItem.objects.create(
            order=order,
            position=position,
            made_for=data["made_for"].strip(),
            category=data["category"].strip(),
            description=data.get("description") or "",
            price=_money(data["price"]),
            quantity=int(data.get("quantity") or 1),
            status=data.get("status") or OrderStatus.RECEIVED,
            order_date=data.get("order_date") or order.order_date,
            delivery_date=data["delivery_date"],
            design_images=_unique(data.get("design_images") or []),
            notes=data.get("notes") or "",
            sizes=data.get("sizes") or {},
        )
        staff = data.get("assigned_staff") or []
        if staff:
            item.assigned_staff.set(staff)

        for material in data.get("materials") or []:
            inventory_item = material.get("inventory_item")
            OrderItemMaterial.objects.create(
                order_item=item,
                inventory_item=inventory_item,
                name=(material.get("name") or getattr(inventory_item, "name", "")).strip(),
                quantity=material["quantity"],
                unit=material.get("unit") or getattr(inventory_item, "unit", "pieces"),
            )
        created.append(item)
    return created


def _apply_derived_fields(order: Order, items) -> None:
    """
    Header fields that mirror the item list.
    """
    first = items[0]
    order.item_type = first["category"].strip() if len(items) == 1 else Order.MULTIPLE_ITEMS
    order.quantity = sum(int(i.get("quantity") or 1) for i in items)
    order.total_amount = _money(
        sum(_money(i["price"]) * int(i.get("quantity") or 1) for i in items)
    )
    if first.get("order_date"):
        order.order_date = first["order_date"]
    order.delivery_date = first["delivery_date"]
    order.notes = "\n".join(n for n in ((i.get("notes") or "").strip() for i in items) if n)
    order.design_images = _unique(img for i in items for img in (i.get("design_images") or []))
    order.recompute_remaining()


def _sync_order_staff(order: Order, items) -> None:
    staff = _unique(s for i in items for s in (i.get("assigned_staff") or []))
    order.assigned_staff.set(staff)


def _deduct_materials(order: Order, items, user) -> list[str]:
    warnings: list[str] = []
    lines: list[MaterialLine] = []

    for data in items:
        for material in data.get("materials") or []:
            inventory_item = material.get("inventory_item")
            name = (material.get("name") or getattr(inventory_item, "name", "") or "Material").strip()
            if inventory_item is None:
                warnings.append(f"{name} - not found in inventory")
                continue
            lines.append(
                MaterialLine(
                    item_id=str(inventory_item.pk),
                    name=name,
                    quantity=Decimal(str(material["quantity"])),
                    unit=material.get("unit") or inventory_item.unit,
                )
            )

    if not lines:
        return warnings

    result = deduct_required_materials(lines, order=order, user=user)
    warnings.extend(result.missing_items)
    order.deducted_materials = [
        {"item_id": str(m.item_id), "name": m.item.name, "quantity": str(m.quantity)}
        for m in result.movements
    ]
    order.save(update_fields=["deducted_materials", "updated_at"])
    return warnings


def _restore_materials(order: Order, user) -> list[str]:
    if order.stock_restored or not order.deducted_materials:
        return []

    result = restore_inventory_for_order(
        [(d["item_id"], d["quantity"]) for d in order.deducted_materials],
        order=order,
        user=user,
    )
    order.stock_restored = True
    order.save(update_fields=["stock_restored", "updated_at"])
    return result.errors


def _transition(order: Order, new_status: str, user) -> list[str]:
    if new_status not in OrderStatus.values:
        raise InvalidStatusTransition(f"Unknown status '{new_status}'")
    if new_status == order.status:
        return []
    if order.status == OrderStatus.CANCELLED:
        raise InvalidStatusTransition("Cancelled orders cannot be reopened")

    order.status = new_status
    order.save(update_fields=["status", "updated_at"])

    if new_status == OrderStatus.CANCELLED:
        return _restore_materials(order, user)
    return []


# ---------------------------------------------------------
# Public API
# ---------------------------------------------------------
@transaction.atomic
def create_order(
    *,
    customer_name: str,
    items,
    customer_phone: str = "",
    customer_email: str = "",
    measurements: dict | None = None,
    priority: str = Order.Priority.NORMAL,
    advance_amount=0,
    user=None,
) -> OrderResult:
    customer_name = (customer_name or "").strip()
    if not customer_name:
        raise OrderServiceError("Customer name is required")
    validate_items(items)
    if items[0].get("status") == OrderStatus.CANCELLED:
        raise InvalidStatusTransition("A new order cannot start as cancelled")

    advance = _money(advance_amount)
    if advance < 0:
        raise InvalidPaymentAmount("Advance cannot be negative")

    customer = upsert_customer_for_order(
        name=customer_name,
        phone=customer_phone,
        email=customer_email,
        measurements=measurements,
    )

    order = Order(
        order_number=generate_order_number(),
        customer=customer,
        customer_name=customer_name,
        customer_phone=(customer_phone or "").strip(),
        customer_email=(customer_email or "").strip(),
        status=items[0].get("status") or OrderStatus.RECEIVED,
        priority=priority or Order.Priority.NORMAL,
        advance_amount=advance,
        measurements=measurements or {},
        progress=default_progress(),
        created_by=user if getattr(user, "is_authenticated", False) else None,
    )
    _apply_derived_fields(order, items)
    order.save()

    _create_items(order, items)
    _sync_order_staff(order, items)
    record_order(customer)

    warnings = _deduct_materials(order, items, user)

    logger.info(
        "Order created",
        extra={"order_number": order.order_number, "items": len(items), "warnings": len(warnings)},
    )
    return OrderResult(order=order, warnings=warnings)


@transaction.atomic
def update_order(
    order: Order,
    *,
    items,
    customer_name: str | None = None,
    customer_phone: str | None = None,
    customer_email: str | None = None,
    measurements: dict | None = None,
    priority: str | None = None,
    user=None,
) -> OrderResult:
    """
    Replace the item list and recompute the header. Stock is not touched
    again; the status follows the first item through the normal transition
    rules.
    """
    validate_items(items)
    locked = Order.objects.select_for_update().get(pk=order.pk)

    if customer_name is not None and customer_name.strip():
        locked.customer_name = customer_name.strip()
    if customer_phone is not None:
        locked.customer_phone = customer_phone.strip()
    if customer_email is not None:
        locked.customer_email = customer_email.strip()
    if measurements is not None:
        locked.measurements = measurements
    if priority:
        locked.priority = priority

    _apply_derived_fields(locked, items)
    locked.save()

    locked.items.all().delete()
    _create_items(locked, items)
    _sync_order_staff(locked, items)

    warnings = _transition(locked, items[0].get("status") or locked.status, user)
    return OrderResult(order=locked, warnings=warnings)


@transaction.atomic
def change_status(order: Order, status: str, *, user=None) -> OrderResult:
    locked = Order.objects.select_for_update().get(pk=order.pk)
    warnings = _transition(locked, status, user)
    logger.info(
        "Order status changed",
        extra={"order_number": locked.order_number, "status": locked.status},
    )
    return OrderResult(order=locked, warnings=warnings)


@transaction.atomic
def record_advance(order: Order, amount, *, user=None) -> Order:
    try:
        amount = _money(amount)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidPaymentAmount("Amount must be a number")
    if amount <= 0:
        raise InvalidPaymentAmount("Amount must be greater than zero")

    locked = Order.objects.select_for_update().get(pk=order.pk)
    if locked.status == OrderStatus.CANCELLED:
        raise InvalidPaymentAmount("Cannot take payments on a cancelled order")

    locked.advance_amount = _money(locked.advance_amount) + amount
    locked.recompute_remaining()
    locked.save(update_fields=["advance_amount", "remaining_amount", "updated_at"])
    return locked


@transaction.atomic
def update_progress(order: Order, changes: dict) -> Order:
    """
    Merge cutting/stitching/finishing flags; unknown keys are ignored.
    """
    locked = Order.objects.select_for_update().get(pk=order.pk)
    progress = {**default_progress(), **(locked.progress or {})}
    for step in PROGRESS_STEPS:
        if step in changes:
            progress[step] = bool(changes[step])
    locked.progress = progress
    locked.save(update_fields=["progress", "updated_at"])
    return locked
