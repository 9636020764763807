# customers/services/customer_service.py
"""
Customer bookkeeping used by orders and billing.

Rules:
- Orders/bills reference customers by name; lookup is exact name first,
  then phone (so a renamed customer with the same number is still found).
- Existing customers only get blank contact fields filled, never overwritten.
- Counters are updated with F() expressions so concurrent orders don't race.
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal

from django.db import transaction
from django.db.models import F

from customers.models import Customer

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")


def _money(v) -> Decimal:
    if v is None or v == "":
        return Decimal("0.00")
    return Decimal(str(v)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def find_customer(*, name: str = "", phone: str = "") -> Customer | None:
    name = (name or "").strip()
    phone = (phone or "").strip()

    if name:
        customer = Customer.objects.filter(name=name).order_by("created_at").first()
        if customer:
            return customer
    if phone:
        return Customer.objects.filter(phone=phone).order_by("created_at").first()
    return None


@transaction.atomic
def upsert_customer_for_order(
    *,
    name: str,
    phone: str = "",
    email: str = "",
    address: str = "",
    measurements: dict | None = None,
) -> Customer:
    """
    Find-or-create the customer an order/bill is for.
    """
    name = (name or "").strip()
    if not name:
        raise ValueError("Customer name is required")

    customer = find_customer(name=name, phone=phone)
    if customer is None:
        customer = Customer.objects.create(
            name=name,
            phone=(phone or "").strip(),
            email=(email or "").strip(),
            address=(address or "").strip(),
            measurements=measurements or {},
        )
        logger.info("Customer created from order", extra={"customer_id": str(customer.id)})
        return customer

    dirty = []
    for field, value in (("phone", phone), ("email", email), ("address", address)):
        value = (value or "").strip()
        if value and not getattr(customer, field):
            setattr(customer, field, value)
            dirty.append(field)
    if measurements and not customer.measurements:
        customer.measurements = measurements
        dirty.append("measurements")

    if dirty:
        customer.save(update_fields=[*dirty, "updated_at"])
    return customer


def record_order(customer: Customer) -> None:
    Customer.objects.filter(pk=customer.pk).update(total_orders=F("total_orders") + 1)
    customer.refresh_from_db(fields=["total_orders"])


def record_payment(customer: Customer, amount) -> None:
    amount = _money(amount)
    if amount <= 0:
        return
    Customer.objects.filter(pk=customer.pk).update(total_spent=F("total_spent") + amount)
    customer.refresh_from_db(fields=["total_spent"])


def adjust_total_spent(customer: Customer, delta) -> None:
    """
    Signed correction (a bill's paid amount edited down).
    """
    delta = _money(delta)
    if not delta:
        return
    Customer.objects.filter(pk=customer.pk).update(total_spent=F("total_spent") + delta)
    customer.refresh_from_db(fields=["total_spent"])
