# billing/services/bill_service.py

"""
BILL SERVICE

Purpose:
- Create / update bills with server-side totals.
- Record payments against a bill.

Rules:
- A bill needs at least one line item or a non-zero breakdown charge.
- paid_amount may never exceed total_amount.
- balance = total - paid; status follows calculate_bill_status.
- UPI link + QR are regenerated on every save for the outstanding balance
  (or qr_amount when given). No UPI id or nothing to pay -> both blank.
- The customer is matched by name (then phone) or created; money received
  is added to Customer.total_spent.
- total_spent follows the bill: moving a bill to another customer moves its
  paid amount, deleting a bill takes it back out.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import timedelta

from django.db import transaction
from django.utils import timezone

from billing.models import Bill, BillItem
from billing.services.exceptions import (
    BillingError,
    InvalidBillItems,
    InvalidPaymentAmount,
    OverpaymentError,
)
from billing.services.qr import generate_qr_code_data_url
from billing.services.totals import (
    ZERO,
    calculate_bill_status,
    calculate_bill_totals,
    generate_bill_id,
    generate_upi_link,
    item_amount,
    money,
)
from customers.services.customer_service import (
    adjust_total_spent,
    record_payment as record_customer_payment,
    upsert_customer_for_order,
)
from shop.services.profile import currency_code, get_shop_profile

logger = logging.getLogger("billing")

BILL_ID_ATTEMPTS = 20


@dataclass
class BillInput:
    """
    Validated bill fields (what the write serializer produces).
    """

    customer_name: str
    items: list
    customer_phone: str = ""
    customer_email: str = ""
    customer_address: str = ""
    order: object = None
    breakdown: dict | None = None
    gst_percent: object = None
    discount: object = 0
    discount_type: str = "amount"
    paid_amount: object = 0
    date: object = None
    due_date: object = None
    upi_id: str | None = None
    qr_amount: object = None
    notes: str = ""


# ---------------------------------------------------------
# Helpers
# ---------------------------------------------------------
def _allocate_bill_id() -> str:
    base = int(time.time() * 1000)
    for attempt in range(BILL_ID_ATTEMPTS):
        candidate = generate_bill_id(base + attempt)
        if not Bill.objects.filter(bill_id=candidate).exists():
            return candidate
    raise BillingError("Could not allocate a unique bill id")


def _clean_items(items) -> list[dict]:
    cleaned = []
    for i, item in enumerate(items or [], start=1):
        description = (item.get("description") or "").strip()
        if not description:
            raise InvalidBillItems(f"Item {i} needs a description")
        try:
            amount = item_amount(item)
            quantity = money(item.get("quantity") if item.get("quantity") not in (None, "") else 1)
            rate = money(item.get("rate"))
        except ValueError as exc:
            raise InvalidBillItems(f"Item {i}: {exc}")
        if amount < 0 or quantity < 0 or rate < 0:
            raise InvalidBillItems(f"Item {i} cannot have negative amounts")
        cleaned.append(
            {
                "description": description,
                "quantity": quantity,
                "rate": rate,
                "amount": amount,
                "charge_type": item.get("charge_type") or BillItem.ChargeType.STITCHING,
            }
        )
    return cleaned


def _clean_breakdown(breakdown) -> dict:
    out = {}
    for key in Bill.BREAKDOWN_FIELDS:
        value = money((breakdown or {}).get(key))
        if value < 0:
            raise InvalidBillItems(f"{key} cannot be negative")
        out[key] = value
    return out


def _apply(bill: Bill, data: BillInput, items: list[dict], breakdown: dict) -> None:
    """
    Write every computed field on the (unsaved or locked) bill.
    """
    profile = get_shop_profile()

    if not items and not any(breakdown.values()):
        raise InvalidBillItems("Add at least one item or charge to the bill")

    gst_percent = money(profile.default_gst_percent if data.gst_percent is None else data.gst_percent)
    if gst_percent < 0 or gst_percent > 100:
        raise BillingError("GST percent must be between 0 and 100")

    discount = money(data.discount)
    if discount < 0:
        raise BillingError("Discount cannot be negative")

    totals = calculate_bill_totals(items, breakdown, gst_percent, discount, data.discount_type)
    paid = money(data.paid_amount)
    if paid < 0:
        raise InvalidPaymentAmount("Paid amount cannot be negative")
    if paid > totals.total_amount:
        raise OverpaymentError("Paid amount cannot exceed total amount")

    for key, attr in Bill.BREAKDOWN_FIELDS.items():
        setattr(bill, attr, breakdown[key])

    bill.customer_name = data.customer_name.strip()
    bill.customer_phone = (data.customer_phone or "").strip()
    bill.customer_email = (data.customer_email or "").strip()
    bill.customer_address = (data.customer_address or "").strip()
    bill.order = data.order
    bill.gst_percent = gst_percent
    bill.discount = discount
    bill.discount_type = data.discount_type or "amount"
    bill.subtotal = totals.subtotal
    bill.gst_amount = totals.gst_amount
    bill.discount_amount = totals.discount_amount
    bill.total_amount = totals.total_amount
    bill.paid_amount = paid
    bill.notes = data.notes or ""

    if data.date:
        bill.date = data.date
    elif not bill.date:
        bill.date = timezone.localdate()
    bill.due_date = data.due_date or (bill.date + timedelta(days=profile.payment_due_days))

    bill.upi_id = (profile.upi_id if data.upi_id is None else data.upi_id).strip()
    bill.bank_details = {
        "account_name": profile.bank_account_name,
        "account_number": profile.bank_account_number,
        "ifsc": profile.bank_ifsc,
        "bank_name": profile.bank_name,
    }
    _refresh_balance(bill, qr_amount=data.qr_amount)


def _refresh_balance(bill: Bill, *, qr_amount=None) -> None:
    bill.balance = money(bill.total_amount) - money(bill.paid_amount)
    bill.status = calculate_bill_status(bill.total_amount, bill.paid_amount)

    amount = money(qr_amount) if qr_amount not in (None, "") else bill.balance
    if bill.upi_id and amount > 0:
        bill.upi_link = generate_upi_link(
            bill.upi_id, bill.customer_name, amount, bill.bill_id, currency=currency_code()
        )
        bill.qr_code = generate_qr_code_data_url(bill.upi_link)
    else:
        bill.upi_link = ""
        bill.qr_code = ""


def _replace_items(bill: Bill, items: list[dict]) -> None:
    bill.items.all().delete()
    BillItem.objects.bulk_create(
        [BillItem(bill=bill, position=pos, **item) for pos, item in enumerate(items)]
    )


# ---------------------------------------------------------
# Public API
# ---------------------------------------------------------
@transaction.atomic
def create_bill(data: BillInput) -> Bill:
    if not (data.customer_name or "").strip():
        raise BillingError("Customer name is required")

    items = _clean_items(data.items)
    breakdown = _clean_breakdown(data.breakdown)

    bill = Bill(bill_id=_allocate_bill_id())
    _apply(bill, data, items, breakdown)

    bill.customer = upsert_customer_for_order(
        name=bill.customer_name,
        phone=bill.customer_phone,
        email=bill.customer_email,
        address=bill.customer_address,
    )
    bill.save()
    _replace_items(bill, items)

    record_customer_payment(bill.customer, bill.paid_amount)

    logger.info(
        "Bill created",
        extra={"bill_id": bill.bill_id, "total": str(bill.total_amount), "status": bill.status},
    )
    return bill


@transaction.atomic
def update_bill(bill: Bill, data: BillInput) -> Bill:
    if not (data.customer_name or "").strip():
        raise BillingError("Customer name is required")

    items = _clean_items(data.items)
    breakdown = _clean_breakdown(data.breakdown)

    locked = Bill.objects.select_for_update().get(pk=bill.pk)
    previous_paid = money(locked.paid_amount)
    previous_customer = locked.customer

    _apply(locked, data, items, breakdown)
    locked.customer = upsert_customer_for_order(
        name=locked.customer_name,
        phone=locked.customer_phone,
        email=locked.customer_email,
        address=locked.customer_address,
    )
    locked.save()
    _replace_items(locked, items)

    if previous_customer is None or previous_customer.pk != locked.customer.pk:
        # the payment moves with the bill
        if previous_customer is not None:
            adjust_total_spent(previous_customer, -previous_paid)
        adjust_total_spent(locked.customer, locked.paid_amount)
    else:
        adjust_total_spent(locked.customer, money(locked.paid_amount) - previous_paid)

    logger.info("Bill updated", extra={"bill_id": locked.bill_id, "status": locked.status})
    return locked


@transaction.atomic
def delete_bill(bill: Bill) -> None:
    """
    Remove a bill and take its paid amount back out of the customer's total_spent.
    """
    locked = Bill.objects.select_for_update().get(pk=bill.pk)
    if locked.customer_id:
        adjust_total_spent(locked.customer, -money(locked.paid_amount))
    bill_id = locked.bill_id
    locked.delete()
    logger.info("Bill deleted", extra={"bill_id": bill_id})


@transaction.atomic
def record_payment(bill: Bill, amount) -> Bill:
    try:
        amount = money(amount)
    except ValueError:
        raise InvalidPaymentAmount("Amount must be a number")
    if amount <= 0:
        raise InvalidPaymentAmount("Amount must be greater than zero")

    locked = Bill.objects.select_for_update().get(pk=bill.pk)
    new_paid = money(locked.paid_amount) + amount
    if new_paid > money(locked.total_amount):
        raise OverpaymentError(
            f"Payment exceeds the outstanding balance of {money(locked.balance)}"
        )

    locked.paid_amount = new_paid
    _refresh_balance(locked)
    locked.save(
        update_fields=["paid_amount", "balance", "status", "upi_link", "qr_code", "updated_at"]
    )

    if locked.customer_id:
        record_customer_payment(locked.customer, amount)

    logger.info(
        "Bill payment recorded",
        extra={"bill_id": locked.bill_id, "amount": str(amount), "status": locked.status},
    )
    return locked


def preview_totals(*, items, breakdown=None, gst_percent=None, discount=0, discount_type="amount", paid_amount=0) -> dict:
    """
    Stateless calculator for the bill form.
    """
    cleaned = _clean_items(items)
    if gst_percent is None:
        gst_percent = get_shop_profile().default_gst_percent
    totals = calculate_bill_totals(cleaned, _clean_breakdown(breakdown), gst_percent, discount, discount_type)
    paid = money(paid_amount)
    balance = totals.total_amount - paid
    return {
        "subtotal": totals.subtotal,
        "gst_amount": totals.gst_amount,
        "discount_amount": totals.discount_amount,
        "total_amount": totals.total_amount,
        "paid_amount": paid,
        "balance": balance if balance > 0 else ZERO,
        "status": calculate_bill_status(totals.total_amount, paid),
        "overpaid": paid > totals.total_amount,
    }
