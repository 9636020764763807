# billing/services/totals.py

"""
BILL ARITHMETIC (pure functions, no DB)

- subtotal     = sum(item amounts) + sum(breakdown charges)
- gst_amount   = subtotal * gst_percent / 100
- discount     = flat amount, or subtotal * d / 100 for "percentage"
- total_amount = max(0, subtotal + gst_amount - discount_amount)

All money is Decimal, quantized half-up to 2dp at each step.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from urllib.parse import quote

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")


@dataclass(frozen=True)
class BillTotals:
    subtotal: Decimal
    gst_amount: Decimal
    total_amount: Decimal
    discount_amount: Decimal


def money(value) -> Decimal:
    if value is None or value == "":
        return ZERO
    try:
        d = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise ValueError(f"Invalid amount: {value!r}")
    if not d.is_finite():
        raise ValueError(f"Invalid amount: {value!r}")
    return d.quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def item_amount(item) -> Decimal:
    """
    Explicit amount wins; otherwise quantity * rate.
    """
    if isinstance(item, dict):
        amount, qty, rate = item.get("amount"), item.get("quantity", 1), item.get("rate")
    else:
        amount, qty, rate = getattr(item, "amount", None), getattr(item, "quantity", 1), getattr(item, "rate", None)

    if amount not in (None, ""):
        return money(amount)
    return money(Decimal(str(qty if qty not in (None, "") else 1)) * money(rate))


def calculate_bill_totals(
    items,
    breakdown: dict | None = None,
    gst_percent=0,
    discount=0,
    discount_type: str = "amount",
) -> BillTotals:
    items_total = sum((item_amount(i) for i in items or []), ZERO)
    breakdown_total = sum((money(v) for v in (breakdown or {}).values()), ZERO)
    subtotal = money(items_total + breakdown_total)

    gst_amount = money(subtotal * money(gst_percent) / 100)

    discount = money(discount)
    if discount_type == "percentage":
        discount_amount = money(subtotal * discount / 100)
    else:
        discount_amount = discount

    total = subtotal + gst_amount - discount_amount
    return BillTotals(
        subtotal=subtotal,
        gst_amount=gst_amount,
        total_amount=money(total) if total > 0 else ZERO,
        discount_amount=discount_amount,
    )


def calculate_bill_status(total_amount, paid_amount) -> str:
    total, paid = money(total_amount), money(paid_amount)
    if paid >= total:
        return "paid"
    if paid > 0:
        return "partial"
    return "unpaid"


def generate_bill_id(now_ms: int | None = None) -> str:
    """BILL + last 6 digits of the epoch milliseconds."""
    now_ms = int(time.time() * 1000) if now_ms is None else now_ms
    return f"BILL{str(now_ms)[-6:]}"


def generate_upi_link(upi_id: str, name: str, amount, bill_id: str, currency: str = "INR") -> str:
    amount = money(amount).normalize()
    return (
        f"upi://pay?pa={upi_id}"
        f"&pn={quote(name or '', safe='')}"
        f"&am={amount:f}"
        f"&cu={currency}"
        f"&tn={quote(f'Bill {bill_id}', safe='')}"
    )


def _indian_grouping(integer_part: str) -> str:
    # last three digits, then pairs: 1234567 -> 12,34,567
    if len(integer_part) <= 3:
        return integer_part
    head, tail = integer_part[:-3], integer_part[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join(pairs + [tail])


def format_currency(amount, symbol: str = "₹") -> str:
    """
    123456.78 -> "₹1,23,456.78"
    """
    value = money(amount)
    sign = "-" if value < 0 else ""
    integer_part, _, fraction = f"{abs(value):.2f}".partition(".")
    return f"{sign}{symbol}{_indian_grouping(integer_part)}.{fraction}"
