# reports/services/stats.py

"""
SHOP REPORTS (READ-ONLY)

- dashboard_stats(): real-time counters for the home dashboard
- usage_stats(): "mostly used" categories / types over all orders
- business_report(): last N months of revenue vs expenses

Contract:
- Money values are Decimals quantized to 2 places; views stringify them.
- Revenue in the monthly report is order value by creation month (booked
  work), not cash collected.
- Rejected expenses never count.
"""

from __future__ import annotations

from collections import Counter
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from django.db.models import Count, DecimalField, Q, Sum
from django.db.models.functions import Coalesce, TruncMonth
from django.utils import timezone

from appointments.models import Appointment
from customers.models import Customer
from expenses.models import Expense
from inventory.models import InventoryItem
from inventory.models.item import low_stock_q
from orders.models import Order, OrderItem, OrderStatus

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")
MONEY = DecimalField(max_digits=14, decimal_places=2)


def _q2(amount) -> Decimal:
    return Decimal(str(amount or 0)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _month_start(d: date, back: int = 0) -> date:
    index = d.year * 12 + (d.month - 1) - back
    return date(index // 12, index % 12 + 1, 1)


# ---------------------------------------------------------
# Dashboard
# ---------------------------------------------------------
def dashboard_stats(*, today: date | None = None) -> dict:
    today = today or timezone.localdate()

    orders = Order.objects.aggregate(
        total=Count("id"),
        pending=Count("id", filter=Q(status=OrderStatus.RECEIVED)),
        active=Count("id", filter=Q(status__in=[OrderStatus.RECEIVED, OrderStatus.IN_PROGRESS])),
        completed=Count("id", filter=Q(status__in=[OrderStatus.READY, OrderStatus.DELIVERED])),
        revenue=Coalesce(
            Sum("total_amount", filter=Q(status=OrderStatus.DELIVERED)),
            ZERO,
            output_field=MONEY,
        ),
    )

    return {
        "total_orders": orders["total"],
        "total_customers": Customer.objects.count(),
        "revenue": _q2(orders["revenue"]),
        "low_stock_items": InventoryItem.objects.filter(low_stock_q()).count(),
        "today_appointments": Appointment.objects.filter(scheduled_at__date=today)
        .exclude(status=Appointment.Status.CANCELLED)
        .count(),
        "active_orders": orders["active"],
        "pending_orders": orders["pending"],
        "completed_orders": orders["completed"],
    }


# ---------------------------------------------------------
# Mostly used
# ---------------------------------------------------------
def usage_stats(limit: int = 5) -> dict:
    """
    Categories are weighted by item quantity. Types count single-category
    orders once each.
    """
    categories = (
        OrderItem.objects.exclude(category="")
        .values("category")
        .annotate(count=Sum("quantity"))
        .order_by("-count", "category")[:limit]
    )

    types = Counter(
        Order.objects.exclude(item_type__in=["", Order.MULTIPLE_ITEMS]).values_list("item_type", flat=True)
    )
    ranked_types = sorted(types.items(), key=lambda kv: (-kv[1], kv[0]))[:limit]

    return {
        "categories": [{"category": row["category"], "count": row["count"]} for row in categories],
        "types": [{"type": t, "count": c} for t, c in ranked_types],
    }


# ---------------------------------------------------------
# Business report
# ---------------------------------------------------------
def business_report(months: int = 6, *, today: date | None = None) -> dict:
    today = today or timezone.localdate()
    months = max(1, int(months))
    start = _month_start(today, back=months - 1)

    revenue_rows = (
        Order.objects.filter(created_at__date__gte=start)
        .annotate(month=TruncMonth("created_at"))
        .order_by()
        .values("month")
        .annotate(total=Sum("total_amount"))
    )
    revenue_by_month = {
        (r["month"].year, r["month"].month): _q2(r["total"]) for r in revenue_rows
    }

    expenses = Expense.objects.filter(date__gte=start).exclude(status=Expense.Status.REJECTED)
    expense_rows = (
        expenses.annotate(month=TruncMonth("date")).order_by().values("month").annotate(total=Sum("amount"))
    )
    expense_by_month = {
        (r["month"].year, r["month"].month): _q2(r["total"]) for r in expense_rows
    }

    monthly = []
    for back in range(months - 1, -1, -1):
        m = _month_start(today, back=back)
        key = (m.year, m.month)
        revenue = revenue_by_month.get(key, ZERO)
        spent = expense_by_month.get(key, ZERO)
        monthly.append(
            {
                "month": m.strftime("%b %Y"),
                "revenue": revenue,
                "expenses": spent,
                "profit": revenue - spent,
            }
        )

    total_expenses = _q2(expenses.aggregate(t=Sum("amount"))["t"])
    breakdown = []
    for row in expenses.values("category").annotate(amount=Sum("amount")).order_by("-amount", "category"):
        amount = _q2(row["amount"])
        percentage = (
            int((amount * 100 / total_expenses).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
            if total_expenses > 0
            else 0
        )
        breakdown.append({"category": row["category"], "amount": amount, "percentage": percentage})

    status_rows = {
        row["status"]: row
        for row in Order.objects.filter(created_at__date__gte=start)
        .order_by()
        .values("status")
        .annotate(count=Count("id"), value=Sum("total_amount"))
    }
    orders_by_status = [
        {
            "status": value,
            "count": status_rows.get(value, {}).get("count", 0),
            "value": _q2(status_rows.get(value, {}).get("value")),
        }
        for value in OrderStatus.values
    ]

    total_revenue = sum((m["revenue"] for m in monthly), ZERO)
    profit = total_revenue - total_expenses
    margin = (
        (profit * 100 / total_revenue).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
        if total_revenue > 0
        else Decimal("0.0")
    )

    return {
        "start": start,
        "end": today,
        "monthly": monthly,
        "expense_breakdown": breakdown,
        "orders_by_status": orders_by_status,
        "totals": {
            "revenue": total_revenue,
            "expenses": total_expenses,
            "profit": profit,
            "profit_margin": margin,
        },
    }
