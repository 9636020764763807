# orders/services/stats.py

from __future__ import annotations

from decimal import Decimal

from django.db.models import Count, DecimalField, Q, Sum
from django.db.models.functions import Coalesce

from orders.models import Order, OrderStatus


def order_stats(qs=None) -> dict:
    """
    Counts per status plus revenue (delivered orders only).
    """
    qs = Order.objects.all() if qs is None else qs
    agg = qs.aggregate(
        total=Count("id"),
        received=Count("id", filter=Q(status=OrderStatus.RECEIVED)),
        in_progress=Count("id", filter=Q(status=OrderStatus.IN_PROGRESS)),
        ready=Count("id", filter=Q(status=OrderStatus.READY)),
        delivered=Count("id", filter=Q(status=OrderStatus.DELIVERED)),
        cancelled=Count("id", filter=Q(status=OrderStatus.CANCELLED)),
        revenue=Coalesce(
            Sum("total_amount", filter=Q(status=OrderStatus.DELIVERED)),
            Decimal("0.00"),
            output_field=DecimalField(max_digits=14, decimal_places=2),
        ),
    )
    return {
        "total": agg["total"],
        "pending": agg["received"],
        "in_progress": agg["in_progress"],
        "ready": agg["ready"],
        "delivered": agg["delivered"],
        "cancelled": agg["cancelled"],
        "revenue": agg["revenue"],
    }
