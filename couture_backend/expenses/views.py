# expenses/views.py

"""
EXPENSES (expenses.view / expenses.edit)

- CRUD (latest first)  ?category= ?status= ?start= ?end= ?recurring=true ?updated_since=
- GET  summary/?start=&end=   total, count and per-category totals
"""

from __future__ import annotations

from decimal import Decimal

from django.db.models import Count, DecimalField, Sum
from django.db.models.functions import Coalesce
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from backend.mixins import UpdatedSinceMixin
from backend.query_params import money_str, parse_date_param
from expenses.models import Expense
from expenses.models.expense import EXPENSE_CATEGORIES
from expenses.serializers import ExpenseSerializer
from permissions.roles import CAP_EXPENSES_EDIT, CAP_EXPENSES_VIEW, ActionCapability


class ExpenseViewSet(UpdatedSinceMixin, viewsets.ModelViewSet):
    serializer_class = ExpenseSerializer
    permission_classes = [IsAuthenticated, ActionCapability]
    read_capability = CAP_EXPENSES_VIEW
    write_capability = CAP_EXPENSES_EDIT

    def _date_window(self, qs):
        start = parse_date_param(self.request.query_params.get("start"))
        if start:
            qs = qs.filter(date__gte=start)
        end = parse_date_param(self.request.query_params.get("end"))
        if end:
            qs = qs.filter(date__lte=end)
        return qs

    def get_queryset(self):
        qs = Expense.objects.all().order_by("-date", "-created_at")
        params = self.request.query_params

        category = (params.get("category") or "").strip()
        if category:
            qs = qs.filter(category=category)

        status_param = (params.get("status") or "").strip()
        if status_param:
            qs = qs.filter(status=status_param)

        if (params.get("recurring") or "").lower() in {"1", "true", "yes"}:
            qs = qs.filter(is_recurring=True)

        return self.filter_updated_since(self._date_window(qs))

    def perform_create(self, serializer):
        serializer.save(created_by=self.request.user)

    @action(detail=False, methods=["get"])
    def summary(self, request):
        qs = self._date_window(Expense.objects.exclude(status=Expense.Status.REJECTED))
        money = DecimalField(max_digits=14, decimal_places=2)
        zero = Decimal("0.00")

        totals = qs.aggregate(
            total=Coalesce(Sum("amount"), zero, output_field=money),
            count=Count("id"),
        )
        by_category = (
            qs.values("category")
            .annotate(total=Coalesce(Sum("amount"), zero, output_field=money), count=Count("id"))
            .order_by("-total")
        )
        return Response(
            {
                "total": money_str(totals["total"]),
                "count": totals["count"],
                "recurring_count": qs.filter(is_recurring=True).count(),
                "by_category": [
                    {"category": row["category"], "total": money_str(row["total"]), "count": row["count"]}
                    for row in by_category
                ],
            }
        )

    @action(detail=False, methods=["get"])
    def categories(self, request):
        return Response({"categories": list(EXPENSE_CATEGORIES)})
