# reports/views.py

"""
GET /api/reports/dashboard/            live counters
GET /api/reports/usage/?limit=5        mostly used categories / types
GET /api/reports/business/?months=6    revenue vs expenses by month
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, OpenApiTypes, extend_schema
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from backend.query_params import money_str
from permissions.roles import CAP_ORDERS_VIEW, CAP_REPORTS_VIEW, HasAnyCapability, HasCapability
from reports.services.stats import business_report, dashboard_stats, usage_stats

MAX_LIMIT = 50
MAX_MONTHS = 24


def _int_param(raw, *, default: int, maximum: int) -> int | None:
    if raw in (None, ""):
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return None
    if value < 1:
        return None
    return min(value, maximum)


class DashboardStatsView(APIView):
    # the work floor sees live counters too
    permission_classes = [IsAuthenticated, HasAnyCapability]
    required_any_capabilities = {CAP_REPORTS_VIEW, CAP_ORDERS_VIEW}

    @extend_schema(responses={200: OpenApiTypes.OBJECT})
    def get(self, request):
        data = dashboard_stats()
        data["revenue"] = money_str(data["revenue"])
        return Response(data)


class UsageStatsView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_REPORTS_VIEW

    @extend_schema(
        parameters=[OpenApiParameter("limit", OpenApiTypes.INT, required=False)],
        responses={200: OpenApiTypes.OBJECT},
    )
    def get(self, request):
        limit = _int_param(request.query_params.get("limit"), default=5, maximum=MAX_LIMIT)
        if limit is None:
            return Response({"detail": "limit must be a positive integer."}, status=400)
        return Response(usage_stats(limit=limit))


class BusinessReportView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_REPORTS_VIEW

    @extend_schema(
        parameters=[OpenApiParameter("months", OpenApiTypes.INT, required=False)],
        responses={200: OpenApiTypes.OBJECT},
    )
    def get(self, request):
        months = _int_param(request.query_params.get("months"), default=6, maximum=MAX_MONTHS)
        if months is None:
            return Response({"detail": "months must be a positive integer."}, status=400)

        report = business_report(months=months)
        for row in report["monthly"]:
            for key in ("revenue", "expenses", "profit"):
                row[key] = money_str(row[key])
        for row in report["expense_breakdown"]:
            row["amount"] = money_str(row["amount"])
        for row in report["orders_by_status"]:
            row["value"] = money_str(row["value"])
        totals = report["totals"]
        for key in ("revenue", "expenses", "profit"):
            totals[key] = money_str(totals[key])
        totals["profit_margin"] = str(totals["profit_margin"])
        report["start"] = report["start"].isoformat()
        report["end"] = report["end"].isoformat()
        return Response(report)
