# billing/views.py

"""
BILLING VIEWSET

- CRUD (newest first)   ?status= ?q=<bill id/name/phone> ?date_from= ?date_to= ?order= ?updated_since=
- DELETE {id}/         also takes its paid amount off the customer's total_spent
- GET  {id}/pdf/         attachment <bill_id>.pdf
- POST {id}/payments/    {amount}   paid never exceeds total
- GET  {id}/whatsapp/    message templates + wa.me links
- GET  summary/          counts and money totals (same filters as the list)
- POST preview-totals/   stateless totals calculator for the bill form
"""

from __future__ import annotations

from decimal import Decimal

from django.db.models import Count, DecimalField, Q, Sum
from django.db.models.functions import Coalesce
from django.http import HttpResponse
from drf_spectacular.utils import extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from backend.mixins import UpdatedSinceMixin
from backend.query_params import money_str, parse_date_param
from billing.models import Bill, BillStatus
from billing.serializers import (
    BillListSerializer,
    BillSerializer,
    BillTotalsInputSerializer,
    BillWriteSerializer,
    PaymentSerializer,
)
from billing.services.bill_service import (
    BillInput,
    create_bill,
    delete_bill,
    preview_totals as calculate_preview,
    record_payment,
    update_bill,
)
from billing.services.exceptions import BillingError
from billing.services.messages import bill_whatsapp_links
from billing.services.pdf import render_bill_pdf
from permissions.roles import CAP_BILLING_EDIT, CAP_BILLING_VIEW, ActionCapability


def _bill_input(data: dict) -> BillInput:
    return BillInput(
        customer_name=data["customer_name"],
        customer_phone=data.get("customer_phone", ""),
        customer_email=data.get("customer_email", ""),
        customer_address=data.get("customer_address", ""),
        order=data.get("order"),
        items=data.get("items") or [],
        breakdown=data.get("breakdown"),
        gst_percent=data.get("gst_percent"),
        discount=data.get("discount") or Decimal("0"),
        discount_type=data.get("discount_type") or "amount",
        paid_amount=data.get("paid_amount") or Decimal("0"),
        date=data.get("date"),
        due_date=data.get("due_date"),
        upi_id=data.get("upi_id"),
        qr_amount=data.get("qr_amount"),
        notes=data.get("notes", ""),
    )


class BillViewSet(UpdatedSinceMixin, viewsets.ModelViewSet):
    permission_classes = [IsAuthenticated, ActionCapability]
    read_capability = CAP_BILLING_VIEW
    write_capability = CAP_BILLING_EDIT
    action_capabilities = {
        "preview_totals": CAP_BILLING_VIEW,
    }

    def get_serializer_class(self):
        if self.action == "list":
            return BillListSerializer
        if self.action in {"create", "update", "partial_update"}:
            return BillWriteSerializer
        return BillSerializer

    def get_queryset(self):
        qs = Bill.objects.select_related("order").order_by("-created_at")
        if self.action not in {"list", "summary"}:
            qs = qs.prefetch_related("items")

        params = self.request.query_params

        status_param = (params.get("status") or "").strip()
        if status_param:
            qs = qs.filter(status=status_param)

        order = (params.get("order") or "").strip()
        if order:
            qs = qs.filter(order_id=order)

        q = (params.get("q") or "").strip()
        if q:
            qs = qs.filter(
                Q(bill_id__icontains=q) | Q(customer_name__icontains=q) | Q(customer_phone__icontains=q)
            )

        date_from = parse_date_param(params.get("date_from"))
        if date_from:
            qs = qs.filter(date__gte=date_from)

        date_to = parse_date_param(params.get("date_to"))
        if date_to:
            qs = qs.filter(date__lte=date_to)

        return self.filter_updated_since(qs)

    # -------------------------
    # Create / update
    # -------------------------
    @extend_schema(request=BillWriteSerializer, responses={201: BillSerializer})
    def create(self, request, *args, **kwargs):
        serializer = BillWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            bill = create_bill(_bill_input(serializer.validated_data))
        except BillingError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(BillSerializer(bill).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=BillWriteSerializer, responses={200: BillSerializer})
    def update(self, request, *args, **kwargs):
        bill = self.get_object()
        # totals depend on every field, so updates always take the full bill
        serializer = BillWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            bill = update_bill(bill, _bill_input(serializer.validated_data))
        except BillingError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(BillSerializer(bill).data)

    def perform_destroy(self, instance):
        delete_bill(instance)

    # -------------------------
    # Documents / payments
    # -------------------------
    @action(detail=True, methods=["get"])
    def pdf(self, request, pk=None):
        bill = self.get_object()
        content = render_bill_pdf(bill)
        response = HttpResponse(content, content_type="application/pdf")
        response["Content-Disposition"] = f'attachment; filename="{bill.bill_id}.pdf"'
        return response

    @extend_schema(request=PaymentSerializer, responses={200: BillSerializer})
    @action(detail=True, methods=["post"])
    def payments(self, request, pk=None):
        bill = self.get_object()
        serializer = PaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            bill = record_payment(bill, serializer.validated_data["amount"])
        except BillingError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(BillSerializer(bill).data)

    @action(detail=True, methods=["get"])
    def whatsapp(self, request, pk=None):
        bill = self.get_object()
        return Response({"bill_id": bill.bill_id, "templates": bill_whatsapp_links(bill)})

    # -------------------------
    # Aggregates
    # -------------------------
    @action(detail=False, methods=["get"])
    def summary(self, request):
        money = DecimalField(max_digits=14, decimal_places=2)
        zero = Decimal("0.00")
        agg = self.get_queryset().aggregate(
            count=Count("id"),
            total_amount=Coalesce(Sum("total_amount"), zero, output_field=money),
            paid_amount=Coalesce(Sum("paid_amount"), zero, output_field=money),
            outstanding=Coalesce(Sum("balance"), zero, output_field=money),
            paid=Count("id", filter=Q(status=BillStatus.PAID)),
            partial=Count("id", filter=Q(status=BillStatus.PARTIAL)),
            unpaid=Count("id", filter=Q(status=BillStatus.UNPAID)),
        )
        return Response(
            {
                "count": agg["count"],
                "total_amount": money_str(agg["total_amount"]),
                "paid_amount": money_str(agg["paid_amount"]),
                "outstanding": money_str(agg["outstanding"]),
                "by_status": {
                    "paid": agg["paid"],
                    "partial": agg["partial"],
                    "unpaid": agg["unpaid"],
                },
            }
        )

    @extend_schema(request=BillTotalsInputSerializer, responses={200: dict})
    @action(detail=False, methods=["post"], url_path="preview-totals")
    def preview_totals(self, request):
        serializer = BillTotalsInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            result = calculate_preview(
                items=data.get("items") or [],
                breakdown=data.get("breakdown"),
                gst_percent=data.get("gst_percent"),
                discount=data.get("discount") or Decimal("0"),
                discount_type=data.get("discount_type") or "amount",
                paid_amount=data.get("paid_amount") or Decimal("0"),
            )
        except BillingError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(
            {
                key: (money_str(value) if isinstance(value, Decimal) else value)
                for key, value in result.items()
            }
        )
