# orders/views.py

"""
ORDER VIEWSET

Staff:
- CRUD (newest first)
    ?status= ?priority= ?customer=<uuid> ?q=<number/name/phone>
    ?delivery_from=YYYY-MM-DD ?delivery_to=YYYY-MM-DD ?updated_since=
- POST {id}/status/      {status}   cancel restores deducted stock once
- POST {id}/advance/     {amount}
- POST {id}/progress/    {cutting?, stitching?, finishing?}   (orders.view)
- GET  {id}/messages/    WhatsApp status / payment reminder links
- GET  calendar/?start=&end=   orders by delivery date, with billed amounts
- GET  stats/
"""

from __future__ import annotations

from decimal import Decimal

from django.db.models import DecimalField, Q, Sum
from django.db.models.functions import Coalesce
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from backend.mixins import UpdatedSinceMixin
from backend.query_params import money_str, parse_date_param
from customers.services.contact import (
    generate_whatsapp_link,
    order_status_message,
    payment_reminder_message,
)
from orders.models import Order, OrderStatus
from orders.serializers import (
    AdvancePaymentSerializer,
    OrderListSerializer,
    OrderSerializer,
    OrderStatusSerializer,
    OrderWriteSerializer,
    ProgressSerializer,
)
from orders.services.exceptions import OrderServiceError
from orders.services.order_service import (
    change_status,
    create_order,
    record_advance,
    update_order,
    update_progress,
)
from orders.services.stats import order_stats
from permissions.roles import CAP_ORDERS_EDIT, CAP_ORDERS_VIEW, ActionCapability


def _bad_request(exc: Exception) -> Response:
    return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)


class OrderViewSet(UpdatedSinceMixin, viewsets.ModelViewSet):
    permission_classes = [IsAuthenticated, ActionCapability]
    read_capability = CAP_ORDERS_VIEW
    write_capability = CAP_ORDERS_EDIT
    action_capabilities = {
        # tailors tick cutting/stitching/finishing from the workshop
        "progress": CAP_ORDERS_VIEW,
    }

    def get_serializer_class(self):
        if self.action == "list":
            return OrderListSerializer
        if self.action in {"create", "update", "partial_update"}:
            return OrderWriteSerializer
        return OrderSerializer

    def get_queryset(self):
        qs = Order.objects.all().order_by("-created_at")
        if self.action != "list":
            qs = qs.prefetch_related("items__materials", "items__assigned_staff", "assigned_staff")

        params = self.request.query_params

        status_param = (params.get("status") or "").strip()
        if status_param:
            qs = qs.filter(status=status_param)

        priority = (params.get("priority") or "").strip()
        if priority:
            qs = qs.filter(priority=priority)

        customer = (params.get("customer") or "").strip()
        if customer:
            qs = qs.filter(customer_id=customer)

        q = (params.get("q") or "").strip()
        if q:
            qs = qs.filter(
                Q(order_number__icontains=q)
                | Q(customer_name__icontains=q)
                | Q(customer_phone__icontains=q)
            )

        delivery_from = parse_date_param(params.get("delivery_from"))
        if delivery_from:
            qs = qs.filter(delivery_date__gte=delivery_from)

        delivery_to = parse_date_param(params.get("delivery_to"))
        if delivery_to:
            qs = qs.filter(delivery_date__lte=delivery_to)

        return self.filter_updated_since(qs)

    # -------------------------
    # Create / update
    # -------------------------
    @extend_schema(request=OrderWriteSerializer, responses={201: OrderSerializer})
    def create(self, request, *args, **kwargs):
        serializer = OrderWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            result = create_order(
                customer_name=data["customer_name"],
                customer_phone=data.get("customer_phone", ""),
                customer_email=data.get("customer_email", ""),
                measurements=data.get("measurements"),
                priority=data.get("priority") or Order.Priority.NORMAL,
                advance_amount=data.get("advance_amount") or Decimal("0"),
                items=data["items"],
                user=request.user,
            )
        except OrderServiceError as exc:
            return _bad_request(exc)

        return Response(
            {"order": OrderSerializer(result.order).data, "warnings": result.warnings},
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(request=OrderWriteSerializer, responses={200: OrderSerializer})
    def update(self, request, *args, **kwargs):
        order = self.get_object()
        partial = kwargs.get("partial", False)
        serializer = OrderWriteSerializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        if "items" not in data:
            return Response(
                {"detail": "Please add at least one item to the order"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            result = update_order(
                order,
                items=data["items"],
                customer_name=data.get("customer_name"),
                customer_phone=data.get("customer_phone"),
                customer_email=data.get("customer_email"),
                measurements=data.get("measurements"),
                priority=data.get("priority"),
                user=request.user,
            )
        except OrderServiceError as exc:
            return _bad_request(exc)

        order = self.get_queryset().get(pk=result.order.pk)
        return Response({"order": OrderSerializer(order).data, "warnings": result.warnings})

    # -------------------------
    # Lifecycle actions
    # -------------------------
    @extend_schema(request=OrderStatusSerializer, responses={200: OrderSerializer})
    @action(detail=True, methods=["post"], url_path="status")
    def set_status(self, request, pk=None):
        order = self.get_object()
        serializer = OrderStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            result = change_status(order, serializer.validated_data["status"], user=request.user)
        except OrderServiceError as exc:
            return _bad_request(exc)

        return Response({"order": OrderSerializer(result.order).data, "warnings": result.warnings})

    @extend_schema(request=AdvancePaymentSerializer, responses={200: OrderSerializer})
    @action(detail=True, methods=["post"])
    def advance(self, request, pk=None):
        order = self.get_object()
        serializer = AdvancePaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            order = record_advance(order, serializer.validated_data["amount"], user=request.user)
        except OrderServiceError as exc:
            return _bad_request(exc)

        return Response(OrderSerializer(order).data)

    @extend_schema(request=ProgressSerializer, responses={200: OrderSerializer})
    @action(detail=True, methods=["post"])
    def progress(self, request, pk=None):
        order = self.get_object()
        serializer = ProgressSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order = update_progress(order, serializer.validated_data)
        return Response(OrderSerializer(order).data)

    @action(detail=True, methods=["get"])
    def messages(self, request, pk=None):
        order = self.get_object()
        if not order.customer_phone:
            return Response(
                {"detail": "Order has no customer phone number."},
                status=status.HTTP_400_BAD_REQUEST,
            )

        status_text = order_status_message(
            order.customer_name, order.order_number, order.get_status_display()
        )
        payload = {
            "status_update": {
                "message": status_text,
                "whatsapp": generate_whatsapp_link(order.customer_phone, status_text),
            }
        }
        if order.remaining_amount > 0:
            reminder = payment_reminder_message(
                order.customer_name, order.remaining_amount, order.order_number
            )
            payload["payment_reminder"] = {
                "message": reminder,
                "whatsapp": generate_whatsapp_link(order.customer_phone, reminder),
            }
        return Response(payload)

    # -------------------------
    # Calendar / stats
    # -------------------------
    @extend_schema(
        parameters=[
            OpenApiParameter("start", str, OpenApiParameter.QUERY, required=True),
            OpenApiParameter("end", str, OpenApiParameter.QUERY, required=True),
        ],
        responses={200: dict},
    )
    @action(detail=False, methods=["get"])
    def calendar(self, request):
        start = parse_date_param(request.query_params.get("start"))
        end = parse_date_param(request.query_params.get("end"))
        if not start or not end:
            return Response(
                {"detail": "start and end are required (YYYY-MM-DD)."},
                status=status.HTTP_400_BAD_REQUEST,
            )
        if end < start:
            return Response(
                {"detail": "end cannot be before start."},
                status=status.HTTP_400_BAD_REQUEST,
            )

        money = DecimalField(max_digits=14, decimal_places=2)
        qs = (
            Order.objects.filter(delivery_date__gte=start, delivery_date__lte=end)
            .exclude(status=OrderStatus.CANCELLED)
            .annotate(
                billed_total=Coalesce(Sum("bills__total_amount"), Decimal("0.00"), output_field=money),
                billed_paid=Coalesce(Sum("bills__paid_amount"), Decimal("0.00"), output_field=money),
            )
            .order_by("delivery_date", "order_number")
        )

        days: dict[str, list] = {}
        for order in qs:
            days.setdefault(order.delivery_date.isoformat(), []).append(
                {
                    "id": str(order.id),
                    "order_number": order.order_number,
                    "customer_name": order.customer_name,
                    "item_type": order.item_type,
                    "status": order.status,
                    "priority": order.priority,
                    "total_amount": money_str(order.total_amount),
                    "advance_amount": money_str(order.advance_amount),
                    "remaining_amount": money_str(order.remaining_amount),
                    "billed_total": money_str(order.billed_total),
                    "billed_paid": money_str(order.billed_paid),
                }
            )

        return Response(
            {
                "start": start.isoformat(),
                "end": end.isoformat(),
                "days": [{"date": d, "orders": orders} for d, orders in days.items()],
            }
        )

    @action(detail=False, methods=["get"])
    def stats(self, request):
        data = order_stats()
        data["revenue"] = money_str(data["revenue"])
        return Response(data)
