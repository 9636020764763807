# appointments/views.py

"""
APPOINTMENTS

- CRUD (soonest first)  ?status= ?date=YYYY-MM-DD ?q= ?updated_since=
- GET  today/
- POST {id}/reminder/   reminder text + wa.me link; marks reminder_sent
"""

from __future__ import annotations

from django.db.models import Q
from django.utils import timezone
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from appointments.models import Appointment
from appointments.serializers import AppointmentSerializer
from backend.mixins import UpdatedSinceMixin
from backend.query_params import day_bounds, parse_date_param
from customers.services.contact import appointment_reminder_message, generate_whatsapp_link
from customers.services.customer_service import find_customer
from permissions.roles import CAP_APPOINTMENTS_EDIT, CAP_APPOINTMENTS_VIEW, ActionCapability


class AppointmentViewSet(UpdatedSinceMixin, viewsets.ModelViewSet):
    serializer_class = AppointmentSerializer
    permission_classes = [IsAuthenticated, ActionCapability]
    read_capability = CAP_APPOINTMENTS_VIEW
    write_capability = CAP_APPOINTMENTS_EDIT

    def get_queryset(self):
        qs = Appointment.objects.all().order_by("scheduled_at")
        params = self.request.query_params

        status_param = (params.get("status") or "").strip()
        if status_param:
            qs = qs.filter(status=status_param)

        day = parse_date_param(params.get("date"))
        if day:
            start, end = day_bounds(day)
            qs = qs.filter(scheduled_at__gte=start, scheduled_at__lt=end)

        q = (params.get("q") or "").strip()
        if q:
            qs = qs.filter(
                Q(customer_name__icontains=q) | Q(customer_phone__icontains=q) | Q(purpose__icontains=q)
            )

        return self.filter_updated_since(qs)

    def perform_create(self, serializer):
        data = serializer.validated_data
        serializer.save(customer=find_customer(name=data["customer_name"], phone=data.get("customer_phone", "")))

    @action(detail=False, methods=["get"])
    def today(self, request):
        start, end = day_bounds(timezone.localdate())
        qs = (
            Appointment.objects.filter(scheduled_at__gte=start, scheduled_at__lt=end)
            .exclude(status=Appointment.Status.CANCELLED)
            .order_by("scheduled_at")
        )
        data = AppointmentSerializer(qs, many=True).data
        return Response({"count": len(data), "results": data})

    @action(detail=True, methods=["post"])
    def reminder(self, request, pk=None):
        appointment = self.get_object()
        if appointment.status in {Appointment.Status.CANCELLED, Appointment.Status.COMPLETED}:
            return Response(
                {"detail": f"Appointment is {appointment.status}."},
                status=status.HTTP_400_BAD_REQUEST,
            )

        local = timezone.localtime(appointment.scheduled_at)
        message = appointment_reminder_message(
            appointment.customer_name,
            local.strftime("%d/%m/%Y"),
            appointment.time_label or local.strftime("%I:%M %p"),
        )
        appointment.reminder_sent = True
        appointment.save(update_fields=["reminder_sent", "updated_at"])

        return Response(
            {
                "message": message,
                "whatsapp": generate_whatsapp_link(appointment.customer_phone, message),
                "reminder_sent": True,
            }
        )
