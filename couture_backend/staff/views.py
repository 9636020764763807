# staff/views.py

"""
STAFF

Managers (staff.view / staff.manage):
- members/              CRUD   ?status= ?q=
- members/{id}/attendance/?start=&end=
- tasks/                CRUD   ?assigned_to= ?status=

Any linked staff user:
- tasks/{id}/status/    own tasks (managers: any task)
- me/dashboard/
- me/check-in/          idempotent per day
- me/check-out/
"""

from __future__ import annotations

from django.db.models import Q
from drf_spectacular.utils import extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from backend.mixins import UpdatedSinceMixin
from backend.query_params import parse_date_param
from permissions.roles import (
    CAP_STAFF_MANAGE,
    CAP_STAFF_VIEW,
    ActionCapability,
    user_has_capability,
)
from staff.models import StaffMember, Task
from staff.serializers import (
    AttendanceSerializer,
    CheckInSerializer,
    StaffMemberSerializer,
    TaskSerializer,
    TaskStatusSerializer,
)
from staff.services.attendance import check_in, check_out, staff_dashboard, staff_for_user
from staff.services.exceptions import AttendanceError, NoStaffProfile


class StaffMemberViewSet(UpdatedSinceMixin, viewsets.ModelViewSet):
    serializer_class = StaffMemberSerializer
    permission_classes = [IsAuthenticated, ActionCapability]
    read_capability = CAP_STAFF_VIEW
    write_capability = CAP_STAFF_MANAGE

    def get_queryset(self):
        qs = StaffMember.objects.all().order_by("name")
        params = self.request.query_params

        status_param = (params.get("status") or "").strip()
        if status_param:
            qs = qs.filter(status=status_param)

        q = (params.get("q") or "").strip()
        if q:
            qs = qs.filter(
                Q(name__icontains=q) | Q(position__icontains=q) | Q(department__icontains=q)
            )

        return self.filter_updated_since(qs)

    @action(detail=True, methods=["get"])
    def attendance(self, request, pk=None):
        staff = self.get_object()
        qs = staff.attendance.all().order_by("-date")

        start = parse_date_param(request.query_params.get("start"))
        if start:
            qs = qs.filter(date__gte=start)
        end = parse_date_param(request.query_params.get("end"))
        if end:
            qs = qs.filter(date__lte=end)

        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(AttendanceSerializer(page, many=True).data)
        return Response(AttendanceSerializer(qs, many=True).data)


class TaskViewSet(UpdatedSinceMixin, viewsets.ModelViewSet):
    serializer_class = TaskSerializer
    permission_classes = [IsAuthenticated, ActionCapability]
    read_capability = CAP_STAFF_VIEW
    write_capability = CAP_STAFF_MANAGE

    def get_permissions(self):
        if self.action == "set_status":
            # ownership is checked in the action
            return [IsAuthenticated()]
        return super().get_permissions()

    def get_queryset(self):
        qs = Task.objects.select_related("assigned_to", "order").order_by("due_date", "-created_at")
        params = self.request.query_params

        assigned_to = (params.get("assigned_to") or "").strip()
        if assigned_to:
            qs = qs.filter(assigned_to_id=assigned_to)

        status_param = (params.get("status") or "").strip()
        if status_param:
            qs = qs.filter(status=status_param)

        return self.filter_updated_since(qs)

    def perform_create(self, serializer):
        serializer.save(assigned_by=self.request.user)

    @extend_schema(request=TaskStatusSerializer, responses={200: TaskSerializer})
    @action(detail=True, methods=["post"], url_path="status")
    def set_status(self, request, pk=None):
        task = self.get_object()

        is_manager = user_has_capability(request.user, CAP_STAFF_MANAGE)
        if not is_manager and task.assigned_to.user_id != request.user.id:
            return Response(
                {"detail": "You can only update your own tasks."},
                status=status.HTTP_403_FORBIDDEN,
            )

        serializer = TaskStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        task.status = serializer.validated_data["status"]
        task.save(update_fields=["status", "updated_at"])
        return Response(TaskSerializer(task).data)


# -------------------------
# Self-service (logged-in tailor)
# -------------------------
class MyDashboardView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        try:
            staff = staff_for_user(request.user)
        except NoStaffProfile as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)

        data = staff_dashboard(staff)
        return Response(
            {
                "staff": StaffMemberSerializer(data["staff"]).data,
                "attendance": AttendanceSerializer(data["attendance"]).data if data["attendance"] else None,
                "checked_in": data["checked_in"],
                "tasks": TaskSerializer(data["tasks"], many=True).data,
                "pending_tasks": data["pending_tasks"],
                "in_progress_tasks": data["in_progress_tasks"],
                "completed_tasks": data["completed_tasks"],
                "active_orders": data["active_orders"],
            }
        )


class MyCheckInView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(request=CheckInSerializer, responses={200: AttendanceSerializer})
    def post(self, request):
        try:
            staff = staff_for_user(request.user)
        except NoStaffProfile as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)

        serializer = CheckInSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = check_in(staff, image_url=serializer.validated_data.get("image_url", ""))
        return Response(
            AttendanceSerializer(result.attendance).data,
            status=status.HTTP_201_CREATED if result.created else status.HTTP_200_OK,
        )


class MyCheckOutView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(request=None, responses={200: AttendanceSerializer})
    def post(self, request):
        try:
            staff = staff_for_user(request.user)
            attendance = check_out(staff)
        except NoStaffProfile as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
        except AttendanceError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(AttendanceSerializer(attendance).data)
