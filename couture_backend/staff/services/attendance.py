# staff/services/attendance.py

"""
ATTENDANCE SERVICE

Rules:
- One Attendance row per staff member per local day.
- check_in is idempotent: a second call the same day returns the existing row.
- check_out requires a check_in; a second check_out keeps the first time.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from django.db import transaction
from django.utils import timezone

from staff.models import Attendance, StaffMember, Task
from staff.services.exceptions import AttendanceError, NoStaffProfile

logger = logging.getLogger(__name__)


@dataclass
class CheckInResult:
    attendance: Attendance
    created: bool


def staff_for_user(user) -> StaffMember:
    staff = StaffMember.objects.filter(user=user).first() if user and user.is_authenticated else None
    if staff is None:
        raise NoStaffProfile("Your account is not linked to a staff profile.")
    return staff


@transaction.atomic
def check_in(staff: StaffMember, *, image_url: str = "", now=None) -> CheckInResult:
    now = now or timezone.now()
    today = timezone.localdate(now)

    attendance, created = Attendance.objects.select_for_update().get_or_create(
        staff=staff,
        date=today,
        defaults={"check_in": now, "status": Attendance.Status.PRESENT, "image_url": image_url or ""},
    )
    if not created and attendance.check_in is None:
        # row created by a manager (e.g. marked absent) before the staff arrived
        attendance.check_in = now
        attendance.status = Attendance.Status.PRESENT
        if image_url:
            attendance.image_url = image_url
        attendance.save(update_fields=["check_in", "status", "image_url", "updated_at"])
        created = True

    if created:
        logger.info("Staff checked in", extra={"staff_id": str(staff.id), "date": today.isoformat()})
    return CheckInResult(attendance=attendance, created=created)


@transaction.atomic
def check_out(staff: StaffMember, *, now=None) -> Attendance:
    now = now or timezone.now()
    today = timezone.localdate(now)

    attendance = Attendance.objects.select_for_update().filter(staff=staff, date=today).first()
    if attendance is None or attendance.check_in is None:
        raise AttendanceError("Cannot check out without checking in.")
    if attendance.check_out is not None:
        return attendance

    attendance.check_out = now
    attendance.save(update_fields=["check_out", "updated_at"])
    logger.info("Staff checked out", extra={"staff_id": str(staff.id), "date": today.isoformat()})
    return attendance


def staff_dashboard(staff: StaffMember) -> dict:
    """
    Own tasks grouped by status, today's attendance and active order count.
    """
    today = timezone.localdate()
    tasks = list(Task.objects.filter(assigned_to=staff).select_related("order").order_by("due_date", "-created_at"))
    attendance = Attendance.objects.filter(staff=staff, date=today).first()

    return {
        "staff": staff,
        "attendance": attendance,
        "checked_in": bool(attendance and attendance.check_in and not attendance.check_out),
        "tasks": tasks,
        "pending_tasks": sum(1 for t in tasks if t.status == Task.Status.PENDING),
        "in_progress_tasks": sum(1 for t in tasks if t.status == Task.Status.IN_PROGRESS),
        "completed_tasks": sum(1 for t in tasks if t.status == Task.Status.COMPLETED),
        "active_orders": staff.orders.exclude(status__in=["delivered", "cancelled"]).count(),
    }
