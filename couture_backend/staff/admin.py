from django.contrib import admin

from staff.models import Attendance, StaffMember, Task


@admin.register(StaffMember)
class StaffMemberAdmin(admin.ModelAdmin):
    list_display = ("name", "position", "department", "status", "phone", "joining_date")
    list_filter = ("status", "role")
    search_fields = ("name", "email", "phone")


@admin.register(Attendance)
class AttendanceAdmin(admin.ModelAdmin):
    list_display = ("staff", "date", "check_in", "check_out", "status")
    list_filter = ("status", "date")


@admin.register(Task)
class TaskAdmin(admin.ModelAdmin):
    list_display = ("title", "assigned_to", "priority", "status", "due_date")
    list_filter = ("status", "priority")
    search_fields = ("title",)
