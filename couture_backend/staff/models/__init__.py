from .attendance import Attendance
from .member import StaffMember
from .task import Task

__all__ = ["StaffMember", "Attendance", "Task"]
