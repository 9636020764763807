# staff/services/exceptions.py


class StaffServiceError(Exception):
    """Base domain error for staff operations."""


class NoStaffProfile(StaffServiceError):
    """The logged-in user is not linked to a staff member."""


class AttendanceError(StaffServiceError):
    """Check-in / check-out rule violated."""
