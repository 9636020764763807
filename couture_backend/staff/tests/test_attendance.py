# staff/tests/test_attendance.py

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

from staff.models import Attendance, StaffMember
from staff.services.attendance import check_in, check_out
from staff.services.exceptions import AttendanceError

User = get_user_model()


class AttendanceServiceTests(TestCase):
    """
    GUARANTEES:
    - One attendance row per staff per day; check-in is idempotent
    - Check-out without check-in is rejected
    """

    def setUp(self):
        self.staff = StaffMember.objects.create(name="Ravi")

    def test_check_in_idempotent(self):
        first = check_in(self.staff)
        second = check_in(self.staff)
        self.assertTrue(first.created)
        self.assertFalse(second.created)
        self.assertEqual(first.attendance.pk, second.attendance.pk)
        self.assertEqual(first.attendance.check_in, second.attendance.check_in)
        self.assertEqual(Attendance.objects.count(), 1)

    def test_check_out_requires_check_in(self):
        with self.assertRaises(AttendanceError):
            check_out(self.staff)

    def test_check_out(self):
        check_in(self.staff)
        attendance = check_out(self.staff)
        self.assertIsNotNone(attendance.check_out)
        self.assertGreaterEqual(attendance.check_out, attendance.check_in)


class StaffApiTests(TestCase):
    """
    GUARANTEES:
    - Only admins manage staff records; managers can read them
    - Skills accept a comma-separated string
    - Linked tailors use me/ endpoints and update their own tasks only
    """

    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_user(username="owner", password="pass1234", role="admin")
        self.manager = User.objects.create_user(username="desk", password="pass1234", role="manager")
        self.tailor_user = User.objects.create_user(username="ravi", password="pass1234", role="staff")
        self.tailor = StaffMember.objects.create(name="Ravi", user=self.tailor_user)
        self.other = StaffMember.objects.create(name="Sita")

    def test_create_with_comma_skills(self):
        self.client.force_authenticate(user=self.admin)
        res = self.client.post(
            "/api/staff/members/",
            {"name": "Meena", "position": "Cutter", "skills": "cutting, embroidery,cutting"},
            format="json",
        )
        self.assertEqual(res.status_code, 201, res.data)
        self.assertEqual(res.data["skills"], ["cutting", "embroidery"])

    def test_manager_reads_but_cannot_create(self):
        self.client.force_authenticate(user=self.manager)
        self.assertEqual(self.client.get("/api/staff/members/").status_code, 200)
        res = self.client.post("/api/staff/members/", {"name": "X"}, format="json")
        self.assertEqual(res.status_code, 403)

    def test_tailor_cannot_list_staff(self):
        self.client.force_authenticate(user=self.tailor_user)
        self.assertEqual(self.client.get("/api/staff/members/").status_code, 403)

    def test_me_flow(self):
        self.client.force_authenticate(user=self.tailor_user)

        res = self.client.post("/api/staff/me/check-out/", {}, format="json")
        self.assertEqual(res.status_code, 400)

        res = self.client.post("/api/staff/me/check-in/", {}, format="json")
        self.assertEqual(res.status_code, 201)
        res = self.client.post("/api/staff/me/check-in/", {}, format="json")
        self.assertEqual(res.status_code, 200)

        res = self.client.get("/api/staff/me/dashboard/")
        self.assertEqual(res.status_code, 200)
        self.assertTrue(res.data["checked_in"])

        res = self.client.post("/api/staff/me/check-out/", {}, format="json")
        self.assertEqual(res.status_code, 200)
        self.assertIsNotNone(res.data["check_out"])

    def test_me_without_profile(self):
        self.client.force_authenticate(user=self.manager)
        self.assertEqual(self.client.get("/api/staff/me/dashboard/").status_code, 404)

    def test_task_status_ownership(self):
        self.client.force_authenticate(user=self.admin)
        mine = self.client.post(
            "/api/staff/tasks/", {"assigned_to": str(self.tailor.id), "title": "Hem saree"}, format="json"
        ).data["id"]
        theirs = self.client.post(
            "/api/staff/tasks/", {"assigned_to": str(self.other.id), "title": "Cut lehenga"}, format="json"
        ).data["id"]

        self.client.force_authenticate(user=self.tailor_user)
        res = self.client.post(f"/api/staff/tasks/{mine}/status/", {"status": "completed"}, format="json")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["status"], "completed")

        res = self.client.post(f"/api/staff/tasks/{theirs}/status/", {"status": "completed"}, format="json")
        self.assertEqual(res.status_code, 403)

    def test_attendance_history(self):
        check_in(self.tailor)
        self.client.force_authenticate(user=self.manager)
        res = self.client.get(f"/api/staff/members/{self.tailor.id}/attendance/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["count"], 1)
