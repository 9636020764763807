# expenses/tests/test_expenses.py

from datetime import date
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import SimpleTestCase, TestCase
from rest_framework.test import APIClient

from expenses.models import Expense, next_due_date

User = get_user_model()


class NextDueDateTests(SimpleTestCase):
    def test_periods(self):
        self.assertEqual(next_due_date(date(2026, 3, 10), "weekly"), date(2026, 3, 17))
        self.assertEqual(next_due_date(date(2026, 3, 10), "monthly"), date(2026, 4, 10))
        self.assertEqual(next_due_date(date(2026, 11, 30), "quarterly"), date(2027, 2, 28))
        self.assertEqual(next_due_date(date(2028, 2, 29), "yearly"), date(2029, 2, 28))
        self.assertIsNone(next_due_date(date(2026, 3, 10), ""))

    def test_month_end_clamp(self):
        self.assertEqual(next_due_date(date(2026, 1, 31), "monthly"), date(2026, 2, 28))


class ExpenseModelTests(TestCase):
    def test_recurring_fills_next_due(self):
        expense = Expense.objects.create(
            title="Shop rent", amount=Decimal("15000"), category="Rent & Utilities",
            date=date(2026, 5, 1), is_recurring=True, recurring_type="monthly",
        )
        self.assertEqual(expense.next_due_date, date(2026, 6, 1))

    def test_non_recurring_clears_schedule(self):
        expense = Expense.objects.create(
            title="Thread", amount=Decimal("300"), recurring_type="monthly", next_due_date=date(2026, 6, 1),
        )
        self.assertEqual(expense.recurring_type, "")
        self.assertIsNone(expense.next_due_date)


class ExpenseApiTests(TestCase):
    """
    GUARANTEES:
    - Only admin/manager roles see expenses
    - Amount must be positive; recurring needs a frequency
    - summary/ totals by category inside the date window, rejected excluded
    """

    def setUp(self):
        self.client = APIClient()
        self.manager = User.objects.create_user(username="desk", password="pass1234", role="manager")
        self.tailor = User.objects.create_user(username="tailor", password="pass1234", role="staff")
        self.client.force_authenticate(user=self.manager)

    def _create(self, **overrides):
        payload = {"title": "Fabric purchase", "amount": "1200", "category": "Raw Materials", "date": "2026-05-10"}
        payload.update(overrides)
        return self.client.post("/api/expenses/", payload, format="json")

    def test_create(self):
        res = self._create()
        self.assertEqual(res.status_code, 201, res.data)
        self.assertEqual(res.data["status"], "pending")

    def test_validation(self):
        self.assertEqual(self._create(amount="0").status_code, 400)
        self.assertEqual(self._create(is_recurring=True).status_code, 400)

    def test_staff_forbidden(self):
        self.client.force_authenticate(user=self.tailor)
        self.assertEqual(self.client.get("/api/expenses/").status_code, 403)

    def test_summary(self):
        self._create()
        self._create(amount="800")
        self._create(title="Rent", amount="15000", category="Rent & Utilities", is_recurring=True, recurring_type="monthly")
        self._create(title="Old", amount="999", date="2026-01-01")
        self._create(title="Refused", amount="500", status="rejected")

        res = self.client.get("/api/expenses/summary/?start=2026-05-01&end=2026-05-31")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["total"], "17000.00")
        self.assertEqual(res.data["count"], 3)
        self.assertEqual(res.data["recurring_count"], 1)
        self.assertEqual(
            res.data["by_category"],
            [
                {"category": "Rent & Utilities", "total": "15000.00", "count": 1},
                {"category": "Raw Materials", "total": "2000.00", "count": 2},
            ],
        )
