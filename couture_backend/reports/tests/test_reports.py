# reports/tests/test_reports.py

from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.utils import timezone
from rest_framework.test import APIClient

from appointments.models import Appointment
from expenses.models import Expense
from inventory.models import InventoryItem
from orders.models import OrderStatus
from orders.services.order_service import change_status, create_order
from reports.services.stats import business_report, dashboard_stats, usage_stats

User = get_user_model()


def _item(category, price, quantity=1):
    return {
        "made_for": "Self",
        "category": category,
        "price": str(price),
        "quantity": quantity,
        "delivery_date": timezone.localdate() + timedelta(days=7),
    }


class ReportServiceTests(TestCase):
    """
    GUARANTEES:
    - Revenue on the dashboard counts delivered orders only
    - Mostly used categories are weighted by quantity
    - Monthly profit = order value booked - non-rejected expenses
    """

    def setUp(self):
        self.blouse = create_order(customer_name="Priya", items=[_item("Blouse", 1000, quantity=3)]).order
        self.lehenga = create_order(customer_name="Meena", items=[_item("Lehenga", 5000)]).order
        create_order(
            customer_name="Asha",
            customer_phone="9000000001",
            items=[_item("Blouse", 800), _item("Kurti", 600, quantity=2)],
        )
        change_status(self.lehenga, OrderStatus.DELIVERED)

    def test_dashboard_counts(self):
        InventoryItem.objects.create(name="Silk", quantity=Decimal("2"), min_stock=5)
        InventoryItem.objects.create(name="Cotton", quantity=Decimal("50"), min_stock=5)
        Appointment.objects.create(
            customer_name="Priya",
            customer_phone="9876543210",
            scheduled_at=timezone.now(),
            purpose="Fitting",
        )

        stats = dashboard_stats()

        self.assertEqual(stats["total_orders"], 3)
        self.assertEqual(stats["total_customers"], 3)
        self.assertEqual(stats["revenue"], Decimal("5000.00"))
        self.assertEqual(stats["low_stock_items"], 1)
        self.assertEqual(stats["today_appointments"], 1)
        self.assertEqual(stats["active_orders"], 2)
        self.assertEqual(stats["pending_orders"], 2)
        self.assertEqual(stats["completed_orders"], 1)

    def test_usage_weighted_by_quantity(self):
        usage = usage_stats(limit=2)
        self.assertEqual(
            usage["categories"],
            [{"category": "Blouse", "count": 4}, {"category": "Kurti", "count": 2}],
        )
        self.assertEqual(usage["types"][0], {"type": "Blouse", "count": 1})
        self.assertNotIn("Multiple Items", [t["type"] for t in usage["types"]])

    def test_business_report_current_month(self):
        Expense.objects.create(title="Rent", amount=Decimal("3000"), category="Rent & Utilities")
        Expense.objects.create(title="Thread", amount=Decimal("1000"), category="Materials")
        Expense.objects.create(
            title="Duplicate", amount=Decimal("9999"), category="Materials", status=Expense.Status.REJECTED
        )

        report = business_report(months=3)

        self.assertEqual(len(report["monthly"]), 3)
        current = report["monthly"][-1]
        self.assertEqual(current["revenue"], Decimal("10000.00"))
        self.assertEqual(current["expenses"], Decimal("4000.00"))
        self.assertEqual(current["profit"], Decimal("6000.00"))
        self.assertEqual(report["monthly"][0]["revenue"], Decimal("0.00"))

        self.assertEqual(
            [(r["category"], r["percentage"]) for r in report["expense_breakdown"]],
            [("Rent & Utilities", 75), ("Materials", 25)],
        )
        by_status = {r["status"]: r for r in report["orders_by_status"]}
        self.assertEqual(by_status["delivered"]["count"], 1)
        self.assertEqual(by_status["received"]["value"], Decimal("5000.00"))
        self.assertEqual(report["totals"]["profit_margin"], Decimal("60.0"))


class ReportApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.manager = User.objects.create_user(username="desk", password="pass1234", role="manager")
        self.tailor = User.objects.create_user(username="tailor", password="pass1234", role="staff")

    def test_dashboard_money_is_string(self):
        self.client.force_authenticate(user=self.manager)
        res = self.client.get("/api/reports/dashboard/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["revenue"], "0.00")

    def test_staff_cannot_view_reports(self):
        self.client.force_authenticate(user=self.tailor)
        self.assertEqual(self.client.get("/api/reports/business/").status_code, 403)

    def test_bad_months(self):
        self.client.force_authenticate(user=self.manager)
        self.assertEqual(self.client.get("/api/reports/business/?months=zero").status_code, 400)

    def test_business_shape(self):
        self.client.force_authenticate(user=self.manager)
        res = self.client.get("/api/reports/business/?months=2")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(len(res.data["monthly"]), 2)
        self.assertEqual(res.data["totals"]["revenue"], "0.00")
        self.assertEqual(len(res.data["orders_by_status"]), len(OrderStatus.values))

    def test_staff_see_dashboard(self):
        self.client.force_authenticate(user=self.tailor)
        self.assertEqual(self.client.get("/api/reports/dashboard/").status_code, 200)
