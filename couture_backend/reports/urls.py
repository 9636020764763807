# reports/urls.py

from django.urls import path

from reports.views import BusinessReportView, DashboardStatsView, UsageStatsView

app_name = "reports"

urlpatterns = [
    path("dashboard/", DashboardStatsView.as_view(), name="dashboard"),
    path("usage/", UsageStatsView.as_view(), name="usage"),
    path("business/", BusinessReportView.as_view(), name="business"),
]
