# staff/urls.py

from django.urls import path
from rest_framework.routers import DefaultRouter

from staff.views import (
    MyCheckInView,
    MyCheckOutView,
    MyDashboardView,
    StaffMemberViewSet,
    TaskViewSet,
)

app_name = "staff"

router = DefaultRouter()
router.register(r"members", StaffMemberViewSet, basename="staff-member")
router.register(r"tasks", TaskViewSet, basename="staff-task")

urlpatterns = [
    path("me/dashboard/", MyDashboardView.as_view(), name="me-dashboard"),
    path("me/check-in/", MyCheckInView.as_view(), name="me-check-in"),
    path("me/check-out/", MyCheckOutView.as_view(), name="me-check-out"),
] + router.urls
