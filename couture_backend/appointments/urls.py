# appointments/urls.py

from rest_framework.routers import SimpleRouter

from appointments.views import AppointmentViewSet

app_name = "appointments"

router = SimpleRouter()
router.register(r"", AppointmentViewSet, basename="appointment")

urlpatterns = router.urls
