# billing/urls.py

from rest_framework.routers import DefaultRouter

from billing.views import BillViewSet

app_name = "billing"

router = DefaultRouter()
router.register(r"bills", BillViewSet, basename="bill")

urlpatterns = router.urls
