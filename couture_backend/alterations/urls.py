# alterations/urls.py

from rest_framework.routers import SimpleRouter

from alterations.views import AlterationViewSet

app_name = "alterations"

router = SimpleRouter()
router.register(r"", AlterationViewSet, basename="alteration")

urlpatterns = router.urls
