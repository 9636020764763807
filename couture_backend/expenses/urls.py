# expenses/urls.py

from rest_framework.routers import SimpleRouter

from expenses.views import ExpenseViewSet

app_name = "expenses"

router = SimpleRouter()
router.register(r"", ExpenseViewSet, basename="expense")

urlpatterns = router.urls
