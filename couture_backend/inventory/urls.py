# inventory/urls.py

from rest_framework.routers import DefaultRouter

from inventory.views import InventoryItemViewSet

app_name = "inventory"

router = DefaultRouter()
router.register(r"items", InventoryItemViewSet, basename="inventory-item")

urlpatterns = router.urls
