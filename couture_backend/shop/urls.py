# shop/urls.py

from django.urls import path

from shop.views import ShopProfileView

app_name = "shop"

urlpatterns = [
    path("profile/", ShopProfileView.as_view(), name="shop-profile"),
]
