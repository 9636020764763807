# media/urls.py

from django.urls import path

from media.views import ImageUploadView

app_name = "media"

urlpatterns = [
    path("upload/", ImageUploadView.as_view(), name="upload"),
]
