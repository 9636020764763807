# media/views.py

"""
POST /api/media/upload/   multipart "file" (one) or "files" (many)

-> {"url": ...} for a single file, {"urls": [...]} for many.
Throttled with the "uploads" scope.
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView

from media.services.cloudinary import upload_image, upload_many
from media.services.exceptions import InvalidUpload, MediaConfigError, MediaUploadError
from permissions.roles import CAP_MEDIA_UPLOAD, HasCapability


class ImageUploadView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_MEDIA_UPLOAD
    parser_classes = [MultiPartParser, FormParser]
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "uploads"

    @extend_schema(
        request={"multipart/form-data": {"type": "object", "properties": {"file": {"type": "string", "format": "binary"}}}},
        responses={201: dict},
    )
    def post(self, request):
        files = request.FILES.getlist("files")
        single = request.FILES.get("file")

        if not files and not single:
            return Response({"detail": "Attach an image as 'file' or 'files'."}, status=status.HTTP_400_BAD_REQUEST)

        try:
            if files:
                return Response({"urls": upload_many(files)}, status=status.HTTP_201_CREATED)
            return Response({"url": upload_image(single)}, status=status.HTTP_201_CREATED)
        except InvalidUpload as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        except MediaConfigError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)
        except MediaUploadError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_502_BAD_GATEWAY)
