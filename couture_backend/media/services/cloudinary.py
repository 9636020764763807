# media/services/cloudinary.py

"""
CLOUDINARY UNSIGNED UPLOADS

POST {API_BASE}/{CLOUD_NAME}/image/upload
    {"file": "data:<mime>;base64,...", "upload_preset": UPLOAD_PRESET}
-> {"secure_url": "https://res.cloudinary.com/..."}

Rules:
- Non-2xx -> MediaUploadError("Upload failed with status: N")
- Missing secure_url -> MediaUploadError
- upload_many keeps input order and stops at the first failure
"""

from __future__ import annotations

import base64
import json
import logging
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from django.conf import settings

from media.services.exceptions import InvalidUpload, MediaConfigError, MediaUploadError

logger = logging.getLogger("media")

MAX_UPLOAD_BYTES = 10 * 1024 * 1024
ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/png", "image/webp", "image/gif", "image/heic"}


def _cfg() -> dict:
    cfg = getattr(settings, "CLOUDINARY", {}) or {}
    cloud = (cfg.get("CLOUD_NAME") or "").strip()
    preset = (cfg.get("UPLOAD_PRESET") or "").strip()
    if not cloud or not preset:
        raise MediaConfigError("Image uploads are not configured (CLOUDINARY_CLOUD_NAME / CLOUDINARY_UPLOAD_PRESET).")
    return {
        "url": f"{(cfg.get('API_BASE') or 'https://api.cloudinary.com/v1_1').rstrip('/')}/{cloud}/image/upload",
        "preset": preset,
        "timeout": int(cfg.get("TIMEOUT") or 30),
    }


def to_data_uri(content: bytes, content_type: str) -> str:
    return f"data:{content_type};base64,{base64.b64encode(content).decode('ascii')}"


def validate_upload(file) -> None:
    content_type = (getattr(file, "content_type", "") or "").lower()
    if content_type not in ALLOWED_CONTENT_TYPES:
        raise InvalidUpload(f"Unsupported file type: {content_type or 'unknown'}")
    if (getattr(file, "size", 0) or 0) > MAX_UPLOAD_BYTES:
        raise InvalidUpload("File is larger than 10 MB")


def _post_json(url: str, body: dict, *, timeout: int) -> dict[str, Any]:
    req = Request(
        url,
        data=json.dumps(body).encode("utf-8"),
        headers={"Content-Type": "application/json", "Accept": "application/json"},
        method="POST",
    )
    try:
        with urlopen(req, timeout=timeout) as resp:
            raw = resp.read().decode("utf-8", errors="replace")
    except HTTPError as e:
        preview = e.read()[:300].decode("utf-8", errors="replace") if e.fp else ""
        logger.warning("Cloudinary rejected upload", extra={"status": e.code, "body_preview": preview})
        raise MediaUploadError(f"Upload failed with status: {e.code}", status_code=e.code) from e
    except URLError as e:
        logger.warning("Cloudinary unreachable", extra={"reason": str(e.reason)})
        raise MediaUploadError("Upload service unreachable") from e

    try:
        parsed = json.loads(raw or "{}")
    except ValueError as e:
        raise MediaUploadError("Upload service returned invalid JSON") from e
    return parsed if isinstance(parsed, dict) else {}


def upload_image(file) -> str:
    """
    Upload one Django UploadedFile (or any object with read()/content_type)
    and return its secure_url.
    """
    validate_upload(file)
    cfg = _cfg()

    data_uri = to_data_uri(file.read(), file.content_type)
    payload = _post_json(
        cfg["url"],
        {"file": data_uri, "upload_preset": cfg["preset"]},
        timeout=cfg["timeout"],
    )

    secure_url = (payload.get("secure_url") or "").strip()
    if not secure_url:
        raise MediaUploadError("No secure URL returned from Cloudinary")

    logger.info("Image uploaded", extra={"file_name": getattr(file, "name", ""), "url": secure_url})
    return secure_url


def upload_many(files) -> list[str]:
    return [upload_image(f) for f in files]
