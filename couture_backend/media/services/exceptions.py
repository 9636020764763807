# media/services/exceptions.py


class MediaUploadError(Exception):
    """Image upload failed; status_code carries the upstream HTTP status when there was one."""

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class MediaConfigError(MediaUploadError):
    """Cloudinary is not configured."""


class InvalidUpload(MediaUploadError):
    """File type or size not accepted."""
