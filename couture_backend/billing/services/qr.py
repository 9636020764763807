# billing/services/qr.py

"""
UPI QR codes as PNG data URLs (qrcode + Pillow).

200x200px, 2-module margin, black on white. Failures return "" so a bill
can still be saved without its QR.
"""

from __future__ import annotations

import base64
import io
import logging

import qrcode
from PIL import Image
from qrcode.constants import ERROR_CORRECT_M

logger = logging.getLogger("billing")

QR_SIZE_PX = 200
QR_MARGIN = 2


def render_qr_png(text: str, *, size: int = QR_SIZE_PX, margin: int = QR_MARGIN) -> bytes:
    qr = qrcode.QRCode(
        version=None,
        error_correction=ERROR_CORRECT_M,
        box_size=8,
        border=margin,
    )
    qr.add_data(text)
    qr.make(fit=True)

    image = qr.make_image(fill_color="black", back_color="white").get_image()
    image = image.convert("RGB").resize((size, size), Image.NEAREST)

    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def generate_qr_code_data_url(text: str) -> str:
    if not text:
        return ""
    try:
        png = render_qr_png(text)
    except Exception:
        logger.exception("QR code generation failed")
        return ""
    return "data:image/png;base64," + base64.b64encode(png).decode("ascii")


def data_url_to_bytes(data_url: str) -> bytes | None:
    """
    Decode a base64 PNG data URL (as stored on Bill.qr_code).
    """
    prefix, _, payload = (data_url or "").partition(",")
    if not payload or not prefix.endswith(";base64"):
        return None
    try:
        return base64.b64decode(payload)
    except ValueError:
        return None
