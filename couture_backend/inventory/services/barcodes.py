# inventory/services/barcodes.py

"""
BARCODES (Code128)

- validate_barcode_text: 1-50 chars of letters, digits, '-' or '_'
- generate_barcode: PNG data URL rendered with python-barcode's ImageWriter
  (Pillow), human-readable text under the bars. If rendering fails a
  plain-text SVG data URL is returned instead.
"""

from __future__ import annotations

import base64
import io
import logging
from xml.sax.saxutils import escape

import barcode
from barcode.writer import ImageWriter

from inventory.models.item import BARCODE_TEXT_RE
from inventory.services.exceptions import InvalidBarcodeText

logger = logging.getLogger("inventory")

# Roughly a 200px wide label for short codes at the default 300 dpi.
WRITER_OPTIONS = {
    "module_width": 0.2,
    "module_height": 8.0,
    "quiet_zone": 2.0,
    "font_size": 8,
    "text_distance": 3.0,
    "background": "white",
    "foreground": "black",
    "write_text": True,
}


def validate_barcode_text(text) -> bool:
    return isinstance(text, str) and bool(BARCODE_TEXT_RE.fullmatch(text))


def _fallback_svg(text: str) -> str:
    svg = (
        '<svg width="200" height="50" xmlns="http://www.w3.org/2000/svg">'
        '<rect width="200" height="50" fill="white" stroke="black"/>'
        '<text x="100" y="30" text-anchor="middle" font-family="monospace" font-size="12">'
        f"{escape(text)}</text></svg>"
    )
    return "data:image/svg+xml;base64," + base64.b64encode(svg.encode("utf-8")).decode("ascii")


def render_barcode_png(text: str) -> bytes:
    if not validate_barcode_text(text):
        raise InvalidBarcodeText(text)

    code128 = barcode.get_barcode_class("code128")
    buffer = io.BytesIO()
    code128(text, writer=ImageWriter()).write(buffer, options=WRITER_OPTIONS)
    return buffer.getvalue()


def generate_barcode(text: str) -> str:
    """
    Returns a data: URL (PNG, or SVG fallback).
    """
    png = None
    try:
        png = render_barcode_png(text)
    except InvalidBarcodeText:
        raise
    except Exception:
        logger.exception("Barcode rendering failed", extra={"barcode_text": text})

    if png is None:
        return _fallback_svg(text)
    return "data:image/png;base64," + base64.b64encode(png).decode("ascii")
