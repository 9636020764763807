# billing/services/pdf.py

"""
BILL PDF (reportlab platypus)

Layout:
- shop header (name, tagline, contact, GSTIN)
- bill details | customer details
- items table, then non-zero breakdown charges
- totals: subtotal, GST, discount, total, paid, balance
- UPI QR + bank details when configured
- footer with payment terms
"""

from __future__ import annotations

import io
import logging
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Image, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from billing.services.qr import data_url_to_bytes
from billing.services.totals import format_currency
from shop.services.profile import get_shop_profile

logger = logging.getLogger("billing")

ACCENT = colors.HexColor("#7c3aed")
MUTED = colors.HexColor("#6b7280")
GRID = colors.HexColor("#d1d5db")
HEADER_BG = colors.HexColor("#f3f4f6")

# The standard PDF fonts have no rupee glyph.
PDF_CURRENCY = "Rs. "

BREAKDOWN_LABELS = {
    "fabric": "Fabric",
    "stitching": "Stitching",
    "accessories": "Accessories",
    "customization": "Customization",
    "other_charges": "Other Charges",
}


def _amount(value) -> str:
    return format_currency(value, symbol=PDF_CURRENCY)


def _styles():
    base = getSampleStyleSheet()
    return {
        "title": ParagraphStyle(
            "ShopTitle", parent=base["Title"], fontSize=22, textColor=ACCENT, alignment=TA_CENTER, spaceAfter=2
        ),
        "tagline": ParagraphStyle("Tagline", parent=base["Normal"], textColor=MUTED, alignment=TA_CENTER),
        "heading": ParagraphStyle("Heading", parent=base["Heading3"], spaceAfter=4),
        "normal": base["Normal"],
        "right": ParagraphStyle("Right", parent=base["Normal"], alignment=TA_RIGHT),
        "footer": ParagraphStyle("Footer", parent=base["Normal"], textColor=MUTED, alignment=TA_CENTER, fontSize=9),
    }


def _header(profile, styles) -> list:
    flowables = [Paragraph(escape(profile.name), styles["title"])]
    if profile.tagline:
        flowables.append(Paragraph(escape(profile.tagline), styles["tagline"]))

    contact = " | ".join(x for x in (profile.address, profile.phone, profile.email) if x)
    if contact:
        flowables.append(Paragraph(escape(contact), styles["tagline"]))
    if profile.gstin:
        flowables.append(Paragraph(f"GSTIN: {escape(profile.gstin)}", styles["tagline"]))
    flowables.append(Spacer(1, 8 * mm))
    return flowables


def _details(bill, styles) -> Table:
    left = [
        Paragraph("Bill Details", styles["heading"]),
        Paragraph(f"<b>Bill No:</b> {escape(bill.bill_id)}", styles["normal"]),
        Paragraph(f"<b>Date:</b> {bill.date:%d/%m/%Y}", styles["normal"]),
    ]
    if bill.due_date:
        left.append(Paragraph(f"<b>Due Date:</b> {bill.due_date:%d/%m/%Y}", styles["normal"]))
    if bill.order_id:
        left.append(Paragraph(f"<b>Order:</b> {escape(bill.order.order_number)}", styles["normal"]))

    right = [
        Paragraph("Customer Details", styles["heading"]),
        Paragraph(f"<b>Name:</b> {escape(bill.customer_name)}", styles["normal"]),
    ]
    if bill.customer_phone:
        right.append(Paragraph(f"<b>Phone:</b> {escape(bill.customer_phone)}", styles["normal"]))
    if bill.customer_email:
        right.append(Paragraph(f"<b>Email:</b> {escape(bill.customer_email)}", styles["normal"]))
    if bill.customer_address:
        right.append(Paragraph(f"<b>Address:</b> {escape(bill.customer_address)}", styles["normal"]))

    table = Table([[left, right]], colWidths=[85 * mm, 85 * mm])
    table.setStyle(TableStyle([("VALIGN", (0, 0), (-1, -1), "TOP")]))
    return table


def _items_table(bill, styles) -> Table:
    rows = [["Description", "Qty", "Rate", "Amount"]]
    for item in bill.items.all():
        rows.append(
            [
                Paragraph(escape(item.description), styles["normal"]),
                f"{item.quantity.normalize():f}",
                _amount(item.rate),
                _amount(item.amount),
            ]
        )
    for key, value in bill.breakdown.items():
        if value:
            rows.append([BREAKDOWN_LABELS[key], "", "", _amount(value)])

    table = Table(rows, colWidths=[85 * mm, 20 * mm, 30 * mm, 35 * mm], repeatRows=1)
    table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), HEADER_BG),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("GRID", (0, 0), (-1, -1), 0.5, GRID),
                ("ALIGN", (1, 0), (-1, -1), "RIGHT"),
                ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                ("TOPPADDING", (0, 0), (-1, -1), 6),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
            ]
        )
    )
    return table


def _totals_table(bill) -> Table:
    discount_label = "Discount"
    if bill.discount_type == "percentage" and bill.discount:
        discount_label = f"Discount ({bill.discount.normalize():f}%)"

    rows = [
        ["Subtotal", _amount(bill.subtotal)],
        [f"GST ({bill.gst_percent.normalize():f}%)", _amount(bill.gst_amount)],
        [discount_label, f"-{_amount(bill.discount_amount)}"],
        ["Total", _amount(bill.total_amount)],
        ["Paid", _amount(bill.paid_amount)],
        ["Balance", _amount(bill.balance)],
    ]
    table = Table(rows, colWidths=[45 * mm, 40 * mm], hAlign="RIGHT")
    table.setStyle(
        TableStyle(
            [
                ("ALIGN", (0, 0), (-1, -1), "RIGHT"),
                ("FONTNAME", (0, 3), (-1, 3), "Helvetica-Bold"),
                ("TEXTCOLOR", (0, 3), (-1, 3), ACCENT),
                ("FONTNAME", (0, 5), (-1, 5), "Helvetica-Bold"),
                ("TEXTCOLOR", (0, 5), (-1, 5), colors.HexColor("#dc2626")),
                ("LINEABOVE", (0, 3), (-1, 3), 0.75, GRID),
            ]
        )
    )
    return table


def _payment_block(bill, styles) -> list:
    flowables = []
    png = data_url_to_bytes(bill.qr_code)
    if png:
        flowables += [
            Spacer(1, 6 * mm),
            Paragraph("Scan to pay via UPI", styles["heading"]),
            Image(io.BytesIO(png), width=40 * mm, height=40 * mm, hAlign="LEFT"),
        ]
    if bill.upi_id:
        flowables.append(Paragraph(f"<b>UPI ID:</b> {escape(bill.upi_id)}", styles["normal"]))

    bank = bill.bank_details or {}
    if bank.get("account_number"):
        flowables += [
            Spacer(1, 4 * mm),
            Paragraph("Bank Details", styles["heading"]),
            Paragraph(f"<b>Account Name:</b> {escape(bank.get('account_name', ''))}", styles["normal"]),
            Paragraph(f"<b>Account No:</b> {escape(bank['account_number'])}", styles["normal"]),
            Paragraph(f"<b>IFSC:</b> {escape(bank.get('ifsc', ''))}", styles["normal"]),
            Paragraph(f"<b>Bank:</b> {escape(bank.get('bank_name', ''))}", styles["normal"]),
        ]
    return flowables


def render_bill_pdf(bill) -> bytes:
    """
    Render a bill to PDF bytes.
    """
    profile = get_shop_profile()
    styles = _styles()

    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=20 * mm,
        rightMargin=20 * mm,
        topMargin=15 * mm,
        bottomMargin=15 * mm,
        title=f"{profile.name} - {bill.bill_id}",
    )

    story = []
    story += _header(profile, styles)
    story.append(_details(bill, styles))
    story.append(Spacer(1, 6 * mm))
    story.append(_items_table(bill, styles))
    story.append(Spacer(1, 4 * mm))
    story.append(_totals_table(bill))
    story += _payment_block(bill, styles)
    if bill.notes:
        story += [Spacer(1, 4 * mm), Paragraph(f"<b>Notes:</b> {escape(bill.notes)}", styles["normal"])]

    story += [
        Spacer(1, 10 * mm),
        Paragraph(f"Thank you for choosing {escape(profile.name)}!", styles["footer"]),
        Paragraph(
            f"For any queries, please contact us. Payment due within {profile.payment_due_days} days.",
            styles["footer"],
        ),
    ]

    doc.build(story)
    logger.info("Bill PDF rendered", extra={"bill_id": bill.bill_id})
    return buffer.getvalue()
