# billing/services/messages.py

"""
WhatsApp message templates for a bill.

Keys: bill_delivery, payment_reminder, thank_you, custom1, custom2, custom3.
"""

from __future__ import annotations

from billing.services.totals import format_currency
from customers.services.contact import generate_whatsapp_link
from shop.services.profile import get_shop_profile

TEMPLATE_KEYS = (
    "bill_delivery",
    "payment_reminder",
    "thank_you",
    "custom1",
    "custom2",
    "custom3",
)


def whatsapp_templates(
    *,
    customer_name: str,
    bill_id: str,
    total_amount,
    balance,
    upi_link: str,
    due_date: str = "",
    shop_name: str | None = None,
) -> dict[str, str]:
    shop = shop_name or get_shop_profile().name
    total = format_currency(total_amount)
    pending = format_currency(balance)
    due_line = f"Due date: {due_date}\n\n" if due_date else ""

    return {
        "bill_delivery": (
            f"Hello {customer_name}! 🪡✨\n\n"
            f"Your bill {bill_id} for {total} is ready from {shop}.\n\n"
            f"Pay conveniently via UPI: {upi_link}\n\n"
            "Or scan the QR code attached. Thank you for choosing us! 💜"
        ),
        "payment_reminder": (
            f"Dear {customer_name},\n\n"
            f"Friendly reminder: Your pending balance for bill {bill_id} is {pending}.\n\n"
            f"{due_line}"
            f"Please complete payment via UPI: {upi_link}\n\n"
            "Thank you for your understanding! 🙏"
        ),
        "thank_you": (
            f"Dear {customer_name},\n\n"
            f"Thank you for your payment! ✨ We've received your settlement for bill {bill_id}.\n\n"
            f"We truly appreciate your business and look forward to serving you again at {shop}! 🪡💜"
        ),
        "custom1": (
            f"Hi {customer_name}! Your custom order is ready for pickup. "
            f"Bill {bill_id} - {total}. Pay via: {upi_link}"
        ),
        "custom2": (
            f"Dear {customer_name}, your alteration work is complete! "
            f"Please review bill {bill_id} and make payment. Thanks!"
        ),
        "custom3": (
            f"{customer_name}, your exclusive design is ready! "
            f"Bill {bill_id} for {total}. Secure payment: {upi_link}"
        ),
    }


def bill_templates(bill) -> dict[str, str]:
    return whatsapp_templates(
        customer_name=bill.customer_name,
        bill_id=bill.bill_id,
        total_amount=bill.total_amount,
        balance=bill.balance,
        upi_link=bill.upi_link,
        due_date=bill.due_date.strftime("%d/%m/%Y") if bill.due_date else "",
    )


def bill_whatsapp_links(bill) -> dict[str, dict]:
    """
    {key: {"message": ..., "whatsapp": wa.me link or None}}
    """
    out = {}
    for key, message in bill_templates(bill).items():
        out[key] = {
            "message": message,
            "whatsapp": generate_whatsapp_link(bill.customer_phone, message) if bill.customer_phone else None,
        }
    return out
