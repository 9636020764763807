# customers/services/contact.py
"""
Customer contact helpers: wa.me / tel: links and message texts.
"""

from __future__ import annotations

import re
from decimal import Decimal
from urllib.parse import quote

from shop.services.profile import country_dial_code, get_shop_profile

_NON_DIGITS = re.compile(r"\D")


def generate_whatsapp_link(phone: str, message: str) -> str:
    """
    https://wa.me/<dial code + number>?text=<urlencoded message>

    The country dial code is prefixed unless the number already starts with it.
    """
    clean = _NON_DIGITS.sub("", phone or "")
    dial = country_dial_code()
    if not clean.startswith(dial):
        clean = f"{dial}{clean}"
    return f"https://wa.me/{clean}?text={quote(message or '', safe='')}"


def generate_call_link(phone: str) -> str:
    return f"tel:{phone}"


def _shop_name() -> str:
    return get_shop_profile().name


def order_status_message(customer_name: str, order_id: str, status: str) -> str:
    return (
        f"Hi {customer_name}, your order #{order_id} status has been updated to: {status}. "
        f"Thank you for choosing {_shop_name()}!"
    )


def appointment_reminder_message(customer_name: str, date: str, time: str) -> str:
    return (
        f"Hi {customer_name}, this is a reminder for your appointment at {_shop_name()} "
        f"on {date} at {time}. We look forward to seeing you!"
    )


def payment_reminder_message(customer_name: str, amount, order_id: str) -> str:
    amount = Decimal(str(amount or 0)).normalize()
    return (
        f"Hi {customer_name}, your order #{order_id} is ready for delivery. "
        f"Pending payment: ₹{amount:f}. Please contact us to arrange payment and delivery."
    )
