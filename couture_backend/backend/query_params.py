# backend/query_params.py
"""
Query-string parsing shared by list/report endpoints.

Parsers return None on malformed input; views answer 400 themselves.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from decimal import ROUND_HALF_UP, Decimal

from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

TWOPLACES = Decimal("0.01")


def parse_date_param(value: str | None) -> date | None:
    """
    Accepts YYYY-MM-DD.
    """
    if not value:
        return None
    try:
        return parse_date(value.strip())
    except ValueError:
        return None


def parse_datetime_param(value: str | None) -> datetime | None:
    """
    Accepts ISO-8601 datetimes or plain dates (start of that local day).
    Naive values are made aware in the current timezone.
    """
    if not value:
        return None
    value = value.strip()
    try:
        dt = parse_datetime(value)
    except ValueError:
        return None
    if dt is None:
        d = parse_date_param(value)
        if d is None:
            return None
        dt = datetime.combine(d, time.min)
    if timezone.is_naive(dt):
        dt = timezone.make_aware(dt, timezone.get_current_timezone())
    return dt


def day_bounds(d: date):
    """
    Timezone-aware [start, end) bounds for a local date.
    """
    tz = timezone.get_current_timezone()
    start = timezone.make_aware(datetime.combine(d, time.min), tz)
    return start, start + timedelta(days=1)


def money_str(x) -> str:
    """
    JSON-safe money string.
    """
    if x is None:
        return "0.00"
    return str(Decimal(str(x)).quantize(TWOPLACES, rounding=ROUND_HALF_UP))
