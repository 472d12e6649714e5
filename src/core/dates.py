"""Date parsing at the service boundary."""
from __future__ import annotations

import datetime

from django.utils import timezone
from django.utils.dateparse import parse_date

from core.exceptions import InvalidInput


def parse_optional_date(value, *, field: str) -> datetime.date:
    """Return *value* as a ``date``; ``None`` or blank means today."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return timezone.localdate()
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    try:
        parsed = parse_date(str(value).strip())
    except ValueError:
        parsed = None
    if parsed is None:
        raise InvalidInput(f"{field} must be a date (YYYY-MM-DD)", field=field)
    return parsed
