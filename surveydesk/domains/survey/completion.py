"""Turnaround calculation for completed surveys."""

import math
from datetime import date, datetime, timedelta

from surveydesk.core.exceptions import ValidationError

SECONDS_PER_DAY = 24 * 60 * 60


def _as_datetime(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime(value.year, value.month, value.day)


def calculate_days_process(reception: date | datetime, delivery: date | datetime) -> int:
    """
    Whole days between reception and delivery, rounding partial days up.

    The order of the two dates is not checked; the absolute difference is used.
    """
    diff: timedelta = _as_datetime(delivery) - _as_datetime(reception)
    return math.ceil(abs(diff.total_seconds()) / SECONDS_PER_DAY)


def check_completion(
    client_name: str | None,
    reception: date | datetime | None,
    delivery: date | datetime | None,
) -> None:
    """
    Ensure staff filled in every completion field.

    Raises:
        ValidationError: If the client name or either date is missing
    """
    missing = []
    if not client_name or not client_name.strip():
        missing.append("clientName")
    if reception is None:
        missing.append("receptionDate")
    if delivery is None:
        missing.append("deliveryDate")
    if missing:
        raise ValidationError("Client name and both dates are required", {"missing": missing})
