"""Date manipulation utilities"""

import calendar
from datetime import date, datetime, timedelta, timezone
from typing import TypeVar

from strafen_gateway.domain.models import TimePeriod, TimeUnit

Moment = TypeVar("Moment", date, datetime)


def add_months(start: Moment, months: int) -> Moment:
    """
    Add months while keeping day in valid range (e.g., Jan 31 + 1 month => Feb 28/29).
    Time of day is kept for datetimes.
    """
    y = start.year + (start.month - 1 + months) // 12
    m = (start.month - 1 + months) % 12 + 1
    day = min(start.day, calendar.monthrange(y, m)[1])
    return start.replace(year=y, month=m, day=day)


def add_years(start: Moment, years: int) -> Moment:
    """Add years, Feb 29 becomes Feb 28 in non-leap years"""
    return add_months(start, years * 12)


def advance(start: Moment, period: TimePeriod, times: int = 1) -> Moment:
    """Advance a date by a time period, applied `times` times"""
    amount = period.value * times
    if period.unit == TimeUnit.DAY:
        return start + timedelta(days=amount)
    if period.unit == TimeUnit.MONTH:
        return add_months(start, amount)
    return add_years(start, amount)


def to_utc(moment: datetime) -> datetime:
    """Timezone-aware UTC datetime, naive datetimes are taken as UTC"""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)
