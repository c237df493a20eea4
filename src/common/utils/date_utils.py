from datetime import date, datetime, timedelta
from typing import Iterator, Optional
from zoneinfo import ZoneInfo

from common.utils.constants import DATE_FORMAT, HOTEL_TIMEZONE


def parse_calendar_date(value: date | str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(value[:10], DATE_FORMAT).date()


def to_date_key(day: date) -> str:
    return day.strftime(DATE_FORMAT)


def iter_stay_dates(check_in: date | str, check_out: date | str) -> Iterator[date]:
    """Yield every night of a stay: check_in inclusive, check_out exclusive."""
    current = parse_calendar_date(check_in)
    end = parse_calendar_date(check_out)
    while current < end:
        yield current
        current += timedelta(days=1)


def local_today(tz_name: Optional[str] = HOTEL_TIMEZONE) -> date:
    if tz_name:
        return datetime.now(ZoneInfo(tz_name)).date()
    return date.today()
