"""Store-local calendar helpers. Timestamps are stored in UTC."""
import calendar
from datetime import date, datetime, time, timedelta, timezone
from functools import lru_cache
from typing import Optional
from zoneinfo import ZoneInfo

from voicepos.core.config import settings


@lru_cache
def store_timezone() -> ZoneInfo:
    return ZoneInfo(settings.STORE_TIMEZONE)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """SQLite hands back naive values; they were written as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_local(value: datetime) -> datetime:
    return as_utc(value).astimezone(store_timezone())


def local_today(now: Optional[datetime] = None) -> date:
    return to_local(now or utc_now()).date()


def local_midnight(day: date) -> datetime:
    """Start of `day` in store-local time, expressed in UTC."""
    return datetime.combine(day, time.min, tzinfo=store_timezone()).astimezone(timezone.utc)


def day_bounds(now: Optional[datetime] = None):
    """[start, end) of the store-local day containing `now`, in UTC."""
    today = local_today(now)
    return local_midnight(today), local_midnight(today + timedelta(days=1))


def month_start(now: Optional[datetime] = None) -> datetime:
    today = local_today(now)
    return local_midnight(today.replace(day=1))


def shift_months(value: datetime, months: int) -> datetime:
    """Move `value` by whole calendar months, clamping the day (Mar 31 - 1 month = Feb 28/29)."""
    month_index = value.year * 12 + (value.month - 1) + months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def parse_filter_datetime(value: Optional[str], end_of_day: bool = False) -> Optional[datetime]:
    """
    Parse a history filter value (ISO date or datetime) into UTC.

    Naive values are store-local. A bare date used as an upper bound
    covers that whole day. Raises ValueError on garbage.
    """
    if value is None:
        return None
    text = value.strip()
    if not text:
        return None

    if len(text) == 10:
        day = date.fromisoformat(text)
        if end_of_day:
            return local_midnight(day + timedelta(days=1)) - timedelta(microseconds=1)
        return local_midnight(day)

    parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=store_timezone())
    return parsed.astimezone(timezone.utc)
