import calendar
from datetime import date, datetime, timedelta, timezone as dt_timezone
from typing import Optional, Union
import pytz

from habit_tracker.config import settings


def now_utc() -> datetime:
    return datetime.now(dt_timezone.utc)


def today_local(tz_name: Optional[str] = None) -> date:
    """Today's calendar date in the configured application timezone."""
    tz = pytz.timezone(tz_name or settings.APP_TIMEZONE)
    return now_utc().astimezone(tz).date()


def days_ago(days: int, today: Optional[date] = None) -> date:
    return (today or today_local()) - timedelta(days=days)


def to_day(value: Union[str, date, datetime], tz_name: Optional[str] = None) -> date:
    """
    Normalize an ISO-8601 string, date or datetime to a calendar day.

    Timezone-aware datetimes are converted to the application timezone first,
    naive ones are taken as already local.

    Raises:
        ValueError: If a string is not valid ISO-8601
    """
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        if len(text) == 10:
            return date.fromisoformat(text)
        value = datetime.fromisoformat(text)

    if isinstance(value, datetime):
        if value.tzinfo is not None:
            tz = pytz.timezone(tz_name or settings.APP_TIMEZONE)
            value = value.astimezone(tz)
        return value.date()
    return value


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last day of a month."""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)
