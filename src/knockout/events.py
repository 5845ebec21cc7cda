"""
Tournament event status and countdown.
"""
from datetime import date, datetime, time, timezone as dt_timezone
from typing import Dict, Optional
from zoneinfo import ZoneInfo

UPCOMING = 'upcoming'
ONGOING = 'ongoing'
PAST = 'past'


def parse_event_datetime(value, timezone: Optional[str] = None, end_of_day: bool = False) -> datetime:
    """
    Convert a date, datetime or ISO string into a datetime.

    Date-only values mean the start of the day, or its last moment when
    ``end_of_day`` is set. With a ``timezone`` (IANA name) naive values are
    taken as local time in that zone.
    """
    if isinstance(value, datetime):
        result = value
    elif isinstance(value, date):
        result = datetime.combine(value, time.max if end_of_day else time.min)
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        if len(text) == 10:
            result = datetime.combine(date.fromisoformat(text), time.max if end_of_day else time.min)
        else:
            result = datetime.fromisoformat(text)
    else:
        raise ValueError(f"Invalid event date: {value!r}")

    if timezone:
        zone = ZoneInfo(timezone)
        if result.tzinfo is None:
            result = result.replace(tzinfo=zone)
        else:
            result = result.astimezone(zone)
    elif result.tzinfo is not None:
        result = result.astimezone(dt_timezone.utc)
    return result


def _resolve_now(now: Optional[datetime], timezone: Optional[str], reference: datetime) -> datetime:
    if now is None:
        if reference.tzinfo is not None:
            return datetime.now(reference.tzinfo)
        return datetime.now()
    if reference.tzinfo is not None and now.tzinfo is None:
        return now.replace(tzinfo=reference.tzinfo)
    if reference.tzinfo is None and now.tzinfo is not None:
        return now.astimezone(dt_timezone.utc).replace(tzinfo=None)
    return now


def _event_window(start, end, timezone: Optional[str]):
    start_dt = parse_event_datetime(start, timezone)
    end_dt = parse_event_datetime(end if end else start, timezone, end_of_day=True)
    # Naive and aware bounds are compared in UTC
    if (start_dt.tzinfo is None) != (end_dt.tzinfo is None):
        if start_dt.tzinfo is None:
            start_dt = start_dt.replace(tzinfo=dt_timezone.utc)
        else:
            end_dt = end_dt.replace(tzinfo=dt_timezone.utc)
    return start_dt, end_dt


def get_event_status(start, end, now: Optional[datetime] = None, timezone: Optional[str] = None) -> str:
    """Return 'upcoming' before start, 'ongoing' until end (inclusive), then 'past'."""
    start_dt, end_dt = _event_window(start, end, timezone)
    now = _resolve_now(now, timezone, start_dt)
    if now < start_dt:
        return UPCOMING
    if now <= end_dt:
        return ONGOING
    return PAST


def get_countdown(start, end, now: Optional[datetime] = None, timezone: Optional[str] = None) -> Dict:
    """
    Time left until the event starts (upcoming) or ends (ongoing).

    Past events count down to zero.
    """
    start_dt, end_dt = _event_window(start, end, timezone)
    now = _resolve_now(now, timezone, start_dt)
    status = get_event_status(start_dt, end_dt, now=now)
    target = start_dt if status == UPCOMING else end_dt

    remaining = max(0, int((target - now).total_seconds()))
    days, remainder = divmod(remaining, 24 * 60 * 60)
    hours, remainder = divmod(remainder, 60 * 60)
    minutes, seconds = divmod(remainder, 60)
    return {
        'status': status,
        'days': days,
        'hours': hours,
        'minutes': minutes,
        'seconds': seconds,
    }
