"""List-view helpers for accounts, tutor applications and bookings.

Stored documents are plain dicts as returned by the API (or read from
the store); nothing here talks to the network.
"""

from collections.abc import Iterable
from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

from admin_backend.core import config
from admin_backend.models.booking import BookingStatus

ALL = 'all'
DEFAULT_RANGE_START = datetime(2000, 1, 1)
DEFAULT_RANGE_END = datetime(2100, 1, 1)


def normalize_status(raw_status) -> str:
    """Fold a stored booking status into ``active``, ``completed`` or ``cancelled``."""
    value = str(raw_status or '').strip().lower()
    if 'cancel' in value:
        return BookingStatus.CANCELLED.value
    if value == BookingStatus.COMPLETED.value:
        return BookingStatus.COMPLETED.value
    return BookingStatus.ACTIVE.value


def reporting_timezone() -> ZoneInfo:
    return ZoneInfo(config.REPORTING_TIMEZONE)


def to_datetime(value) -> datetime | None:
    """Best-effort conversion of a stored timestamp to a naive local datetime.

    Timezone-aware values are shifted into ``REPORTING_TIMEZONE`` first;
    naive values are taken as already local.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    elif isinstance(value, (int, float)):
        parsed = datetime.fromtimestamp(value, tz=timezone.utc)
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    elif isinstance(value, dict):
        seconds = value.get('seconds', value.get('_seconds'))
        if not isinstance(seconds, (int, float)) or isinstance(seconds, bool):
            return None
        nanoseconds = value.get('nanoseconds', value.get('_nanoseconds')) or 0
        parsed = datetime.fromtimestamp(seconds + nanoseconds / 1e9, tz=timezone.utc)
    else:
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(reporting_timezone()).replace(tzinfo=None)
    return parsed


def _range_bound(value, default: datetime) -> datetime:
    if value is None or value == '':
        return default
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    return datetime.combine(date.fromisoformat(str(value).strip()), time.min)


def filter_bookings_by_date(bookings: Iterable[dict], date_from=None, date_to=None) -> list[dict]:
    """Keep bookings whose ``startAt`` falls between two calendar days, inclusive.

    ``date_from``/``date_to`` may be dates, datetimes or ``YYYY-MM-DD``
    strings. ``date_to`` covers that whole day. With neither bound set the
    bookings are returned unfiltered.
    """
    bookings = list(bookings)
    if not date_from and not date_to:
        return bookings

    range_start = _range_bound(date_from, DEFAULT_RANGE_START)
    range_end = _range_bound(date_to, DEFAULT_RANGE_END)
    if date_to:
        range_end = datetime.combine(range_end.date(), time.min) + timedelta(days=1) - timedelta(microseconds=1)

    filtered = []
    for booking in bookings:
        start_at = to_datetime(booking.get('startAt'))
        if start_at is not None and range_start <= start_at <= range_end:
            filtered.append(booking)
    return filtered


def filter_bookings_by_status(bookings: Iterable[dict], status: str | None) -> list[dict]:
    if not status or status == ALL:
        return list(bookings)
    return [booking for booking in bookings if normalize_status(booking.get('status')) == status]


def filter_accounts_by_role(accounts: Iterable[dict], role: str | None) -> list[dict]:
    if not role or role == ALL:
        return list(accounts)
    return [account for account in accounts if account.get('role') == role]


def filter_applications_by_status(applications: Iterable[dict], status: str | None) -> list[dict]:
    if not status or status == ALL:
        return list(applications)
    return [application for application in applications if application.get('status') == status]


def with_normalized_status(bookings: Iterable[dict]) -> list[dict]:
    return [{**booking, 'status': normalize_status(booking.get('status'))} for booking in bookings]


def booking_end_time(booking: dict) -> datetime | None:
    start_at = to_datetime(booking.get('startAt'))
    hours = booking.get('hours')
    if start_at is None or not hours or not isinstance(hours, (int, float)) or isinstance(hours, bool):
        return None
    return start_at + timedelta(hours=hours)
