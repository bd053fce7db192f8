from __future__ import annotations

import re
from datetime import date, datetime, timedelta

DEFAULT_LOOKBACK_DAYS = 7
MAX_RANGE_DAYS = 90
MAX_HISTORY_DAYS = 365

WEEKDAY_NAMES: tuple[str, ...] = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

_FALLBACK_FORMATS = ("%Y/%m/%d", "%d.%m.%Y", "%Y-%m-%d %H:%M:%S", "%Y-%m-%d %H:%M:%S.%f")
_ALPHANUMERIC = re.compile(r"[A-Za-z0-9]")


def coerce_datetime(value: datetime | date | str) -> datetime:
    if isinstance(value, datetime):
        return value

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)

    if isinstance(value, str):
        candidate = value.strip().replace(" ", "T", 1)
        try:
            return datetime.fromisoformat(candidate)
        except ValueError:
            for fmt in _FALLBACK_FORMATS:
                try:
                    return datetime.strptime(value.strip(), fmt)
                except ValueError:
                    continue

    raise ValueError(f"Unsupported datetime value: {value!r}")


def parse_date(value: datetime | date | str | None) -> date | None:
    """Return the calendar date for ``value`` or ``None`` when it cannot be read."""

    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    try:
        return coerce_datetime(value).date()
    except (TypeError, ValueError):
        return None


def normalize_date_range(
    start_input: datetime | date | str | None,
    end_input: datetime | date | str | None,
    *,
    today: date | None = None,
) -> tuple[date, date]:
    """Clamp a user supplied date pair into a bounded reporting window.

    Empty or unreadable values fall back to the last week. The steps run in a
    fixed order: the 90 day window is measured from the already clamped end.
    """

    today = today or date.today()
    if isinstance(today, datetime):
        today = today.date()

    start = parse_date(start_input) or today - timedelta(days=DEFAULT_LOOKBACK_DAYS)
    end = parse_date(end_input) or today

    if start > end:
        start, end = end, start

    if end > today:
        end = today

    if start > today:
        start = today - timedelta(days=1)

    oldest = today - timedelta(days=MAX_HISTORY_DAYS)
    if end < oldest:
        end = oldest

    if (end - start).days > MAX_RANGE_DAYS:
        start = end - timedelta(days=MAX_RANGE_DAYS)

    if start < oldest:
        start = oldest

    return start, end


def weekday_label(value: date) -> str:
    return WEEKDAY_NAMES[value.weekday()]


def strip_alphanumeric(value: str | None) -> str:
    return _ALPHANUMERIC.sub("", value or "")
