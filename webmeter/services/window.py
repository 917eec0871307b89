"""
Time window resolution for dashboard and charge requests.

Turns query-string dates (``YYYY-MM-DD``) and times of day (``HH:MM``)
into an absolute inclusive ``[start, end]`` pair plus the minute-of-day
span used by the demand series and TOU views. All parsing failures raise
:class:`QueryValidationError` so the HTTP layer can reject the request
before touching the Reading Store.

This is a pure module: "today" and "now" are passed in by the caller.

CHANGELOG:
- 2026-10-19: Initial creation
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, time

from webmeter import errors
from webmeter.errors import QueryValidationError

_TIME_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")
_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

DEFAULT_FROM = "00:00"
DEFAULT_CHARGE_TO = "23:59"


@dataclass(frozen=True)
class TimeWindow:
    """Resolved request window.

    Attributes:
        start: Inclusive absolute start.
        end: Inclusive absolute end.
        slave_ids: Meters to include; empty tuple means all meters.
    """

    start: datetime
    end: datetime
    slave_ids: tuple[int, ...] = ()

    @property
    def to_hour(self) -> int:
        return self.end.hour

    @property
    def from_total_minutes(self) -> int:
        """Minute of day of the window start."""
        return self.start.hour * 60 + self.start.minute

    @property
    def to_total_minutes(self) -> int:
        """Minute of day of the window end."""
        return self.end.hour * 60 + self.end.minute


def parse_time_of_day(value: str, name: str) -> time:
    """Parse an ``HH:MM`` time of day.

    Raises:
        QueryValidationError: If *value* is not a valid 24-hour ``HH:MM``.
    """
    match = _TIME_RE.match(value.strip()) if value else None
    if match is None:
        raise QueryValidationError(
            errors.INVALID_TIME,
            f"'{name}' must be a time of day formatted HH:MM (got '{value}')",
        )
    return time(int(match.group(1)), int(match.group(2)))


def parse_date(value: str, name: str) -> date:
    """Parse a ``YYYY-MM-DD`` calendar date.

    Raises:
        QueryValidationError: If *value* is not a valid calendar date.
    """
    if not value or not _DATE_RE.match(value.strip()):
        raise QueryValidationError(
            errors.INVALID_DATE,
            f"'{name}' must be a date formatted YYYY-MM-DD (got '{value}')",
        )
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        raise QueryValidationError(
            errors.INVALID_DATE,
            f"'{name}' is not a valid calendar date (got '{value}')",
        ) from None


def parse_slave_ids(values: Iterable[str] | str | None) -> tuple[int, ...]:
    """Parse slave ids from a CSV string or repeated query values.

    ``"3,1, 2"`` and ``["3", "1,2"]`` both yield ``(1, 2, 3)``. Blank
    entries are ignored; duplicates collapse.

    Raises:
        QueryValidationError: If any entry is not a positive integer.
    """
    if values is None:
        return ()
    if isinstance(values, str):
        values = [values]

    ids: set[int] = set()
    for value in values:
        for entry in value.split(","):
            entry = entry.strip()
            if not entry:
                continue
            if not (entry.isascii() and entry.isdigit()) or int(entry) < 1:
                raise QueryValidationError(
                    errors.INVALID_SLAVE_ID,
                    f"Slave ids must be positive integers (got '{entry}')",
                )
            ids.add(int(entry))
    return tuple(sorted(ids))


def resolve_day_window(
    *,
    now: datetime,
    day: str | None = None,
    from_time: str | None = None,
    to_time: str | None = None,
    slave_ids: Iterable[int] = (),
) -> TimeWindow:
    """Resolve a single-day dashboard window.

    Args:
        now: Current wall-clock time; supplies the default date and the
            default end of window.
        day: ``YYYY-MM-DD``; defaults to ``now``'s date.
        from_time: ``HH:MM`` start; defaults to ``00:00``.
        to_time: ``HH:MM`` end; defaults to ``now`` truncated to the minute.
        slave_ids: Meters to include; empty means all.

    Returns:
        TimeWindow: Inclusive window on the requested day.

    Raises:
        QueryValidationError: On malformed input or ``from > to``.
    """
    resolved_day = parse_date(day, "date") if day else now.date()
    start_tod = parse_time_of_day(from_time or DEFAULT_FROM, "from")
    if to_time:
        end_tod = parse_time_of_day(to_time, "to")
    else:
        end_tod = time(now.hour, now.minute)

    if start_tod > end_tod:
        raise QueryValidationError(
            errors.INVALID_RANGE,
            f"'from' ({start_tod:%H:%M}) must not be later than 'to' ({end_tod:%H:%M})",
        )

    return TimeWindow(
        start=datetime.combine(resolved_day, start_tod),
        end=datetime.combine(resolved_day, end_tod),
        slave_ids=tuple(sorted(set(slave_ids))),
    )


def resolve_range_window(
    *,
    date_from: str | None,
    date_to: str | None,
    time_from: str | None = None,
    time_to: str | None = None,
    slave_ids: Iterable[int] = (),
) -> TimeWindow:
    """Resolve a multi-day billing window.

    ``date_from`` and ``date_to`` are required. Times default to
    ``00:00`` and ``23:59``.

    Raises:
        QueryValidationError: If a date is missing or malformed, a time is
            malformed, or the resolved end precedes the start.
    """
    missing = [name for name, value in (("dateFrom", date_from), ("dateTo", date_to)) if not value]
    if missing:
        raise QueryValidationError(
            errors.MISSING_PARAMETER,
            f"Missing required parameter(s): {', '.join(missing)}",
        )

    start = datetime.combine(
        parse_date(date_from, "dateFrom"),
        parse_time_of_day(time_from or DEFAULT_FROM, "timeFrom"),
    )
    end = datetime.combine(
        parse_date(date_to, "dateTo"),
        parse_time_of_day(time_to or DEFAULT_CHARGE_TO, "timeTo"),
    )
    if start > end:
        raise QueryValidationError(
            errors.INVALID_RANGE,
            f"Window start ({start:%Y-%m-%d %H:%M}) is after its end ({end:%Y-%m-%d %H:%M})",
        )

    return TimeWindow(start=start, end=end, slave_ids=tuple(sorted(set(slave_ids))))
