"""Date windows selecting which work logs belong to a computation."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone


def as_utc(moment: datetime) -> datetime:
    """Return an aware datetime; naive values are taken as UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


@dataclass(frozen=True)
class DateWindow:
    """A range of instants. ``None`` on either side means unbounded."""

    start: datetime | None
    end: datetime | None = None
    start_inclusive: bool = False
    end_inclusive: bool = True

    def contains(self, moment: datetime) -> bool:
        moment = as_utc(moment)
        if self.start is not None:
            start = as_utc(self.start)
            if moment < start or (moment == start and not self.start_inclusive):
                return False
        if self.end is not None:
            end = as_utc(self.end)
            if moment > end or (moment == end and not self.end_inclusive):
                return False
        return True


def unpaid_window(
    last_payroll_date: datetime | None,
    epoch: datetime,
    now: datetime | None = None,
) -> DateWindow:
    """Logs strictly after the last payout (or the epoch if never paid).

    With ``now`` the window is closed at that instant, so logs dated in
    the future stay unpaid until their date has passed.
    """
    start = last_payroll_date if last_payroll_date is not None else epoch
    return DateWindow(start=start, end=now, start_inclusive=False, end_inclusive=True)


def month_bounds(year: int, month: int) -> tuple[datetime, datetime]:
    """First and last instant (microsecond precision) of a calendar month, UTC."""
    if not 1 <= month <= 12:
        raise ValueError(f"month must be between 1 and 12, got {month}")
    first = datetime(year, month, 1, tzinfo=timezone.utc)
    if month == 12:
        following = datetime(year + 1, 1, 1, tzinfo=timezone.utc)
    else:
        following = datetime(year, month + 1, 1, tzinfo=timezone.utc)
    return first, following - timedelta(microseconds=1)


def calendar_month_window(year: int, month: int) -> DateWindow:
    """Closed window covering the whole calendar month."""
    first, last = month_bounds(year, month)
    return DateWindow(start=first, end=last, start_inclusive=True, end_inclusive=True)


def resolve_report_period(
    month: int | None, year: int | None, today: date
) -> tuple[int, int]:
    """Fill a missing month/year from ``today``."""
    return (month or today.month, year or today.year)
