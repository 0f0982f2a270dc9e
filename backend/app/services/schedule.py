"""Calendar arithmetic for recurring schedules."""

import calendar
import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import List, Optional

from app.config import settings
from app.models.recurring import Frequency

logger = logging.getLogger(__name__)

_FIXED_STEPS = {
    Frequency.daily: timedelta(days=1),
    Frequency.weekly: timedelta(days=7),
    Frequency.biweekly: timedelta(days=14),
}


def _add_months(from_date: date, months: int) -> date:
    """Shift by whole months, clamping the day to the target month's length."""
    month_index = from_date.month - 1 + months
    year = from_date.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(from_date.day, last_day))


def next_due_date(frequency: Frequency, from_date: date) -> date:
    """
    Calculate the occurrence that follows from_date.

    Monthly keeps the day of month and clamps to the end of shorter months
    (Jan 31 -> Feb 28). The clamped day becomes the new anchor, so the
    following month stays on the 28th. Yearly turns Feb 29 into Feb 28 in
    non-leap years.
    """
    frequency = Frequency(frequency)
    if frequency in _FIXED_STEPS:
        return from_date + _FIXED_STEPS[frequency]
    if frequency == Frequency.monthly:
        return _add_months(from_date, 1)
    return _add_months(from_date, 12)


def _first_candidate(frequency: Frequency, start_date: date, last_generated_date: Optional[date]) -> date:
    """
    First occurrence not generated yet.

    A start date moved past the generation progress restarts the schedule
    there; earlier periods are not backfilled.
    """
    if last_generated_date is None:
        return start_date
    return max(next_due_date(frequency, last_generated_date), start_date)


@dataclass
class DueDates:
    """Result of enumerating the occurrences that are due."""
    dates: List[date] = field(default_factory=list)
    truncated: bool = False

    def __bool__(self) -> bool:
        return bool(self.dates)

    def __len__(self) -> int:
        return len(self.dates)

    @property
    def last(self) -> Optional[date]:
        return self.dates[-1] if self.dates else None


def due_dates(
    frequency: Frequency,
    start_date: date,
    last_generated_date: Optional[date],
    end_date: Optional[date],
    as_of: date,
    limit: Optional[int] = None,
) -> DueDates:
    """
    Enumerate every occurrence due on or before as_of that was not generated yet.

    Catches up on all missed periods, not only the latest one. end_date is
    inclusive. At most `limit` dates are returned per call; when more remain
    the result is flagged as truncated and a later run picks up the rest.
    """
    if limit is None:
        limit = settings.max_catch_up_occurrences

    candidate = _first_candidate(frequency, start_date, last_generated_date)

    limit_date = end_date if end_date is not None and end_date < as_of else as_of

    result = DueDates()
    while candidate <= limit_date:
        if len(result.dates) >= limit:
            result.truncated = True
            logger.warning(
                "Scheduling anomaly: catch-up for %s schedule starting %s capped at %d occurrences",
                Frequency(frequency).value, start_date.isoformat(), limit,
            )
            break
        result.dates.append(candidate)
        candidate = next_due_date(frequency, candidate)

    return result


@dataclass(frozen=True)
class ScheduleState:
    """
    Generation progress of a recurring definition.

    A definition is either never generated (last_generated is None) or
    generated through a date. next_due is derived, never stored independently.
    """
    frequency: Frequency
    start_date: date
    end_date: Optional[date] = None
    last_generated: Optional[date] = None

    @classmethod
    def of(cls, recurring) -> "ScheduleState":
        return cls(
            frequency=Frequency(recurring.frequency),
            start_date=recurring.start_date,
            end_date=recurring.end_date,
            last_generated=recurring.last_generated_date,
        )

    @property
    def never_generated(self) -> bool:
        return self.last_generated is None

    @property
    def next_due(self) -> date:
        return _first_candidate(self.frequency, self.start_date, self.last_generated)

    @property
    def exhausted(self) -> bool:
        """True once the next occurrence falls after the inclusive end date."""
        return self.end_date is not None and self.next_due > self.end_date

    def due_dates(self, as_of: date, limit: Optional[int] = None) -> DueDates:
        return due_dates(
            self.frequency,
            self.start_date,
            self.last_generated,
            self.end_date,
            as_of,
            limit=limit,
        )

    def generated_through(self, last_date: date) -> "ScheduleState":
        return ScheduleState(
            frequency=self.frequency,
            start_date=self.start_date,
            end_date=self.end_date,
            last_generated=last_date,
        )
