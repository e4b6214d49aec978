"""Deadline value type and calendar arithmetic for recurring tasks.

A deadline is stored as the exact string the user typed. Three cases are
kept apart:

- the sentinel "No deadline" (nothing was entered),
- a valid YYYY-MM-DD calendar date,
- anything else (kept verbatim, never overdue, sorted after real dates).
"""

import calendar
import re
from dataclasses import dataclass
from datetime import date, timedelta

from tickoff.errors import ValidationError

NO_DEADLINE_TEXT = "No deadline"
DATE_FORMAT = "%Y-%m-%d"

_ISO_DATE_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")

# Sort buckets: real dates first, then garbage, then "No deadline".
_BUCKET_DATE = 0
_BUCKET_INVALID = 1
_BUCKET_UNSET = 2


def _parse_iso(value: str) -> date | None:
    """Return the date for a strict YYYY-MM-DD string, or None."""
    match = _ISO_DATE_RE.match(value.strip())
    if match is None:
        return None
    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def parse_date(value: str) -> date:
    """Parse a user-supplied YYYY-MM-DD date.

    Raises:
        ValidationError: If the value is not a real calendar date.
    """
    parsed = _parse_iso(value or "")
    if parsed is None:
        raise ValidationError(f"Invalid date '{value}', expected YYYY-MM-DD.")
    return parsed


def add_months(day: date, months: int) -> date:
    """Add calendar months, clamping to the last day of the target month.

    >>> add_months(date(2024, 1, 31), 1)
    datetime.date(2024, 2, 29)
    """
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


REPEAT_STEPS = {
    "daily": lambda d: d + timedelta(days=1),
    "weekly": lambda d: d + timedelta(days=7),
    "monthly": lambda d: add_months(d, 1),
}


@dataclass(frozen=True)
class Deadline:
    """A task deadline as entered by the user."""

    raw: str = NO_DEADLINE_TEXT

    @classmethod
    def parse(cls, value: str | None) -> "Deadline":
        """Build a deadline from raw input; blank input means no deadline."""
        if value is None or not value.strip():
            return NO_DEADLINE
        return cls(value.strip())

    @classmethod
    def from_date(cls, day: date) -> "Deadline":
        return cls(day.strftime(DATE_FORMAT))

    @property
    def is_set(self) -> bool:
        return self.raw != NO_DEADLINE_TEXT

    @property
    def as_date(self) -> date | None:
        """The calendar date, or None for the sentinel or an unparseable value."""
        if not self.is_set:
            return None
        return _parse_iso(self.raw)

    @property
    def is_valid(self) -> bool:
        return self.as_date is not None

    def is_overdue(self, today: date) -> bool:
        """True once the deadline day has started, i.e. the date is today or earlier."""
        parsed = self.as_date
        return parsed is not None and parsed <= today

    def is_on_or_before(self, day: date) -> bool:
        parsed = self.as_date
        return parsed is not None and parsed <= day

    def sort_key(self) -> tuple[int, date]:
        """Ordering key: valid dates ascending, then invalid, then unset."""
        parsed = self.as_date
        if parsed is not None:
            return (_BUCKET_DATE, parsed)
        if self.is_set:
            return (_BUCKET_INVALID, date.min)
        return (_BUCKET_UNSET, date.min)

    def shifted(self, repeat: str | None) -> "Deadline | None":
        """Return the next occurrence for a repeat kind.

        None when the deadline has no valid date or the kind is unknown.
        """
        parsed = self.as_date
        step = REPEAT_STEPS.get((repeat or "").strip().lower())
        if parsed is None or step is None:
            return None
        return Deadline.from_date(step(parsed))

    def __str__(self) -> str:
        return self.raw


NO_DEADLINE = Deadline(NO_DEADLINE_TEXT)
