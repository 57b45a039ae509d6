"""
Leave-day and resume-date computation.

Responsibility:
    Turns (category, start date, requested days) into the day count,
    clock times and resume date recorded on an application.

Architecture position:
    Kernel > Domain -- pure functions, ZERO I/O, deterministic and
    idempotent.

Rules:
    * Half-day categories force 0.5 days and fixed clock slots.  Morning
      leave resumes the same day; afternoon and midday leave resume on the
      next working day.
    * Full-day categories advance floor(days) business days from the first
      non-weekend start, then step over any trailing weekend.
    * Only Saturday and Sunday are non-working days; public holidays are
      not modelled.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time, timedelta
from decimal import Decimal, InvalidOperation

from leave_kernel.domain.leave import LeaveCategory
from leave_kernel.exceptions import InvalidLeaveDatesError

HALF_DAY = Decimal("0.5")

_SATURDAY = 5
_SUNDAY = 6


@dataclass(frozen=True)
class HalfDaySlot:
    start_time: time
    resume_time: time
    resumes_next_working_day: bool


HALF_DAY_SLOTS: dict[LeaveCategory, HalfDaySlot] = {
    LeaveCategory.MORNING_LEAVE: HalfDaySlot(time(8, 30), time(12, 30), False),
    LeaveCategory.AFTERNOON_LEAVE: HalfDaySlot(time(12, 30), time(16, 30), True),
    LeaveCategory.MIDDAY_LEAVE: HalfDaySlot(time(10, 30), time(14, 30), True),
}


@dataclass(frozen=True)
class LeaveSchedule:
    """Computed day count, optional clock slot and resume date."""

    leave_days: Decimal
    resume_date: date
    start_time: time | None = None
    resume_time: time | None = None


def is_weekend(day: date) -> bool:
    return day.weekday() in (_SATURDAY, _SUNDAY)


def _skip_weekend(day: date) -> date:
    while is_weekend(day):
        day += timedelta(days=1)
    return day


def next_working_day(day: date) -> date:
    """The calendar day after ``day``, moved past a weekend."""
    return _skip_weekend(day + timedelta(days=1))


def add_business_days(start: date, days: Decimal | int | float) -> date:
    """Advance ``floor(days)`` business days from ``start``.

    A weekend ``start`` is first moved to the following Monday.  The result
    is never a weekend.  Non-positive ``days`` return ``start`` unchanged.
    """
    days = Decimal(str(days))
    if days <= 0:
        return start

    current = _skip_weekend(start)
    remaining = int(days)  # floor for positive values
    while remaining > 0:
        current += timedelta(days=1)
        if not is_weekend(current):
            remaining -= 1

    return _skip_weekend(current)


def normalize_leave_days(value: Decimal | int | float | str) -> Decimal:
    """Coerce ``value`` to Decimal and check it is a positive multiple of 0.5."""
    try:
        days = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise InvalidLeaveDatesError(f"leave days {value!r} is not a number") from None
    if not days.is_finite() or days <= 0:
        raise InvalidLeaveDatesError(f"leave days must be positive, got {value}")
    if (days / HALF_DAY) % 1 != 0:
        raise InvalidLeaveDatesError(f"leave days must be a multiple of 0.5, got {value}")
    return days.quantize(HALF_DAY)


def compute_leave_schedule(
    category: LeaveCategory | str,
    start_date: date,
    leave_days: Decimal | int | float | str | None = None,
) -> LeaveSchedule:
    """Compute the schedule for a leave request.

    ``leave_days`` is ignored for half-day categories (always 0.5) and
    required for full-day categories.

    Raises:
        InvalidLeaveDatesError: unknown category, or a missing / invalid
            day count for a full-day category.
    """
    try:
        category = LeaveCategory(category)
    except ValueError:
        raise InvalidLeaveDatesError(f"unknown leave category {category!r}") from None

    slot = HALF_DAY_SLOTS.get(category)
    if slot is not None:
        resume = next_working_day(start_date) if slot.resumes_next_working_day else start_date
        return LeaveSchedule(
            leave_days=HALF_DAY,
            resume_date=resume,
            start_time=slot.start_time,
            resume_time=slot.resume_time,
        )

    if leave_days is None:
        raise InvalidLeaveDatesError(f"'{category.value}' leave requires a day count")
    days = normalize_leave_days(leave_days)
    return LeaveSchedule(leave_days=days, resume_date=add_business_days(start_date, days))


def validate_leave_dates(
    category: LeaveCategory,
    start_date: date,
    resume_date: date,
    leave_days: Decimal,
) -> None:
    """Check the date invariants of a (possibly hand-edited) schedule.

    Raises:
        InvalidLeaveDatesError: resume before start, or a full-day count of
            one or more days that does not resume strictly after start.
    """
    if resume_date < start_date:
        raise InvalidLeaveDatesError("resume date precedes start date")
    if leave_days >= 1 and not resume_date > start_date:
        raise InvalidLeaveDatesError(
            "resume date must be after start date for full-day leaves"
        )
    if category.is_half_day and leave_days != HALF_DAY:
        raise InvalidLeaveDatesError(f"'{category.value}' is always half a day")
