"""
Leave domain types (``leave_kernel.domain.leave``).

Responsibility
--------------
Pure value objects for leave applications: the status, action and
category enumerations, the per-stage comment slots, and the frozen
``LeaveApplication`` snapshot handed out by selectors and services.

Architecture position
---------------------
**Kernel domain layer** -- pure value objects.  ZERO I/O.  No imports
from ``db/``, ``models/``, ``services/`` or ``selectors/``.

Invariants enforced
-------------------
* ``LeaveStatus`` is the closed set of seven states; nothing else is
  representable.
* ``TERMINAL_LEAVE_STATUSES`` lists the states that are never left.
* ``LeaveCategory.is_half_day`` is the single source of truth for the
  half-day / full-day split.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from uuid import UUID


class LeaveStatus(str, Enum):
    """Leave application lifecycle states."""

    PENDING_ACTING_ACCEPTANCE = "Pending Acting Acceptance"
    ACTING_REJECTED = "Acting Rejected"
    PENDING = "Pending"
    RECOMMENDED = "Recommended"
    APPROVED = "Approved"
    REJECTED = "Rejected"
    CANCELLED = "Cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_LEAVE_STATUSES


INITIAL_LEAVE_STATUS = LeaveStatus.PENDING_ACTING_ACCEPTANCE

TERMINAL_LEAVE_STATUSES: frozenset[LeaveStatus] = frozenset({
    LeaveStatus.APPROVED,
    LeaveStatus.REJECTED,
    LeaveStatus.ACTING_REJECTED,
    LeaveStatus.CANCELLED,
})


class LeaveAction(str, Enum):
    """Actions a participant can take on an application."""

    ACCEPT_ACTING = "Accept Acting"
    REJECT_ACTING = "Reject Acting"
    RECOMMEND = "Recommend"
    APPROVE = "Approve"
    REJECT = "Reject"


class LeaveCategory(str, Enum):
    """Leave categories offered on the application form."""

    CASUAL = "Casual"
    VOCATION = "Vocation"
    SHORT_LEAVE = "Short Leave"
    MORNING_LEAVE = "Morning Leave"
    AFTERNOON_LEAVE = "Afternoon Leave"
    MIDDAY_LEAVE = "Midday Leave"

    @property
    def is_half_day(self) -> bool:
        return self in HALF_DAY_CATEGORIES


HALF_DAY_CATEGORIES: frozenset[LeaveCategory] = frozenset({
    LeaveCategory.MORNING_LEAVE,
    LeaveCategory.AFTERNOON_LEAVE,
    LeaveCategory.MIDDAY_LEAVE,
})

FULL_DAY_CATEGORIES: frozenset[LeaveCategory] = frozenset({
    LeaveCategory.CASUAL,
    LeaveCategory.VOCATION,
    LeaveCategory.SHORT_LEAVE,
})


class StaffType(str, Enum):
    """Staff classification used to pick the subject-in-charge."""

    OFFICE = "Office"
    FIELD = "Field"


class CommentSlot(str, Enum):
    """The three per-stage comment slots on an application."""

    ACTING = "acting"
    RECOMMENDER = "recommender"
    APPROVER = "approver"


@dataclass(frozen=True)
class LeaveComments:
    """Per-stage comments.  Each slot is written by exactly one stage."""

    acting: str | None = None
    recommender: str | None = None
    approver: str | None = None

    def get(self, slot: CommentSlot) -> str | None:
        return getattr(self, slot.value)


@dataclass(frozen=True)
class LeaveRequest:
    """What a requester fills in on the application form.

    ``leave_days`` is ignored for half-day categories.  ``resume_date`` is
    optional; when given it must pass ``validate_leave_dates``.
    """

    leave_type: LeaveCategory
    start_date: date
    reason: str
    acting_officer_id: UUID
    recommender_id: UUID
    approver_id: UUID
    leave_days: Decimal | None = None
    resume_date: date | None = None


@dataclass(frozen=True)
class LeaveApplication:
    """Immutable snapshot of a leave application."""

    id: UUID
    requester_id: UUID
    requester_name: str
    designation: str
    division_id: UUID | None
    leave_type: LeaveCategory
    status: LeaveStatus
    start_date: date
    resume_date: date
    leave_days: Decimal
    reason: str
    acting_officer_id: UUID
    recommender_id: UUID
    approver_id: UUID
    subject_in_charge_id: UUID
    start_time: time | None = None
    resume_time: time | None = None
    comments: LeaveComments = field(default_factory=LeaveComments)
    created_at: datetime | None = None
    updated_at: datetime | None = None
    updated_by_id: UUID | None = None

    def covers(self, day: date) -> bool:
        """True when ``day`` falls within [start_date, resume_date]."""
        return self.start_date <= day <= self.resume_date
