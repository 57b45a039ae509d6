"""
Module: leave_kernel.models.leave_application
Responsibility: ORM persistence for leave applications.

Architecture position: Kernel > Models.  May import from db/base.py, the
    pure domain types and exceptions.py.

Invariants enforced:
    - status is one of the seven LeaveStatus values (CHECK constraint).
    - leave_type is one of the LeaveCategory values (CHECK constraint).
    - leave_days > 0 (CHECK constraint).
    - A terminal status is never changed through the ORM: the
      before_update listener raises TerminalStatusViolationError.  The
      workflow service writes with a conditional UPDATE keyed on the
      observed (non-terminal) status, so it cannot reach a terminal row
      either.

Failure modes:
    - IntegrityError on a status, leave_type or leave_days outside the
      constraints.
    - TerminalStatusViolationError on an ORM flush that changes the status
      of an Approved / Rejected / Acting Rejected / Cancelled row.
"""

from __future__ import annotations

from datetime import date, time
from decimal import Decimal
from uuid import UUID

from sqlalchemy import (
    CheckConstraint,
    Date,
    ForeignKey,
    Index,
    String,
    Text,
    Time,
    event,
)
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.orm.attributes import get_history

from leave_kernel.db.base import TimestampedBase, UUIDString
from leave_kernel.domain.leave import (
    INITIAL_LEAVE_STATUS,
    LeaveApplication,
    LeaveCategory,
    LeaveComments,
    LeaveStatus,
)
from leave_kernel.exceptions import TerminalStatusViolationError
from leave_kernel.logging_config import get_logger

logger = get_logger("models.leave_application")

_STATUSES = ", ".join(f"'{s.value}'" for s in LeaveStatus)
_CATEGORIES = ", ".join(f"'{c.value}'" for c in LeaveCategory)


class LeaveApplicationModel(TimestampedBase):
    """
    Persistent leave application.

    Contract:
        Participants (acting officer, recommender, approver,
        subject-in-charge) are bound at creation and never reassigned.
        Each comment column is written by exactly one workflow stage.

    Guarantees:
        - created_at / updated_at are server-assigned.
        - updated_by_id records the actor of the last transition.
    """

    __tablename__ = "leave_applications"

    __table_args__ = (
        CheckConstraint(
            f"status IN ({_STATUSES})",
            name="ck_leave_applications_valid_status",
        ),
        CheckConstraint(
            f"leave_type IN ({_CATEGORIES})",
            name="ck_leave_applications_valid_leave_type",
        ),
        CheckConstraint("leave_days > 0", name="ck_leave_applications_positive_days"),
        CheckConstraint(
            "resume_date >= start_date",
            name="ck_leave_applications_resume_after_start",
        ),
        Index("ix_leave_applications_requester", "requester_id", "created_at"),
        Index("ix_leave_applications_acting_status", "acting_officer_id", "status"),
        Index("ix_leave_applications_recommender_status", "recommender_id", "status"),
        Index("ix_leave_applications_approver_status", "approver_id", "status"),
        Index("ix_leave_applications_status_dates", "status", "start_date", "resume_date"),
    )

    requester_id: Mapped[UUID] = mapped_column(
        UUIDString(), ForeignKey("staff_members.id"), nullable=False,
    )
    requester_name: Mapped[str] = mapped_column(String(200), nullable=False)
    designation: Mapped[str] = mapped_column(String(100), nullable=False, default="N/A")
    division_id: Mapped[UUID | None] = mapped_column(UUIDString(), nullable=True)
    leave_type: Mapped[str] = mapped_column(String(30), nullable=False)
    status: Mapped[str] = mapped_column(
        String(40), nullable=False, default=INITIAL_LEAVE_STATUS.value,
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    resume_date: Mapped[date] = mapped_column(Date, nullable=False)
    start_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    resume_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    leave_days: Mapped[Decimal] = mapped_column(nullable=False)
    reason: Mapped[str] = mapped_column(Text, nullable=False)

    acting_officer_id: Mapped[UUID] = mapped_column(
        UUIDString(), ForeignKey("staff_members.id"), nullable=False,
    )
    recommender_id: Mapped[UUID] = mapped_column(
        UUIDString(), ForeignKey("staff_members.id"), nullable=False,
    )
    approver_id: Mapped[UUID] = mapped_column(
        UUIDString(), ForeignKey("staff_members.id"), nullable=False,
    )
    subject_in_charge_id: Mapped[UUID] = mapped_column(
        UUIDString(), ForeignKey("staff_members.id"), nullable=False,
    )

    acting_comment: Mapped[str | None] = mapped_column(Text, nullable=True)
    recommender_comment: Mapped[str | None] = mapped_column(Text, nullable=True)
    approver_comment: Mapped[str | None] = mapped_column(Text, nullable=True)

    updated_by_id: Mapped[UUID | None] = mapped_column(UUIDString(), nullable=True)

    def __repr__(self) -> str:
        return f"<LeaveApplication {self.id} {self.leave_type} status={self.status}>"

    def to_dto(self) -> LeaveApplication:
        """Convert ORM model to frozen domain DTO."""
        return LeaveApplication(
            id=self.id,
            requester_id=self.requester_id,
            requester_name=self.requester_name,
            designation=self.designation,
            division_id=self.division_id,
            leave_type=LeaveCategory(self.leave_type),
            status=LeaveStatus(self.status),
            start_date=self.start_date,
            resume_date=self.resume_date,
            leave_days=Decimal(self.leave_days),
            reason=self.reason,
            acting_officer_id=self.acting_officer_id,
            recommender_id=self.recommender_id,
            approver_id=self.approver_id,
            subject_in_charge_id=self.subject_in_charge_id,
            start_time=self.start_time,
            resume_time=self.resume_time,
            comments=LeaveComments(
                acting=self.acting_comment,
                recommender=self.recommender_comment,
                approver=self.approver_comment,
            ),
            created_at=self.created_at,
            updated_at=self.updated_at,
            updated_by_id=self.updated_by_id,
        )


# =============================================================================
# ORM-level terminal status protection
# =============================================================================


@event.listens_for(LeaveApplicationModel, "before_update")
def prevent_terminal_status_change(mapper, connection, target):
    """Block a status change away from a terminal status.

    Raises: TerminalStatusViolationError when the persisted status is
        terminal and the pending flush would change it.
    """
    history = get_history(target, "status")
    if not history.deleted:
        return

    old_status = LeaveStatus(history.deleted[0])
    if not old_status.is_terminal:
        return

    new_status = history.added[0] if history.added else target.status
    logger.error(
        "terminal_status_violation_blocked",
        extra={
            "application_id": str(target.id),
            "terminal_status": old_status.value,
            "attempted_status": str(new_status),
        },
    )
    raise TerminalStatusViolationError(
        str(target.id), old_status.value, str(new_status),
    )
