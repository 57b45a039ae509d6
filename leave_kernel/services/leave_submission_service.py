"""
leave_kernel.services.leave_submission_service -- New leave applications.

Responsibility:
    Validates a requester's ``LeaveRequest`` and persists it as a new
    application in ``Pending Acting Acceptance``: schedule computation,
    participant eligibility and subject-in-charge assignment.

Architecture position:
    Kernel > Services.  May import from domain/, models/, db/.

Invariants enforced:
    - The stored schedule comes from ``compute_leave_schedule``; a
      caller-supplied resume date must pass ``validate_leave_dates``.
    - Acting officer, recommender and approver are members of the lists
      ``resolve_participants`` offers for this requester.
    - Every application has a subject-in-charge.

Failure modes:
    - StaffMemberNotFoundError if the requester does not exist.
    - InvalidLeaveRequestError for an empty reason.
    - InvalidLeaveDatesError for a bad day count or resume date.
    - MissingParticipantError when no subject-in-charge can be found.
    - IneligibleParticipantError for a participant outside the offered
      lists.
"""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from leave_kernel.domain.leave import (
    INITIAL_LEAVE_STATUS,
    LeaveApplication,
    LeaveCategory,
    LeaveRequest,
)
from leave_kernel.domain.leave_days import compute_leave_schedule, validate_leave_dates
from leave_kernel.domain.participants import (
    ParticipantCandidates,
    RoleNames,
    resolve_participants,
    subject_officer_role,
)
from leave_kernel.exceptions import (
    IneligibleParticipantError,
    InvalidLeaveRequestError,
    MissingParticipantError,
    StaffMemberNotFoundError,
)
from leave_kernel.logging_config import get_logger
from leave_kernel.models.leave_application import LeaveApplicationModel
from leave_kernel.models.staff import StaffMemberModel
from leave_kernel.services.base import BaseService

logger = get_logger("services.leave_submission")


class LeaveSubmissionService(BaseService[LeaveApplicationModel]):
    """Creates leave applications."""

    def __init__(self, session: Session, role_names: RoleNames | None = None):
        super().__init__(session)
        self._role_names = role_names or RoleNames()

    def candidates_for(self, requester_id: UUID) -> ParticipantCandidates:
        """The participant lists offered to ``requester_id``."""
        requester = self._load_requester(requester_id)
        return self._resolve(requester)

    def submit(self, requester_id: UUID, request: LeaveRequest) -> LeaveApplication:
        requester = self._load_requester(requester_id)

        if not request.reason or not request.reason.strip():
            raise InvalidLeaveRequestError("reason", "must not be empty")

        try:
            category = LeaveCategory(request.leave_type)
        except ValueError:
            raise InvalidLeaveRequestError(
                "leave_type", f"unknown leave category {request.leave_type!r}",
            ) from None

        schedule = compute_leave_schedule(category, request.start_date, request.leave_days)
        resume_date = schedule.resume_date
        if request.resume_date is not None:
            validate_leave_dates(
                category, request.start_date, request.resume_date, schedule.leave_days,
            )
            resume_date = request.resume_date

        candidates = self._resolve(requester)
        if candidates.subject_in_charge is None:
            role = subject_officer_role(requester.to_entry(), self._role_names)
            raise MissingParticipantError(
                "subject-in-charge", f"no staff member holds the role '{role}'",
            )
        if not candidates.is_acting_candidate(request.acting_officer_id):
            raise IneligibleParticipantError("acting officer", str(request.acting_officer_id))
        if not candidates.is_recommender_candidate(request.recommender_id):
            raise IneligibleParticipantError("recommender", str(request.recommender_id))
        if not candidates.is_approver_candidate(request.approver_id):
            raise IneligibleParticipantError("approver", str(request.approver_id))

        model = LeaveApplicationModel(
            requester_id=requester.id,
            requester_name=requester.name,
            designation=requester.designation_grade or "N/A",
            division_id=requester.division_id,
            leave_type=category.value,
            status=INITIAL_LEAVE_STATUS.value,
            start_date=request.start_date,
            resume_date=resume_date,
            start_time=schedule.start_time,
            resume_time=schedule.resume_time,
            leave_days=schedule.leave_days,
            reason=request.reason.strip(),
            acting_officer_id=request.acting_officer_id,
            recommender_id=request.recommender_id,
            approver_id=request.approver_id,
            subject_in_charge_id=candidates.subject_in_charge.staff_id,
        )
        self.session.add(model)
        self.session.flush()
        self.session.refresh(model)

        logger.info(
            "leave_application_submitted",
            extra={
                "application_id": str(model.id),
                "requester_id": str(requester.id),
                "leave_type": category.value,
                "leave_days": schedule.leave_days,
                "start_date": request.start_date,
                "resume_date": resume_date,
                "subject_in_charge_id": str(model.subject_in_charge_id),
            },
        )
        return model.to_dto()

    def _load_requester(self, requester_id: UUID) -> StaffMemberModel:
        requester = self.session.get(StaffMemberModel, requester_id)
        if requester is None:
            raise StaffMemberNotFoundError(str(requester_id))
        return requester

    def _resolve(self, requester: StaffMemberModel) -> ParticipantCandidates:
        directory = self.session.execute(
            select(StaffMemberModel).order_by(StaffMemberModel.name, StaffMemberModel.id)
        ).scalars().all()
        return resolve_participants(
            requester.to_entry(),
            [m.to_entry() for m in directory],
            self._role_names,
        )
