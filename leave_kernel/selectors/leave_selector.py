"""
Module: leave_kernel.selectors.leave_selector
Responsibility: Participant queues and lookups over leave applications.
Architecture position: Kernel > Selectors.

Invariants enforced:
    - Queues that need a permission return an empty list (not an error)
      when the actor lacks it.
    - Results are ordered newest first (created_at DESC, id).

Failure modes:
    - LeaveApplicationNotFoundError from ``get``.
"""

from __future__ import annotations

from datetime import date
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from leave_kernel.domain.clock import Clock, SystemClock
from leave_kernel.domain.leave import LeaveApplication, LeaveStatus
from leave_kernel.domain.permissions import PermissionAction, Resource
from leave_kernel.domain.workflow import DEFAULT_HEAD_OF_DEPARTMENT_ROLE, ActorContext
from leave_kernel.exceptions import LeaveApplicationNotFoundError
from leave_kernel.models.leave_application import LeaveApplicationModel
from leave_kernel.selectors.base import BaseSelector

_M = LeaveApplicationModel


class LeaveSelector(BaseSelector[LeaveApplicationModel]):
    """
    Read access to leave applications.

    Contract:
        Every method returns frozen ``LeaveApplication`` DTOs.
    """

    def __init__(
        self,
        session: Session,
        hod_role_name: str = DEFAULT_HEAD_OF_DEPARTMENT_ROLE,
        clock: Clock | None = None,
    ):
        super().__init__(session)
        self._hod_role_name = hod_role_name
        self._clock = clock or SystemClock()

    def get(self, application_id: UUID) -> LeaveApplication:
        model = self.session.get(LeaveApplicationModel, application_id)
        if model is None:
            raise LeaveApplicationNotFoundError(str(application_id))
        return model.to_dto()

    def find(self, application_id: UUID) -> LeaveApplication | None:
        model = self.session.get(LeaveApplicationModel, application_id)
        return model.to_dto() if model is not None else None

    def my_applications(self, requester_id: UUID) -> list[LeaveApplication]:
        return self._query(_M.requester_id == requester_id)

    def acting_duties(self, actor_id: UUID) -> list[LeaveApplication]:
        """Applications waiting for ``actor_id`` to accept or reject acting."""
        return self._query(
            _M.acting_officer_id == actor_id,
            _M.status == LeaveStatus.PENDING_ACTING_ACCEPTANCE.value,
        )

    def recommendations(self, actor: ActorContext) -> list[LeaveApplication]:
        """Pending (and acting-rejected) applications assigned to the recommender."""
        if not actor.permissions.allows(Resource.LEAVE, PermissionAction.RECOMMEND):
            return []
        return self._query(
            _M.recommender_id == actor.actor_id,
            _M.status.in_([LeaveStatus.PENDING.value, LeaveStatus.ACTING_REJECTED.value]),
        )

    def approvals(self, actor: ActorContext) -> list[LeaveApplication]:
        """Recommended applications the actor may decide.

        The Head of Department sees every recommended application.
        """
        if not actor.permissions.allows(Resource.LEAVE, PermissionAction.APPROVE):
            return []
        criteria = [_M.status == LeaveStatus.RECOMMENDED.value]
        if not actor.has_role(self._hod_role_name):
            criteria.append(_M.approver_id == actor.actor_id)
        return self._query(*criteria)

    def list_by(
        self,
        *,
        requester_id: UUID | None = None,
        acting_officer_id: UUID | None = None,
        recommender_id: UUID | None = None,
        approver_id: UUID | None = None,
        status: LeaveStatus | str | None = None,
    ) -> list[LeaveApplication]:
        """Query by any combination of participant and status."""
        criteria = []
        if requester_id is not None:
            criteria.append(_M.requester_id == requester_id)
        if acting_officer_id is not None:
            criteria.append(_M.acting_officer_id == acting_officer_id)
        if recommender_id is not None:
            criteria.append(_M.recommender_id == recommender_id)
        if approver_id is not None:
            criteria.append(_M.approver_id == approver_id)
        if status is not None:
            criteria.append(_M.status == LeaveStatus(status).value)
        return self._query(*criteria)

    def staff_on_leave(self, on_date: date | None = None) -> list[LeaveApplication]:
        """Approved applications whose [start_date, resume_date] covers ``on_date``.

        Defaults to today on the selector's clock.
        """
        if on_date is None:
            on_date = self._clock.today()
        return self._query(
            _M.status == LeaveStatus.APPROVED.value,
            _M.start_date <= on_date,
            _M.resume_date >= on_date,
        )

    def _query(self, *criteria) -> list[LeaveApplication]:
        models = self.session.execute(
            select(LeaveApplicationModel)
            .where(*criteria)
            .order_by(_M.created_at.desc(), _M.id)
        ).scalars().all()
        return [m.to_dto() for m in models]
