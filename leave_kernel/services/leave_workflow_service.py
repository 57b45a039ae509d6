"""
leave_kernel.services.leave_workflow_service -- Leave status transitions.

Responsibility:
    Applies one workflow action (or a requester cancellation) to one leave
    application: locked read, actor resolution, pure planning via
    ``plan_transition``, and a conditional write of exactly the columns the
    planned stage update names.

Architecture position:
    Kernel > Services.  May import from domain/, models/, db/.

Invariants enforced:
    - Check order: not found -> unknown action / invalid (status, action)
      -> unauthorized actor -> storage conflict.
    - One document mutation per successful call, zero on failure.
    - The write is ``UPDATE ... WHERE id = :id AND status = :observed``;
      a matched row count other than one is a StorageConflictError.
    - updated_at is assigned by the database (``now()``).
    - A transition writes status, one comment column and updated_by_id.
      Nothing else.

Failure modes:
    - LeaveApplicationNotFoundError if application_id does not exist.
    - UnknownActionError / InvalidTransitionError if the action is not
      valid from the current status.
    - UnauthorizedActorError if the actor is neither the assignee nor an
      allowed escalation role.
    - StorageConflictError if the record left the observed status between
      read and write.
"""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from leave_kernel.domain.leave import LeaveAction, LeaveApplication, LeaveStatus
from leave_kernel.domain.workflow import (
    DEFAULT_HEAD_OF_DEPARTMENT_ROLE,
    LEAVE_WORKFLOW,
    LeaveCommand,
    PlannedTransition,
    Workflow,
    build_command,
    plan_transition,
)
from leave_kernel.exceptions import (
    InvalidTransitionError,
    LeaveApplicationNotFoundError,
    StorageConflictError,
    TransitionError,
    UnauthorizedActorError,
    UnknownActionError,
)
from leave_kernel.logging_config import get_logger
from leave_kernel.models.leave_application import LeaveApplicationModel
from leave_kernel.services.base import BaseService
from leave_kernel.services.role_resolver import StaffRoleResolver

logger = get_logger("services.leave_workflow")

CANCEL_ACTION = "Cancel"


class LeaveWorkflowService(BaseService[LeaveApplicationModel]):
    """
    Leave status transitions.

    Contract:
        Runs inside the caller's transaction.  Flushes, never commits.

    Guarantees:
        - The actor's role is read inside the same transaction as the
          application, on every call.
        - On any raised error the application row is untouched.
    """

    def __init__(
        self,
        session: Session,
        role_resolver: StaffRoleResolver | None = None,
        hod_role_name: str = DEFAULT_HEAD_OF_DEPARTMENT_ROLE,
        workflow: Workflow = LEAVE_WORKFLOW,
    ):
        super().__init__(session)
        self._resolver = role_resolver or StaffRoleResolver(session)
        self._hod_role_name = hod_role_name
        self._workflow = workflow

    def apply_action(
        self,
        application_id: UUID,
        command: LeaveCommand | LeaveAction | str,
        actor_id: UUID,
        comment: str | None = None,
    ) -> LeaveApplication:
        """
        Apply one workflow action.

        ``command`` is either a command variant (its own comment is used)
        or an action name, in which case ``comment`` is attached.

        Returns:
            The application as persisted after the transition.
        """
        model = self._load_for_update(application_id)

        if isinstance(command, (str, LeaveAction)):
            try:
                command = build_command(command, comment)
            except UnknownActionError as exc:
                self._log_rejected(model, exc.action, actor_id, exc)
                raise UnknownActionError(
                    exc.action, str(application_id), model.status,
                ) from None

        actor = self._resolver.resolve(actor_id)
        try:
            planned = plan_transition(
                model.to_dto(),
                command,
                actor,
                hod_role_name=self._hod_role_name,
                workflow=self._workflow,
            )
        except TransitionError as exc:
            self._log_rejected(model, command.action.value, actor_id, exc)
            raise

        self._write(planned, actor_id)
        self.session.refresh(model)

        logger.info(
            "leave_transition_applied",
            extra={
                "application_id": str(application_id),
                "action": planned.transition.action.value,
                "from_status": planned.from_state.value,
                "to_status": planned.update.status.value,
                "actor_id": str(actor_id),
                "comment_slot": planned.update.slot.value,
                "via_escalation": planned.via_escalation,
            },
        )
        return model.to_dto()

    def cancel(self, application_id: UUID, actor_id: UUID) -> LeaveApplication:
        """
        Cancel an application on behalf of its requester.

        Allowed from any non-terminal status, only for the requester.
        """
        model = self._load_for_update(application_id)
        current = LeaveStatus(model.status)

        if current.is_terminal:
            exc = InvalidTransitionError(str(application_id), current.value, CANCEL_ACTION)
            self._log_rejected(model, CANCEL_ACTION, actor_id, exc)
            raise exc
        if model.requester_id != actor_id:
            exc = UnauthorizedActorError(
                str(application_id), str(actor_id), CANCEL_ACTION, current.value,
            )
            self._log_rejected(model, CANCEL_ACTION, actor_id, exc)
            raise exc

        self._conditional_update(
            application_id,
            current,
            {"status": LeaveStatus.CANCELLED.value, "updated_by_id": actor_id},
        )
        self.session.refresh(model)

        logger.info(
            "leave_application_cancelled",
            extra={
                "application_id": str(application_id),
                "from_status": current.value,
                "actor_id": str(actor_id),
            },
        )
        return model.to_dto()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _load_for_update(self, application_id: UUID) -> LeaveApplicationModel:
        """Load the application row, locking it where the backend supports it."""
        model = self.session.execute(
            select(LeaveApplicationModel)
            .where(LeaveApplicationModel.id == application_id)
            .with_for_update()
        ).scalar_one_or_none()

        if model is None:
            logger.warning(
                "leave_application_not_found",
                extra={"application_id": str(application_id)},
            )
            raise LeaveApplicationNotFoundError(str(application_id))
        return model

    def _write(self, planned: PlannedTransition, actor_id: UUID) -> None:
        update_ = planned.update
        values = {
            "status": update_.status.value,
            f"{update_.slot.value}_comment": update_.comment,
            "updated_by_id": actor_id,
        }
        self._conditional_update(planned.application_id, planned.from_state, values)

    def _conditional_update(
        self,
        application_id: UUID,
        observed: LeaveStatus,
        values: dict,
    ) -> None:
        result = self.session.execute(
            update(LeaveApplicationModel)
            .where(
                LeaveApplicationModel.id == application_id,
                LeaveApplicationModel.status == observed.value,
            )
            .values(updated_at=func.now(), **values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            logger.warning(
                "leave_storage_conflict",
                extra={
                    "application_id": str(application_id),
                    "expected_status": observed.value,
                    "rowcount": result.rowcount,
                },
            )
            raise StorageConflictError(str(application_id), observed.value)

    def _log_rejected(
        self,
        model: LeaveApplicationModel,
        action: str,
        actor_id: UUID,
        exc: Exception,
    ) -> None:
        logger.warning(
            "leave_transition_rejected",
            extra={
                "application_id": str(model.id),
                "action": action,
                "status": model.status,
                "actor_id": str(actor_id),
                "reason": getattr(exc, "code", type(exc).__name__),
            },
        )
