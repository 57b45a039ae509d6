"""
leave_kernel.actions -- Caller surface for leave actions.

Responsibility:
    The entry point web action handlers call.  Each method owns one
    ``session_scope()`` transaction, binds the log context, runs one kernel
    operation and reports the outcome as an ``ActionResult``.

Architecture position:
    Kernel > outer shell.  The only place kernel exceptions are turned into
    ``{success: false, error}`` results; nothing below this module catches
    them.

Invariants enforced:
    - Methods never raise.  Every failure becomes
      ``ActionResult(success=False, error=<message>, code=<code>)``.
    - A failed call leaves storage unchanged (the transaction is rolled
      back by ``session_scope``).

Failure modes (reported, not raised):
    - A payload that is not a mapping, or lacks a field -> ``INVALID_LEAVE_REQUEST``.
    - Any LeaveKernelError -> its own ``code``.
    - SQLAlchemyError -> ``STORAGE_FAILURE``.
    - Anything else -> ``UNEXPECTED_ERROR``, message preserved.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from leave_kernel.db.engine import Database
from leave_kernel.domain.leave import LeaveAction, LeaveApplication, LeaveRequest
from leave_kernel.domain.participants import RoleNames
from leave_kernel.exceptions import InvalidLeaveRequestError, LeaveKernelError
from leave_kernel.logging_config import LogContext, get_logger
from leave_kernel.services.leave_submission_service import LeaveSubmissionService
from leave_kernel.services.leave_workflow_service import LeaveWorkflowService

logger = get_logger("actions")

STORAGE_FAILURE = "STORAGE_FAILURE"
UNEXPECTED_ERROR = "UNEXPECTED_ERROR"

# Accepted spellings for each payload field.
_PAYLOAD_KEYS: dict[str, tuple[str, ...]] = {
    "application_id": ("applicationId", "application_id"),
    "action": ("action",),
    "actor_id": ("actorId", "actor_id"),
    "comment": ("comment",),
}


@dataclass(frozen=True)
class ActionResult:
    """Outcome of one caller-surface call."""

    success: bool
    error: str | None = None
    code: str | None = None
    application: LeaveApplication | None = None

    @classmethod
    def ok(cls, application: LeaveApplication | None = None) -> ActionResult:
        return cls(success=True, application=application)

    @classmethod
    def failed(cls, error: str, code: str) -> ActionResult:
        return cls(success=False, error=error, code=code)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"success": self.success}
        if self.error is not None:
            result["error"] = self.error
        if self.code is not None:
            result["code"] = self.code
        if self.application is not None:
            result["applicationId"] = str(self.application.id)
        return result


def _field(payload: Mapping[str, Any], name: str, required: bool = True) -> Any:
    for key in _PAYLOAD_KEYS[name]:
        if payload.get(key) is not None:
            return payload[key]
    if required:
        raise InvalidLeaveRequestError(_PAYLOAD_KEYS[name][0], "is required")
    return None


def _action_name(action: LeaveAction | str) -> str:
    return action.value if isinstance(action, LeaveAction) else str(action)


def _uuid(value: Any, field: str) -> UUID:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError:
        raise InvalidLeaveRequestError(field, f"{value!r} is not a valid id") from None


class LeaveActionHandler:
    """
    Transaction owner and error boundary for leave operations.

    Contract:
        Constructed once per process with the ``Database`` handle and the
        role names from configuration.  Holds no per-call state.
    """

    def __init__(self, database: Database, role_names: RoleNames | None = None):
        self._database = database
        self._role_names = role_names or RoleNames()

    def update_leave_status(self, payload: Mapping[str, Any]) -> ActionResult:
        """
        Apply an action from a request payload.

        Payload keys: ``applicationId``, ``action``, ``actorId`` and an
        optional ``comment`` (snake_case spellings are accepted too).
        """
        try:
            if not isinstance(payload, Mapping):
                raise InvalidLeaveRequestError(
                    "payload", f"expected a mapping, got {type(payload).__name__}",
                )
            application_id = _uuid(_field(payload, "application_id"), "applicationId")
            actor_id = _uuid(_field(payload, "actor_id"), "actorId")
            action = _field(payload, "action")
            if not isinstance(action, str):
                action = str(action)
            comment = _field(payload, "comment", required=False)
        except InvalidLeaveRequestError as exc:
            logger.warning(
                "leave_action_payload_rejected",
                extra={"field": exc.field, "reason": exc.reason},
            )
            return ActionResult.failed(str(exc), exc.code)
        return self.apply_action(application_id, action, actor_id, comment)

    def apply_action(
        self,
        application_id: UUID,
        action: LeaveAction | str,
        actor_id: UUID,
        comment: str | None = None,
    ) -> ActionResult:
        def run(session: Session) -> LeaveApplication:
            service = LeaveWorkflowService(
                session, hod_role_name=self._role_names.head_of_department,
            )
            return service.apply_action(application_id, action, actor_id, comment)

        return self._run(
            run,
            actor_id=actor_id,
            application_id=application_id,
            action=_action_name(action),
        )

    def cancel_application(self, application_id: UUID, actor_id: UUID) -> ActionResult:
        def run(session: Session) -> LeaveApplication:
            return LeaveWorkflowService(session).cancel(application_id, actor_id)

        return self._run(
            run,
            actor_id=actor_id,
            application_id=application_id,
            action="Cancel",
        )

    def submit_application(self, requester_id: UUID, request: LeaveRequest) -> ActionResult:
        """Submit a new application; the result carries it on success."""
        def run(session: Session) -> LeaveApplication:
            service = LeaveSubmissionService(session, self._role_names)
            return service.submit(requester_id, request)

        return self._run(run, actor_id=requester_id, action="Submit")

    def _run(
        self,
        operation: Callable[[Session], LeaveApplication],
        **context: Any,
    ) -> ActionResult:
        with LogContext.bind(correlation_id=str(uuid4()), **context):
            try:
                with self._database.session_scope() as session:
                    application = operation(session)
            except LeaveKernelError as exc:
                return ActionResult.failed(str(exc), exc.code)
            except SQLAlchemyError as exc:
                logger.exception("leave_action_storage_failure")
                return ActionResult.failed(str(exc), STORAGE_FAILURE)
            except Exception as exc:
                logger.exception("leave_action_unexpected_error")
                return ActionResult.failed(str(exc), UNEXPECTED_ERROR)
        return ActionResult.ok(application)
