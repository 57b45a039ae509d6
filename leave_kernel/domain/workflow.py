"""
Leave workflow state machine (``leave_kernel.domain.workflow``).

Responsibility
--------------
Defines the leave approval chain once, as data: the states, the
transitions with their authorization rule and comment slot, and the pure
``plan_transition`` function that turns (application, command, actor) into
exactly one stage update -- or a typed rejection.

Architecture position
---------------------
**Kernel domain layer** -- pure value objects and pure functions.  ZERO
I/O.  Persistence of a planned update is the service layer's job.

Invariants enforced
-------------------
* Transitions reference only states in ``LEAVE_WORKFLOW.states``;
  terminal states have no outgoing transitions.
* (from_state, action) is unique across the table, so a planned
  transition is a strict partial function of (status, action, actor).
* Every planned update is one of three variants, each carrying exactly
  one comment slot.  A transition can never write two slots.
* Check order: unknown action / wrong status -> InvalidTransitionError,
  then wrong actor -> UnauthorizedActorError.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Union
from uuid import UUID

from leave_kernel.domain.leave import (
    INITIAL_LEAVE_STATUS,
    TERMINAL_LEAVE_STATUSES,
    CommentSlot,
    LeaveAction,
    LeaveApplication,
    LeaveStatus,
)
from leave_kernel.domain.permissions import EMPTY_PERMISSIONS, PermissionSet
from leave_kernel.exceptions import (
    InvalidTransitionError,
    UnauthorizedActorError,
    UnknownActionError,
)

DEFAULT_HEAD_OF_DEPARTMENT_ROLE = "Head of Department"


# =========================================================================
# Actor
# =========================================================================


@dataclass(frozen=True)
class ActorContext:
    """The caller as resolved at decision time."""

    actor_id: UUID
    role_name: str | None = None
    permissions: PermissionSet = EMPTY_PERMISSIONS

    def has_role(self, role_name: str) -> bool:
        return self.role_name is not None and self.role_name == role_name


# =========================================================================
# Transition table
# =========================================================================


class Assignee(str, Enum):
    """Which participant field of the application may take an action."""

    ACTING_OFFICER = "acting_officer_id"
    RECOMMENDER = "recommender_id"
    APPROVER = "approver_id"


@dataclass(frozen=True)
class Transition:
    """A valid state transition in the leave workflow.

    ``hod_may_act`` lets the Head-of-Department role act in place of the
    assignee without changing who is recorded as assignee.
    """

    from_state: LeaveStatus
    action: LeaveAction
    to_state: LeaveStatus
    assignee: Assignee
    comment_slot: CommentSlot
    hod_may_act: bool = False


@dataclass(frozen=True)
class Workflow:
    """A state machine definition for a document lifecycle."""

    name: str
    initial_state: LeaveStatus
    states: tuple[LeaveStatus, ...]
    transitions: tuple[Transition, ...]
    terminal_states: frozenset[LeaveStatus]

    def find(self, from_state: LeaveStatus, action: LeaveAction) -> Transition | None:
        for transition in self.transitions:
            if transition.from_state is from_state and transition.action is action:
                return transition
        return None

    def actions_from(self, state: LeaveStatus) -> tuple[LeaveAction, ...]:
        return tuple(t.action for t in self.transitions if t.from_state is state)


_S = LeaveStatus
_A = LeaveAction

LEAVE_WORKFLOW = Workflow(
    name="leave_application",
    initial_state=INITIAL_LEAVE_STATUS,
    states=tuple(LeaveStatus),
    transitions=(
        Transition(_S.PENDING_ACTING_ACCEPTANCE, _A.ACCEPT_ACTING, _S.PENDING,
                   Assignee.ACTING_OFFICER, CommentSlot.ACTING),
        Transition(_S.PENDING_ACTING_ACCEPTANCE, _A.REJECT_ACTING, _S.ACTING_REJECTED,
                   Assignee.ACTING_OFFICER, CommentSlot.ACTING),
        Transition(_S.PENDING, _A.RECOMMEND, _S.RECOMMENDED,
                   Assignee.RECOMMENDER, CommentSlot.RECOMMENDER),
        Transition(_S.PENDING, _A.REJECT, _S.REJECTED,
                   Assignee.RECOMMENDER, CommentSlot.RECOMMENDER),
        Transition(_S.RECOMMENDED, _A.APPROVE, _S.APPROVED,
                   Assignee.APPROVER, CommentSlot.APPROVER, hod_may_act=True),
        Transition(_S.RECOMMENDED, _A.REJECT, _S.REJECTED,
                   Assignee.APPROVER, CommentSlot.APPROVER, hod_may_act=True),
    ),
    terminal_states=TERMINAL_LEAVE_STATUSES,
)


# =========================================================================
# Action commands (one variant per action)
# =========================================================================


@dataclass(frozen=True)
class AcceptActing:
    action: ClassVar[LeaveAction] = LeaveAction.ACCEPT_ACTING
    comment: str | None = None


@dataclass(frozen=True)
class RejectActing:
    action: ClassVar[LeaveAction] = LeaveAction.REJECT_ACTING
    comment: str | None = None


@dataclass(frozen=True)
class Recommend:
    action: ClassVar[LeaveAction] = LeaveAction.RECOMMEND
    comment: str | None = None


@dataclass(frozen=True)
class Approve:
    action: ClassVar[LeaveAction] = LeaveAction.APPROVE
    comment: str | None = None


@dataclass(frozen=True)
class Reject:
    action: ClassVar[LeaveAction] = LeaveAction.REJECT
    comment: str | None = None


LeaveCommand = Union[AcceptActing, RejectActing, Recommend, Approve, Reject]

_COMMANDS: dict[LeaveAction, type] = {
    LeaveAction.ACCEPT_ACTING: AcceptActing,
    LeaveAction.REJECT_ACTING: RejectActing,
    LeaveAction.RECOMMEND: Recommend,
    LeaveAction.APPROVE: Approve,
    LeaveAction.REJECT: Reject,
}


def build_command(action: LeaveAction | str, comment: str | None = None) -> LeaveCommand:
    """Build the command variant for an action name.

    Raises:
        UnknownActionError: ``action`` is not one of the five actions.
    """
    try:
        action = LeaveAction(action)
    except ValueError:
        raise UnknownActionError(str(action)) from None
    return _COMMANDS[action](comment=comment)


# =========================================================================
# Stage updates (what a successful transition may write)
# =========================================================================


@dataclass(frozen=True)
class ActingStageUpdate:
    slot: ClassVar[CommentSlot] = CommentSlot.ACTING
    status: LeaveStatus
    acting_comment: str | None = None

    @property
    def comment(self) -> str | None:
        return self.acting_comment


@dataclass(frozen=True)
class RecommenderStageUpdate:
    slot: ClassVar[CommentSlot] = CommentSlot.RECOMMENDER
    status: LeaveStatus
    recommender_comment: str | None = None

    @property
    def comment(self) -> str | None:
        return self.recommender_comment


@dataclass(frozen=True)
class ApproverStageUpdate:
    slot: ClassVar[CommentSlot] = CommentSlot.APPROVER
    status: LeaveStatus
    approver_comment: str | None = None

    @property
    def comment(self) -> str | None:
        return self.approver_comment


StageUpdate = Union[ActingStageUpdate, RecommenderStageUpdate, ApproverStageUpdate]


def _stage_update(transition: Transition, comment: str | None) -> StageUpdate:
    if transition.comment_slot is CommentSlot.ACTING:
        return ActingStageUpdate(status=transition.to_state, acting_comment=comment)
    if transition.comment_slot is CommentSlot.RECOMMENDER:
        return RecommenderStageUpdate(status=transition.to_state, recommender_comment=comment)
    return ApproverStageUpdate(status=transition.to_state, approver_comment=comment)


# =========================================================================
# Planning
# =========================================================================


@dataclass(frozen=True)
class PlannedTransition:
    """A validated transition, ready to be persisted."""

    application_id: UUID
    from_state: LeaveStatus
    transition: Transition
    update: StageUpdate
    via_escalation: bool = False


def is_authorized(
    transition: Transition,
    application: LeaveApplication,
    actor: ActorContext,
    hod_role_name: str = DEFAULT_HEAD_OF_DEPARTMENT_ROLE,
) -> tuple[bool, bool]:
    """Return (authorized, via_escalation) for ``actor`` on ``transition``."""
    if getattr(application, transition.assignee.value) == actor.actor_id:
        return True, False
    if transition.hod_may_act and actor.has_role(hod_role_name):
        return True, True
    return False, False


def plan_transition(
    application: LeaveApplication,
    command: LeaveCommand,
    actor: ActorContext,
    *,
    hod_role_name: str = DEFAULT_HEAD_OF_DEPARTMENT_ROLE,
    workflow: Workflow = LEAVE_WORKFLOW,
) -> PlannedTransition:
    """Validate ``command`` against the table and the actor.

    Raises:
        InvalidTransitionError: no transition for (status, action).
        UnauthorizedActorError: transition exists but the actor is neither
            the assignee nor an allowed escalation role.
    """
    transition = workflow.find(application.status, command.action)
    if transition is None:
        raise InvalidTransitionError(
            str(application.id), application.status.value, command.action.value,
        )

    authorized, via_escalation = is_authorized(
        transition, application, actor, hod_role_name,
    )
    if not authorized:
        raise UnauthorizedActorError(
            str(application.id),
            str(actor.actor_id),
            command.action.value,
            application.status.value,
        )

    return PlannedTransition(
        application_id=application.id,
        from_state=application.status,
        transition=transition,
        update=_stage_update(transition, command.comment),
        via_escalation=via_escalation,
    )
