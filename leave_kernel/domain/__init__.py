"""
Pure domain layer.

This module contains pure data transfer objects and domain logic
with NO dependencies on:
- ORM (SQLAlchemy)
- Database
- I/O

All domain objects are immutable and deterministic.
"""

from leave_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from leave_kernel.domain.leave import (
    FULL_DAY_CATEGORIES,
    HALF_DAY_CATEGORIES,
    INITIAL_LEAVE_STATUS,
    TERMINAL_LEAVE_STATUSES,
    CommentSlot,
    LeaveAction,
    LeaveApplication,
    LeaveCategory,
    LeaveComments,
    LeaveRequest,
    LeaveStatus,
    StaffType,
)
from leave_kernel.domain.leave_days import (
    HALF_DAY,
    LeaveSchedule,
    add_business_days,
    compute_leave_schedule,
    next_working_day,
    validate_leave_dates,
)
from leave_kernel.domain.participants import (
    ParticipantCandidates,
    RoleNames,
    StaffEntry,
    resolve_participants,
)
from leave_kernel.domain.permissions import (
    EMPTY_PERMISSIONS,
    PermissionAction,
    PermissionSet,
    Resource,
    parse_permissions,
)
from leave_kernel.domain.summary import LeaveEntitlement, LeaveSummaryRow, summarize
from leave_kernel.domain.workflow import (
    LEAVE_WORKFLOW,
    AcceptActing,
    ActingStageUpdate,
    ActorContext,
    Approve,
    ApproverStageUpdate,
    LeaveCommand,
    PlannedTransition,
    Recommend,
    RecommenderStageUpdate,
    Reject,
    RejectActing,
    StageUpdate,
    Transition,
    Workflow,
    build_command,
    plan_transition,
)

__all__ = [
    "AcceptActing",
    "ActingStageUpdate",
    "ActorContext",
    "Approve",
    "ApproverStageUpdate",
    "Clock",
    "CommentSlot",
    "DeterministicClock",
    "EMPTY_PERMISSIONS",
    "FULL_DAY_CATEGORIES",
    "HALF_DAY",
    "HALF_DAY_CATEGORIES",
    "INITIAL_LEAVE_STATUS",
    "LEAVE_WORKFLOW",
    "LeaveAction",
    "LeaveApplication",
    "LeaveCategory",
    "LeaveCommand",
    "LeaveComments",
    "LeaveRequest",
    "LeaveEntitlement",
    "LeaveSchedule",
    "LeaveStatus",
    "LeaveSummaryRow",
    "ParticipantCandidates",
    "PermissionAction",
    "PermissionSet",
    "PlannedTransition",
    "Recommend",
    "RecommenderStageUpdate",
    "Reject",
    "RejectActing",
    "Resource",
    "RoleNames",
    "StaffEntry",
    "StaffType",
    "StageUpdate",
    "SystemClock",
    "TERMINAL_LEAVE_STATUSES",
    "Transition",
    "Workflow",
    "add_business_days",
    "build_command",
    "compute_leave_schedule",
    "next_working_day",
    "parse_permissions",
    "plan_transition",
    "resolve_participants",
    "summarize",
    "validate_leave_dates",
]
