"""
Typed Exception Hierarchy for the Leave Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Every failure the workflow can produce is a distinct exception class with:
  1. a ``code`` class attribute (machine-readable, API-safe)
  2. structured attributes (application id, status, actor, ...)
  3. a human-readable message

Callers catch by type and report by code, never by parsing messages:

    try:
        service.apply_action(application_id, command, actor_id)
    except UnauthorizedActorError as e:
        api_response(code=e.code, application=e.application_id)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    LeaveKernelError (base)
    |
    +-- NotFoundError
    |   +-- LeaveApplicationNotFoundError
    |   +-- StaffMemberNotFoundError
    |   +-- RoleNotFoundError
    |
    +-- TransitionError
    |   +-- InvalidTransitionError
    |   |   +-- UnknownActionError
    |   +-- UnauthorizedActorError
    |
    +-- ConcurrencyError
    |   +-- StorageConflictError
    |
    +-- ImmutabilityError
    |   +-- TerminalStatusViolationError
    |
    +-- ValidationError
        +-- InvalidLeaveDatesError
        +-- InvalidLeaveRequestError
        +-- MissingParticipantError
        +-- IneligibleParticipantError
        +-- InvalidPermissionError
        +-- PermissionDeniedError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                          | When Raised
----------------|-------------------------------|---------------------------------------
Not found       | LEAVE_APPLICATION_NOT_FOUND   | Application id doesn't exist
                | STAFF_MEMBER_NOT_FOUND        | Staff id doesn't exist
                | ROLE_NOT_FOUND                | Role id doesn't exist
----------------|-------------------------------|---------------------------------------
Transition      | INVALID_TRANSITION            | Action not valid from current status
                | UNKNOWN_ACTION                | Action name is not one of the five
                | UNAUTHORIZED_ACTOR            | Actor is not the assignee (or HOD)
----------------|-------------------------------|---------------------------------------
Concurrency     | STORAGE_CONFLICT              | Conditional write matched no row
----------------|-------------------------------|---------------------------------------
Immutability    | TERMINAL_STATUS_VIOLATION     | Status change on a terminal record
----------------|-------------------------------|---------------------------------------
Validation      | INVALID_LEAVE_DATES           | Bad day count or resume date
                | INVALID_LEAVE_REQUEST         | Malformed submission/action payload
                | MISSING_PARTICIPANT           | No subject-in-charge (or other) found
                | INELIGIBLE_PARTICIPANT        | Chosen participant not eligible
                | INVALID_PERMISSION            | Unknown resource/action in role data
                | PERMISSION_DENIED             | Actor lacks a required permission

===============================================================================
HANDLING PATTERNS
===============================================================================

StorageConflictError is reported to callers exactly like an invalid
transition: the record moved underneath the caller, who may re-read and
resubmit.  The kernel never retries on its own.

Inside the kernel these exceptions propagate.  The caller surface
(``leave_kernel.actions``) is the only place they are converted into
``{success: false, error}`` results.
"""


class LeaveKernelError(Exception):
    """
    Base exception for all leave kernel errors.

    All subclasses must have a ``code`` class attribute for
    machine-readable error identification.
    """

    code: str = "LEAVE_KERNEL_ERROR"


# Not-found exceptions


class NotFoundError(LeaveKernelError):
    """Base exception for missing records."""

    code: str = "NOT_FOUND"


class LeaveApplicationNotFoundError(NotFoundError):
    """Leave application with given ID was not found."""

    code: str = "LEAVE_APPLICATION_NOT_FOUND"

    def __init__(self, application_id: str):
        self.application_id = application_id
        super().__init__(f"Leave application not found: {application_id}")


class StaffMemberNotFoundError(NotFoundError):
    """Staff member with given ID was not found."""

    code: str = "STAFF_MEMBER_NOT_FOUND"

    def __init__(self, staff_id: str):
        self.staff_id = staff_id
        super().__init__(f"Staff member not found: {staff_id}")


class RoleNotFoundError(NotFoundError):
    """Role with given ID was not found."""

    code: str = "ROLE_NOT_FOUND"

    def __init__(self, role_id: str):
        self.role_id = role_id
        super().__init__(f"Role not found: {role_id}")


# Transition exceptions


class TransitionError(LeaveKernelError):
    """Base exception for rejected workflow transitions."""

    code: str = "TRANSITION_ERROR"


class InvalidTransitionError(TransitionError):
    """Action is not permitted from the application's current status."""

    code: str = "INVALID_TRANSITION"

    def __init__(self, application_id: str, current_status: str, action: str):
        self.application_id = application_id
        self.current_status = current_status
        self.action = action
        super().__init__(
            f"Action '{action}' is not valid for application {application_id} "
            f"in status '{current_status}'"
        )


class UnknownActionError(InvalidTransitionError):
    """Action name is not one of the workflow's actions."""

    code: str = "UNKNOWN_ACTION"

    def __init__(self, action: str, application_id: str = "", current_status: str = ""):
        self.application_id = application_id
        self.current_status = current_status
        self.action = action
        TransitionError.__init__(self, f"Unknown leave action: {action!r}")


class UnauthorizedActorError(TransitionError):
    """Actor is not the assigned party (or escalation role) for this stage."""

    code: str = "UNAUTHORIZED_ACTOR"

    def __init__(
        self,
        application_id: str,
        actor_id: str,
        action: str,
        current_status: str,
    ):
        self.application_id = application_id
        self.actor_id = actor_id
        self.action = action
        self.current_status = current_status
        super().__init__(
            f"Actor {actor_id} is not authorized to '{action}' application "
            f"{application_id} at stage '{current_status}'"
        )


# Concurrency exceptions


class ConcurrencyError(LeaveKernelError):
    """Base exception for concurrency-related errors."""

    code: str = "CONCURRENCY_ERROR"


class StorageConflictError(ConcurrencyError):
    """Conditional write found the record no longer in the observed status."""

    code: str = "STORAGE_CONFLICT"

    def __init__(self, application_id: str, expected_status: str):
        self.application_id = application_id
        self.expected_status = expected_status
        super().__init__(
            f"Leave application {application_id} was modified concurrently: "
            f"it is no longer in status '{expected_status}'"
        )


# Immutability exceptions


class ImmutabilityError(LeaveKernelError):
    """Base exception for immutability-related errors."""

    code: str = "IMMUTABILITY_ERROR"


class TerminalStatusViolationError(ImmutabilityError):
    """Attempted to change the status of an application in a terminal state."""

    code: str = "TERMINAL_STATUS_VIOLATION"

    def __init__(self, application_id: str, terminal_status: str, attempted_status: str):
        self.application_id = application_id
        self.terminal_status = terminal_status
        self.attempted_status = attempted_status
        super().__init__(
            f"Leave application {application_id} is '{terminal_status}' and "
            f"cannot move to '{attempted_status}'"
        )


# Validation exceptions


class ValidationError(LeaveKernelError):
    """Base exception for rejected input."""

    code: str = "VALIDATION_ERROR"


class InvalidLeaveDatesError(ValidationError):
    """Day count or dates violate the leave-day rules."""

    code: str = "INVALID_LEAVE_DATES"

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid leave dates: {reason}")


class InvalidLeaveRequestError(ValidationError):
    """A submission or action payload is malformed."""

    code: str = "INVALID_LEAVE_REQUEST"

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid value for '{field}': {reason}")


class MissingParticipantError(ValidationError):
    """A required participant could not be resolved."""

    code: str = "MISSING_PARTICIPANT"

    def __init__(self, participant: str, reason: str):
        self.participant = participant
        self.reason = reason
        super().__init__(f"Missing {participant}: {reason}")


class IneligibleParticipantError(ValidationError):
    """A chosen participant is not in the eligible candidate list."""

    code: str = "INELIGIBLE_PARTICIPANT"

    def __init__(self, participant: str, staff_id: str):
        self.participant = participant
        self.staff_id = staff_id
        super().__init__(f"Staff member {staff_id} is not an eligible {participant}")


class InvalidPermissionError(ValidationError):
    """Raw permission data names an unknown resource or action."""

    code: str = "INVALID_PERMISSION"

    def __init__(self, value: str, reason: str):
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid permission {value!r}: {reason}")


class PermissionDeniedError(ValidationError):
    """Actor's role lacks a permission required by the operation."""

    code: str = "PERMISSION_DENIED"

    def __init__(self, actor_id: str, permission: str):
        self.actor_id = actor_id
        self.permission = permission
        super().__init__(f"Actor {actor_id} lacks permission '{permission}'")
